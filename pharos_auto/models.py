# pharos_auto/models.py
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from .errors import ErrorKind

SUCCESS = "success"
FAILED = "failed"

MODE_AUTO = "auto"
MODE_MANUAL = "manual"


@dataclass
class Account:
    address: str
    private_key: str
    token: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.token)


@dataclass(frozen=True)
class RunConfig:
    mode: str
    amounts: Tuple[str, ...]
    total_tx: int
    delay_minutes: float
    gas_price_multiplier: float
    run_hour: Optional[int] = None
    run_minute: Optional[int] = None
    auto_send_enabled: bool = False
    send_amount: str = "0"
    target_address_count: int = 0

    @property
    def delay_seconds(self) -> float:
        return round(self.delay_minutes * 60, 3)

    @property
    def scheduled(self) -> bool:
        return self.mode == MODE_AUTO

    def amount_for(self, index: int) -> str:
        return self.amounts[index]


@dataclass(frozen=True)
class OperationResult:
    address: str
    status: str
    tx_hash: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None
    to_address: Optional[str] = None
    amount: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS

    @classmethod
    def success(cls, address: str, tx_hash: Optional[str] = None, **extra) -> "OperationResult":
        return cls(address=address, status=SUCCESS, tx_hash=tx_hash, **extra)

    @classmethod
    def failure(cls, address: str, error: str, kind: ErrorKind = ErrorKind.NETWORK, **extra) -> "OperationResult":
        return cls(address=address, status=FAILED, error=error, kind=kind, **extra)


@dataclass
class RunSummary:
    """Counts for one phase of a cycle (checkin, swap or auto-send)."""

    phase: str
    attempted: int = 0
    succeeded: int = 0
    results: List[OperationResult] = field(default_factory=list)
    total_sent: Decimal = Decimal(0)
    skipped: List[OperationResult] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def success_rate(self) -> int:
        if not self.attempted:
            return 0
        return round(self.succeeded / self.attempted * 100)

    def record(self, result: OperationResult) -> None:
        self.results.append(result)
        self.attempted += 1
        if result.ok:
            self.succeeded += 1

    def failures(self) -> List[OperationResult]:
        return [r for r in self.results if not r.ok]

    def attempted_for(self, address: str) -> int:
        return sum(1 for r in self.results if r.address == address)
