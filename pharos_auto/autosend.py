# pharos_auto/autosend.py
import secrets
import time
from decimal import Decimal
from typing import Callable, List, Optional

import requests
from web3 import Web3

from .api import RewardsApi
from .chain import ChainClient
from .config import (
    SEND_DELAY_SEC, ACCOUNT_DELAY_SEC, SEND_GAS_LIMIT, SEND_GAS_RESERVE, EXPLORER_URL,
)
from .errors import ApiError, ErrorKind, classify
from .models import Account, OperationResult, RunConfig, RunSummary
from .util import get_logger, fmt_amount, short, explorer_link, on_error
log = get_logger()


def generate_random_address() -> str:
    return "0x" + secrets.token_hex(20)


def generate_random_addresses(count: int) -> List[str]:
    seen: List[str] = []
    while len(seen) < count:
        addr = generate_random_address()
        if addr not in seen:
            seen.append(addr)
    return seen


class AutoSender:
    """Send ``send_amount`` from every account to each of K fresh random addresses."""

    def __init__(self, client: ChainClient, config: RunConfig, api: Optional[RewardsApi] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 send_delay: float = SEND_DELAY_SEC, account_delay: float = ACCOUNT_DELAY_SEC,
                 gas_limit: int = SEND_GAS_LIMIT, gas_reserve: str = SEND_GAS_RESERVE,
                 explorer_url: str = EXPLORER_URL):
        self.client = client
        self.config = config
        self.api = api
        self.sleep = sleep
        self.send_delay = send_delay
        self.account_delay = account_delay
        self.gas_limit = gas_limit
        self.gas_reserve = Decimal(gas_reserve)
        self.explorer_url = explorer_url

    def required_wei(self, count: int) -> int:
        amount = Decimal(self.config.send_amount) * count + self.gas_reserve
        return Web3.to_wei(amount, "ether")

    def check_balance(self, account: Account, count: int) -> Optional[OperationResult]:
        """Return a failure when the account cannot cover every transfer, else None."""
        try:
            balance = self.client.get_balance(account.address)
            needed = self.required_wei(count)
        except Exception as e:
            on_error(log, "   ❌ error checking balance", e)
            return OperationResult.failure(account.address, str(e), classify(e))
        log.info(f"   💰 balance {fmt_amount(balance)}  needed {fmt_amount(needed)}")
        if balance < needed:
            log.warning("   ⚠️ insufficient balance for all transactions, skipping account")
            return OperationResult.failure(account.address, "Insufficient balance", ErrorKind.INSUFFICIENT_BALANCE)
        return None

    def verify(self, account: Account, tx_hash: str) -> None:
        if self.api is None or not account.authenticated:
            log.info("   ⚠️ skipping verification, no token available")
            return
        log.info("   🔄 verifying transaction…")
        try:
            self.api.verify_task(account.address, tx_hash, account.token)
            log.info("   ✅ task verification successful")
        except (ApiError, requests.RequestException) as e:
            log.warning(f"   ⚠️ task verification failed: {e}")

    def send_one(self, account: Account, to: str) -> OperationResult:
        amount = self.config.send_amount
        log.info(f"💸 sending {amount} to {short(to)}")
        try:
            tx_hash = self.client.send_native(
                account, to, Web3.to_wei(Decimal(amount), "ether"),
                self.config.gas_price_multiplier, gas_limit=self.gas_limit,
            )
        except Exception as e:
            log.error(f"   ❌ transfer failed: {e}")
            return OperationResult.failure(account.address, str(e), classify(e), to_address=to, amount=amount)

        log.info(f"   ✓ transfer completed tx={short(tx_hash)}")
        log.info(f"   🔗 {explorer_link(self.explorer_url, tx_hash)}")
        self.verify(account, tx_hash)
        return OperationResult.success(account.address, tx_hash, to_address=to, amount=amount)

    def run(self, accounts: List[Account], targets: Optional[List[str]] = None) -> RunSummary:
        targets = targets if targets is not None else generate_random_addresses(self.config.target_address_count)
        summary = RunSummary(phase="auto-send")
        log.info("💸 Starting auto send")
        log.info(f"📋 generated {len(targets)} random target addresses")
        for n, addr in enumerate(targets, 1):
            log.info(f"   {n}. {addr}")

        for ai, account in enumerate(accounts):
            log.info(f"👤 account {ai + 1}/{len(accounts)} {account.address}")
            skip = self.check_balance(account, len(targets))
            if skip is not None:
                summary.skipped.append(skip)
                continue

            for ti, to in enumerate(targets):
                log.info(f"   📤 transaction {ti + 1}/{len(targets)}")
                result = self.send_one(account, to)
                summary.record(result)
                if result.ok:
                    summary.total_sent += Decimal(self.config.send_amount)
                if ti < len(targets) - 1:
                    self.sleep(self.send_delay)

            if ai < len(accounts) - 1:
                log.info(f"   ⏳ waiting {self.account_delay:g}s before next account")
                self.sleep(self.account_delay)

        log.info(f"📊 auto send summary: ✓ {summary.succeeded}  ❌ {summary.failed}"
                 f"  💰 total sent {summary.total_sent:.4f}  📈 {summary.success_rate}%")
        for n, r in enumerate(summary.failures(), 1):
            log.warning(f"   {n}. {r.address} → {r.to_address}: {r.error}")
        if summary.skipped:
            log.warning(f"   skipped: {len(summary.skipped)} accounts")
        return summary
