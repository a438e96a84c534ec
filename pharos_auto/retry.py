# pharos_auto/retry.py
import time
from typing import Any, Callable, Optional

from .config import MAX_RETRIES, RETRY_BACKOFF_SEC
from .errors import ErrorKind, classify
from .models import OperationResult
from .util import get_logger
log = get_logger()


class RetryExecutor:
    """Run an action up to ``max_retries`` times, waiting ``attempt * backoff`` between tries.

    The action returns an :class:`OperationResult`. A failed result and a raised
    exception are treated the same way: the error is remembered and the next
    attempt is scheduled. Exceptions never escape; once attempts run out a
    failed result with the last error is returned.
    """

    def __init__(self, max_retries: int = MAX_RETRIES, backoff: float = RETRY_BACKOFF_SEC,
                 sleep: Callable[[float], None] = time.sleep):
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        self.max_retries = max_retries
        self.backoff = backoff
        self.sleep = sleep

    def run(self, action: Callable[..., OperationResult], address: str, *args: Any, **kwargs: Any) -> OperationResult:
        last_error: Optional[str] = None
        last_kind = ErrorKind.NETWORK

        for attempt in range(1, self.max_retries + 1):
            try:
                result = action(*args, **kwargs)
            except Exception as e:
                last_error, last_kind = str(e) or None, classify(e)
            else:
                if result.ok:
                    return result
                last_error, last_kind = result.error, result.kind or ErrorKind.NETWORK

            log.warning(f"   ⚠️ attempt {attempt}/{self.max_retries} failed: {last_error}")
            if attempt < self.max_retries:
                delay = attempt * self.backoff
                log.info(f"   ⏳ retrying in {delay:g}s…")
                self.sleep(delay)

        return OperationResult.failure(address, last_error or "Max retries exceeded", last_kind)
