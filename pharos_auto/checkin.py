# pharos_auto/checkin.py
import json
import time
from typing import Callable, List

import requests

from .api import RewardsApi
from .config import CHECKIN_SPACING_SEC
from .errors import ApiError, ErrorKind
from .models import Account, OperationResult, RunSummary
from .util import get_logger
log = get_logger()


def perform_daily_checkin(api: RewardsApi, accounts: List[Account], spacing: float = CHECKIN_SPACING_SEC,
                          sleep: Callable[[float], None] = time.sleep) -> RunSummary:
    summary = RunSummary(phase="checkin")
    log.info("📅 Starting daily check-in")

    for i, account in enumerate(accounts):
        log.info(f"🔐 check-in {i + 1}/{len(accounts)} {account.address}")
        if not account.authenticated:
            log.warning("   ⚠️ skipping, no authentication token")
            summary.record(OperationResult.failure(account.address, "No authentication token", ErrorKind.API))
            continue

        try:
            body = api.check_in(account.address, account.token)
            log.info("   ✓ check-in successful")
            log.debug(f"   response: {json.dumps(body)}")
            summary.record(OperationResult.success(account.address))
        except ApiError as e:
            log.error(f"   ❌ check-in failed: {e}")
            summary.record(OperationResult.failure(account.address, str(e), ErrorKind.API))
        except requests.RequestException as e:
            log.error(f"   ❌ check-in failed: {e}")
            summary.record(OperationResult.failure(account.address, str(e), ErrorKind.NETWORK))

        if i < len(accounts) - 1:
            sleep(spacing)

    log.info(f"📊 check-in summary: ✓ {summary.succeeded} accounts")
    if summary.failed:
        log.warning(f"   ❌ failed: {summary.failed} accounts")
        for n, r in enumerate(summary.failures(), 1):
            log.warning(f"   {n}. {r.address}: {r.error}")
    log.info(f"📈 success rate: {summary.success_rate}%")
    return summary
