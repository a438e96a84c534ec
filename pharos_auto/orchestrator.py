# pharos_auto/orchestrator.py
import time
from typing import Callable, List, Optional

from web3 import Web3

from .chain import ChainClient
from .config import EXPLORER_URL, AFTER_SEND_PAUSE_SEC
from .errors import ErrorKind
from .models import Account, OperationResult, RunConfig, RunSummary
from .retry import RetryExecutor
from .util import get_logger, fmt_amount, short, explorer_link, sleep_with_progress
log = get_logger()


class TransactionOrchestrator:
    """Round-robin wrap/unwrap over all accounts.

    Each account, each round: wrapped balance > 0 means unwrap all of it,
    otherwise wrap the configured amount. The choice is made from the balance
    read right before the action, so a restarted run picks up where the chain
    state is.
    """

    def __init__(self, client: ChainClient, config: RunConfig, retry: Optional[RetryExecutor] = None,
                 sleep: Callable[[float], None] = time.sleep, auto_sender=None,
                 explorer_url: str = EXPLORER_URL, after_send_pause: float = AFTER_SEND_PAUSE_SEC):
        self.client = client
        self.config = config
        self.retry = retry or RetryExecutor(sleep=sleep)
        self.sleep = sleep
        self.auto_sender = auto_sender
        self.explorer_url = explorer_url
        self.after_send_pause = after_send_pause

    # ---- actions (one attempt each) ----

    def wrap(self, account: Account, amount_wei: int) -> OperationResult:
        log.info(f"📦 wrapping {fmt_amount(amount_wei)} for {short(account.address)}")
        tx_hash = self.client.wrap(account, amount_wei, self.config.gas_price_multiplier)
        log.info(f"   ✓ wrap completed tx={short(tx_hash)}")
        log.info(f"   🔗 {explorer_link(self.explorer_url, tx_hash)}")
        return OperationResult.success(account.address, tx_hash, amount=fmt_amount(amount_wei))

    def unwrap(self, account: Account) -> OperationResult:
        balance = self.client.wrapped_balance(account.address)
        log.info(f"📤 unwrapping {fmt_amount(balance)} for {short(account.address)}")
        tx_hash = self.client.unwrap(account, balance, self.config.gas_price_multiplier)
        log.info(f"   ✓ unwrap completed tx={short(tx_hash)}")
        log.info(f"   🔗 {explorer_link(self.explorer_url, tx_hash)}")
        return OperationResult.success(account.address, tx_hash, amount=fmt_amount(balance))

    # ---- rounds ----

    def process_account(self, account: Account, index: int) -> OperationResult:
        amount_wei = Web3.to_wei(self.config.amount_for(index), "ether")
        try:
            balance = self.client.wrapped_balance(account.address)
        except Exception as e:
            log.error(f"   ❌ final error for account {account.address}: {e}")
            return OperationResult.failure(account.address, str(e), ErrorKind.NETWORK)

        if balance > 0:
            return self.retry.run(self.unwrap, account.address, account)
        return self.retry.run(self.wrap, account.address, account, amount_wei)

    def run_rounds(self, accounts: List[Account]) -> RunSummary:
        cfg = self.config
        summary = RunSummary(phase="swap")
        total = cfg.total_tx * len(accounts)
        log.info("🚀 Starting transaction execution")

        for rnd in range(cfg.total_tx):
            log.info(f"🔄 round {rnd + 1}/{cfg.total_tx}")
            for i, account in enumerate(accounts):
                log.info(f"👤 account {i + 1}/{len(accounts)} {account.address}")
                result = self.process_account(account, i)
                summary.record(result)
                pct = round(summary.attempted / total * 100)
                log.info(f"   📊 overall progress: {summary.attempted}/{total} ({pct}%)")

                last = rnd == cfg.total_tx - 1 and i == len(accounts) - 1
                if not last:
                    sleep_with_progress(
                        cfg.delay_seconds,
                        f"Waiting {cfg.delay_minutes:g} minutes before next transaction",
                        sleep=self.sleep,
                    )

        log.info(f"📊 swap summary: ✓ {summary.succeeded}/{total}  ❌ {summary.failed}/{total}"
                 f"  📈 {summary.success_rate}%")
        return summary

    def run(self, accounts: List[Account]) -> List[RunSummary]:
        """Swap rounds, then the optional auto-send fan-out."""
        summaries = [self.run_rounds(accounts)]
        if self.config.auto_send_enabled and self.auto_sender is not None:
            summaries.append(self.auto_sender.run(accounts))
            self.sleep(self.after_send_pause)
        return summaries
