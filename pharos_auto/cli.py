# pharos_auto/cli.py
import signal
import sys
from typing import List, Optional

import click
from web3 import Web3

from . import __version__
from .api import RewardsApi
from .auth import AuthSessionManager
from .autosend import AutoSender
from .chain import ChainClient, get_w3
from .checkin import perform_daily_checkin
from .config import load_private_keys
from .errors import ConfigError
from .models import Account, RunConfig
from .orchestrator import TransactionOrchestrator
from .prompts import load_run_config
from .scheduler import Scheduler
from .util import init_logging, get_logger, make_account, normalize_key, on_error

log = get_logger()


def load_accounts(keys: List[str]) -> List[Account]:
    if not keys:
        raise ConfigError("PRIVATE_KEYS environment variable not found. Please configure it in .env file")
    accounts = []
    for n, raw in enumerate(keys, 1):
        pk = normalize_key(raw)
        try:
            address = make_account(pk).address
        except Exception as e:
            raise ConfigError(f"private key #{n} is invalid: {e}") from e
        accounts.append(Account(address=address, private_key=pk))
    return accounts


def log_configuration(cfg: RunConfig, account_count: int) -> None:
    log.info("📋 Configuration")
    log.info(f"   mode: {cfg.mode.upper()}")
    log.info(f"   swap transactions: {cfg.total_tx} per account")
    log.info(f"   delay between swaps: {cfg.delay_minutes:g} minutes")
    log.info(f"   gas price multiplier: {cfg.gas_price_multiplier:g}x")
    log.info(f"   accounts: {account_count}")
    log.info(f"   auto send: {'ENABLED' if cfg.auto_send_enabled else 'DISABLED'}")
    if cfg.auto_send_enabled:
        log.info(f"   send amount: {cfg.send_amount} per transaction")
        log.info(f"   target addresses: {cfg.target_address_count} random addresses")
    if cfg.scheduled:
        log.info(f"   scheduled time: {cfg.run_hour:02d}:{cfg.run_minute:02d}")


def log_account_balances(client: ChainClient, accounts: List[Account]) -> None:
    log.info("💰 Account information")
    for i, account in enumerate(accounts, 1):
        try:
            balance = Web3.from_wei(client.get_balance(account.address), "ether")
            log.info(f"🔹 account {i}: {account.address}  balance {balance:.4f}")
        except Exception as e:
            log.warning(f"🔹 account {i}: {account.address}  error fetching balance: {e}")


def run_bot(cfg: RunConfig, accounts: List[Account], client: Optional[ChainClient] = None,
            api: Optional[RewardsApi] = None) -> None:
    log_configuration(cfg, len(accounts))
    client = client or ChainClient(get_w3())
    api = api or RewardsApi()
    log_account_balances(client, accounts)

    AuthSessionManager(api).authenticate(accounts)
    auto_sender = AutoSender(client, cfg, api) if cfg.auto_send_enabled else None
    orchestrator = TransactionOrchestrator(client, cfg, auto_sender=auto_sender)

    def cycle() -> None:
        perform_daily_checkin(api, accounts)
        orchestrator.run(accounts)

    if not cfg.scheduled:
        log.info("👤 Manual mode, running once")
        cycle()
        log.info("🎉 Manual execution completed")
        return

    log.info("🤖 Auto mode, running on schedule")
    scheduler = Scheduler(cycle, cfg.run_hour, cfg.run_minute)
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, lambda *_: scheduler.stop())
    scheduler.run_forever()


@click.command()
@click.version_option(version=__version__, prog_name="pharos-auto")
def main() -> None:
    """Wrap/unwrap, check-in and auto-send across all PRIVATE_KEYS accounts."""
    init_logging()
    try:
        accounts = load_accounts(load_private_keys())
        log.info(f"✓ loaded {len(accounts)} private key(s) from environment")
        click.secho("🔧 Bot Configuration Setup", fg="yellow", bold=True)
        cfg = load_run_config(len(accounts))
        log.info("✅ configuration completed")
        run_bot(cfg, accounts)
    except ConfigError as e:
        log.error(f"💥 fatal error: {e}")
        sys.exit(1)
    except Exception as e:
        on_error(log, "💥 unhandled error", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
