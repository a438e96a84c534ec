# pharos_auto/prompts.py
import math
from decimal import Decimal, InvalidOperation
from typing import Callable, List

import click
from web3 import Web3

from .errors import ConfigError
from .models import MODE_AUTO, MODE_MANUAL, RunConfig


def validate_mode(value: str) -> str:
    mode = value.strip().lower()
    if mode not in (MODE_AUTO, MODE_MANUAL):
        raise ConfigError('Mode must be "auto" or "manual"')
    return mode


def validate_positive_number(value: str, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = float("nan")
    if not math.isfinite(number) or number <= 0:
        raise ConfigError(f"{field_name} must be a positive number")
    return number


def validate_amount(value: str, field_name: str) -> str:
    """Positive native amount that is worth at least one wei. Returns the stripped text."""
    raw = value.strip()
    validate_positive_number(raw, field_name)
    try:
        wei = Web3.to_wei(Decimal(raw), "ether")
    except (InvalidOperation, ValueError) as e:
        raise ConfigError(f"{field_name} is out of range") from e
    if wei <= 0:
        raise ConfigError(f"{field_name} must be at least 1 wei")
    return raw


def _parse_int(value: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        return -1


def validate_hour(value: str) -> int:
    hour = _parse_int(value)
    if not 0 <= hour <= 23:
        raise ConfigError("Hour must be between 0-23")
    return hour


def validate_minute(value: str) -> int:
    minute = _parse_int(value)
    if not 0 <= minute <= 59:
        raise ConfigError("Minute must be between 0-59")
    return minute


def _click_ask(text: str) -> str:
    return click.prompt(click.style(text, fg="blue"), default="", show_default=False, prompt_suffix=" ")


def load_run_config(account_count: int, ask: Callable[[str], str] = _click_ask) -> RunConfig:
    """Walk the operator through the run settings. Raises ConfigError on bad input."""
    mode = validate_mode(ask("➤ Enter SWAP mode (auto/manual):"))
    total_tx = validate_positive_number(ask("🔁 Total SWAP transactions per account:"), "Transaction count")
    delay = validate_positive_number(ask("⏱️ Delay between SWAP transactions (minutes):"), "Transaction delay")
    multiplier = validate_positive_number(
        ask("⛽ Gas price multiplier for SWAP (e.g., 1.2 for 120%):"), "Gas price multiplier")

    amounts: List[str] = []
    for i in range(account_count):
        raw = ask(f"   🔢 Account {i + 1} amount (native units):")
        amounts.append(validate_amount(raw, f"Account {i + 1} amount"))

    auto_send = ask("💸 Enable Auto Send? (y/n):").strip().lower() in ("y", "yes")
    send_amount, target_count = "0", 0
    if auto_send:
        send_amount = validate_amount(ask("💸 Amount to send per transaction:"), "Send amount")
        target_count = math.ceil(validate_positive_number(
            ask("🎯 Number of random target addresses:"), "Target address count"))

    run_hour = run_minute = None
    if mode == MODE_AUTO:
        run_hour = validate_hour(ask("🕐 Hour to run bot (0-23):"))
        run_minute = validate_minute(ask("🕒 Minute to run bot (0-59):"))

    return RunConfig(
        mode=mode,
        amounts=tuple(amounts),
        total_tx=math.ceil(total_tx),
        delay_minutes=delay,
        gas_price_multiplier=multiplier,
        run_hour=run_hour,
        run_minute=run_minute,
        auto_send_enabled=auto_send,
        send_amount=send_amount,
        target_address_count=target_count,
    )
