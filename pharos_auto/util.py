# pharos_auto/util.py
import time
from typing import Callable
from eth_account import Account

# --- pretty logging utils ---
import logging, sys
from .config import LOG_LEVEL, LOG_COLOR, LOG_JSON, DEBUG

RESET = "\x1b[0m"
COLORS = {
    "DEBUG": "\x1b[38;5;245m",
    "INFO":  "\x1b[38;5;39m",
    "WARNING": "\x1b[38;5;214m",
    "ERROR": "\x1b[38;5;203m",
}

class _HumanFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        msg = record.getMessage()
        if LOG_COLOR:
            color = COLORS.get(level, "")
            return f"{color}{level.lower()[:5]:>5}{RESET} {msg}"
        return f"{level.lower()[:5]:>5} {msg}"

class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        import json, time
        payload = {
            "ts": round(time.time(), 3),
            "level": record.levelname.lower(),
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if DEBUG and record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

_log = None

def get_logger(name="pharos"):
    global _log
    return _log if _log else init_logging(name)

def init_logging(name="pharos"):
    global _log
    log = logging.getLogger(name)
    log.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    h = logging.StreamHandler(sys.stdout)
    h.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    h.setFormatter(_JsonFormatter() if LOG_JSON else _HumanFormatter())
    # avoid duplicate handlers
    log.handlers[:] = [h]
    log.propagate = False
    _log = log
    return log

# --- pretty helpers ---
def short(x: object, keep: int = 6) -> str:
    if x is None:
        return "-"
    s = str(x)
    if s.startswith("0x") and len(s) > 2*keep+2:
        return f"{s[:2+keep]}…{s[-keep:]}"
    if len(s) > keep*2:
        return f"{s[:keep]}…{s[-keep:]}"
    return s

def fmt_amount(raw_amount: int, decimals: int = 18) -> str:
    if decimals <= 0:
        return str(raw_amount)
    q = 10 ** decimals
    whole = raw_amount // q
    frac = raw_amount % q
    if frac == 0:
        return f"{whole}"
    # trim trailing zeros, limit length
    s = f"{frac:0{decimals}d}".rstrip("0")
    s = s[:8]  # keep short
    return f"{whole}.{s}"

def fmt_hms(seconds: float) -> str:
    seconds = max(int(seconds), 0)
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"

def explorer_link(explorer_url: str, tx_hash: str) -> str:
    return f"{explorer_url.rstrip('/')}/{tx_hash}"

def on_error(log, msg: str, exc: Exception = None):
    if DEBUG and exc:
        log.exception(msg)
    else:
        log.error(f"{msg}: {exc}" if exc else msg)

def make_account(pk: str):
    return Account.from_key(pk)

def normalize_key(pk: str) -> str:
    pk = pk.strip()
    return pk if pk.startswith("0x") else "0x" + pk

def weth_abi():
    # deposit, withdraw, balanceOf
    return [
        {"name":"deposit","type":"function","stateMutability":"payable","inputs":[],"outputs":[]},
        {"name":"withdraw","type":"function","stateMutability":"nonpayable","inputs":[{"name":"wad","type":"uint256"}],"outputs":[]},
        {"name":"balanceOf","type":"function","stateMutability":"view","inputs":[{"name":"owner","type":"address"}],"outputs":[{"name":"","type":"uint256"}]},
    ]

def sleep_with_progress(seconds: float, message: str, sleep: Callable[[float], None] = time.sleep, width: int = 20):
    """Sleep whole seconds while redrawing a progress bar on stdout."""
    total = int(seconds)
    get_logger().info(f"⏳ {message}")
    for remaining in range(total, 0, -1):
        done = (total - remaining + 1) * width // total
        bar = "█" * done + "░" * (width - done)
        sys.stdout.write(f"\r   [{bar}] {remaining}s remaining")
        sys.stdout.flush()
        sleep(1)
    if total:
        sys.stdout.write("\r" + " " * (width + 24) + "\r")
        sys.stdout.flush()
    # sub-second remainder
    if seconds - total > 0:
        sleep(seconds - total)
    get_logger().info(f"   ✓ {message.replace('Waiting', 'Completed')}")
