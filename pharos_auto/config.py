# pharos_auto/config.py
import os
from typing import List
from dotenv import load_dotenv

load_dotenv()

def _env(name: str, default: str = "") -> str:
    v = os.getenv(name, default).strip()
    return v

def _env_float(name: str, default: float) -> float:
    v = _env(name)
    return float(v) if v else float(default)

def _env_int(name: str, default: int) -> int:
    v = _env(name)
    return int(v) if v else int(default)

def _env_bool(name: str, default: bool) -> bool:
    v = _env(name)
    if not v:
        return default
    return v.lower() in ("1","true","yes","y","on")

def _env_csv(name: str) -> List[str]:
    raw = _env(name)
    if not raw: return []
    parts = [p.strip() for p in raw.split(",")]
    return [p for p in parts if p]

# Pharos testnet endpoints
PHAROS_RPC   = _env("PHAROS_RPC", "https://testnet.dplabs-internal.com")
WETH_ADDRESS = _env("WETH_ADDRESS", "0x76aaada469d23216be5f7c596fa25f282ff9b364")
API_BASE_URL = _env("API_BASE_URL", "https://api.pharosnetwork.xyz")
TESTNET_URL  = _env("TESTNET_URL", "https://testnet.pharosnetwork.xyz/")
EXPLORER_URL = _env("EXPLORER_URL", "https://testnet.pharosscan.xyz/tx")

HTTP_TIMEOUT = _env_int("HTTP_TIMEOUT", 30)
RPC_TIMEOUT  = _env_int("RPC_TIMEOUT", 30)
RECEIPT_TIMEOUT = _env_int("RECEIPT_TIMEOUT", 180)

def load_private_keys() -> List[str]:
    return _env_csv("PRIVATE_KEYS")

# Retries
MAX_RETRIES       = _env_int("MAX_RETRIES", 3)
RETRY_BACKOFF_SEC = _env_float("RETRY_BACKOFF_SEC", 2)

# Pauses between accounts / transfers
AUTH_SPACING_SEC    = _env_float("AUTH_SPACING_SEC", 2)
CHECKIN_SPACING_SEC = _env_float("CHECKIN_SPACING_SEC", 2)
SEND_DELAY_SEC      = _env_float("SEND_DELAY_SEC", 5)
ACCOUNT_DELAY_SEC   = _env_float("ACCOUNT_DELAY_SEC", 10)
AFTER_SEND_PAUSE_SEC = _env_float("AFTER_SEND_PAUSE_SEC", 1)

# Auto-send
SEND_GAS_LIMIT   = _env_int("SEND_GAS_LIMIT", 21_000)
SEND_GAS_RESERVE = _env("SEND_GAS_RESERVE", "0.001")  # native units, kept as str for Decimal
VERIFY_TASK_ID   = _env_int("VERIFY_TASK_ID", 103)

# Login challenge
SIGN_MESSAGE = _env("SIGN_MESSAGE", "pharos")

# ---- Logging flags ----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()  # DEBUG/INFO/WARN/ERROR
LOG_COLOR = os.getenv("LOG_COLOR", "1") not in ("0","false","False")
LOG_JSON  = os.getenv("LOG_JSON", "0") in ("1","true","True")
DEBUG     = _env_bool("DEBUG", False)
