# pharos_auto/errors.py
from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "config"
    CHAIN = "chain"
    NETWORK = "network"
    API = "api"
    INSUFFICIENT_BALANCE = "insufficient_balance"


class ConfigError(ValueError):
    """Invalid user input or missing credentials. Fatal at startup."""


class ChainError(RuntimeError):
    """Submission failed or the transaction was mined but reverted."""

    def __init__(self, message: str, tx_hash: str | None = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class ApiError(RuntimeError):
    """Rewards API answered with an error status or an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None, payload: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


def classify(exc: BaseException) -> ErrorKind:
    if isinstance(exc, ConfigError):
        return ErrorKind.CONFIG
    if isinstance(exc, ApiError):
        return ErrorKind.API
    if isinstance(exc, ChainError):
        return ErrorKind.CHAIN
    return ErrorKind.NETWORK
