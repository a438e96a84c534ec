"""Shared fakes: an in-memory chain client and a scripted rewards API."""

from __future__ import annotations

import pytest
from eth_account import Account as EthAccount

from pharos_auto.errors import ApiError, ChainError
from pharos_auto.models import Account, RunConfig
from pharos_auto.util import normalize_key

TX_HASH = "0x" + "ab" * 32


class FakeChainClient:
    def __init__(self, wrapped=None, native=None, fail_wrap: int = 0, fail_send=()):
        self.wrapped = dict(wrapped or {})
        self.native = dict(native or {})
        self.fail_wrap = fail_wrap
        self.fail_send = set(fail_send)
        self.calls = []

    def get_balance(self, address):
        value = self.native.get(address, 0)
        if isinstance(value, Exception):
            raise value
        return value

    def wrapped_balance(self, address):
        value = self.wrapped.get(address, 0)
        if isinstance(value, Exception):
            raise value
        return value

    def wrap(self, account, amount_wei, multiplier):
        self.calls.append(("wrap", account.address, amount_wei))
        if self.fail_wrap:
            self.fail_wrap -= 1
            raise ChainError("transaction reverted")
        self.wrapped[account.address] = self.wrapped.get(account.address, 0) + amount_wei
        return TX_HASH

    def unwrap(self, account, amount_wei, multiplier):
        self.calls.append(("unwrap", account.address, amount_wei))
        self.wrapped[account.address] = 0
        return TX_HASH

    def send_native(self, account, to, amount_wei, multiplier, gas_limit=21000):
        self.calls.append(("send", account.address, to, amount_wei, gas_limit))
        if to in self.fail_send:
            raise ChainError("nonce too low")
        return TX_HASH

    def of_kind(self, kind):
        return [c for c in self.calls if c[0] == kind]


class FakeApi:
    def __init__(self, tokens=None, checkin_error=None, verify_error=None):
        self.tokens = tokens or {}
        self.checkin_error = checkin_error
        self.verify_error = verify_error
        self.logins = []
        self.checkins = []
        self.verifications = []

    def login(self, address, signature):
        self.logins.append((address, signature))
        token = self.tokens.get(address)
        if token is None:
            raise ApiError("Signature verification failed: 403", status_code=403)
        return token

    def check_in(self, address, token):
        self.checkins.append((address, token))
        if self.checkin_error is not None:
            raise self.checkin_error
        return {"code": 0, "message": "ok"}

    def verify_task(self, address, tx_hash, token, task_id=103):
        self.verifications.append((address, tx_hash, token))
        if self.verify_error is not None:
            raise self.verify_error
        return {"code": 0, "verified": True}


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)

    @property
    def total(self):
        return sum(self.calls)


def make_accounts(n: int) -> list[Account]:
    accounts = []
    for _ in range(n):
        acct = EthAccount.create()
        accounts.append(Account(address=acct.address, private_key=normalize_key(acct.key.hex())))
    return accounts


def make_config(**overrides) -> RunConfig:
    values = dict(
        mode="manual",
        amounts=("0.01",),
        total_tx=1,
        delay_minutes=0.05,
        gas_price_multiplier=1.2,
    )
    values.update(overrides)
    return RunConfig(**values)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def accounts():
    return make_accounts(2)
