# pharos_auto/auth.py
import time
from typing import Callable, List

import requests
from eth_account import Account as EthAccount
from eth_account.messages import encode_defunct
from web3 import Web3

from .api import RewardsApi
from .config import SIGN_MESSAGE, AUTH_SPACING_SEC
from .errors import ApiError
from .models import Account
from .util import get_logger, short
log = get_logger()


def sign_challenge(private_key: str, message: str = SIGN_MESSAGE) -> str:
    signed = EthAccount.sign_message(encode_defunct(text=message), private_key=private_key)
    return Web3.to_hex(signed.signature)


class AuthSessionManager:
    def __init__(self, api: RewardsApi, spacing: float = AUTH_SPACING_SEC,
                 sleep: Callable[[float], None] = time.sleep, message: str = SIGN_MESSAGE):
        self.api = api
        self.spacing = spacing
        self.sleep = sleep
        self.message = message

    def sign_in(self, account: Account) -> str:
        signature = sign_challenge(account.private_key, self.message)
        log.info(f"   ✍️ message signed: {signature[:10]}…")
        return self.api.login(account.address, signature)

    def authenticate(self, accounts: List[Account]) -> List[Account]:
        """Set ``token`` on every account that signs in; the rest stay unauthenticated."""
        log.info("🔐 Authenticating accounts")
        for i, account in enumerate(accounts):
            log.info(f"🔑 account {i + 1}/{len(accounts)} {account.address}")
            try:
                account.token = self.sign_in(account)
                log.info("   ✓ sign-in successful, token received")
            except (ApiError, requests.RequestException) as e:
                account.token = None
                log.error(f"   ❌ sign-in failed: {e}")
            if i < len(accounts) - 1:
                self.sleep(self.spacing)

        ok = sum(1 for a in accounts if a.authenticated)
        log.info(f"📊 auth summary: ✓ {ok}/{len(accounts)}  ⚠ {len(accounts) - ok}/{len(accounts)}")
        return accounts
