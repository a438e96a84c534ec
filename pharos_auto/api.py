# pharos_auto/api.py
import requests
from typing import Any, Dict, Optional

from .config import API_BASE_URL, TESTNET_URL, HTTP_TIMEOUT, VERIFY_TASK_ID
from .errors import ApiError
from .util import get_logger
log = get_logger()


class RewardsApi:
    """Client for the rewards API: login, daily check-in and task verification."""

    def __init__(self, base_url: str = API_BASE_URL, referer: str = TESTNET_URL,
                 timeout: int = HTTP_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.referer = referer
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, path: str, params: Dict[str, Any], token: Optional[str] = None) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json", "Referer": self.referer}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self.base_url}{path}"
        r = self.session.post(url, params=params, headers=headers, timeout=self.timeout)
        if r.status_code >= 400:
            try:
                body = r.json()
            except ValueError:
                body = {"text": r.text[:1000]}
            log.debug(f"[api] HTTP {r.status_code} {path} body={body}")
            raise ApiError(f"HTTP {r.status_code}: {r.reason}", status_code=r.status_code, payload=body)
        try:
            return r.json()
        except ValueError as e:
            raise ApiError(f"invalid JSON from {path}", status_code=r.status_code) from e

    def login(self, address: str, signature: str) -> str:
        body = self._post("/user/login", {"address": address, "signature": signature})
        jwt = (body.get("data") or {}).get("jwt")
        if not jwt:
            raise ApiError("No JWT token received from server", payload=body)
        return jwt

    def check_in(self, address: str, token: str) -> Dict[str, Any]:
        body = self._post("/sign/in", {"address": address}, token=token)
        if body.get("code") == 1:
            raise ApiError(body.get("message") or "Check-in failed", payload=body)
        return body

    def verify_task(self, address: str, tx_hash: str, token: str, task_id: int = VERIFY_TASK_ID) -> Dict[str, Any]:
        body = self._post("/task/verify", {"address": address, "task_id": task_id, "tx_hash": tx_hash}, token=token)
        if body.get("code") == 0 and body.get("verified"):
            return body
        raise ApiError(f"{body.get('code')} - {body.get('message')}", payload=body)
