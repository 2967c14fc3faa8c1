from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import logging, threading, time

from boldem_mailer.logging import log_token_acquired
from .http import BoldemHttpClient
from .result import Result, success, failure

logger = logging.getLogger("boldem_tokens")

TOKEN_PATH = "oauth"

class BoldemError(RuntimeError):
    pass

class TokenAcquisitionError(BoldemError):
    pass

@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str

@dataclass
class AccessToken:
    token: str
    expires_at: int | None = None  # unix seconds

    def expired(self, now: float, leeway: int = 0) -> bool:
        return self.expires_at is not None and self.expires_at - leeway <= now

class TokenManager:
    """Lazily acquires and caches the client-credentials bearer token.

    One token per manager. Unless `honor_expiry` is set the token is reused until
    `clear_token()`/`set_token()`/`set_credentials()`; the `expires_in` sent by the
    provider is recorded either way. Acquisition through `get_token()` is
    serialized so concurrent callers trigger a single token request.
    """

    def __init__(
        self,
        http: BoldemHttpClient,
        credentials: Credentials,
        *,
        honor_expiry: bool = False,
        expiry_leeway: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.http = http
        self.credentials = credentials
        self.honor_expiry = honor_expiry
        self.expiry_leeway = expiry_leeway
        self._clock = clock
        self._cached: AccessToken | None = None
        self._lock = threading.Lock()

    @property
    def cached(self) -> AccessToken | None:
        return self._cached

    def _usable(self) -> AccessToken | None:
        tok = self._cached
        if tok is None:
            return None
        if self.honor_expiry and tok.expired(self._clock(), self.expiry_leeway):
            return None
        return tok

    def get_token(self) -> str | None:
        """Cached token, acquiring one first if needed. `None` when acquisition fails."""
        tok = self._usable()
        if tok:
            return tok.token
        with self._lock:
            tok = self._usable()
            if tok:
                return tok.token
            if self._cached is not None:
                # expired; keep the stale bearer off the refresh and any later request
                self.clear_token()
            res = self.acquire()
            return res.value.token if res.ok else None

    def require_token(self) -> str:
        token = self.get_token()
        if not token:
            raise TokenAcquisitionError(f"Cannot obtain Boldem access token for client_id={self.credentials.client_id}")
        return token

    def set_token(self, token: str, expires_at: int | None = None) -> None:
        self._cached = AccessToken(token=token, expires_at=expires_at)
        self.http.set_default_header("Authorization", f"Bearer {token}")

    def clear_token(self) -> None:
        self._cached = None
        self.http.set_default_header("Authorization", None)

    def set_credentials(self, client_id: str, client_secret: str) -> None:
        self.credentials = Credentials(client_id, client_secret)
        self.clear_token()

    def acquire(self) -> Result[AccessToken]:
        data = {
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
        }
        resp = self.http.post_json(TOKEN_PATH, data)
        if resp is None:
            log_token_acquired(False, error="transport")
            return failure("Token request failed at transport level")
        try:
            body = resp.json()
        except ValueError:
            body = None
        access = body.get("access_token") if isinstance(body, dict) else None
        if resp.status_code != 200 or not access:
            logger.warning("Token request rejected %s: %s", resp.status_code, resp.text[:200])
            log_token_acquired(False, status_code=resp.status_code)
            return failure("Missing access_token in response", status_code=resp.status_code, raw=body)
        expires_at = None
        try:
            expires_at = int(self._clock()) + int(body["expires_in"])
        except (KeyError, TypeError, ValueError):
            pass
        self.set_token(access, expires_at=expires_at)
        log_token_acquired(True, status_code=resp.status_code, expires_at=expires_at)
        return success(self._cached, raw=body, status_code=resp.status_code)

__all__ = ["AccessToken", "BoldemError", "Credentials", "TokenAcquisitionError", "TokenManager"]
