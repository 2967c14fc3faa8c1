"""Boldem transactional-email transport.

send(message) -> recipient count:
  before_send_performed hook (may cancel) -> build payload -> bearer token
  (acquired lazily, cached per transport) -> POST transactionalemails ->
  response_received hook -> send_performed hook.

Only status 200 counts as success. HTTP error statuses are inspected rather than
raised, and transport errors become a failed send while
`suppress_transport_errors` is on, so `send()` always returns a count.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Optional

import httpx

from boldem_mailer.clients.base import Credentials, TokenManager
from boldem_mailer.clients.http import BOLDEM_API_URL, BoldemHttpClient
from boldem_mailer.clients.result import Result, failure, success
from boldem_mailer.core.settings import Settings
from boldem_mailer.logging import (
    log_send_cancelled, log_send_performed, reset_log_client, reset_log_send, set_log_client, set_log_send,
)
from boldem_mailer.models import Message
from boldem_mailer.services.email_service import EmailService
from boldem_mailer.services.events import EventDispatcher, SendResult
from boldem_mailer.services.payload import PayloadBuilder

logger = logging.getLogger("boldem_transport")

SEND_PATH = "transactionalemails"


class BoldemTransport(EmailService):
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        default_headers: Optional[Mapping[str, Any]] = None,
        *,
        api_url: str = BOLDEM_API_URL,
        verify_tls: bool = True,
        suppress_transport_errors: bool = True,
        token_expiry: bool = False,
        token_expiry_leeway: int = 60,
        timeout: float = 30.0,
        record_history: bool = True,
        http_transport: httpx.BaseTransport | None = None,
        dispatcher: EventDispatcher | None = None,
    ):
        """
        Args:
            client_id / client_secret: Boldem OAuth client credentials.
            default_headers: headers applied to every message unless the message sets
                the same name; `X-MK-Tag` populates the payload `Tag` instead.
            verify_tls: certificate verification; only disable against test servers.
            suppress_transport_errors: map DNS/connection failures to a failed send.
            token_expiry: drop the cached token once the provider's `expires_in` elapses.
            http_transport: custom httpx transport (e.g. `httpx.MockTransport` in tests).
        """
        self.http = BoldemHttpClient(
            api_url,
            verify=verify_tls,
            timeout=timeout,
            suppress_errors=suppress_transport_errors,
            record_history=record_history,
            transport=http_transport,
        )
        self.tokens = TokenManager(
            self.http,
            Credentials(client_id, client_secret),
            honor_expiry=token_expiry,
            expiry_leeway=token_expiry_leeway,
        )
        self.builder = PayloadBuilder(default_headers)
        self.dispatcher = dispatcher or EventDispatcher()

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "BoldemTransport":
        kwargs: dict[str, Any] = dict(
            api_url=settings.API_URL,
            verify_tls=settings.VERIFY_TLS,
            suppress_transport_errors=settings.SUPPRESS_TRANSPORT_ERRORS,
            token_expiry=settings.TOKEN_EXPIRY,
            token_expiry_leeway=settings.TOKEN_EXPIRY_LEEWAY,
            timeout=settings.TIMEOUT,
            record_history=settings.RECORD_HISTORY,
        )
        kwargs.update(overrides)
        return cls(settings.CLIENT_ID or "", settings.CLIENT_SECRET or "", settings.DEFAULT_HEADERS, **kwargs)

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------
    def send(self, message: Message) -> int:
        result = self.send_with_result(message)
        return result.value if result.ok and result.value is not None else 0

    def send_with_result(self, message: Message) -> Result[int]:
        """Like `send` but keeps status code and raw response body."""
        ctx = set_log_send(uuid.uuid4().hex)
        client_ctx = set_log_client(self.client_id)
        try:
            return self._send(message)
        finally:
            reset_log_client(client_ctx)
            reset_log_send(ctx)

    def _send(self, message: Message) -> Result[int]:
        send_event = self.dispatcher.create_send_event(self, message)
        self.dispatcher.dispatch_event(send_event, "before_send_performed")
        if send_event.bubble_cancelled():
            log_send_cancelled(subject=message.subject)
            return failure("Send cancelled by listener")

        payload = self.builder.build(message)
        token = self.tokens.get_token()
        headers = {"Authorization": f"Bearer {token}"} if token else None
        resp = self.http.post_json(SEND_PATH, payload, headers=headers)

        status_code = resp.status_code if resp is not None else None
        body = resp.text if resp is not None else ""
        ok = status_code == 200
        if resp is not None and not ok:
            logger.warning("Boldem send failed %s: %s", status_code, body[:200])

        response_event = self.dispatcher.create_response_event(self, body, ok)
        self.dispatcher.dispatch_event(response_event, "response_received")

        send_event.result = SendResult.SUCCESS if ok else SendResult.FAILED
        self.dispatcher.dispatch_event(send_event, "send_performed")

        recipients = len(message.all_recipients())
        log_send_performed(ok, status_code, recipients if ok else 0)
        if ok:
            return success(recipients, raw=body, status_code=status_code)
        return failure("Boldem rejected the message" if resp is not None else "Transport error",
                       status_code=status_code, raw=body)

    def register_plugin(self, listener: Any) -> None:
        self.dispatcher.bind_event_listener(listener)

    # ------------------------------------------------------------------
    # Credentials and token
    # ------------------------------------------------------------------
    @property
    def client_id(self) -> str:
        return self.tokens.credentials.client_id

    @property
    def client_secret(self) -> str:
        return self.tokens.credentials.client_secret

    def set_credentials(self, client_id: str, client_secret: str) -> None:
        self.tokens.set_credentials(client_id, client_secret)

    def set_client_id(self, client_id: str) -> None:
        self.tokens.set_credentials(client_id, self.client_secret)

    def set_client_secret(self, client_secret: str) -> None:
        self.tokens.set_credentials(self.client_id, client_secret)

    def get_access_token(self) -> str | None:
        return self.tokens.get_token()

    def set_access_token(self, token: str) -> None:
        """Direct setup is rarely needed; the token is normally obtained from the API."""
        self.tokens.set_token(token)

    def get_history(self) -> str:
        return self.http.get_history()

    # ------------------------------------------------------------------
    # Lifecycle (stateless HTTP; kept for mailer integrations)
    # ------------------------------------------------------------------
    def is_started(self) -> bool:
        return True

    def start(self) -> bool:
        return True

    def stop(self) -> bool:
        return True

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "BoldemTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["BoldemTransport", "SEND_PATH"]
