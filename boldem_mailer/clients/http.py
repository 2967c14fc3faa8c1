from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import httpx
import logging

logger = logging.getLogger("boldem_http")

BOLDEM_API_URL = "https://api.boldem.cz/api/"

DEFAULT_REQUEST_HEADERS = {
    "Accept": "application/json;charset:utf-8",
    "Content-Type": "application/json",
    "X-Requested-With": "XMLHttpRequest",
    "User-Agent": "boldem-mailer python client",
}

class BoldemHttpClient:
    """Thin synchronous wrapper around `httpx.Client` for the Boldem API.

    - non-2xx responses are returned, never raised
    - transport errors (DNS, reset, timeout) are logged and mapped to `None`
      unless `suppress_errors=False`
    - every request/response pair is kept for `get_history()` when
      `record_history` is on
    """

    def __init__(
        self,
        base_url: str = BOLDEM_API_URL,
        *,
        verify: bool = True,
        timeout: float = 30.0,
        suppress_errors: bool = True,
        record_history: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.suppress_errors = suppress_errors
        self.record_history = record_history
        self._history: List[Tuple[httpx.Request, httpx.Response]] = []
        if not verify:
            logger.warning("TLS certificate verification disabled for %s", self.base_url)
        self.client = httpx.Client(
            headers=DEFAULT_REQUEST_HEADERS,
            verify=verify,
            timeout=timeout,
            transport=transport,
            event_hooks={"response": [self._record]},
        )

    def _record(self, response: httpx.Response) -> None:
        if not self.record_history:
            return
        response.read()
        self._history.append((response.request, response))

    @property
    def default_headers(self) -> httpx.Headers:
        return self.client.headers

    def set_default_header(self, name: str, value: str | None) -> None:
        """Set (or with `None` remove) a header sent on every later request."""
        if value is None:
            self.client.headers.pop(name, None)
        else:
            self.client.headers[name] = value

    def url_for(self, path: str) -> str:
        return self.base_url + path.lstrip("/")

    def post_json(self, path: str, payload: Any, headers: Optional[Dict[str, str]] = None) -> httpx.Response | None:
        url = self.url_for(path)
        try:
            return self.client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            if not self.suppress_errors:
                raise
            logger.warning("Boldem request to %s failed: %s", url, e)
            return None

    def get_history(self) -> str:
        """Human readable transcript of every request/response pair so far.

        Contains credentials (token request body, Authorization header); debug use only.
        """
        chunks: List[str] = []
        for request, response in self._history:
            lines = [f"{request.method} {request.url}"]
            lines.extend(f"{k}: {v}" for k, v in request.headers.multi_items())
            lines.append("")
            lines.append(request.content.decode("utf-8", errors="replace"))
            lines.append(f"HTTP {response.status_code}")
            lines.append(response.text)
            chunks.append("\n".join(lines))
        return "\n\n".join(chunks)

    def clear_history(self) -> None:
        self._history.clear()

    def close(self) -> None:
        self.client.close()

__all__ = ["BoldemHttpClient", "BOLDEM_API_URL", "DEFAULT_REQUEST_HEADERS"]
