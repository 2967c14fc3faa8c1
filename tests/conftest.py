"""Shared fixtures: a respx router for the Boldem API and a transport bound to it."""
from __future__ import annotations

import httpx
import pytest
import respx

from boldem_mailer.models import Address, Message
from boldem_mailer.services.transport import BoldemTransport

API_URL = "https://api.boldem.test/api/"
OAUTH_URL = API_URL + "oauth"
SEND_URL = API_URL + "transactionalemails"


@pytest.fixture
def boldem_api():
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def oauth_route(boldem_api):
    return boldem_api.post(OAUTH_URL).mock(
        return_value=httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600, "token_type": "Bearer"})
    )


@pytest.fixture
def transport():
    t = BoldemTransport("client-id", "client-secret", api_url=API_URL)
    yield t
    t.close()


@pytest.fixture
def simple_message() -> Message:
    return Message(
        subject="Hi",
        sender=Address("a@x.com", "Alice"),
        to=[Address("b@x.com", "")],
        body="hello",
    )
