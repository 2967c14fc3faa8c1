import json
import threading
import time

import httpx
import pytest

from boldem_mailer.clients.base import Credentials, TokenAcquisitionError, TokenManager
from boldem_mailer.clients.http import BoldemHttpClient
from conftest import API_URL, OAUTH_URL


@pytest.fixture
def http():
    client = BoldemHttpClient(API_URL)
    yield client
    client.close()


def make_manager(http, **kwargs):
    return TokenManager(http, Credentials("client-id", "client-secret"), **kwargs)


def test_get_token_acquires_once(http, oauth_route):
    tokens = make_manager(http)
    assert tokens.get_token() == "tok-1"
    assert tokens.get_token() == "tok-1"
    assert oauth_route.call_count == 1
    sent = oauth_route.calls.last.request
    assert json.loads(sent.content) == {
        "client_id": "client-id",
        "client_secret": "client-secret",
    }


def test_acquire_installs_default_authorization_header(http, oauth_route):
    tokens = make_manager(http)
    result = tokens.acquire()
    assert result.ok
    assert result.value.token == "tok-1"
    assert http.default_headers["Authorization"] == "Bearer tok-1"


def test_acquire_records_expiry(http, oauth_route):
    tokens = make_manager(http, clock=lambda: 1000.0)
    tokens.acquire()
    assert tokens.cached.expires_at == 4600


def test_acquire_failure_on_missing_field(http, boldem_api):
    boldem_api.post(OAUTH_URL).mock(return_value=httpx.Response(200, json={"error": "nope"}))
    tokens = make_manager(http)
    result = tokens.acquire()
    assert not result.ok
    assert tokens.cached is None
    assert "Authorization" not in http.default_headers


def test_acquire_failure_on_error_status(http, boldem_api):
    boldem_api.post(OAUTH_URL).mock(return_value=httpx.Response(401, json={"access_token": "tok"}))
    tokens = make_manager(http)
    assert tokens.get_token() is None
    assert tokens.cached is None


def test_acquire_failure_on_invalid_json(http, boldem_api):
    boldem_api.post(OAUTH_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))
    assert not make_manager(http).acquire().ok


def test_acquire_failure_on_transport_error(http, boldem_api):
    boldem_api.post(OAUTH_URL).mock(side_effect=httpx.ConnectError("dns"))
    result = make_manager(http).acquire()
    assert not result.ok
    assert result.status_code is None


def test_transport_error_raises_when_not_suppressed(boldem_api):
    boldem_api.post(OAUTH_URL).mock(side_effect=httpx.ConnectError("dns"))
    http = BoldemHttpClient(API_URL, suppress_errors=False)
    with pytest.raises(httpx.ConnectError):
        make_manager(http).get_token()
    http.close()


def test_require_token_raises(http, boldem_api):
    boldem_api.post(OAUTH_URL).mock(return_value=httpx.Response(500))
    with pytest.raises(TokenAcquisitionError):
        make_manager(http).require_token()


def test_set_token_skips_acquisition(http, oauth_route):
    tokens = make_manager(http)
    tokens.set_token("manual")
    assert tokens.get_token() == "manual"
    assert http.default_headers["Authorization"] == "Bearer manual"
    assert oauth_route.call_count == 0


def test_clear_token_forces_new_acquisition(http, oauth_route):
    tokens = make_manager(http)
    tokens.get_token()
    tokens.clear_token()
    assert "Authorization" not in http.default_headers
    tokens.get_token()
    assert oauth_route.call_count == 2


def test_set_credentials_clears_token(http, oauth_route):
    tokens = make_manager(http)
    tokens.get_token()
    tokens.set_credentials("other-id", "other-secret")
    assert tokens.cached is None
    tokens.get_token()
    assert b"other-id" in oauth_route.calls.last.request.content


def test_expired_token_reused_by_default(http, oauth_route):
    now = [1000.0]
    tokens = make_manager(http, clock=lambda: now[0])
    tokens.get_token()
    now[0] += 10_000
    tokens.get_token()
    assert oauth_route.call_count == 1


def test_expired_token_refreshed_when_expiry_enabled(http, oauth_route):
    now = [1000.0]
    tokens = make_manager(http, honor_expiry=True, expiry_leeway=60, clock=lambda: now[0])
    tokens.get_token()
    now[0] += 3000
    tokens.get_token()
    assert oauth_route.call_count == 1
    now[0] += 545  # within leeway of expires_at=4600
    tokens.get_token()
    assert oauth_route.call_count == 2


def test_failed_refresh_drops_expired_token(http, boldem_api):
    now = [1000.0]
    route = boldem_api.post(OAUTH_URL)
    route.side_effect = [
        httpx.Response(200, json={"access_token": "old", "expires_in": 100}),
        httpx.Response(401, json={"error": "invalid_client"}),
    ]
    tokens = make_manager(http, honor_expiry=True, clock=lambda: now[0])
    assert tokens.get_token() == "old"
    now[0] += 500
    assert tokens.get_token() is None
    assert tokens.cached is None
    assert "Authorization" not in http.default_headers
    assert "Authorization" not in route.calls.last.request.headers


def test_concurrent_get_token_issues_one_request(http, boldem_api):
    def slow_oauth(request):
        time.sleep(0.2)
        return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})

    route = boldem_api.post(OAUTH_URL).mock(side_effect=slow_oauth)
    tokens = make_manager(http)
    results = []
    threads = [threading.Thread(target=lambda: results.append(tokens.get_token())) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == ["tok"] * 5
    assert route.call_count == 1
