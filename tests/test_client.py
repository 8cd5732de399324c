from __future__ import annotations

import logging
import sys
import threading
import time
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from kucoin_rest.client import (  # noqa: E402
    ApiClient,
    Method,
    RequestSpec,
)
from kucoin_rest.errors import (  # noqa: E402
    CredentialsMissing,
    HTTPError,
    RequestTimeout,
    TransportError,
)
from kucoin_rest.signer import sign  # noqa: E402


class DummyResponse:
    def __init__(self, body: bytes = b'{"success":true,"data":{}}', status_code: int = 200) -> None:
        self.content = body
        self.status_code = status_code
        self.headers = {"Content-Type": "application/json"}


class RecordingSession:
    def __init__(self, response: DummyResponse | None = None) -> None:
        self.response = response or DummyResponse()
        self.calls: list[dict[str, Any]] = []

    def request(self, method, url, data=None, headers=None, timeout=None, proxies=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "data": data,
                "headers": headers,
                "timeout": timeout,
                "proxies": proxies,
            }
        )
        return self.response

    def close(self) -> None:
        pass


class HangingSession:
    def __init__(self) -> None:
        self.release = threading.Event()
        self.calls = 0

    def request(self, *args, **kwargs):
        self.calls += 1
        self.release.wait(10)
        return DummyResponse()

    def close(self) -> None:
        self.release.set()


def test_get_places_params_in_query_string() -> None:
    session = RecordingSession()
    client = ApiClient(session=session)

    client.send(RequestSpec(Method.GET, "open/orders", {"symbol": "KCS-BTC", "limit": "5"}))

    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.kucoin.com/v1/open/orders?limit=5&symbol=KCS-BTC"
    assert call["data"] is None
    assert "Content-Type" not in call["headers"]
    assert call["headers"]["Accept"] == "application/json"
    assert call["timeout"] == client.timeout


def test_post_places_params_in_form_body() -> None:
    session = RecordingSession()
    client = ApiClient(session=session)

    client.send(
        RequestSpec(Method.POST, "order", {"price": "1.1", "type": "BUY", "amount": "10"})
    )

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.kucoin.com/v1/order"
    assert call["data"] == "amount=10&price=1.1&type=BUY"
    assert call["headers"]["Content-Type"] == "application/x-www-form-urlencoded;charset=utf-8"


def test_get_without_params_has_no_question_mark() -> None:
    session = RecordingSession()
    client = ApiClient(session=session)

    client.send(RequestSpec(Method.GET, "market/open/coins"))

    assert session.calls[0]["url"] == "https://api.kucoin.com/v1/market/open/coins"


def test_absolute_url_used_verbatim() -> None:
    session = RecordingSession()
    client = ApiClient(session=session)

    client.send(RequestSpec(Method.GET, "https://example.test/v1/ping"))

    assert session.calls[0]["url"] == "https://example.test/v1/ping"


def test_get_merges_query_embedded_in_path() -> None:
    session = RecordingSession()
    client = ApiClient(session=session)

    client.send(RequestSpec(Method.GET, "open/tick?symbol=KCS-BTC", {"limit": "1"}))

    assert session.calls[0]["url"] == "https://api.kucoin.com/v1/open/tick?limit=1&symbol=KCS-BTC"


def test_authenticated_request_attaches_signed_headers() -> None:
    session = RecordingSession()
    client = ApiClient(api_key="key", api_secret="secret", session=session)

    with patch.object(client._nonces, "next", return_value=1509449940000):
        client.send(
            RequestSpec(
                Method.POST,
                "order",
                {"symbol": "KCS-BTC", "type": "BUY", "price": "1.1", "amount": "10"},
                auth_needed=True,
            )
        )

    headers = session.calls[0]["headers"]
    assert headers["KC-API-KEY"] == "key"
    assert headers["KC-API-NONCE"] == "1509449940000"
    assert headers["KC-API-SIGNATURE"] == sign(
        "/v1/order",
        "amount=10&price=1.1&symbol=KCS-BTC&type=BUY",
        1509449940000,
        "secret",
    )


def test_signature_uses_path_without_query() -> None:
    session = RecordingSession()
    client = ApiClient(api_key="key", api_secret="secret", session=session)

    with patch.object(client._nonces, "next", return_value=42):
        client.send(
            RequestSpec(Method.GET, "account/KCS/wallet/records", {"type": "DEPOSIT"}, True)
        )

    headers = session.calls[0]["headers"]
    assert headers["KC-API-SIGNATURE"] == sign(
        "/v1/account/KCS/wallet/records", "type=DEPOSIT", 42, "secret"
    )


def test_unauthenticated_request_has_no_auth_headers() -> None:
    session = RecordingSession()
    client = ApiClient(api_key="key", api_secret="secret", session=session)

    client.send(RequestSpec(Method.GET, "market/open/symbols"))

    headers = session.calls[0]["headers"]
    assert not {"KC-API-KEY", "KC-API-NONCE", "KC-API-SIGNATURE"} & set(headers)


@pytest.mark.parametrize("api_key, api_secret", [("key", ""), ("", "secret"), ("", "")])
def test_missing_credentials_short_circuit(api_key: str, api_secret: str) -> None:
    session = MagicMock()
    client = ApiClient(api_key=api_key, api_secret=api_secret, session=session)

    with pytest.raises(CredentialsMissing):
        client.send(RequestSpec(Method.GET, "user/info", auth_needed=True))

    session.request.assert_not_called()


def test_timeout_against_unresponsive_transport() -> None:
    session = HangingSession()
    client = ApiClient(session=session, timeout=0.2)

    start = time.monotonic()
    try:
        with pytest.raises(RequestTimeout) as excinfo:
            client.send(RequestSpec(Method.GET, "market/open/symbols"))
        elapsed = time.monotonic() - start
    finally:
        client.close()

    assert excinfo.value.timeout == 0.2
    assert 0.15 <= elapsed < 2.0
    assert session.calls == 1


class StallingSession:
    """First ``stalled`` calls block until released; later calls answer at once."""

    def __init__(self, stalled: int) -> None:
        self.release = threading.Event()
        self.stalled = stalled
        self.calls = 0
        self._lock = threading.Lock()

    def request(self, *args, **kwargs):
        with self._lock:
            self.calls += 1
            hang = self.calls <= self.stalled
        if hang:
            self.release.wait(10)
        return DummyResponse()

    def close(self) -> None:
        self.release.set()


def test_abandoned_calls_do_not_block_later_sends() -> None:
    session = StallingSession(stalled=4)
    client = ApiClient(session=session, timeout=0.2, pool_size=2)

    try:
        for _ in range(4):
            with pytest.raises(RequestTimeout):
                client.send(RequestSpec(Method.GET, "market/open/symbols"))

        raw = client.send(RequestSpec(Method.GET, "market/open/coins"))
    finally:
        client.close()

    assert raw.status_code == 200
    assert session.calls == 5


def test_requests_timeout_maps_to_request_timeout() -> None:
    session = MagicMock()
    session.request.side_effect = requests.ReadTimeout("read timed out")
    client = ApiClient(session=session, timeout=5)

    with pytest.raises(RequestTimeout):
        client.send(RequestSpec(Method.GET, "market/open/symbols"))


def test_transport_error_wraps_cause() -> None:
    cause = requests.ConnectionError("connection refused")
    session = MagicMock()
    session.request.side_effect = cause
    client = ApiClient(session=session)

    with pytest.raises(TransportError) as excinfo:
        client.send(RequestSpec(Method.GET, "market/open/symbols"))

    assert excinfo.value.cause is cause
    assert excinfo.value.__cause__ is cause


def test_non_200_preserves_body() -> None:
    body = b'{"error":"rate limited"}'
    session = RecordingSession(DummyResponse(body, status_code=429))
    client = ApiClient(session=session)

    with pytest.raises(HTTPError) as excinfo:
        client.send(RequestSpec(Method.GET, "market/open/symbols"))

    assert excinfo.value.status_code == 429
    assert excinfo.value.body == body
    assert excinfo.value.message == "rate limited"


def test_200_returns_body_unmodified() -> None:
    body = b'{"success":false,"code":"ERROR","msg":"nope"}'
    session = RecordingSession(DummyResponse(body))
    client = ApiClient(session=session)

    raw = client.send(RequestSpec(Method.GET, "market/open/symbols"))

    assert raw.status_code == 200
    assert raw.body == body
    assert raw.json()["msg"] == "nope"


def test_client_usable_after_failure() -> None:
    session = MagicMock()
    session.request.side_effect = [requests.ConnectionError("boom"), DummyResponse()]
    client = ApiClient(session=session)

    with pytest.raises(TransportError):
        client.send(RequestSpec(Method.GET, "market/open/symbols"))
    raw = client.send(RequestSpec(Method.GET, "market/open/symbols"))

    assert raw.status_code == 200
    assert session.request.call_count == 2


def test_no_retry_on_server_error() -> None:
    session = RecordingSession(DummyResponse(b"oops", status_code=503))
    client = ApiClient(session=session)

    with pytest.raises(HTTPError):
        client.send(RequestSpec(Method.GET, "market/open/symbols"))

    assert len(session.calls) == 1


def test_debug_dump_redacts_credentials(caplog: pytest.LogCaptureFixture) -> None:
    session = RecordingSession()
    client = ApiClient(api_key="my-key", api_secret="my-secret", session=session)
    client.set_debug(True)

    with caplog.at_level(logging.INFO, logger="kucoin_rest.client"):
        client.send(RequestSpec(Method.GET, "user/info", auth_needed=True))

    signature = session.calls[0]["headers"]["KC-API-SIGNATURE"]
    assert "dumpRequest" in caplog.text
    assert "dumpResponse" in caplog.text
    assert "my-key" not in caplog.text
    assert "my-secret" not in caplog.text
    assert signature not in caplog.text


def test_debug_flag_is_per_instance(caplog: pytest.LogCaptureFixture) -> None:
    noisy = ApiClient(session=RecordingSession(), debug=True)
    quiet = ApiClient(session=RecordingSession())

    with caplog.at_level(logging.INFO, logger="kucoin_rest.client"):
        quiet.send(RequestSpec(Method.GET, "market/open/coins"))

    assert noisy.debug is True
    assert "dumpRequest" not in caplog.text


def test_request_spec_is_immutable() -> None:
    params = {"symbol": "KCS-BTC"}
    spec = RequestSpec(Method.GET, "open/tick", params)
    params["symbol"] = "ETH-BTC"

    assert spec.params["symbol"] == "KCS-BTC"
    with pytest.raises(TypeError):
        spec.params["symbol"] = "X"  # type: ignore[index]


def test_repr_hides_secret() -> None:
    client = ApiClient(api_key="key", api_secret="top-secret", session=RecordingSession())

    assert "top-secret" not in repr(client)


def test_default_session_mounts_single_attempt_adapter() -> None:
    client = ApiClient()

    adapter = client.session.get_adapter("https://api.kucoin.com")
    assert adapter.max_retries.total == 0
    client.close()
