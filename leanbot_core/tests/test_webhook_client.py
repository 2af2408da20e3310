import httpx
import pytest

from leanbot_core.domain.exceptions import (
    ApiError,
    NotFoundFailure,
    RateLimitError,
    ServerFailure,
    TimeoutFailure,
    TransportFailure,
    ValidationError,
)
from leanbot_core.providers import WebhookClient, create_transport


class SettingsStub:
    webhook_url = "https://hooks.example.com/chat"
    http_timeout = 1.0


def _fake_client(status_code=200, text="", raises=None, captured=None):
    class Resp:
        def __init__(self):
            self.status_code = status_code
            self.text = text

    class Client:
        def __init__(self, *a, **kw):
            if captured is not None:
                captured["client_kwargs"] = kw

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, headers=None, **kw):
            if captured is not None:
                captured["url"] = url
                captured["json"] = json
                captured["headers"] = headers
            if raises is not None:
                raise raises
            return Resp()

    return Client


@pytest.mark.asyncio
async def test_post_chat_sends_payload_and_returns_raw_text(monkeypatch):
    captured = {}
    monkeypatch.setattr("httpx.AsyncClient", _fake_client(text='{"output": "hi"}', captured=captured))

    raw = await WebhookClient(SettingsStub()).post_chat("Show products", "LSC-abc")

    assert raw == '{"output": "hi"}'
    assert captured["url"] == "https://hooks.example.com/chat"
    assert captured["json"] == {"chatInput": "Show products", "sessionId": "LSC-abc"}
    assert captured["headers"] == {"Content-Type": "application/json"}
    assert captured["client_kwargs"]["timeout"] == 1.0
    assert captured["client_kwargs"]["trust_env"] is False


@pytest.mark.asyncio
async def test_server_error_status(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", _fake_client(status_code=500, text="oops"))

    with pytest.raises(ServerFailure) as exc_info:
        await WebhookClient(SettingsStub()).post_chat("hi", "LSC-1")

    assert exc_info.value.message == "HTTP error! status: 500"
    assert exc_info.value.http_status == 500
    assert exc_info.value.title == "Server Error"


@pytest.mark.asyncio
async def test_not_found_status(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", _fake_client(status_code=404))

    with pytest.raises(NotFoundFailure) as exc_info:
        await WebhookClient(SettingsStub()).post_chat("hi", "LSC-1")
    assert exc_info.value.title == "Service Unavailable"


@pytest.mark.asyncio
async def test_upstream_rate_limit_status(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", _fake_client(status_code=429))

    with pytest.raises(RateLimitError):
        await WebhookClient(SettingsStub()).post_chat("hi", "LSC-1")


@pytest.mark.asyncio
async def test_client_error_uses_body_message(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", _fake_client(status_code=400, text='{"message": "bad input"}'))

    with pytest.raises(ApiError) as exc_info:
        await WebhookClient(SettingsStub()).post_chat("hi", "LSC-1")

    err = exc_info.value
    assert type(err) is ApiError
    assert err.message == "bad input"
    assert err.http_status == 400


@pytest.mark.asyncio
async def test_error_body_with_nested_message(monkeypatch):
    body = '{"error": {"message": "workflow crashed"}}'
    monkeypatch.setattr("httpx.AsyncClient", _fake_client(status_code=502, text=body))

    with pytest.raises(ServerFailure) as exc_info:
        await WebhookClient(SettingsStub()).post_chat("hi", "LSC-1")
    assert exc_info.value.message == "workflow crashed"


@pytest.mark.asyncio
async def test_connection_error_is_transport_failure(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", _fake_client(raises=httpx.ConnectError("connection refused")))

    with pytest.raises(TransportFailure) as exc_info:
        await WebhookClient(SettingsStub()).post_chat("hi", "LSC-1")

    err = exc_info.value
    assert not isinstance(err, TimeoutFailure)
    assert err.code == "NETWORK_ERROR"
    assert err.title == "Network Error"
    assert err.extra["url"] == "https://hooks.example.com/chat"


@pytest.mark.asyncio
async def test_timeout_is_timeout_failure(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", _fake_client(raises=httpx.ReadTimeout("read timed out")))

    with pytest.raises(TimeoutFailure) as exc_info:
        await WebhookClient(SettingsStub()).post_chat("hi", "LSC-1")
    assert exc_info.value.code == "TIMEOUT"
    assert exc_info.value.title == "Request Timeout"


@pytest.mark.asyncio
async def test_missing_url_raises_validation_error():
    class NoUrl(SettingsStub):
        webhook_url = ""

    with pytest.raises(ValidationError):
        await WebhookClient(NoUrl()).post_chat("hi", "LSC-1")


def test_create_transport_uses_given_settings():
    transport = create_transport(SettingsStub())
    assert isinstance(transport, WebhookClient)
    assert transport.name == "webhook"
