"""EndpointResolver とヘッダー生成のテスト。"""

import httpx
import pytest

from otp_client.models.auth import Rejected
from otp_client.models.config import ClientConfig
from otp_client.services.auth import NETWORK_ERROR_MESSAGE, AuthClient, TransportError
from otp_client.services.endpoints import EndpointResolver, build_headers, build_http_client
from otp_client.services.events import EventRecorder


@pytest.mark.parametrize(
    "base_url,path,expected",
    [
        ("https://auth.example.com/api", "/config", "https://auth.example.com/api/config"),
        ("https://auth.example.com/api/", "/config", "https://auth.example.com/api/config"),
        ("https://auth.example.com/api", "logout", "https://auth.example.com/api/logout"),
        ("/custom/base/", "/verify-otp", "/custom/base/verify-otp"),
    ],
)
def test_resolve_with_base_url(base_url, path, expected):
    resolver = EndpointResolver(ClientConfig(base_url=base_url))

    assert resolver.resolve(path) == expected


def test_resolve_without_base_url_uses_fallback():
    resolver = EndpointResolver(ClientConfig())

    assert resolver.resolve("/request-auth") == "/wp-json/zfl/v1/request-auth"


def test_resolve_with_custom_fallback():
    resolver = EndpointResolver(ClientConfig(fallback_base_path="/api/auth"))

    assert resolver.resolve("/logout") == "/api/auth/logout"


def test_resolve_empty_path_does_not_raise():
    resolver = EndpointResolver(ClientConfig(base_url="https://auth.example.com"))

    assert resolver.resolve("") == "https://auth.example.com/"


def test_headers_without_token():
    assert build_headers(ClientConfig()) == {"Content-Type": "application/json"}


def test_headers_with_token_and_custom_header():
    config = ClientConfig(anti_forgery_token="tok", anti_forgery_header="X-CSRF-Token")

    assert build_headers(config) == {
        "Content-Type": "application/json",
        "X-CSRF-Token": "tok",
    }


@pytest.mark.asyncio
async def test_http_client_resolves_fallback_against_origin():
    seen: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={})

    config = ClientConfig(origin="https://site.example.com", timeout_seconds=4)
    client = build_http_client(config, transport=httpx.MockTransport(_handler))
    try:
        await client.get(EndpointResolver(config).resolve("/config"))
    finally:
        await client.aclose()

    assert seen == ["https://site.example.com/wp-json/zfl/v1/config"]
    assert client.timeout == httpx.Timeout(4)


@pytest.mark.asyncio
async def test_fallback_path_without_origin_fails_in_transport():
    recorder = EventRecorder()

    async with AuthClient(ClientConfig(), event_hook=recorder) as client:
        with pytest.raises(TransportError) as exc_info:
            await client.fetch_config()

        challenge = await client.request_challenge("a@b.com")
        verification = await client.verify_challenge("a@b.com", "123456")
        logout = await client.terminate_session()

    assert isinstance(exc_info.value.__cause__, httpx.UnsupportedProtocol)
    assert recorder.last("config.request") == {"url": "/wp-json/zfl/v1/config"}
    assert challenge == Rejected(message=NETWORK_ERROR_MESSAGE)
    assert verification == Rejected(message=NETWORK_ERROR_MESSAGE)
    assert logout == Rejected(message=NETWORK_ERROR_MESSAGE)
    failures = [fields for name, fields in recorder.events if name == "transport.failed"]
    assert [fields["operation"] for fields in failures] == ["challenge", "verify", "logout"]
    assert {fields["error"] for fields in failures} == {"UnsupportedProtocol"}
