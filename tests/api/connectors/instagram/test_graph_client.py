"""Testes do InstagramGraphClient com httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from api.connectors.instagram.graph_client import InstagramGraphClient, MediaDownloadError
from config.settings import InstagramSettings

SETTINGS = InstagramSettings(
    access_token="IGTOKEN",
    facebook_base_url="https://fb.test",
    instagram_base_url="https://ig.test",
    api_version="v21.0",
    media_max_size_bytes=10,
)


def _client(handler, settings: InstagramSettings = SETTINGS) -> InstagramGraphClient:
    return InstagramGraphClient(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_get_user_info_sends_fields_and_token() -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={"name": "Ana", "username": "ana"})

    info = await _client(handler).get_user_info("42")

    assert info == {"name": "Ana", "username": "ana"}
    assert seen[0].host == "ig.test"
    assert seen[0].path == "/v21.0/42"
    assert seen[0].params["fields"] == "name,username"
    assert seen[0].params["access_token"] == "IGTOKEN"


@pytest.mark.asyncio
async def test_get_user_info_returns_none_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "Unsupported get request"}})

    assert await _client(handler).get_user_info("42") is None


@pytest.mark.asyncio
async def test_get_user_info_returns_none_on_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    assert await _client(handler).get_user_info("42") is None


@pytest.mark.asyncio
async def test_missing_token_skips_lookup() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client = _client(handler, InstagramSettings())

    assert await client.get_user_info("42") is None
    assert await client.get_media_info("77") is None
    await client.send_direct_reply("42", "oi")
    assert calls == []


@pytest.mark.asyncio
async def test_get_media_info_falls_back_to_instagram_host() -> None:
    hosts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        if request.url.host == "fb.test":
            return httpx.Response(400, json={"error": {}})
        return httpx.Response(200, json={"id": "77", "media_type": "STORY"})

    info = await _client(handler).get_media_info("77")

    assert info == {"id": "77", "media_type": "STORY"}
    assert hosts == ["fb.test", "ig.test"]


@pytest.mark.asyncio
async def test_download_bytes_returns_content_and_type() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == "Bearer IGTOKEN"
        return httpx.Response(200, content=b"12345", headers={"content-type": "image/png"})

    download = await _client(handler).download_bytes("https://cdn.test/a.png")

    assert download.content == b"12345"
    assert download.content_type == "image/png"


@pytest.mark.asyncio
async def test_download_bytes_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, content=b"no")

    with pytest.raises(MediaDownloadError) as exc_info:
        await _client(handler).download_bytes("https://cdn.test/a.png")

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_download_bytes_rejects_oversized_media() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"x" * 11)

    with pytest.raises(MediaDownloadError, match="media_too_large"):
        await _client(handler).download_bytes("https://cdn.test/big.mp4")


@pytest.mark.asyncio
async def test_download_bytes_wraps_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(MediaDownloadError, match="download_error"):
        await _client(handler).download_bytes("https://cdn.test/a.png")


@pytest.mark.asyncio
async def test_send_direct_reply_posts_message() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"recipient_id": "42", "message_id": "m"})

    await _client(handler).send_direct_reply("42", "Salom!")

    assert seen["url"] == "https://ig.test/v21.0/me/messages"
    assert seen["body"] == {"recipient": {"id": "42"}, "message": {"text": "Salom!"}}


@pytest.mark.asyncio
async def test_send_direct_reply_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "outside window"}})

    with caplog.at_level("ERROR"):
        await _client(handler).send_direct_reply("42", "Salom!")

    assert "instagram_auto_reply_failed" in caplog.text
