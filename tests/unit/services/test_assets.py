"""Unit tests for asset resolution, naming and download.

All HTTP calls are mocked using respx for deterministic, isolated testing.
"""

from pathlib import Path

import httpx
import pytest
import respx

from sitesnap.core.errors import AssetDownloadError
from sitesnap.services.assets import (
    AssetDownloader,
    derive_filename,
    extension_for_content_type,
    resolve_reference,
    sanitize_filename,
)

PAGE = "https://example.com/docs/intro"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://cdn.example.net/a.js", "https://cdn.example.net/a.js"),
        ("//cdn.example.net/a.js", "https://cdn.example.net/a.js"),
        ("/img/logo.png", "https://example.com/img/logo.png"),
        ("img/logo.png", "https://example.com/img/logo.png"),
    ],
)
def test_resolve_reference(raw: str, expected: str) -> None:
    assert resolve_reference(raw, PAGE) == expected


def test_protocol_relative_takes_page_scheme() -> None:
    assert resolve_reference("//cdn.example.net/a.js", "http://example.com/") == (
        "http://cdn.example.net/a.js"
    )


@pytest.mark.parametrize(
    "content_type,ext",
    [
        ("text/css", ".css"),
        ("application/javascript; charset=utf-8", ".js"),
        ("IMAGE/PNG", ".png"),
        ("image/svg+xml", ".svg"),
        ("application/octet-stream", ""),
        (None, ""),
    ],
)
def test_extension_for_content_type(content_type: str | None, ext: str) -> None:
    assert extension_for_content_type(content_type) == ext


def test_derive_filename_keeps_existing_extension() -> None:
    """A basename with an extension is never given a second one."""
    assert derive_filename("https://example.com/static/site.css", "text/css") == "site.css"
    assert derive_filename("https://example.com/a/photo.jpeg", "image/png") == "photo.jpeg"


def test_derive_filename_appends_content_type_extension() -> None:
    assert derive_filename("https://example.com/avatar", "image/png") == "avatar.png"
    assert derive_filename("https://example.com/avatar") == "avatar"


def test_derive_filename_fallbacks() -> None:
    assert derive_filename("https://example.com/", "text/css") == "asset.css"
    assert derive_filename("https://example.com/my%20logo.png") == "my logo.png"


def test_derive_filename_replaces_url_delimiters() -> None:
    """Decoded # and % would break the rewritten reference on replay."""
    assert derive_filename("https://example.com/img/a%23b.png") == "a_b.png"
    assert derive_filename("https://example.com/img/100%25.png") == "100_.png"


def test_sanitize_filename() -> None:
    assert sanitize_filename('a<b>:c".png') == "a_b__c_.png"
    assert sanitize_filename("..") == "asset"
    assert sanitize_filename(".hidden") == "_hidden"
    assert len(sanitize_filename("x" * 500)) == 200


@respx.mock
@pytest.mark.asyncio
async def test_download_saves_asset(tmp_path: Path) -> None:
    respx.get("https://example.com/img/logo.png").mock(
        return_value=httpx.Response(200, content=b"PNG", headers={"content-type": "image/png"})
    )
    async with httpx.AsyncClient() as client:
        downloader = AssetDownloader(client, tmp_path)
        local = await downloader.download("https://example.com/img/logo.png")

    assert local == "./assets/logo.png"
    assert (tmp_path / "assets" / "logo.png").read_bytes() == b"PNG"


@respx.mock
@pytest.mark.asyncio
async def test_download_collision_gets_hash_suffix(tmp_path: Path) -> None:
    """Two different URLs with the same basename never overwrite each other."""
    respx.get("https://example.com/a/logo.png").mock(
        return_value=httpx.Response(200, content=b"first")
    )
    respx.get("https://example.com/b/logo.png").mock(
        return_value=httpx.Response(200, content=b"second")
    )
    async with httpx.AsyncClient() as client:
        downloader = AssetDownloader(client, tmp_path)
        first = await downloader.download("https://example.com/a/logo.png")
        second = await downloader.download("https://example.com/b/logo.png")
        again = await downloader.download("https://example.com/a/logo.png")

    assert first == "./assets/logo.png"
    assert second != first
    assert second.startswith("./assets/logo-") and second.endswith(".png")
    assert again == first
    assets = tmp_path / "assets"
    assert (assets / "logo.png").read_bytes() == b"first"
    assert (assets / second.removeprefix("./assets/")).read_bytes() == b"second"


@respx.mock
@pytest.mark.asyncio
async def test_download_non_success_status_raises(tmp_path: Path) -> None:
    respx.get("https://example.com/missing.png").mock(return_value=httpx.Response(404))
    async with httpx.AsyncClient() as client:
        downloader = AssetDownloader(client, tmp_path)
        with pytest.raises(AssetDownloadError, match="HTTP 404"):
            await downloader.download("https://example.com/missing.png")

    assert not (tmp_path / "assets" / "missing.png").exists()


@respx.mock
@pytest.mark.asyncio
async def test_download_timeout_raises(tmp_path: Path) -> None:
    respx.get("https://example.com/slow.js").mock(side_effect=httpx.ReadTimeout("timeout"))
    async with httpx.AsyncClient() as client:
        downloader = AssetDownloader(client, tmp_path)
        with pytest.raises(AssetDownloadError, match="timed out"):
            await downloader.download("https://example.com/slow.js")


@respx.mock
@pytest.mark.asyncio
async def test_download_connect_error_raises(tmp_path: Path) -> None:
    respx.get("https://example.com/down.css").mock(side_effect=httpx.ConnectError("refused"))
    async with httpx.AsyncClient() as client:
        downloader = AssetDownloader(client, tmp_path)
        with pytest.raises(AssetDownloadError) as exc_info:
            await downloader.download("https://example.com/down.css")

    assert exc_info.value.url == "https://example.com/down.css"
    assert "refused" in exc_info.value.reason
