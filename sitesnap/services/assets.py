"""Asset resolution and download for snapshot pages.

Resolves raw asset references found in a page, fetches them as binary, and
stores them in the snapshot's ``assets/`` directory under a filename derived
from the URL path (or the response content type when the path has no
extension).
"""

from __future__ import annotations

import hashlib
import logging
import posixpath
import re
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx

from sitesnap.core.errors import AssetDownloadError
from sitesnap.core.url_validation import origin_of

logger = logging.getLogger(__name__)

ASSETS_DIRNAME = "assets"
DEFAULT_ASSET_NAME = "asset"

CONTENT_TYPE_EXTENSIONS = {
    "text/css": ".css",
    "application/javascript": ".js",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/svg+xml": ".svg",
    "image/webp": ".webp",
}

INVALID_FILENAME_CHARS_RE = re.compile(r'[<>:"/\\|?*#%\x00-\x1f]')
MAX_FILENAME_LENGTH = 200


def resolve_reference(raw_ref: str, base_url: str) -> str:
    """Resolve a raw asset reference to an absolute URL.

    Args:
        raw_ref: Reference as written in the page (``src``/``href`` value)
        base_url: URL of the page the reference was found on

    Returns:
        Absolute URL. Protocol-relative references take the page's scheme,
        root-relative references the page's origin, and any other relative
        reference is joined to the origin with a single ``/``.

    Examples:
        >>> resolve_reference("//cdn.example.com/a.js", "https://example.com/x")
        'https://cdn.example.com/a.js'
        >>> resolve_reference("/img/logo.png", "https://example.com/docs/")
        'https://example.com/img/logo.png'
        >>> resolve_reference("css/site.css", "https://example.com/docs/")
        'https://example.com/css/site.css'
    """
    ref = raw_ref.strip()
    if ref.lower().startswith(("http://", "https://")):
        return ref
    if ref.startswith("//"):
        return f"{urlparse(base_url).scheme}:{ref}"
    origin = origin_of(base_url)
    if ref.startswith("/"):
        return f"{origin}{ref}"
    return f"{origin}/{ref}"


def extension_for_content_type(content_type: str | None) -> str:
    """Map a Content-Type header to a file extension, or an empty string."""
    if not content_type:
        return ""
    media_type = content_type.split(";")[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(media_type, "")


def sanitize_filename(name: str) -> str:
    name = INVALID_FILENAME_CHARS_RE.sub("_", name)
    if name in ("", ".", ".."):
        return DEFAULT_ASSET_NAME
    if name.startswith("."):
        name = "_" + name[1:]
    return name[:MAX_FILENAME_LENGTH]


def derive_filename(url: str, content_type: str | None = None) -> str:
    """Derive a local filename for an asset URL.

    The URL path's basename is used as-is when it carries an extension;
    otherwise the extension mapped from ``content_type`` is appended.

    Examples:
        >>> derive_filename("https://example.com/static/site.css?x=1")
        'site.css'
        >>> derive_filename("https://example.com/avatar", "image/png")
        'avatar.png'
    """
    basename = posixpath.basename(unquote(urlparse(url).path)) or DEFAULT_ASSET_NAME
    _, ext = posixpath.splitext(basename)
    if not ext:
        basename += extension_for_content_type(content_type)
    return sanitize_filename(basename)


def _hash_suffixed(filename: str, url: str) -> str:
    stem, ext = posixpath.splitext(filename)
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:8]
    return f"{stem}-{digest}{ext}"


class AssetDownloader:
    """Download assets of one snapshot into its ``assets/`` directory.

    Filenames are claimed per snapshot: the first URL to derive a filename
    keeps it, and a different URL deriving the same name later gets an
    8-hex-digit hash of its URL inserted before the extension, so distinct
    sources never overwrite each other.

    Args:
        client: Shared HTTP client of the crawl
        snapshot_dir: Snapshot root; assets go to ``snapshot_dir/assets``
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        snapshot_dir: Path,
        timeout: float = 60.0,
    ) -> None:
        self._client = client
        self.assets_dir = snapshot_dir / ASSETS_DIRNAME
        self._timeout = timeout
        self._owners: dict[str, str] = {}

    async def download(self, url: str) -> str:
        """Fetch ``url`` and store it under ``assets/``.

        Args:
            url: Absolute asset URL

        Returns:
            Path relative to the snapshot root (``./assets/<filename>``) for
            rewriting the referencing attribute

        Raises:
            AssetDownloadError: On transport errors, timeouts, non-success
                status codes or failure to write the file
        """
        try:
            response = await self._client.get(url, timeout=self._timeout)
        except httpx.TimeoutException as exc:
            raise AssetDownloadError(url, "timed out") from exc
        except httpx.InvalidURL as exc:
            raise AssetDownloadError(url, f"invalid URL: {exc}") from exc
        except httpx.HTTPError as exc:
            raise AssetDownloadError(url, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise AssetDownloadError(url, f"HTTP {response.status_code}")

        filename = self._claim(url, derive_filename(url, response.headers.get("content-type")))
        target = self.assets_dir / filename
        try:
            self.assets_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(response.content)
        except OSError as exc:
            raise AssetDownloadError(url, f"cannot write {target}: {exc}") from exc

        logger.debug("Saved asset %s -> %s (%d bytes)", url, filename, len(response.content))
        return f"./{ASSETS_DIRNAME}/{filename}"

    def _claim(self, url: str, filename: str) -> str:
        owner = self._owners.get(filename)
        if owner is not None and owner != url:
            filename = _hash_suffixed(filename, url)
        self._owners[filename] = url
        return filename
