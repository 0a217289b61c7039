"""URL validation and normalization utilities.

Seed URLs are validated before a job exists; page URLs are normalized so that
fragments and trailing slashes never produce a second visit of the same page.
"""

from __future__ import annotations

from urllib.parse import urldefrag, urlparse

from sitesnap.core.errors import ValidationError

ALLOWED_SCHEMES = {"http", "https"}


def validate_seed_url(url: str) -> str:
    """Validate a seed URL and return its hostname.

    Args:
        url: URL supplied by the caller

    Returns:
        Lower-cased hostname of the URL, which names the output namespace

    Raises:
        ValidationError: If the URL lacks a scheme or host, or uses a scheme
            other than http/https

    Examples:
        >>> validate_seed_url("https://Example.com/docs")
        'example.com'
        >>> validate_seed_url("not-a-url")
        Traceback (most recent call last):
        ...
        sitesnap.core.errors.ValidationError: Invalid URL: not-a-url
    """
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("URL is required")

    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except ValueError as exc:
        raise ValidationError(f"Malformed URL: {url}") from exc

    if not parsed.scheme or not hostname:
        raise ValidationError(f"Invalid URL: {url}")
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise ValidationError(f"URL must use http or https scheme: {url}")
    return hostname.lower()


def normalize_url(url: str) -> str:
    """Strip the fragment and any trailing slashes from a URL.

    Idempotent: ``normalize_url(normalize_url(u)) == normalize_url(u)``.

    Examples:
        >>> normalize_url("https://example.com/about/#team")
        'https://example.com/about'
    """
    without_fragment, _ = urldefrag(url)
    return without_fragment.rstrip("/")


def hostname_of(url: str) -> str:
    """Return the lower-cased hostname of a URL, or an empty string."""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_same_host(url: str, hostname: str) -> bool:
    """Return True when ``url`` points at ``hostname``."""
    return hostname_of(url) == hostname.lower()


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` for a URL."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"
