"""Crawl traversal engine for site snapshots.

This module archives one site per job: it fetches pages from an explicit FIFO
worklist, downloads and rewrites each page's assets, saves the page, and
enqueues same-host links until the page budget is spent. All network I/O of a
crawl is sequential: pages and assets are awaited one at a time, spaced by the
injected Throttle.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path
from urllib.parse import unquote, urldefrag, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from sitesnap.core.config import Settings
from sitesnap.core.errors import AssetDownloadError
from sitesnap.core.url_validation import is_same_host, normalize_url
from sitesnap.services.assets import ASSETS_DIRNAME, AssetDownloader, resolve_reference
from sitesnap.services.classifier import ResourceClassifier
from sitesnap.services.models import CrawlSummary, Job
from sitesnap.services.rewriter import (
    iter_anchor_hrefs,
    iter_asset_references,
    parse_document,
    rewrite_reference,
    serialize_document,
)
from sitesnap.services.throttle import Throttle

logger = logging.getLogger(__name__)

ROOT_PAGE = "index.html"
# Save path of the site root when the crawl was seeded elsewhere
SITE_ROOT_PAGE = "_root.html"
IGNORED_LINK_PREFIXES = ("mailto:", "tel:", "javascript:", "#")


@dataclass(frozen=True)
class PageTask:
    """A worklist entry.

    Args:
        normalized_url: Dedup key (no fragment, no trailing slash)
        url: URL to fetch
        save_path: Path of the saved page relative to the snapshot root
    """

    normalized_url: str
    url: str
    save_path: str


def save_path_for(url: str) -> str:
    """Compute where a linked page is saved inside the snapshot.

    The site root maps to ``index.html``, a trailing-slash path gets
    ``index.html`` appended, and any other path not ending in ``.html`` gets
    ``.html`` appended. ``.`` and ``..`` segments are dropped so a page can
    never be written outside the snapshot.

    Examples:
        >>> save_path_for("https://example.com/")
        'index.html'
        >>> save_path_for("https://example.com/docs/")
        'docs/index.html'
        >>> save_path_for("https://example.com/about")
        'about.html'
    """
    path = unquote(urlparse(url).path)
    segments = [s for s in path.split("/") if s not in ("", ".", "..")]
    relative = "/".join(segments)
    if not relative:
        return ROOT_PAGE
    if path.endswith("/"):
        return f"{relative}/{ROOT_PAGE}"
    if not relative.endswith(".html"):
        return f"{relative}.html"
    return relative


def extract_links(soup: BeautifulSoup, page_url: str, hostname: str) -> list[PageTask]:
    """Collect same-host page links of a document, deduplicated.

    Args:
        soup: Parsed page
        page_url: URL the page was fetched from, used to resolve relative
            and protocol-relative links
        hostname: Job hostname; links to other hosts are dropped

    Returns:
        PageTask per distinct normalized target, in document order
    """
    tasks: list[PageTask] = []
    seen: set[str] = set()
    for href in iter_anchor_hrefs(soup):
        if href.lower().startswith(IGNORED_LINK_PREFIXES):
            continue
        try:
            absolute, _ = urldefrag(urljoin(page_url, href))
            scheme = urlparse(absolute).scheme
        except ValueError as exc:
            logger.debug("Ignoring malformed link %r on %s: %s", href, page_url, exc)
            continue
        if scheme not in ("http", "https"):
            continue
        if not is_same_host(absolute, hostname):
            continue
        normalized = normalize_url(absolute)
        if normalized in seen:
            continue
        seen.add(normalized)
        tasks.append(PageTask(normalized, absolute, save_path_for(absolute)))
    return tasks


def relative_asset_path(local_path: str, save_path: str) -> str:
    """Make a ``./assets/...`` path relative to the page that references it.

    Examples:
        >>> relative_asset_path("./assets/logo.png", "index.html")
        './assets/logo.png'
        >>> relative_asset_path("./assets/logo.png", "docs/intro.html")
        '../assets/logo.png'
    """
    depth = save_path.count("/")
    if depth == 0:
        return local_path
    return "../" * depth + local_path.removeprefix("./")


class SiteArchiver:
    """Archive a site into a snapshot directory.

    Args:
        settings: Service settings (timeouts, intervals, User-Agent)
        classifier: Skip rules for discovered assets
        throttle_factory: Builds one Throttle per crawl
        transport: Optional httpx transport (tests, proxies)

    Example:
        >>> archiver = SiteArchiver(Settings())
        >>> summary = await archiver.archive(job, Path("data/example.com/2024-..."))
        >>> summary.page_count
        4
    """

    def __init__(
        self,
        settings: Settings,
        classifier: ResourceClassifier | None = None,
        throttle_factory: Callable[[], Throttle] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._classifier = classifier or ResourceClassifier.default(
            settings.extra_skip_patterns
        )
        self._throttle_factory = throttle_factory or (
            lambda: Throttle(settings.asset_interval, settings.page_interval)
        )
        self._transport = transport

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"User-Agent": self._settings.user_agent},
            timeout=self._settings.page_timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    async def archive(self, job: Job, snapshot_dir: Path) -> CrawlSummary:
        """Crawl ``job.target_url`` into ``snapshot_dir``.

        The seed page is always saved as ``index.html``. A page whose fetch
        fails is still counted as visited and the crawl moves on; filesystem
        errors while saving a page propagate to the caller.

        Args:
            job: Job whose progress counters this crawl owns
            snapshot_dir: Directory for pages and ``assets/``

        Returns:
            CrawlSummary with visited page and saved asset counts
        """
        snapshot_dir.mkdir(parents=True, exist_ok=True)
        (snapshot_dir / ASSETS_DIRNAME).mkdir(exist_ok=True)

        throttle = self._throttle_factory()
        seed, _ = urldefrag(job.target_url)
        seed_task = PageTask(normalize_url(seed), seed, ROOT_PAGE)
        worklist: deque[PageTask] = deque([seed_task])
        queued = {seed_task.normalized_url}
        # Different URLs can map to one file (/about, /about.html)
        claimed_paths = {seed_task.save_path}
        visited: set[str] = set()
        pages_saved = 0

        async with self._make_client() as client:
            downloader = AssetDownloader(
                client, snapshot_dir, timeout=self._settings.asset_timeout
            )
            while worklist:
                task = worklist.popleft()
                if len(visited) >= job.max_pages:
                    break
                if task.normalized_url in visited:
                    continue

                visited.add(task.normalized_url)
                job.progress.pages_processed = len(visited)
                job.progress.current_page_url = task.url
                logger.info(
                    "[%d/%d] Crawling %s (assets so far: %d)",
                    len(visited),
                    job.max_pages,
                    task.url,
                    job.progress.assets_downloaded,
                )

                await throttle.before_page()
                links = await self._archive_page(
                    client, downloader, throttle, job, task, snapshot_dir
                )
                if links is None:
                    continue
                pages_saved += 1

                for link in links:
                    if len(visited) + len(worklist) >= job.max_pages:
                        break
                    if link.normalized_url in queued:
                        continue
                    queued.add(link.normalized_url)
                    if link.save_path == ROOT_PAGE:
                        link = replace(link, save_path=SITE_ROOT_PAGE)
                    if link.save_path in claimed_paths:
                        continue
                    claimed_paths.add(link.save_path)
                    worklist.append(link)

        return CrawlSummary(
            page_count=len(visited),
            asset_count=job.progress.assets_downloaded,
            pages_saved=pages_saved,
        )

    async def _archive_page(
        self,
        client: httpx.AsyncClient,
        downloader: AssetDownloader,
        throttle: Throttle,
        job: Job,
        task: PageTask,
        snapshot_dir: Path,
    ) -> list[PageTask] | None:
        try:
            response = await client.get(task.url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Failed to crawl %s: %s", task.url, str(exc) or type(exc).__name__)
            return None

        soup = parse_document(response.text)
        await self._archive_assets(soup, downloader, throttle, job, task)

        target = snapshot_dir / task.save_path
        target.parent.mkdir(parents=True, exist_ok=True)
        html = serialize_document(soup)
        target.write_text(html, encoding="utf-8")
        logger.info("Saved page %s (%d bytes)", task.save_path, len(html))

        return extract_links(soup, task.url, job.hostname)

    async def _archive_assets(
        self,
        soup: BeautifulSoup,
        downloader: AssetDownloader,
        throttle: Throttle,
        job: Job,
        task: PageTask,
    ) -> None:
        # raw reference -> rewritten path, None when the download failed
        handled: dict[str, str | None] = {}

        for reference in iter_asset_references(soup):
            if reference.raw_url in handled:
                local_path = handled[reference.raw_url]
                if local_path is not None:
                    rewrite_reference(reference, local_path)
                continue

            rule = self._classifier.matching_rule(reference.category, reference.raw_url)
            if rule is not None:
                logger.debug(
                    "Skipping %s %s (%s)", reference.category, reference.raw_url, rule.reason
                )
                continue

            handled[reference.raw_url] = None
            absolute = resolve_reference(reference.raw_url, task.url)
            await throttle.before_asset()
            try:
                local_path = await downloader.download(absolute)
            except AssetDownloadError as exc:
                logger.warning("%s", exc)
                continue

            local_path = relative_asset_path(local_path, task.save_path)
            handled[reference.raw_url] = local_path
            rewrite_reference(reference, local_path)
            job.progress.assets_downloaded += 1
