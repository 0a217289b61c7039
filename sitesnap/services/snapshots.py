"""Read-only browsing of saved snapshots (sitemap and page content)."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from sitesnap.core.errors import SnapshotNotFoundError
from sitesnap.services.assets import ASSETS_DIRNAME
from sitesnap.services.crawler import ROOT_PAGE
from sitesnap.services.models import PageContent, PageLink, SnapshotPage
from sitesnap.services.rewriter import page_title, parse_document

MAX_PAGE_LINKS = 50
_EXCLUDED_LINK_PREFIXES = ("#", "mailto:", "tel:")


def display_path_for(page_path: str) -> str:
    """Map a saved page path to the site path it mirrors.

    Examples:
        >>> display_path_for("index.html")
        '/'
        >>> display_path_for("docs/intro.html")
        '/docs/intro'
    """
    if page_path == ROOT_PAGE:
        return "/"
    return "/" + page_path.removesuffix(".html")


class SnapshotBrowser:
    """List and read the pages of snapshots under the data root.

    Args:
        data_dir: Root directory holding one subdirectory per host
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir

    def snapshot_dir(self, hostname: str, snapshot_id: str) -> Path:
        """Return the directory of a snapshot.

        Raises:
            SnapshotNotFoundError: If the names escape the data root or the
                directory does not exist
        """
        root = self.data_dir.resolve()
        candidate = (root / hostname / snapshot_id).resolve()
        if root not in candidate.parents or not candidate.is_dir():
            raise SnapshotNotFoundError(f"Archive not found: {hostname}/{snapshot_id}")
        return candidate

    def list_pages(self, hostname: str, snapshot_id: str) -> list[SnapshotPage]:
        """Return every saved HTML page of a snapshot, sorted by site path."""
        root = self.snapshot_dir(hostname, snapshot_id)
        pages: list[SnapshotPage] = []
        for html_file in root.rglob("*.html"):
            relative = html_file.relative_to(root)
            if relative.parts[0] == ASSETS_DIRNAME or not html_file.is_file():
                continue
            stat = html_file.stat()
            page_path = relative.as_posix()
            pages.append(
                SnapshotPage(
                    path=page_path,
                    display_path=display_path_for(page_path),
                    size=stat.st_size,
                    modified=datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(),
                )
            )
        pages.sort(key=lambda p: p.display_path)
        return pages

    def read_page(self, hostname: str, snapshot_id: str, page: str) -> PageContent:
        """Return a saved page with its title and first outbound links.

        Args:
            hostname: Archived host
            snapshot_id: Snapshot directory name
            page: Site path or saved path; ``""`` and ``/`` mean the root
                page, and ``.html`` is appended when missing

        Raises:
            SnapshotNotFoundError: If the snapshot or page does not exist
        """
        root = self.snapshot_dir(hostname, snapshot_id)
        clean = page.strip().lstrip("/")
        if not clean:
            clean = ROOT_PAGE
        elif not clean.endswith(".html"):
            clean = f"{clean}.html"

        file_path = (root / clean).resolve()
        if root not in file_path.parents or not file_path.is_file():
            raise SnapshotNotFoundError(f"Page not found: {page}")

        content = file_path.read_text(encoding="utf-8", errors="replace")
        soup = parse_document(content)
        links: list[PageLink] = []
        for anchor in soup.find_all("a", href=True):
            href = str(anchor["href"])
            if href.startswith(_EXCLUDED_LINK_PREFIXES):
                continue
            links.append(PageLink(href=href, text=anchor.get_text(strip=True)))
            if len(links) >= MAX_PAGE_LINKS:
                break

        return PageContent(
            path=clean,
            title=page_title(soup),
            content=content,
            links=links,
            size=len(content),
        )
