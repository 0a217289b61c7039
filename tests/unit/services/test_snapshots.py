"""Unit tests for snapshot browsing."""

from pathlib import Path

import pytest

from sitesnap.core.errors import SnapshotNotFoundError
from sitesnap.services.snapshots import MAX_PAGE_LINKS, SnapshotBrowser, display_path_for

SNAPSHOT = "2024-01-15T10-30-00-000Z"


@pytest.fixture
def snapshot(data_dir: Path) -> Path:
    root = data_dir / "example.com" / SNAPSHOT
    (root / "assets").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "index.html").write_text(
        "<html><head><title>Home</title></head><body>"
        '<a href="/about">About</a><a href="#top">Top</a>'
        '<a href="mailto:a@example.com">Mail</a><a href="tel:1">Call</a>'
        "</body></html>"
    )
    (root / "about.html").write_text("<p>About us</p>")
    (root / "docs" / "intro.html").write_text("<title>Intro</title>")
    (root / "assets" / "embed.html").write_text("<p>asset</p>")
    return root


def test_display_path_for() -> None:
    assert display_path_for("index.html") == "/"
    assert display_path_for("docs/intro.html") == "/docs/intro"
    assert display_path_for("docs/index.html") == "/docs/index"


def test_list_pages_sorted_and_excludes_assets(data_dir: Path, snapshot: Path) -> None:
    pages = SnapshotBrowser(data_dir).list_pages("example.com", SNAPSHOT)

    assert [p.display_path for p in pages] == ["/", "/about", "/docs/intro"]
    assert [p.path for p in pages] == ["index.html", "about.html", "docs/intro.html"]
    assert pages[1].size == len("<p>About us</p>")


@pytest.mark.parametrize("page", ["", "/", "index", "index.html"])
def test_read_root_page(data_dir: Path, snapshot: Path, page: str) -> None:
    content = SnapshotBrowser(data_dir).read_page("example.com", SNAPSHOT, page)

    assert content.path == "index.html"
    assert content.title == "Home"
    assert [(link.href, link.text) for link in content.links] == [("/about", "About")]
    assert content.size == len(content.content)


def test_read_nested_page_and_untitled(data_dir: Path, snapshot: Path) -> None:
    browser = SnapshotBrowser(data_dir)

    assert browser.read_page("example.com", SNAPSHOT, "/docs/intro").title == "Intro"
    assert browser.read_page("example.com", SNAPSHOT, "about").title == "Untitled"


def test_links_are_capped(data_dir: Path, snapshot: Path) -> None:
    anchors = "".join(f'<a href="/p{i}">{i}</a>' for i in range(MAX_PAGE_LINKS + 10))
    (snapshot / "many.html").write_text(anchors)

    content = SnapshotBrowser(data_dir).read_page("example.com", SNAPSHOT, "many")

    assert len(content.links) == MAX_PAGE_LINKS


@pytest.mark.parametrize(
    "host,snapshot_id,page",
    [
        ("example.com", "missing", ""),
        ("other.example", SNAPSHOT, ""),
        ("example.com", SNAPSHOT, "nope"),
        ("example.com", SNAPSHOT, "../../../secrets"),
        ("..", "..", ""),
    ],
)
def test_missing_or_escaping_paths(
    data_dir: Path, snapshot: Path, host: str, snapshot_id: str, page: str
) -> None:
    with pytest.raises(SnapshotNotFoundError):
        SnapshotBrowser(data_dir).read_page(host, snapshot_id, page)
