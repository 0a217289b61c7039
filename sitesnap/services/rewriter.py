"""HTML helpers: discover asset references and anchors, rewrite asset links."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.element import Tag

from sitesnap.services.classifier import IMAGE, SCRIPT, STYLESHEET


@dataclass(frozen=True)
class AssetReference:
    """An asset-bearing attribute discovered in a page.

    Args:
        element: Tag holding the reference
        attribute: Attribute name (``src`` or ``href``)
        raw_url: Attribute value as written in the page
        category: Classifier category (image, stylesheet, script)
    """

    element: Tag
    attribute: str
    raw_url: str
    category: str


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def serialize_document(soup: BeautifulSoup) -> str:
    return str(soup)


def _is_stylesheet(tag: Tag) -> bool:
    rels = tag.get("rel") or []
    if isinstance(rels, str):
        rels = rels.split()
    return "stylesheet" in {rel.lower() for rel in rels}


def _classify(tag: Tag) -> tuple[str, str] | None:
    if tag.name == "img" and tag.get("src"):
        return IMAGE, "src"
    if tag.name == "link" and tag.get("href") and _is_stylesheet(tag):
        return STYLESHEET, "href"
    if tag.name == "script" and tag.get("src"):
        return SCRIPT, "src"
    return None


def iter_asset_references(soup: BeautifulSoup) -> Iterator[AssetReference]:
    """Yield image, stylesheet and script references in document order."""
    for tag in soup.find_all(["img", "link", "script"]):
        classified = _classify(tag)
        if classified is None:
            continue
        category, attribute = classified
        raw_url = str(tag.get(attribute)).strip()
        if raw_url:
            yield AssetReference(tag, attribute, raw_url, category)


def rewrite_reference(reference: AssetReference, local_path: str) -> None:
    """Point the referencing attribute at a locally saved file."""
    reference.element[reference.attribute] = local_path


def iter_anchor_hrefs(soup: BeautifulSoup) -> Iterator[str]:
    """Yield the raw ``href`` of every anchor, in document order."""
    for anchor in soup.find_all("a", href=True):
        href = str(anchor["href"]).strip()
        if href:
            yield href


def page_title(soup: BeautifulSoup) -> str:
    title = soup.title.get_text(strip=True) if soup.title else ""
    return title or "Untitled"
