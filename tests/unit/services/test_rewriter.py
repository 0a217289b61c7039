"""Unit tests for HTML asset discovery and rewriting."""

from sitesnap.services.classifier import IMAGE, SCRIPT, STYLESHEET
from sitesnap.services.rewriter import (
    iter_anchor_hrefs,
    iter_asset_references,
    page_title,
    parse_document,
    rewrite_reference,
    serialize_document,
)

HTML = """
<html><head>
<title> Docs Home </title>
<link rel="stylesheet" href="/css/site.css">
<link rel="icon" href="/favicon.ico">
<script src="/static/app.js"></script>
<script>inline()</script>
</head><body>
<img src="/img/logo.png" alt="logo">
<img alt="no source">
<a href="/about">About</a>
<a name="anchor-only">x</a>
<a href="  ">blank</a>
</body></html>
"""


def test_asset_references_in_document_order() -> None:
    refs = list(iter_asset_references(parse_document(HTML)))

    assert [(r.category, r.raw_url) for r in refs] == [
        (STYLESHEET, "/css/site.css"),
        (SCRIPT, "/static/app.js"),
        (IMAGE, "/img/logo.png"),
    ]


def test_stylesheet_rel_is_token_matched() -> None:
    soup = parse_document('<link rel="alternate Stylesheet" href="/alt.css">')
    refs = list(iter_asset_references(soup))
    assert [r.raw_url for r in refs] == ["/alt.css"]


def test_rewrite_reference_updates_attribute() -> None:
    soup = parse_document(HTML)
    image = next(r for r in iter_asset_references(soup) if r.category == IMAGE)

    rewrite_reference(image, "./assets/logo.png")

    html = serialize_document(soup)
    assert 'src="./assets/logo.png"' in html
    assert 'href="/css/site.css"' in html


def test_anchor_hrefs_skip_missing_and_blank() -> None:
    assert list(iter_anchor_hrefs(parse_document(HTML))) == ["/about"]


def test_page_title() -> None:
    assert page_title(parse_document(HTML)) == "Docs Home"
    assert page_title(parse_document("<p>no title</p>")) == "Untitled"
