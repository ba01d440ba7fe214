"""Data models for fetched reference documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urljoin, urlsplit

from lxml import etree, html

from typelink.core.exceptions import DocumentParseError
from typelink.core.models import Declaration, NamespaceInfo

# Hrefs that point at a declaration or namespace page
TYPE_LINK_MARKERS = ("class_", "interface_", "struct_", "namespace_")


def has_class(name: str) -> str:
    """XPath predicate matching elements whose class list contains ``name``."""
    return f"contains(concat(' ', normalize-space(@class), ' '), ' {name} ')"


def text_of(element: html.HtmlElement | None) -> str:
    """Whitespace-collapsed text content of an element."""
    if element is None:
        return ""
    return " ".join(element.text_content().split())


class SourceDocument:
    """An HTML page together with the location it was loaded from."""

    def __init__(self, root: html.HtmlElement, source: str) -> None:
        self.root = root
        self.source = source

    @classmethod
    def from_string(cls, content: str, source: str = "<string>") -> SourceDocument:
        if not content.strip():
            raise DocumentParseError(f"Empty document: {source}")
        try:
            root = html.document_fromstring(content)
        except (etree.ParserError, ValueError) as e:
            raise DocumentParseError(f"Failed to parse HTML from {source}: {e}") from e
        return cls(root, source)

    def xpath(self, expression: str, **variables: str) -> list[html.HtmlElement]:
        return self.root.xpath(expression, **variables)

    def first(self, expression: str, **variables: str) -> html.HtmlElement | None:
        found = self.root.xpath(expression, **variables)
        return found[0] if found else None

    def title(self) -> str:
        """Text of the page's ``.title`` element, or an empty string."""
        return text_of(self.first(f"//*[{has_class('title')}]"))

    def type_links(self) -> list[tuple[str, str]]:
        """(text, href) of every ``a.el`` anchor that links to a type page."""
        links = []
        for anchor in self.xpath(f"//a[{has_class('el')}][@href]"):
            href = anchor.get("href", "")
            text = text_of(anchor)
            if text and any(marker in href for marker in TYPE_LINK_MARKERS):
                links.append((text, href))
        return links

    def __repr__(self) -> str:
        return f"SourceDocument({self.source!r})"


@dataclass
class ParsedDocument:
    """Result of fetching and extracting one reference document."""

    source: str
    declaration: Declaration | None = None
    namespace: NamespaceInfo | None = None
    is_namespace: bool = False
    source_document: SourceDocument | None = None


def is_namespace_location(path: str) -> bool:
    """Whether a document location names a namespace page."""
    return "namespace_" in path or "/namespace" in path


def is_network_location(location: str) -> bool:
    return urlsplit(location).scheme in ("http", "https")


def join_location(root: str, name: str) -> str:
    """``name`` inside the directory or URL ``root``."""
    if is_network_location(root):
        return urljoin(root.rstrip("/") + "/", name)
    return str(Path(root) / name)
