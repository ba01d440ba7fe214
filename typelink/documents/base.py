"""Protocols for document fetching and declaration extraction."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from typelink.core.models import Declaration, NamespaceInfo
    from typelink.documents.models import ParsedDocument, SourceDocument


class DocumentFetcher(Protocol):
    """Capability the dependency resolver uses to load documents."""

    async def fetch_and_parse(self, path: str) -> ParsedDocument:
        """Load a document and extract its declaration or namespace."""
        ...

    def is_network_uri(self, uri: str) -> bool:
        """Check if a location must be fetched over the network."""
        ...

    def resolve_uri(self, href: str, source: str) -> str:
        """Resolve a link found in ``source`` to a loadable location."""
        ...

    def guess_document_path(self, full_name: str, document_root: str) -> str:
        """Location of the page documenting ``full_name`` under ``document_root``."""
        ...


class DeclarationExtractor(Protocol):
    """Protocol for reference documentation extractors."""

    def extract_declaration(self, document: SourceDocument) -> Declaration | None:
        """Extract the class-like declaration a page describes."""
        ...

    def extract_namespace(self, document: SourceDocument) -> NamespaceInfo | None:
        """Extract a namespace page's enums."""
        ...
