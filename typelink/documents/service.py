"""Document parsing service: fetch, parse, and extract reference pages."""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from urllib.parse import urljoin

import httpx

from typelink.documents.base import DeclarationExtractor
from typelink.documents.doxygen import DoxygenExtractor, class_page_name
from typelink.documents.loader import load_file, load_url
from typelink.documents.models import (
    ParsedDocument,
    SourceDocument,
    is_namespace_location,
    is_network_location,
    join_location,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class DocumentParsingService:
    """Loads reference documents from disk or HTTP and extracts their content.

    The HTTP client is created on first use and closed by ``aclose`` or by
    leaving an ``async with`` block. A client passed in stays owned by the
    caller.
    """

    def __init__(
        self,
        extractor: DeclarationExtractor | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.extractor = extractor if extractor is not None else DoxygenExtractor()
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    async def __aenter__(self) -> DocumentParsingService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._client

    async def load(self, path: str) -> SourceDocument:
        if self.is_network_uri(path):
            return await load_url(self._http(), path)
        return await load_file(path)

    async def fetch_and_parse(self, path: str) -> ParsedDocument:
        """Load a document and extract its declaration, or its enums for namespace pages.

        Raises:
            FetchError: The document could not be read or downloaded.
            DocumentParseError: The content is not parseable HTML.
        """
        return self.parse_document(await self.load(path))

    def parse_document(self, document: SourceDocument) -> ParsedDocument:
        if is_namespace_location(document.source):
            return ParsedDocument(
                source=document.source,
                namespace=self.extractor.extract_namespace(document),
                is_namespace=True,
                source_document=document,
            )

        return ParsedDocument(
            source=document.source,
            declaration=self.extractor.extract_declaration(document),
            source_document=document,
        )

    @staticmethod
    def is_network_uri(uri: str) -> bool:
        return is_network_location(uri)

    def resolve_uri(self, href: str, source: str) -> str:
        """Resolve ``href`` relative to the document it appeared in, dropping fragments."""
        href = href.split("#", 1)[0]
        if self.is_network_uri(href):
            return href
        if self.is_network_uri(source):
            return urljoin(source, href)
        return str(Path(source).parent / href)

    def guess_document_path(self, full_name: str, document_root: str) -> str:
        """Where Doxygen would have written the page for ``full_name``."""
        return join_location(document_root, class_page_name(full_name))
