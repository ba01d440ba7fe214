"""
Documents: loading reference pages and extracting declarations from them.

Components:
    - DocumentParsingService: Fetches local files or URLs and runs an extractor
    - DoxygenExtractor: Reads classes, members, and enums from Doxygen HTML
    - SourceDocument: Parsed HTML page plus its location
    - ParsedDocument: Extraction result handed to the dependency resolver
"""

from typelink.documents.base import DeclarationExtractor, DocumentFetcher
from typelink.documents.doxygen import DoxygenExtractor, class_page_name, escape_name
from typelink.documents.models import (
    ParsedDocument,
    SourceDocument,
    is_namespace_location,
    is_network_location,
    join_location,
)
from typelink.documents.service import DocumentParsingService

__all__ = [
    "DeclarationExtractor",
    "DocumentFetcher",
    "DocumentParsingService",
    "DoxygenExtractor",
    "ParsedDocument",
    "SourceDocument",
    "class_page_name",
    "escape_name",
    "is_namespace_location",
    "is_network_location",
    "join_location",
]
