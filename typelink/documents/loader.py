"""Loading HTML documents from disk or over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from typelink.core.exceptions import FetchError
from typelink.documents.models import SourceDocument

logger = logging.getLogger(__name__)


async def load_file(path: str) -> SourceDocument:
    """Read and parse a local HTML file without blocking the event loop."""
    try:
        content = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FetchError(f"Failed to read file {path}: {e}") from e

    logger.debug("Loaded %s (%d bytes)", path, len(content))
    return SourceDocument.from_string(content, path)


async def load_url(client: httpx.AsyncClient, url: str) -> SourceDocument:
    """Fetch and parse an HTML page."""
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    logger.debug("Fetched %s (HTTP %d)", url, response.status_code)
    return SourceDocument.from_string(response.text, url)
