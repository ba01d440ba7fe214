"""Document bookkeeping: visited URIs and discovered namespace documents."""

from __future__ import annotations


class DocumentStorage:
    """Tracks which documents were fetched and which await a later pass."""

    def __init__(self) -> None:
        self._visited: set[str] = set()
        self._discovered: dict[str, None] = {}

    def mark_visited(self, uri: str) -> None:
        self._visited.add(uri)

    def is_visited(self, uri: str) -> bool:
        return uri in self._visited

    def visited(self) -> set[str]:
        return set(self._visited)

    def add_discovered(self, path: str) -> None:
        """Queue a document for the enumeration pass; insertion order is kept."""
        self._discovered.setdefault(path, None)

    def discovered(self) -> set[str]:
        return set(self._discovered)

    def discovered_in_order(self) -> list[str]:
        return list(self._discovered)

    def clear(self) -> None:
        self._visited.clear()
        self._discovered.clear()
