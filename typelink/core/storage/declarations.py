"""Declaration storage operations."""

from __future__ import annotations

import logging

from typelink.core.exceptions import DeclarationNotFoundError
from typelink.core.models import Declaration, EnumDeclaration

logger = logging.getLogger(__name__)


class DeclarationStorage:
    """Storage operations for declarations, keyed by full name."""

    def __init__(self) -> None:
        self._declarations: dict[str, Declaration] = {}
        self.duplicates_merged = 0

    def add(self, key: str, declaration: Declaration) -> bool:
        """Add a declaration, merging into an existing entry with the same key.

        A duplicate never replaces the stored declaration; it only contributes
        enums the stored one does not have yet.

        Returns:
            True if the key was new, False if it was merged into an existing entry
        """
        existing = self._declarations.get(key)
        if existing is not None:
            self.duplicates_merged += 1
            logger.debug("Duplicate declaration merged: %s", key)
            existing.enums = _unique_enums(existing.enums, declaration.enums)
            return False

        declaration.enums = _unique_enums(declaration.enums)
        self._declarations[key] = declaration
        return True

    def get(self, key: str) -> Declaration:
        """Get a declaration by its key."""
        try:
            return self._declarations[key]
        except KeyError:
            raise DeclarationNotFoundError(f"Declaration '{key}' not found") from None

    def contains(self, key: str) -> bool:
        return key in self._declarations

    def all(self) -> dict[str, Declaration]:
        """Snapshot of all declarations."""
        return dict(self._declarations)

    def in_namespace(self, namespace: str) -> list[Declaration]:
        return [d for d in self._declarations.values() if d.namespace == namespace]

    def inheriting_from(self, base: str) -> list[Declaration]:
        return [d for d in self._declarations.values() if base in d.inheritance]

    def __len__(self) -> int:
        return len(self._declarations)

    def clear(self) -> None:
        """Delete all declarations."""
        self._declarations.clear()
        self.duplicates_merged = 0


def _unique_enums(
    enums: list[EnumDeclaration], extra: list[EnumDeclaration] | None = None
) -> list[EnumDeclaration]:
    """Deduplicate enums by name and value names, keeping first occurrences."""
    seen: set[str] = set()
    result: list[EnumDeclaration] = []
    for enum in [*enums, *(extra or [])]:
        if enum.signature in seen:
            continue
        seen.add(enum.signature)
        result.append(enum)
    return result
