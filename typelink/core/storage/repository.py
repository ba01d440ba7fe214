"""Repository that coordinates all storage operations."""

from __future__ import annotations

from typelink.core.models import Declaration, EnumDeclaration
from typelink.core.storage.declarations import DeclarationStorage
from typelink.core.storage.documents import DocumentStorage
from typelink.core.storage.enums import EnumStorage


class DeclarationRepository:
    """Facade that coordinates declarations, global enums, and documents storage.

    The flat ``add_declaration``/``mark_visited``/... methods are the capability
    consumed by the dependency resolution service; the storages stay reachable
    for finer-grained queries.
    """

    def __init__(self) -> None:
        self.declarations = DeclarationStorage()
        self.enums = EnumStorage()
        self.documents = DocumentStorage()

    def add_declaration(self, key: str, declaration: Declaration) -> bool:
        return self.declarations.add(key, declaration)

    def get_declaration(self, key: str) -> Declaration:
        return self.declarations.get(key)

    def has_declaration(self, key: str) -> bool:
        return self.declarations.contains(key)

    def get_all_declarations(self) -> dict[str, Declaration]:
        return self.declarations.all()

    def add_global_enum(self, enum: EnumDeclaration) -> bool:
        return self.enums.add(enum)

    def get_global_enums(self) -> dict[str, EnumDeclaration]:
        return self.enums.all()

    def add_discovered_document_link(self, path: str) -> None:
        self.documents.add_discovered(path)

    def get_discovered_document_links(self) -> set[str]:
        return self.documents.discovered()

    def mark_visited(self, uri: str) -> None:
        self.documents.mark_visited(uri)

    def is_visited(self, uri: str) -> bool:
        return self.documents.is_visited(uri)

    def get_stats(self) -> dict[str, int]:
        """Get repository statistics."""
        declarations = self.declarations.all().values()
        return {
            "declarations": len(self.declarations),
            "enums": sum(len(d.enums) for d in declarations),
            "global_enums": len(self.enums),
            "methods": sum(len(d.methods) + len(d.slots) for d in declarations),
            "signals": sum(len(d.signals) for d in declarations),
            "documents": len(self.documents.visited()),
            "namespace_documents": len(self.documents.discovered()),
            "duplicates_merged": self.declarations.duplicates_merged,
        }

    def clear(self) -> None:
        """Clear all data from the repository."""
        self.declarations.clear()
        self.enums.clear()
        self.documents.clear()
