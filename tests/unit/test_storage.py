"""Unit tests for the in-memory declaration repository."""

import pytest

from typelink.core.exceptions import DeclarationNotFoundError
from typelink.core.models import Declaration, EnumDeclaration, EnumValue, Method
from typelink.core.storage import DeclarationRepository


def make_enum(name: str, *values: str) -> EnumDeclaration:
    """Create a test enum."""
    return EnumDeclaration(name=name, values=[EnumValue(name=v) for v in values])


def make_declaration(full_name: str, enums: list[EnumDeclaration] | None = None) -> Declaration:
    """Create a test declaration."""
    namespace, _, name = full_name.rpartition("::")
    return Declaration(name=name, namespace=namespace, full_name=full_name, enums=enums or [])


@pytest.fixture
def repository() -> DeclarationRepository:
    """Create an empty repository."""
    return DeclarationRepository()


class TestDeclarations:
    """Tests for declaration storage."""

    def test_add_and_get(self, repository: DeclarationRepository) -> None:
        """Test storing and retrieving a declaration."""
        declaration = make_declaration("KWin::Window")
        assert repository.add_declaration("KWin::Window", declaration)
        assert repository.get_declaration("KWin::Window") is declaration
        assert repository.has_declaration("KWin::Window")

    def test_get_missing_raises(self, repository: DeclarationRepository) -> None:
        """Test that unknown keys raise DeclarationNotFoundError."""
        with pytest.raises(DeclarationNotFoundError, match="KWin::Missing"):
            repository.get_declaration("KWin::Missing")

    def test_duplicate_merges_enums(self, repository: DeclarationRepository) -> None:
        """Test that a duplicate contributes only new enums."""
        first = make_declaration("KWin::Window", [make_enum("Type", "Normal", "Dialog")])
        second = make_declaration(
            "KWin::Window",
            [make_enum("Type", "Normal", "Dialog"), make_enum("Layer", "Top")],
        )
        second.methods.append(Method(name="ignored", return_type="void"))

        repository.add_declaration("KWin::Window", first)
        assert not repository.add_declaration("KWin::Window", second)

        stored = repository.get_declaration("KWin::Window")
        assert stored is first
        assert [e.name for e in stored.enums] == ["Type", "Layer"]
        assert stored.methods == []
        assert repository.declarations.duplicates_merged == 1

    def test_enums_deduplicated_on_insert(self, repository: DeclarationRepository) -> None:
        """Test that repeated enums in one declaration are collapsed."""
        declaration = make_declaration("A", [make_enum("E", "X"), make_enum("E", "X")])
        repository.add_declaration("A", declaration)
        assert len(repository.get_declaration("A").enums) == 1

    def test_queries(self, repository: DeclarationRepository) -> None:
        """Test namespace and inheritance queries."""
        base = make_declaration("KWin::Item")
        child = make_declaration("KWin::Window")
        child.inheritance = ["KWin::Item"]
        other = make_declaration("Other")
        for declaration in (base, child, other):
            repository.add_declaration(declaration.full_name, declaration)

        assert {d.full_name for d in repository.declarations.in_namespace("KWin")} == {
            "KWin::Item",
            "KWin::Window",
        }
        assert repository.declarations.inheriting_from("KWin::Item") == [child]


class TestGlobalEnums:
    """Tests for namespace-level enum storage."""

    def test_first_definition_wins(self, repository: DeclarationRepository) -> None:
        """Test that a later enum with the same name is rejected."""
        assert repository.add_global_enum(make_enum("Layer", "Top"))
        assert not repository.add_global_enum(make_enum("Layer", "Bottom"))
        assert [v.name for v in repository.get_global_enums()["Layer"].values] == ["Top"]


class TestDocuments:
    """Tests for document bookkeeping."""

    def test_visited(self, repository: DeclarationRepository) -> None:
        """Test visited URI tracking."""
        assert not repository.is_visited("docs/a.html")
        repository.mark_visited("docs/a.html")
        assert repository.is_visited("docs/a.html")

    def test_discovered_keeps_order(self, repository: DeclarationRepository) -> None:
        """Test that discovered namespace documents are unique and ordered."""
        for path in ("b.html", "a.html", "b.html"):
            repository.add_discovered_document_link(path)
        assert repository.documents.discovered_in_order() == ["b.html", "a.html"]
        assert repository.get_discovered_document_links() == {"a.html", "b.html"}


class TestRepository:
    """Tests for repository-wide operations."""

    def test_stats(self, repository: DeclarationRepository) -> None:
        """Test repository statistics."""
        declaration = make_declaration("A", [make_enum("E", "X")])
        declaration.methods.append(Method(name="m", return_type="void"))
        declaration.signals.append(Method(name="s", return_type="void"))
        repository.add_declaration("A", declaration)
        repository.add_global_enum(make_enum("G", "Y"))
        repository.mark_visited("a.html")
        repository.add_discovered_document_link("namespace_x.html")

        assert repository.get_stats() == {
            "declarations": 1,
            "enums": 1,
            "global_enums": 1,
            "methods": 1,
            "signals": 1,
            "documents": 1,
            "namespace_documents": 1,
            "duplicates_merged": 0,
        }

    def test_clear(self, repository: DeclarationRepository) -> None:
        """Test that clear empties every storage."""
        repository.add_declaration("A", make_declaration("A"))
        repository.add_global_enum(make_enum("G", "Y"))
        repository.mark_visited("a.html")
        repository.clear()
        assert repository.get_all_declarations() == {}
        assert repository.get_global_enums() == {}
        assert not repository.is_visited("a.html")
