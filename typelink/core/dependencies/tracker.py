"""Extraction of type dependencies from declarations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from typelink.core.models import Declaration, Method, TypeDependency, UsageType
from typelink.documents.models import SourceDocument
from typelink.signatures import parse_type
from typelink.signatures.models import ARRAY_SUFFIX, SCOPE_SEPARATOR
from typelink.signatures.utils import (
    clean_type_string,
    extract_type_name,
    is_object_literal,
    normalize_whitespace,
)
from typelink.typesystem import TypeRegistry, default_config
from typelink.typesystem.config import DEFAULT_MAX_ITERATIONS

logger = logging.getLogger(__name__)


@dataclass
class ResolutionContext:
    """Mutable state of one resolution session."""

    visited_types: set[str] = field(default_factory=set)
    pending_types: set[str] = field(default_factory=set)
    type_links: dict[str, str] = field(default_factory=dict)
    resolved_declarations: dict[str, Declaration] = field(default_factory=dict)
    ancestry: dict[str, tuple[str, ...]] = field(default_factory=dict)
    current_depth: int = 0
    max_depth: int = DEFAULT_MAX_ITERATIONS

    def clear(self) -> None:
        self.visited_types.clear()
        self.pending_types.clear()
        self.type_links.clear()
        self.resolved_declarations.clear()
        self.ancestry.clear()
        self.current_depth = 0


@dataclass(frozen=True)
class _TypeReference:
    type_name: str
    full_name: str
    namespace: str | None


class DependencyTracker:
    """Finds the non-builtin types a declaration refers to and where they are documented.

    Args:
        registry: Decides which types are builtin and never need resolving.
        primary_namespace: Namespace tried for unqualified names when
            looking up links, e.g. ``KWin``.
        max_depth: Round limit recorded on the context.
    """

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        primary_namespace: str | None = None,
        max_depth: int = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        self.registry = registry if registry is not None else TypeRegistry(default_config())
        self.primary_namespace = primary_namespace
        self._context = ResolutionContext(max_depth=max_depth)

    @property
    def context(self) -> ResolutionContext:
        return self._context

    def extract_dependencies(
        self,
        declaration: Declaration,
        document: SourceDocument | None,
        source_location: str,
    ) -> list[TypeDependency]:
        """All referenced types of a declaration, one per full name, with links where known."""
        found: dict[str, TypeDependency] = {}

        def add(type_string: str, usage: UsageType) -> None:
            for reference in self.type_references(type_string):
                if reference.full_name in found:
                    continue
                found[reference.full_name] = TypeDependency(
                    type_name=reference.type_name,
                    full_name=reference.full_name,
                    source_location=source_location,
                    usage_type=usage,
                    namespace=reference.namespace,
                )

        for parent in declaration.inheritance:
            add(parent, UsageType.INHERITANCE)
        for prop in declaration.properties:
            add(prop.type, UsageType.PROPERTY)
        for method in [*declaration.methods, *declaration.slots]:
            self._add_method(method, add)
        for signal in declaration.signals:
            for param in signal.parameters:
                add(param.type, UsageType.SIGNAL_PARAM)

        dependencies = list(found.values())
        if document is not None:
            self._attach_links(dependencies, self.extract_type_links(document))

        logger.debug(
            "Found %d type references in %s (%d linked)",
            len(dependencies),
            declaration.full_name,
            sum(1 for d in dependencies if d.linked_href),
        )
        return dependencies

    @staticmethod
    def _add_method(method: Method, add) -> None:
        add(method.return_type, UsageType.METHOD_RETURN)
        for param in method.parameters:
            add(param.type, UsageType.METHOD_PARAM)

    def type_references(self, type_string: str) -> list[_TypeReference]:
        """Non-builtin types named by a type string.

        Containers the registry knows, e.g. ``QList<T>``, are looked through
        to their arguments.
        """
        clean = clean_type_string(type_string)
        if not clean or is_object_literal(clean):
            return []

        parsed = parse_type(clean)
        if parsed is None:
            base = clean.removesuffix(ARRAY_SUFFIX).strip()
            if not base or self.registry.is_builtin(base):
                return []
            namespace, _, type_name = base.rpartition(SCOPE_SEPARATOR)
            return [_TypeReference(type_name, base, namespace or None)]

        references = []
        if not self.registry.is_builtin(parsed.full_name):
            references.append(
                _TypeReference(parsed.base_type, parsed.qualified_name, parsed.namespace)
            )
        for arg in parsed.template_args:
            references.extend(self.type_references(arg.full_name))
        return references

    def extract_type_links(self, document: SourceDocument) -> dict[str, str]:
        """Map link texts, whole and unqualified, to their hrefs."""
        links: dict[str, str] = {}
        for text, href in document.type_links():
            full_name = normalize_whitespace(text)
            links[full_name] = href
            short_name = extract_type_name(full_name)
            if short_name and short_name != full_name:
                links[short_name] = href
        return links

    def _attach_links(self, dependencies: list[TypeDependency], links: dict[str, str]) -> None:
        for dependency in dependencies:
            for candidate in self._link_candidates(dependency):
                href = links.get(candidate)
                if href:
                    dependency.linked_href = href
                    self._context.type_links[dependency.full_name] = href
                    break

    def _link_candidates(self, dependency: TypeDependency) -> list[str]:
        candidates = [dependency.full_name, dependency.type_name]
        if self.primary_namespace:
            candidates.append(f"{self.primary_namespace}::{dependency.type_name}")
        if dependency.namespace:
            candidates.append(f"{dependency.namespace}::{dependency.type_name}")
        candidates.append(dependency.full_name.replace(".", "::"))
        candidates.append(dependency.full_name.replace("::", "."))
        return candidates

    def unresolved_dependencies(self, dependencies: list[TypeDependency]) -> list[TypeDependency]:
        """Linked dependencies that are neither resolved, visited, nor builtin."""
        return [
            d
            for d in dependencies
            if d.linked_href
            and d.full_name not in self._context.resolved_declarations
            and d.full_name not in self._context.visited_types
            and not self.registry.is_builtin(d.full_name)
        ]

    def can_resolve(self, dependency: TypeDependency) -> bool:
        return bool(
            dependency.linked_href
            and dependency.full_name not in self._context.visited_types
            and not self.is_circular(dependency.full_name)
        )

    def is_circular(self, type_name: str) -> bool:
        """Whether a type is already awaiting resolution."""
        return type_name in self._context.pending_types

    def add_resolved_declaration(self, name: str, declaration: Declaration) -> None:
        self._context.resolved_declarations[name] = declaration
        self._context.visited_types.add(name)

    def ancestry_of(self, name: str) -> tuple[str, ...]:
        return self._context.ancestry.get(name, ())

    def record_ancestry(self, name: str, path: tuple[str, ...]) -> None:
        """Remember the discovery path of a declaration; the first path wins."""
        self._context.ancestry.setdefault(name, path)

    def reset(self) -> None:
        self._context.clear()
