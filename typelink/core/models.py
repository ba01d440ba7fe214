"""Data models for typelink."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Visibility(Enum):
    """Member visibility as reported by the documentation."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class UsageType(Enum):
    """Where a referenced type appears inside a declaration."""

    PROPERTY = "property"
    METHOD_PARAM = "method_param"
    METHOD_RETURN = "method_return"
    SIGNAL_PARAM = "signal_param"
    INHERITANCE = "inheritance"


@dataclass
class Parameter:
    """A method or signal parameter."""

    name: str
    type: str
    default_value: str | None = None
    description: str | None = None


@dataclass
class Method:
    """A method, slot, or signal of a declaration."""

    name: str
    return_type: str
    parameters: list[Parameter] = field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_const: bool = False
    is_virtual: bool = False
    is_override: bool = False
    is_abstract: bool = False
    decorators: list[str] = field(default_factory=list)
    description: str | None = None


@dataclass
class Property:
    """A property of a declaration."""

    name: str
    type: str
    readonly: bool = False
    description: str | None = None


@dataclass
class EnumValue:
    """A single enumerator."""

    name: str
    value: str | None = None
    description: str | None = None


@dataclass
class EnumDeclaration:
    """An enumeration declared by a class or a namespace."""

    name: str
    values: list[EnumValue] = field(default_factory=list)
    description: str | None = None

    @property
    def signature(self) -> str:
        """Identity used to deduplicate enums: name plus value names."""
        return f"{self.name}:{'|'.join(v.name for v in self.values)}"


@dataclass
class Declaration:
    """A class-like entity extracted from a reference document."""

    name: str
    namespace: str
    full_name: str
    inheritance: list[str] = field(default_factory=list)
    enums: list[EnumDeclaration] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    slots: list[Method] = field(default_factory=list)
    signals: list[Method] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    description: str | None = None
    is_abstract: bool = False


@dataclass
class NamespaceInfo:
    """A namespace reference page; contributes enums only."""

    name: str
    full_name: str
    enums: list[EnumDeclaration] = field(default_factory=list)


@dataclass
class TypeDependency:
    """A type referenced by a declaration that may need resolving."""

    type_name: str
    full_name: str
    source_location: str
    usage_type: UsageType
    namespace: str | None = None
    linked_href: str | None = None


class ResolutionStats:
    """Statistics from a dependency resolution session."""

    def __init__(self) -> None:
        self.resolved_types: int = 0
        self.unresolved_types: int = 0
        self.circular_references: int = 0
        self.deferred_namespaces: int = 0
        self.max_depth: int = 0
        self.iterations: int = 0
        self.cap_reached: bool = False

    def to_dict(self) -> dict[str, int | bool]:
        return {
            "resolved_types": self.resolved_types,
            "unresolved_types": self.unresolved_types,
            "circular_references": self.circular_references,
            "deferred_namespaces": self.deferred_namespaces,
            "max_depth": self.max_depth,
            "iterations": self.iterations,
            "cap_reached": self.cap_reached,
        }

    def __repr__(self) -> str:
        return (
            f"ResolutionStats(resolved={self.resolved_types}, "
            f"unresolved={self.unresolved_types}, "
            f"circular={self.circular_references}, "
            f"deferred={self.deferred_namespaces}, max_depth={self.max_depth}, "
            f"iterations={self.iterations}, cap_reached={self.cap_reached})"
        )
