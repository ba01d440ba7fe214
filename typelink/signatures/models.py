"""Data models for parsed type signatures."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

SCOPE_SEPARATOR = "::"
ARRAY_SUFFIX = "[]"


@dataclass(frozen=True)
class ParsedType:
    """Structured form of a type signature.

    ``full_name`` is derived from the other fields, so two parsed types with
    equal structure always render the same way.
    """

    base_type: str
    namespace: str | None = None
    template_args: tuple[ParsedType, ...] = field(default_factory=tuple)
    is_const: bool = False
    is_pointer: bool = False
    is_reference: bool = False
    is_array: bool = False

    @property
    def qualified_name(self) -> str:
        """Namespace and base type, without generic arguments or array suffix."""
        if self.namespace:
            return f"{self.namespace}{SCOPE_SEPARATOR}{self.base_type}"
        return self.base_type

    @property
    def full_name(self) -> str:
        name = self.qualified_name
        if self.template_args:
            name += f"<{', '.join(arg.full_name for arg in self.template_args)}>"
        if self.is_array:
            name += ARRAY_SUFFIX
        return name

    @property
    def is_generic(self) -> bool:
        return bool(self.template_args)

    def signature(self) -> str:
        """``full_name`` with const, pointer, and reference qualifiers re-applied."""
        result = self.full_name
        if self.is_const:
            result = f"const {result}"
        if self.is_pointer:
            result += "*"
        if self.is_reference:
            result += "&"
        return result

    def walk(self) -> Iterator[ParsedType]:
        """Pre-order traversal over this type and its generic arguments."""
        yield self
        for arg in self.template_args:
            yield from arg.walk()

    def to_dict(self) -> dict[str, object]:
        return {
            "base_type": self.base_type,
            "namespace": self.namespace,
            "template_args": [arg.to_dict() for arg in self.template_args],
            "is_const": self.is_const,
            "is_pointer": self.is_pointer,
            "is_reference": self.is_reference,
            "is_array": self.is_array,
            "full_name": self.full_name,
        }
