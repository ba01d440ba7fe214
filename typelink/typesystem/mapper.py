"""High-level facade over the registry and converter."""

from __future__ import annotations

from pathlib import Path

from typelink.typesystem.config import create_type_system
from typelink.typesystem.converter import TypeConverter, TypeInfo
from typelink.typesystem.models import TypeDefinition
from typelink.typesystem.registry import TypeRegistry


class TypeMapper:
    """One-stop type mapping: defaults, custom additions, and lookups."""

    def __init__(self, registry: TypeRegistry | None = None) -> None:
        if registry is None:
            registry, converter = create_type_system()
        else:
            converter = TypeConverter(registry)
        self.registry = registry
        self.converter = converter

    @classmethod
    def from_config(cls, path: str | Path) -> TypeMapper:
        registry, _ = create_type_system(path)
        return cls(registry)

    def map_type(self, raw: str) -> str:
        return self.converter.convert(raw)

    def add_type_mapping(self, name: str, target_type: str, category: str = "custom") -> None:
        self.registry.register_type(
            TypeDefinition(name=name, target_type=target_type, category=category)
        )

    def type_mappings(self) -> dict[str, str]:
        """Every known name, aliases included, mapped to its target type."""
        mappings = {}
        for name in self.registry.all_type_names():
            definition = self.registry.get_type(name)
            if definition is not None:
                mappings[name] = definition.target_type
        return mappings

    def can_convert(self, raw: str) -> bool:
        return self.converter.can_convert(raw)

    def type_info(self, raw: str) -> TypeInfo:
        return self.converter.type_info(raw)

    def is_builtin(self, raw: str) -> bool:
        return self.registry.is_builtin(raw)

    def stats(self) -> dict[str, int]:
        return self.converter.stats()

    def clear_cache(self) -> None:
        self.converter.clear_cache()
