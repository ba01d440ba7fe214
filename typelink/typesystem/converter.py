"""Conversion of C++-style signatures into target type notation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from typelink.signatures import ParsedType, clean_type_string, parse_type
from typelink.signatures.models import ARRAY_SUFFIX
from typelink.signatures.utils import normalize_whitespace
from typelink.typesystem.models import substitute_placeholders
from typelink.typesystem.registry import TypeRegistry

logger = logging.getLogger(__name__)

FALLBACK_TYPE = "any"


@dataclass
class TypeInfo:
    """Conversion summary for a single signature."""

    can_convert: bool
    target_type: str
    category: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "can_convert": self.can_convert,
            "target_type": self.target_type,
            "category": self.category,
        }


class TypeConverter:
    """Converts signatures using the rules of a TypeRegistry.

    Strategies are tried in order: custom rules, generic substitution,
    namespace mapping, direct lookup, then the cleaned input itself.
    Results are memoized per raw string until the registry changes.
    """

    def __init__(self, registry: TypeRegistry) -> None:
        self.registry = registry
        self.invalidations = 0
        self._memo: dict[str, str] = {}
        registry.add_listener(self._on_registry_changed)

    def _on_registry_changed(self, generation: int) -> None:
        self._memo.clear()
        self.invalidations += 1
        logger.debug("Conversion cache invalidated (registry generation %d)", generation)

    def convert(self, raw: str) -> str:
        """Convert a signature. Never raises; unknown types pass through cleaned."""
        cached = self._memo.get(raw)
        if cached is not None:
            return cached

        result = self._convert(raw)
        self._memo[raw] = result
        return result

    def _convert(self, raw: str) -> str:
        clean = _clean(raw)

        for rule in self.registry.custom_rules:
            if rule.matches(clean):
                logger.debug("Custom rule %r matched %r", rule.name, clean)
                return self.resolve_generics(rule.apply(clean))

        parsed = parse_type(clean)
        if parsed is not None and parsed.is_generic:
            return self._convert_generic(parsed)

        if parsed is not None and parsed.namespace:
            return self._suffixed(self._map_namespace(parsed), parsed.is_array)

        return self._lookup(clean)

    def _convert_generic(self, parsed: ParsedType) -> str:
        args = [self.convert(arg.full_name) for arg in parsed.template_args]
        rule = self.registry.match_generic_rule(parsed)
        if rule is not None:
            result = substitute_placeholders(rule.replacement, args)
        else:
            result = f"{self._map_namespace(parsed)}<{', '.join(args)}>"
        return self._suffixed(result, parsed.is_array)

    def _map_namespace(self, parsed: ParsedType) -> str:
        """Base type with its namespace rewritten, without arguments or suffix."""
        if not parsed.namespace:
            return parsed.base_type

        rule = self.registry.namespace_rule(parsed.namespace)
        if rule is None:
            return f"{parsed.namespace.replace('::', '.')}.{parsed.base_type}"
        if rule.strip_namespace or not rule.target_namespace:
            return parsed.base_type
        return f"{rule.target_namespace}.{parsed.base_type}"

    def _lookup(self, clean: str) -> str:
        definition = self.registry.get_type(clean)
        if definition is None:
            definition = self.registry.get_type(normalize_whitespace(clean))
        if definition is not None:
            return definition.target_type

        if clean.endswith(ARRAY_SUFFIX):
            element = self.registry.get_type(clean[: -len(ARRAY_SUFFIX)].strip())
            if element is not None:
                return element.target_type + ARRAY_SUFFIX

        return clean or FALLBACK_TYPE

    @staticmethod
    def _suffixed(result: str, is_array: bool) -> str:
        return result + ARRAY_SUFFIX if is_array else result

    def resolve_generics(self, type_string: str) -> str:
        """Convert the generic arguments of an already converted type.

        ``Array<T>`` becomes ``T[]``; ``Map`` and ``Set`` keep their shape.
        """
        parsed = parse_type(type_string)
        if parsed is None or not parsed.is_generic:
            return type_string

        args = [self.convert(arg.full_name) for arg in parsed.template_args]
        base = parsed.base_type if parsed.namespace is None else None

        if base == "Array":
            result = f"{args[0]}[]"
        elif base == "Map" and len(args) >= 2:
            result = f"Map<{args[0]}, {args[1]}>"
        elif base == "Set":
            result = f"Set<{args[0]}>"
        else:
            result = f"{self._map_namespace(parsed)}<{', '.join(args)}>"
        return self._suffixed(result, parsed.is_array)

    def can_convert(self, raw: str) -> bool:
        """Whether some rule or definition applies, rather than the fallback."""
        clean = _clean(raw)
        if any(rule.matches(clean) for rule in self.registry.custom_rules):
            return True

        parsed = parse_type(clean)
        if parsed is not None:
            if self.registry.match_generic_rule(parsed) is not None:
                return True
            return self.registry.has_type(parsed.qualified_name) or self.registry.has_type(
                parsed.base_type
            )

        return self.registry.has_type(clean) or self.registry.has_type(normalize_whitespace(clean))

    def type_info(self, raw: str) -> TypeInfo:
        clean = _clean(raw)
        definition = self.registry.get_type(clean)
        if definition is None:
            parsed = parse_type(clean)
            if parsed is not None:
                definition = self.registry.get_type(parsed.qualified_name)

        return TypeInfo(
            can_convert=self.can_convert(raw),
            target_type=self.convert(raw),
            category=definition.category if definition is not None else None,
        )

    def stats(self) -> dict[str, int]:
        return {
            "cache_size": len(self._memo),
            "registered_types": len(self.registry.all_type_names()),
            "invalidations": self.invalidations,
        }

    def clear_cache(self) -> None:
        self.registry.clear_cache()


def _clean(raw: str) -> str:
    parsed = parse_type(raw)
    if parsed is not None:
        return parsed.full_name
    return clean_type_string(raw)
