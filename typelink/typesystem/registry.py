"""Registry of type definitions and conversion rules."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from typelink.signatures import ParsedType, parse_type
from typelink.signatures.utils import clean_type_for_lookup, clean_type_string
from typelink.typesystem.models import (
    CustomConversionRule,
    GenericSubstitutionRule,
    NamespaceMappingRule,
    TypeDefinition,
    TypeMappingConfig,
)

logger = logging.getLogger(__name__)

RegistryListener = Callable[[int], None]


class TypeRegistry:
    """Type definitions, aliases, and the rules the converter applies.

    Every mutation bumps ``generation`` and notifies listeners before
    returning, so dependent caches never observe stale rules.
    """

    def __init__(self, config: TypeMappingConfig | None = None) -> None:
        self.generation = 0
        self._types: dict[str, TypeDefinition] = {}
        self._aliases: dict[str, str] = {}
        self._generic_rules: list[GenericSubstitutionRule] = []
        self._namespace_rules: list[NamespaceMappingRule] = []
        self._custom_rules: list[CustomConversionRule] = []
        self._listeners: list[RegistryListener] = []

        # Derived caches, dropped on every mutation
        self._compiled_bases: dict[str, re.Pattern[str]] = {}
        self._builtin_answers: dict[str, bool] = {}

        if config is not None:
            self.load_config(config)

    # Listeners

    def add_listener(self, listener: RegistryListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: RegistryListener) -> None:
        self._listeners.remove(listener)

    def _changed(self) -> None:
        self.generation += 1
        self._compiled_bases.clear()
        self._builtin_answers.clear()
        for listener in list(self._listeners):
            listener(self.generation)

    # Mutations

    def load_config(self, config: TypeMappingConfig) -> None:
        """Replace all definitions and rules with those of ``config``."""
        self._types.clear()
        self._aliases.clear()
        for definition in config.mappings:
            self._store(definition)

        self._generic_rules = list(config.template_mappings)
        self._namespace_rules = list(config.namespace_mappings)
        self._custom_rules = _by_priority(config.custom_rules)

        logger.debug(
            "Loaded %d type definitions, %d generic rules, %d namespace rules, %d custom rules",
            len(self._types),
            len(self._generic_rules),
            len(self._namespace_rules),
            len(self._custom_rules),
        )
        self._changed()

    def register_type(self, definition: TypeDefinition) -> None:
        """Add or replace a type definition."""
        self._store(definition)
        self._changed()

    def add_custom_rule(self, rule: CustomConversionRule) -> None:
        self._custom_rules = _by_priority([*self._custom_rules, rule])
        self._changed()

    def clear_cache(self) -> None:
        """Drop every derived cache, here and in listeners."""
        self._changed()

    def _store(self, definition: TypeDefinition) -> None:
        previous = self._types.get(definition.name)
        if previous is not None:
            for alias in previous.aliases:
                if self._aliases.get(alias) == definition.name:
                    del self._aliases[alias]

        self._types[definition.name] = definition
        for alias in definition.aliases:
            owner = self._aliases.get(alias)
            if owner is not None and owner != definition.name:
                logger.debug("Alias %r moved from %r to %r", alias, owner, definition.name)
            self._aliases[alias] = definition.name

    # Lookups

    def get_type(self, name: str) -> TypeDefinition | None:
        return self._types.get(self._aliases.get(name, name))

    def has_type(self, name: str) -> bool:
        return self._aliases.get(name, name) in self._types

    def types_by_category(self, category: str) -> list[TypeDefinition]:
        return [d for d in self._types.values() if d.category == category]

    def all_type_names(self) -> list[str]:
        """Sorted canonical names and aliases."""
        return sorted({*self._types, *self._aliases})

    @property
    def generic_rules(self) -> list[GenericSubstitutionRule]:
        return list(self._generic_rules)

    @property
    def namespace_rules(self) -> list[NamespaceMappingRule]:
        return list(self._namespace_rules)

    @property
    def custom_rules(self) -> list[CustomConversionRule]:
        return list(self._custom_rules)

    def match_generic_rule(self, parsed: ParsedType) -> GenericSubstitutionRule | None:
        """First generic rule whose base pattern names this type's base."""
        if not parsed.is_generic:
            return None
        for rule in self._generic_rules:
            compiled = self._compiled_base(rule)
            if compiled.fullmatch(parsed.base_type) or compiled.fullmatch(parsed.qualified_name):
                return rule
        return None

    def namespace_rule(self, namespace: str) -> NamespaceMappingRule | None:
        for rule in self._namespace_rules:
            if rule.source_namespace == namespace:
                return rule
        return None

    def _compiled_base(self, rule: GenericSubstitutionRule) -> re.Pattern[str]:
        compiled = self._compiled_bases.get(rule.pattern)
        if compiled is None:
            compiled = re.compile(rule.base_pattern)
            self._compiled_bases[rule.pattern] = compiled
        return compiled

    def is_builtin(self, type_string: str) -> bool:
        """Whether a type is handled by the registry rather than by resolution.

        Qualifiers, array suffixes, and generic arguments are ignored; a
        generic counts as builtin when a substitution rule covers its base.
        """
        answer = self._builtin_answers.get(type_string)
        if answer is None:
            answer = self._check_builtin(type_string)
            self._builtin_answers[type_string] = answer
        return answer

    def _check_builtin(self, type_string: str) -> bool:
        parsed = parse_type(type_string)
        if parsed is None:
            return self.has_type(clean_type_for_lookup(clean_type_string(type_string)))

        if self.match_generic_rule(parsed) is not None:
            return True
        return self.has_type(parsed.qualified_name) or self.has_type(parsed.base_type)

    def export_config(self) -> TypeMappingConfig:
        """Snapshot of the current definitions and rules."""
        return TypeMappingConfig.model_construct(
            mappings=list(self._types.values()),
            template_mappings=list(self._generic_rules),
            namespace_mappings=list(self._namespace_rules),
            custom_rules=list(self._custom_rules),
        )

    def __len__(self) -> int:
        return len(self._types)


def _by_priority(rules: list[CustomConversionRule]) -> list[CustomConversionRule]:
    # sorted() is stable, so equal priorities keep insertion order
    return sorted(rules, key=lambda rule: -rule.priority)
