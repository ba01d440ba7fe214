"""Configuration models for the type system.

Every model validates the JSON shape of a type mapping configuration file
(camelCase keys) and is used directly by the registry at runtime.
"""

from __future__ import annotations

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def substitute_placeholders(template: str, values: list[str]) -> str:
    """Replace ``$1``..``$n`` with values; highest index first so ``$10`` stays whole."""
    result = template
    for index in range(len(values), 0, -1):
        result = result.replace(f"${index}", values[index - 1])
    return result


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class TypeDefinition(_ConfigModel):
    """A canonical type and the notation it converts to."""

    name: str = Field(min_length=1)
    target_type: str = Field(alias="targetType", min_length=1)
    category: str = Field(min_length=1)
    description: str | None = None
    aliases: tuple[str, ...] = ()


class GenericSubstitutionRule(_ConfigModel):
    """Rewrites a generic instantiation, e.g. ``^QList<(.+)>$`` -> ``$1[]``."""

    pattern: str = Field(min_length=1)
    replacement: str
    description: str | None = None

    @field_validator("pattern")
    @classmethod
    def _base_pattern_compiles(cls, value: str) -> str:
        try:
            re.compile(_strip_anchors(value).split("<", 1)[0])
        except re.error as e:
            raise ValueError(f"invalid base type pattern in {value!r}: {e}") from e
        return value

    @property
    def base_pattern(self) -> str:
        """The part of ``pattern`` that names the generic base type."""
        return _strip_anchors(self.pattern).split("<", 1)[0]


class NamespaceMappingRule(_ConfigModel):
    """Maps a source namespace onto a target namespace, or drops it."""

    source_namespace: str = Field(alias="sourceNamespace", min_length=1)
    target_namespace: str = Field(alias="targetNamespace")
    strip_namespace: bool = Field(default=False, alias="stripNamespace")


class RegexRule(_ConfigModel):
    """Custom rule: regex search on the cleaned type, ``$n`` group template."""

    kind: Literal["regex"] = "regex"
    name: str = Field(min_length=1)
    priority: int = 0
    pattern: str = Field(min_length=1)
    template: str
    description: str | None = None

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid pattern {value!r}: {e}") from e
        return value

    def matches(self, type_string: str) -> bool:
        return re.search(self.pattern, type_string) is not None

    def apply(self, type_string: str) -> str:
        match = re.search(self.pattern, type_string)
        if match is None:
            return type_string
        groups = [group or "" for group in match.groups()]
        return substitute_placeholders(self.template, groups)


class LiteralRule(_ConfigModel):
    """Custom rule: exact match on the cleaned type, fixed replacement."""

    kind: Literal["literal"] = "literal"
    name: str = Field(min_length=1)
    priority: int = 0
    equals: str = Field(min_length=1)
    replacement: str
    description: str | None = None

    def matches(self, type_string: str) -> bool:
        return type_string == self.equals

    def apply(self, type_string: str) -> str:
        return self.replacement


CustomConversionRule = Annotated[RegexRule | LiteralRule, Field(discriminator="kind")]


class TypeMappingConfig(_ConfigModel):
    """A complete type mapping configuration payload."""

    mappings: list[TypeDefinition] = Field(min_length=1)
    template_mappings: list[GenericSubstitutionRule] = Field(
        default_factory=list, alias="templateMappings"
    )
    namespace_mappings: list[NamespaceMappingRule] = Field(
        default_factory=list, alias="namespaceMappings"
    )
    custom_rules: list[CustomConversionRule] = Field(default_factory=list, alias="customRules")

    @model_validator(mode="after")
    def _names_and_aliases_unique(self) -> TypeMappingConfig:
        owners: dict[str, str] = {}
        for definition in self.mappings:
            if definition.name in owners:
                raise ValueError(f"duplicate type name {definition.name!r}")
            owners[definition.name] = definition.name

        for definition in self.mappings:
            for alias in definition.aliases:
                owner = owners.get(alias)
                if owner is not None and owner != definition.name:
                    raise ValueError(
                        f"alias {alias!r} of {definition.name!r} already names {owner!r}"
                    )
                owners[alias] = definition.name
        return self

    def to_payload(self) -> dict[str, object]:
        """JSON-ready dict using the camelCase configuration keys."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def _strip_anchors(pattern: str) -> str:
    if pattern.startswith("^"):
        pattern = pattern[1:]
    if pattern.endswith("$"):
        pattern = pattern[:-1]
    return pattern
