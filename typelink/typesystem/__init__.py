"""
Type system: registry of known types and conversion into target notation.

Components:
    - TypeRegistry: Definitions, aliases, and generic/namespace/custom rules
    - TypeConverter: Memoized conversion, invalidated whenever the registry changes
    - TypeMapper: Facade used by the CLI and MCP server
    - TypeMappingConfig: Validated JSON configuration (camelCase keys)
"""

from typelink.typesystem.config import (
    ResolverSettings,
    create_type_system,
    load_type_config,
)
from typelink.typesystem.converter import TypeConverter, TypeInfo
from typelink.typesystem.defaults import default_config
from typelink.typesystem.mapper import TypeMapper
from typelink.typesystem.models import (
    CustomConversionRule,
    GenericSubstitutionRule,
    LiteralRule,
    NamespaceMappingRule,
    RegexRule,
    TypeDefinition,
    TypeMappingConfig,
)
from typelink.typesystem.registry import TypeRegistry

__all__ = [
    "CustomConversionRule",
    "GenericSubstitutionRule",
    "LiteralRule",
    "NamespaceMappingRule",
    "RegexRule",
    "ResolverSettings",
    "TypeConverter",
    "TypeDefinition",
    "TypeInfo",
    "TypeMapper",
    "TypeMappingConfig",
    "TypeRegistry",
    "create_type_system",
    "default_config",
    "load_type_config",
]
