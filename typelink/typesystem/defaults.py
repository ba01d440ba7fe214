"""Built-in type mappings for Qt/C++ reference documentation."""

from __future__ import annotations

from typelink.typesystem.models import (
    GenericSubstitutionRule,
    NamespaceMappingRule,
    TypeDefinition,
    TypeMappingConfig,
)

_PRIMITIVES = [
    ("int", "number", "32-bit signed integer"),
    ("uint", "number", "32-bit unsigned integer"),
    ("long", "number", "Long integer"),
    ("short", "number", "16-bit signed integer"),
    ("char", "string", "Single character"),
    ("bool", "boolean", "Boolean value"),
    ("void", "void", "No return value"),
    ("float", "number", "32-bit floating point"),
    ("double", "number", "64-bit floating point"),
    ("qreal", "number", "Qt real number type"),
]

_QT_BASIC = [
    ("QString", "string", "Qt string class"),
    ("QStringList", "string[]", "List of Qt strings"),
    ("QByteArray", "Uint8Array", "Qt byte array"),
]

_GENERICS = [
    ("^QList<(.+)>$", "$1[]", "QList to array"),
    ("^QVector<(.+)>$", "$1[]", "QVector to array"),
    ("^QHash<(.+),\\s*(.+)>$", "Map<$1, $2>", "QHash to Map"),
    ("^QMap<(.+),\\s*(.+)>$", "Map<$1, $2>", "QMap to Map"),
    ("^QSet<(.+)>$", "Set<$1>", "QSet to Set"),
    ("^std::vector<(.+)>$", "$1[]", "std::vector to array"),
    ("^std::map<(.+),\\s*(.+)>$", "Map<$1, $2>", "std::map to Map"),
    ("^std::set<(.+)>$", "Set<$1>", "std::set to Set"),
]


def default_config() -> TypeMappingConfig:
    """The mapping set used when no configuration file is given."""
    mappings = [
        TypeDefinition(name=name, target_type=target, category="primitive", description=desc)
        for name, target, desc in _PRIMITIVES
    ]
    mappings += [
        TypeDefinition(name=name, target_type=target, category="qt-basic", description=desc)
        for name, target, desc in _QT_BASIC
    ]

    return TypeMappingConfig(
        mappings=mappings,
        template_mappings=[
            GenericSubstitutionRule(pattern=pattern, replacement=replacement, description=desc)
            for pattern, replacement, desc in _GENERICS
        ],
        namespace_mappings=[
            NamespaceMappingRule(source_namespace="KWin", target_namespace="KWin"),
            NamespaceMappingRule(source_namespace="Qt", target_namespace="Qt"),
            NamespaceMappingRule(source_namespace="std", target_namespace="", strip_namespace=True),
        ],
    )
