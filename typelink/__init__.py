"""
typelink: Type signature translation and cross-document dependency resolution.

typelink reads C++-style type signatures from reference documentation and
converts them to TypeScript-style notation, enabling you to:
- Parse signatures like ``const QList<KWin::Window*>&`` into type trees
- Map them through configurable type, generic, and namespace rules
- Follow links between reference pages to resolve every referenced type

Usage:
    from typelink.typesystem import create_type_system

    registry, converter = create_type_system()
    converter.convert("QList<int>")  # "number[]"
"""

__version__ = "0.1.0"
