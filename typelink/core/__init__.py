"""
Core module: data models, exceptions, and storage.

This module provides the foundational types and the in-memory repository:

Models (models.py):
    - Declaration: A class-like entity with methods, signals, properties, and enums
    - TypeDependency: A type referenced by a declaration, possibly linked to its page
    - ResolutionStats: Counters from a dependency resolution session
    - UsageType/Visibility: Enums for categorization

Exceptions (exceptions.py):
    - TypelinkError: Base exception for all typelink errors
    - ConfigLoadError, FetchError, DocumentParseError: Loading failures
    - CircularReferenceError: A dependency loops back to one of its ancestors

Storage (storage/):
    - DeclarationRepository: Facade for declarations, global enums, and documents

Dependency resolution lives in ``typelink.core.dependencies``.
"""

from typelink.core.exceptions import (
    CircularReferenceError,
    ConfigLoadError,
    DeclarationNotFoundError,
    DocumentParseError,
    FetchError,
    SignatureParseError,
    TypelinkError,
)
from typelink.core.models import (
    Declaration,
    EnumDeclaration,
    EnumValue,
    Method,
    NamespaceInfo,
    Parameter,
    Property,
    ResolutionStats,
    TypeDependency,
    UsageType,
    Visibility,
)
from typelink.core.storage import DeclarationRepository

__all__ = [
    # Models
    "Declaration",
    "EnumDeclaration",
    "EnumValue",
    "Method",
    "NamespaceInfo",
    "Parameter",
    "Property",
    "ResolutionStats",
    "TypeDependency",
    "UsageType",
    "Visibility",
    # Exceptions
    "TypelinkError",
    "SignatureParseError",
    "ConfigLoadError",
    "FetchError",
    "DocumentParseError",
    "CircularReferenceError",
    "DeclarationNotFoundError",
    # Storage
    "DeclarationRepository",
]
