"""
Storage layer: in-memory repository for parsed declarations.

This module provides storage operations split by concern:

Components:
    - DeclarationRepository: Main facade that coordinates all storage
    - DeclarationStorage: Declarations keyed by full name, merged on duplicates
    - EnumStorage: Enums declared at namespace level
    - DocumentStorage: Visited document URIs and queued namespace documents

The repository lives for one resolution session; nothing is persisted.
"""

from typelink.core.storage.declarations import DeclarationStorage
from typelink.core.storage.documents import DocumentStorage
from typelink.core.storage.enums import EnumStorage
from typelink.core.storage.repository import DeclarationRepository

__all__ = [
    "DeclarationRepository",
    "DeclarationStorage",
    "DocumentStorage",
    "EnumStorage",
]
