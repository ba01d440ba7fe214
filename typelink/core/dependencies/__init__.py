"""
Dependency resolution: follow type references from declaration to declaration.

Components:
    - DependencyTracker: Extracts referenced types and matches them to document links
    - DependencyResolutionService: Round-based resolver with cycle detection and a round cap
    - resolve_document: Complete session from a single seed document
"""

from typelink.core.dependencies.resolver import (
    DependencyResolutionService,
    ResolutionRound,
    ScheduledDependency,
)
from typelink.core.dependencies.session import SessionResult, resolve_document
from typelink.core.dependencies.tracker import DependencyTracker, ResolutionContext

__all__ = [
    "DependencyResolutionService",
    "DependencyTracker",
    "ResolutionContext",
    "ResolutionRound",
    "ScheduledDependency",
    "SessionResult",
    "resolve_document",
]
