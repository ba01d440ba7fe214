"""Global enum storage operations."""

from __future__ import annotations

import logging

from typelink.core.models import EnumDeclaration

logger = logging.getLogger(__name__)


class EnumStorage:
    """Storage for enums declared at namespace level."""

    def __init__(self) -> None:
        self._enums: dict[str, EnumDeclaration] = {}

    def add(self, enum: EnumDeclaration) -> bool:
        """Add an enum keyed by name; the first definition wins.

        Returns:
            True if the enum was stored, False if one with that name existed
        """
        existing = self._enums.get(enum.name)
        if existing is None:
            self._enums[enum.name] = enum
            return True

        if existing.signature != enum.signature:
            logger.warning("Enum %s has different values, keeping existing", enum.name)
        else:
            logger.debug("Skipping duplicate enum: %s", enum.name)
        return False

    def all(self) -> dict[str, EnumDeclaration]:
        return dict(self._enums)

    def __len__(self) -> int:
        return len(self._enums)

    def clear(self) -> None:
        self._enums.clear()
