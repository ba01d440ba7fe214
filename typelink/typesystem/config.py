"""Loading type mapping configuration files and resolver settings."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from typelink.core.exceptions import ConfigLoadError
from typelink.typesystem.converter import TypeConverter
from typelink.typesystem.defaults import default_config
from typelink.typesystem.models import TypeMappingConfig
from typelink.typesystem.registry import TypeRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 50


class ResolverSettings(BaseModel):
    """Tunables for a dependency resolution session."""

    model_config = ConfigDict(extra="forbid")

    max_iterations: int = Field(default=DEFAULT_MAX_ITERATIONS, ge=1)
    primary_namespace: str | None = None
    document_root: str | None = None


def load_type_config(path: str | Path) -> TypeMappingConfig:
    """Read and validate a JSON type mapping configuration.

    Raises:
        ConfigLoadError: The file cannot be read or any entry is invalid.
            Every validation issue is listed as ``location: message``.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigLoadError(f"Cannot read type configuration {path}: {e}") from e

    try:
        config = TypeMappingConfig.model_validate_json(text)
    except ValidationError as e:
        raise ConfigLoadError(
            f"Invalid type configuration {path}", issues=format_validation_issues(e)
        ) from e

    logger.info("Loaded type configuration from %s (%d mappings)", path, len(config.mappings))
    return config


def format_validation_issues(error: ValidationError) -> list[str]:
    issues = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        issues.append(f"{location}: {detail['msg']}")
    return issues


def create_type_system(path: str | Path | None = None) -> tuple[TypeRegistry, TypeConverter]:
    """Registry and converter for a configuration file, or the defaults."""
    config = load_type_config(path) if path is not None else default_config()
    registry = TypeRegistry(config)
    return registry, TypeConverter(registry)
