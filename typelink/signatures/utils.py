"""String-level helpers for type names that may not parse."""

from __future__ import annotations

import re

_CONST = re.compile(r"\bconst\b")
_QUALIFIER_CHARS = re.compile(r"[&*]")
_DECORATION_CHARS = re.compile(r"[<>*&\[\]]")
_WHITESPACE = re.compile(r"\s+")


def clean_type_string(type_string: str) -> str:
    """Drop const, pointer, and reference qualifiers and collapse whitespace."""
    cleaned = _CONST.sub("", type_string)
    cleaned = _QUALIFIER_CHARS.sub("", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def clean_type_for_lookup(type_name: str) -> str:
    """Remove every bracket and qualifier character."""
    return _DECORATION_CHARS.sub("", type_name).strip()


def extract_type_name(full_type_name: str) -> str:
    """Last component of a ``::``-qualified name."""
    return full_type_name.rsplit("::", 1)[-1] or full_type_name


def normalize_whitespace(type_name: str) -> str:
    return _WHITESPACE.sub(" ", type_name).strip()


def is_object_literal(type_name: str) -> bool:
    """Inline record notation such as ``{ x: number }``."""
    return type_name.startswith("{") and type_name.endswith("}")
