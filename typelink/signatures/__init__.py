"""
Signature parsing: turn C++-style type strings into structured type trees.

Components:
    - tokenize: Regex lexer producing a flat token stream plus skipped characters
    - SignatureParser: Recursive descent parser producing ParsedType trees
    - ParsedType: Immutable type tree with a derived canonical ``full_name``

Both ``::`` and ``.`` are accepted as scope separators; namespaces are always
re-joined with ``::``. Malformed signatures parse to None so callers can fall
back to ``clean_type_string``.
"""

from typelink.signatures.lexer import LexError, LexResult, Token, TokenType, tokenize
from typelink.signatures.models import ParsedType
from typelink.signatures.parser import (
    SignatureParser,
    base_name,
    canonical_signature,
    is_generic,
    normalize,
    parse_type,
    split_namespace,
    template_parameters,
)
from typelink.signatures.utils import clean_type_string

__all__ = [
    "LexError",
    "LexResult",
    "ParsedType",
    "SignatureParser",
    "Token",
    "TokenType",
    "base_name",
    "canonical_signature",
    "clean_type_string",
    "is_generic",
    "normalize",
    "parse_type",
    "split_namespace",
    "template_parameters",
    "tokenize",
]
