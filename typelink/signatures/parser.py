"""Recursive descent parser for C++-style type signatures."""

from __future__ import annotations

import logging
from functools import lru_cache

from typelink.core.exceptions import SignatureParseError
from typelink.signatures.lexer import LexResult, Token, TokenType, tokenize
from typelink.signatures.models import SCOPE_SEPARATOR, ParsedType
from typelink.signatures.utils import clean_type_string

logger = logging.getLogger(__name__)

_SEPARATORS = (TokenType.SCOPE, TokenType.DOT)


class _Cursor:
    """Position over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self.index = 0

    def at_end(self) -> bool:
        return self.index >= len(self._tokens)

    def peek(self, offset: int = 0) -> Token | None:
        index = self.index + offset
        return self._tokens[index] if index < len(self._tokens) else None

    def peek_is(self, token_type: TokenType, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.type == token_type

    def advance(self) -> Token:
        token = self._tokens[self.index]
        self.index += 1
        return token

    def accept(self, token_type: TokenType) -> Token | None:
        if self.peek_is(token_type):
            return self.advance()
        return None


class SignatureParser:
    """Parser that turns type signature strings into ParsedType trees."""

    def parse(self, text: str) -> ParsedType | None:
        """Parse a signature, returning None if it is malformed."""
        try:
            return self._parse(text)
        except SignatureParseError as e:
            logger.debug("Failed to parse type %r: %s", text, e)
            return None

    def _parse(self, text: str) -> ParsedType:
        lexed = tokenize(text)
        if lexed.critical_errors:
            details = ", ".join(str(e) for e in lexed.critical_errors)
            raise SignatureParseError(f"lexing failed: {details}")

        cursor = _Cursor(lexed.tokens)
        is_const = cursor.accept(TokenType.CONST) is not None

        namespace, base_type = self._parse_qualified_name(cursor)

        template_args: tuple[ParsedType, ...] = ()
        if cursor.peek_is(TokenType.LEFT_ANGLE):
            template_args = self._parse_template_args(cursor, lexed)

        is_array = self._parse_array_suffix(cursor)

        is_pointer = False
        is_reference = False
        while not cursor.at_end():
            token = cursor.advance()
            if token.type == TokenType.ASTERISK:
                is_pointer = True
            elif token.type == TokenType.AMPERSAND:
                is_reference = True
            elif token.type == TokenType.CONST:
                is_const = True

        return ParsedType(
            base_type=base_type,
            namespace=namespace,
            template_args=template_args,
            is_const=is_const,
            is_pointer=is_pointer,
            is_reference=is_reference,
            is_array=is_array,
        )

    def _parse_qualified_name(self, cursor: _Cursor) -> tuple[str | None, str]:
        """Parse ``A::B::C`` or ``A.B.C`` into (namespace, base type)."""
        first = cursor.accept(TokenType.IDENTIFIER)
        if first is None:
            raise SignatureParseError("expected a type name")

        identifiers = [first.image]
        while (
            not cursor.at_end()
            and cursor.peek().type in _SEPARATORS  # type: ignore[union-attr]
            and cursor.peek_is(TokenType.IDENTIFIER, 1)
        ):
            cursor.advance()
            identifiers.append(cursor.advance().image)

        if len(identifiers) == 1:
            return None, identifiers[0]
        return SCOPE_SEPARATOR.join(identifiers[:-1]), identifiers[-1]

    def _parse_template_args(self, cursor: _Cursor, lexed: LexResult) -> tuple[ParsedType, ...]:
        """Split ``<...>`` on top-level commas and parse each argument recursively.

        Each argument is re-parsed from its slice of the original text, so
        qualifiers inside it are read exactly as written.
        """
        cursor.advance()
        args: list[ParsedType] = []
        current: list[Token] = []
        depth = 1

        while not cursor.at_end():
            token = cursor.advance()

            if token.type == TokenType.LEFT_ANGLE:
                depth += 1
            elif token.type == TokenType.RIGHT_ANGLE:
                depth -= 1
                if depth == 0:
                    self._add_argument(current, lexed, args)
                    break
            elif token.type == TokenType.COMMA and depth == 1:
                self._add_argument(current, lexed, args)
                current = []
                continue

            current.append(token)

        return tuple(args)

    def _add_argument(self, tokens: list[Token], lexed: LexResult, args: list[ParsedType]) -> None:
        if not tokens:
            return
        parsed = self.parse(lexed.slice_text(tokens))
        if parsed is not None:
            args.append(parsed)

    def _parse_array_suffix(self, cursor: _Cursor) -> bool:
        """Consume a balanced ``[...]`` group; unbalanced brackets are left alone."""
        if not cursor.peek_is(TokenType.LEFT_BRACKET):
            return False

        depth = 0
        offset = 0
        while (token := cursor.peek(offset)) is not None:
            if token.type == TokenType.LEFT_BRACKET:
                depth += 1
            elif token.type == TokenType.RIGHT_BRACKET:
                depth -= 1
            offset += 1
            if depth == 0:
                cursor.index += offset
                return True

        return False


_parser = SignatureParser()


@lru_cache(maxsize=4096)
def parse_type(text: str) -> ParsedType | None:
    """Parse a signature with the shared parser. Results are immutable and cached."""
    return _parser.parse(text)


def normalize(text: str) -> str:
    """Canonical full name of a signature, or the cleaned text if it does not parse."""
    parsed = parse_type(text)
    if parsed is None:
        return clean_type_string(text)
    return parsed.full_name


def canonical_signature(text: str) -> str:
    """Normalized signature that keeps const, pointer, and reference markers."""
    parsed = parse_type(text)
    if parsed is None:
        return text.strip()
    return parsed.signature()


def template_parameters(text: str) -> list[str]:
    """Full names of the top-level generic arguments."""
    parsed = parse_type(text)
    if parsed is None:
        return []
    return [arg.full_name for arg in parsed.template_args]


def base_name(text: str) -> str:
    """Qualified name without generic arguments, or the input if it does not parse."""
    parsed = parse_type(text)
    if parsed is None:
        return text
    return parsed.qualified_name


def is_generic(text: str) -> bool:
    parsed = parse_type(text)
    return parsed is not None and parsed.is_generic


def split_namespace(text: str) -> tuple[str | None, str]:
    """Split a signature into (namespace, type name)."""
    parsed = parse_type(text)
    if parsed is not None:
        return parsed.namespace, parsed.base_type

    namespace, sep, type_name = text.rpartition(SCOPE_SEPARATOR)
    if sep:
        return namespace, type_name
    return None, text
