"""Regex tokenizer for C++-style type signatures."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class TokenType(Enum):
    """Kinds of tokens in a type signature."""

    CONST = "const"
    IDENTIFIER = "identifier"
    SCOPE = "::"
    DOT = "."
    LEFT_ANGLE = "<"
    RIGHT_ANGLE = ">"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    COMMA = ","
    ASTERISK = "*"
    AMPERSAND = "&"


# Order matters: the keyword must win over IDENTIFIER, "::" is checked before ".".
_TOKEN_PATTERNS: list[tuple[TokenType | None, str]] = [
    (None, r"\s+"),
    (TokenType.CONST, r"const\b"),
    (TokenType.SCOPE, r"::"),
    (TokenType.DOT, r"\."),
    (TokenType.LEFT_ANGLE, r"<"),
    (TokenType.RIGHT_ANGLE, r">"),
    (TokenType.LEFT_BRACKET, r"\["),
    (TokenType.RIGHT_BRACKET, r"\]"),
    (TokenType.COMMA, r","),
    (TokenType.ASTERISK, r"\*"),
    (TokenType.AMPERSAND, r"&"),
    (TokenType.IDENTIFIER, r"[A-Za-z_]\w*"),
]

_MASTER = re.compile(
    "|".join(f"(?P<T{i}>{pattern})" for i, (_, pattern) in enumerate(_TOKEN_PATTERNS))
)

# Array sizes ("int[3]") leave digits outside any token; they are expected.
BENIGN_STRAY_CHARACTERS = frozenset("0123456789")


@dataclass(frozen=True)
class Token:
    """A lexed token with its span in the source text."""

    type: TokenType
    image: str
    start: int
    end: int


@dataclass(frozen=True)
class LexError:
    """An unrecognized character."""

    offset: int
    char: str

    @property
    def is_benign(self) -> bool:
        return self.char in BENIGN_STRAY_CHARACTERS

    def __str__(self) -> str:
        return f"unexpected character {self.char!r} at offset {self.offset}"


@dataclass
class LexResult:
    """Tokens plus any characters the lexer skipped."""

    text: str
    tokens: list[Token] = field(default_factory=list)
    errors: list[LexError] = field(default_factory=list)

    @property
    def critical_errors(self) -> list[LexError]:
        return [e for e in self.errors if not e.is_benign]

    def slice_text(self, tokens: list[Token]) -> str:
        """Source text spanned by a contiguous run of tokens."""
        if not tokens:
            return ""
        return self.text[tokens[0].start : tokens[-1].end]


def tokenize(text: str) -> LexResult:
    """Split a signature into tokens.

    Unrecognized characters are recorded as errors and skipped; lexing always
    continues with the rest of the input.
    """
    result = LexResult(text=text)
    pos = 0
    length = len(text)

    while pos < length:
        match = _MASTER.match(text, pos)
        if match is None:
            result.errors.append(LexError(offset=pos, char=text[pos]))
            pos += 1
            continue

        token_type = _TOKEN_PATTERNS[int(match.lastgroup[1:])][0]  # type: ignore[index]
        if token_type is not None:
            result.tokens.append(
                Token(type=token_type, image=match.group(), start=match.start(), end=match.end())
            )
        pos = match.end()

    return result
