"""
Tokenizer for logic expressions.

Turns a string like ``"((0 AND 1) or 2)"`` into a lazy stream of tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

from ..errors import InvalidNumber, UnexpectedCharacter
from .gates import Gate, gate_from_keyword

# Terminal indices are unsigned 16 bit values
MAX_TERMINAL_ID = 0xFFFF

WHITESPACE = frozenset(" \t\n\r\f\v")
DIGITS = frozenset("0123456789")
LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


class TokenKind(str, Enum):
    TERMINAL = "terminal"
    GATE = "gate"
    LPAREN = "("
    RPAREN = ")"
    END = "end"


@dataclass(frozen=True)
class Token:
    """A lexical unit and where it starts in the source."""

    kind: TokenKind
    position: int
    value: Optional[Union[int, Gate]] = None

    def __str__(self) -> str:
        if self.kind is TokenKind.TERMINAL:
            return str(self.value)
        if self.kind is TokenKind.GATE:
            return str(self.value)
        if self.kind is TokenKind.END:
            return "end of input"
        return self.kind.value


def tokenize(source: str) -> Iterator[Token]:
    """
    Scan ``source`` into tokens.

    The stream is produced lazily in a single forward pass and always ends
    with an END token.

    Raises:
        UnexpectedCharacter: On a character that starts no token, or a letter
            run that is not a gate keyword.
        InvalidNumber: On a terminal index above MAX_TERMINAL_ID.
    """
    length = len(source)
    i = 0

    while i < length:
        char = source[i]

        if char in WHITESPACE:
            i += 1
            continue

        if char == "(":
            yield Token(TokenKind.LPAREN, i)
            i += 1
            continue

        if char == ")":
            yield Token(TokenKind.RPAREN, i)
            i += 1
            continue

        if char in DIGITS:
            end = _scan_run(source, i, DIGITS)
            text = source[i:end]
            # Length first, int() refuses very long digit strings
            digits = text.lstrip("0") or "0"
            if len(digits) > len(str(MAX_TERMINAL_ID)):
                raise InvalidNumber(text, i, MAX_TERMINAL_ID)
            index = int(digits)
            if index > MAX_TERMINAL_ID:
                raise InvalidNumber(text, i, MAX_TERMINAL_ID)
            yield Token(TokenKind.TERMINAL, i, index)
            i = end
            continue

        if char in LETTERS:
            # Whole word only, so ANDROID is not AND followed by ROID
            end = _scan_run(source, i, LETTERS)
            word = source[i:end]
            gate = gate_from_keyword(word)
            if gate is None:
                raise UnexpectedCharacter(char, i, word=word)
            yield Token(TokenKind.GATE, i, gate)
            i = end
            continue

        raise UnexpectedCharacter(char, i)

    yield Token(TokenKind.END, length)


def _scan_run(source: str, start: int, charset: frozenset) -> int:
    """Return the end of the maximal run of ``charset`` starting at ``start``."""
    end = start
    while end < len(source) and source[end] in charset:
        end += 1
    return end
