"""
Exceptions raised by the requiem logic engine.

Syntax errors (lexing and parsing) and evaluation errors form two separate
families under a common base. Every exception carries a human readable
message plus a ``details`` dict with the context needed for diagnostics.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class RequiemError(Exception):
    """Base exception for all requiem errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class LogicSyntaxError(RequiemError, ValueError):
    """Raised when a logic string cannot be turned into an expression tree."""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.position = position
        details = dict(details or {})
        if position is not None:
            details.setdefault("position", position)
        super().__init__(message, details)


# Lexing


class LexError(LogicSyntaxError):
    """Raised by the tokenizer."""


class UnexpectedCharacter(LexError):
    """A character (or a letter run) that starts no valid token."""

    def __init__(self, char: str, position: int, word: Optional[str] = None):
        self.char = char
        self.word = word
        if word and word != char:
            message = f"Unexpected word '{word}' at position {position}"
        else:
            message = f"Unexpected character '{char}' at position {position}"
        super().__init__(message, position, {"char": char, "word": word})


class InvalidNumber(LexError):
    """A digit run that does not fit a terminal index."""

    def __init__(self, text: str, position: int, limit: int):
        self.text = text
        self.limit = limit
        shown = text if len(text) <= 20 else f"{text[:10]}...({len(text)} digits)"
        super().__init__(
            f"Terminal index {shown} at position {position} exceeds {limit}",
            position,
            {"text": text, "limit": limit},
        )


# Parsing


class ParseError(LogicSyntaxError):
    """
    Raised by the parser.

    ``token`` is the offending token, or None where the failure is not tied
    to a single token (e.g. empty input).
    """

    def __init__(self, message: str, token: Any = None, position: Optional[int] = None):
        self.token = token
        if position is None and token is not None:
            position = getattr(token, "position", None)
        details = {"token": str(token)} if token is not None else {}
        super().__init__(message, position, details)


class EmptyInput(ParseError):
    def __init__(self) -> None:
        super().__init__("Empty expression")


class UnbalancedParentheses(ParseError):
    pass


class UnexpectedToken(ParseError):
    pass


class ArityMismatch(ParseError):
    pass


class TrailingInput(ParseError):
    pass


class TooDeep(ParseError):
    """Nesting exceeds the parser's configured maximum depth."""

    def __init__(self, token: Any, max_depth: int):
        self.max_depth = max_depth
        super().__init__(
            f"Expression nesting exceeds maximum depth of {max_depth}", token
        )


# Evaluation


class EvalError(RequiemError):
    """Raised when a well-formed tree cannot be evaluated."""


class MissingTerminal(EvalError):
    """The truth mapping holds no definite boolean for a referenced terminal."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"No truth value for terminal {index}", {"index": index})


# Surroundings


class DocumentError(RequiemError, ValueError):
    """Raised when a gate document cannot be loaded or validated."""


class RequirementFailed(RequiemError):
    """A requirement referenced by the logic failed to resolve."""

    def __init__(self, index: int, error: Optional[BaseException] = None):
        self.index = index
        self.error = error
        reason = f": {error}" if error is not None and str(error) else ""
        kind = type(error).__name__ if error is not None else None
        super().__init__(
            f"Requirement {index} failed to resolve{reason}",
            {"index": index, "error_type": kind},
        )
