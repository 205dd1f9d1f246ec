"""
Expression Parser for gating logic.

Parses expressions such as ``"((0 AND 1) OR (NOT 2))"`` into an expression
tree of Terminal and GateNode objects.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..errors import (
    ArityMismatch,
    EmptyInput,
    LogicSyntaxError,
    TooDeep,
    TrailingInput,
    UnbalancedParentheses,
    UnexpectedToken,
)
from .gates import Gate
from .tokenizer import Token, TokenKind, tokenize
from .tree import Expression, GateNode, Terminal


class _TokenStream:
    """Token cursor with one token of lookahead."""

    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._index = 0

    def peek(self) -> Token:
        return self._tokens[self._index]

    def next(self) -> Token:
        token = self._tokens[self._index]
        # END is sticky
        if token.kind is not TokenKind.END:
            self._index += 1
        return token


class ExpressionParser:
    """
    Recursive descent parser for gating logic.

    Grammar::

        expr  := terminal | '(' inner ')'
        inner := "NOT" expr | expr gate expr

    Every gate application must be wrapped in its own parentheses, so the
    tree shape is exactly the parenthesization written by the author and no
    precedence rules exist. A bare terminal index is a complete expression.
    """

    DEFAULT_MAX_DEPTH = 64

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth

    def parse(self, expression: str) -> Expression:
        """
        Parse an expression into a tree.

        Args:
            expression: The logic string.

        Returns:
            The root node of the expression tree.

        Raises:
            LexError: If the string contains invalid characters or numbers.
            ParseError: If the tokens do not form a valid expression.
        """
        if not isinstance(expression, str):
            raise TypeError(f"Expected string expression, got {type(expression).__name__}")

        tokens = list(tokenize(expression))
        if tokens[0].kind is TokenKind.END:
            raise EmptyInput()

        self._check_parentheses(tokens)

        stream = _TokenStream(tokens)
        tree = self._parse_expr(stream)

        token = stream.peek()
        if token.kind is not TokenKind.END:
            raise TrailingInput(
                f"Unexpected {token} at position {token.position} after complete "
                f"expression; wrap gate applications in parentheses",
                token,
            )
        return tree

    def _check_parentheses(self, tokens: Iterable[Token]) -> None:
        """Reject unbalanced or too deeply nested input before descending."""
        open_parens: List[Token] = []

        for token in tokens:
            if token.kind is TokenKind.LPAREN:
                open_parens.append(token)
                if len(open_parens) > self.max_depth:
                    raise TooDeep(token, self.max_depth)
            elif token.kind is TokenKind.RPAREN:
                if not open_parens:
                    raise UnbalancedParentheses(
                        f"Unmatched ')' at position {token.position}", token
                    )
                open_parens.pop()

        if open_parens:
            token = open_parens[-1]
            raise UnbalancedParentheses(
                f"Unclosed '(' at position {token.position}", token
            )

    def _parse_expr(self, stream: _TokenStream) -> Expression:
        token = stream.next()

        if token.kind is TokenKind.TERMINAL:
            return Terminal(token.value)

        if token.kind is TokenKind.LPAREN:
            node = self._parse_inner(stream)
            closing = stream.next()
            if closing.kind is not TokenKind.RPAREN:
                if node.gate is Gate.NOT:
                    raise ArityMismatch(
                        f"NOT takes exactly one operand, found extra {closing} "
                        f"at position {closing.position}",
                        closing,
                    )
                raise UnexpectedToken(
                    f"Expected ')' at position {closing.position}, found {closing}",
                    closing,
                )
            return node

        raise UnexpectedToken(
            f"Expected terminal or '(' at position {token.position}, found {token}",
            token,
        )

    def _parse_inner(self, stream: _TokenStream) -> GateNode:
        """Parse a gate application between a pair of parentheses."""
        token = stream.peek()

        if token.kind is TokenKind.GATE:
            if token.value is not Gate.NOT:
                raise UnexpectedToken(
                    f"Binary gate {token} at position {token.position} "
                    f"is missing its left operand",
                    token,
                )
            stream.next()
            self._require_operand(stream, token)
            return GateNode.unary(Gate.NOT, self._parse_expr(stream))

        if token.kind is TokenKind.RPAREN:
            raise UnexpectedToken(
                f"Empty parentheses at position {token.position}", token
            )

        left = self._parse_expr(stream)

        gate_token = stream.next()
        if gate_token.kind is not TokenKind.GATE:
            raise UnexpectedToken(
                f"Expected a gate after {left} at position {gate_token.position}, "
                f"found {gate_token}",
                gate_token,
            )
        if gate_token.value is Gate.NOT:
            raise ArityMismatch(
                f"NOT at position {gate_token.position} is unary and must be "
                f"written as (NOT <expr>)",
                gate_token,
            )

        self._require_operand(stream, gate_token)
        right = self._parse_expr(stream)
        return GateNode.binary(gate_token.value, left, right)

    def _require_operand(self, stream: _TokenStream, gate_token: Token) -> None:
        """Raise ArityMismatch when a gate is directly followed by ')' or the end."""
        token = stream.peek()
        if token.kind in (TokenKind.RPAREN, TokenKind.END):
            gate = gate_token.value
            if gate is Gate.NOT:
                message = f"NOT at position {gate_token.position} has no operand"
            else:
                message = (
                    f"{gate} at position {gate_token.position} takes two operands, "
                    f"found one"
                )
            raise ArityMismatch(message, gate_token)

    def validate(self, expression: str) -> Tuple[bool, Optional[str]]:
        """
        Check whether an expression parses.

        Returns:
            Tuple of (is_valid, error_message).
        """
        try:
            self.parse(expression)
            return True, None
        except LogicSyntaxError as e:
            return False, str(e)


_default_parser = ExpressionParser()


def parse(expression: str, max_depth: Optional[int] = None) -> Expression:
    """Parse ``expression`` with the default parser or a custom depth limit."""
    if max_depth is None:
        return _default_parser.parse(expression)
    return ExpressionParser(max_depth=max_depth).parse(expression)
