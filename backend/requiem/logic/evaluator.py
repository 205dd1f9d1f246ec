"""
Expression Evaluator for gating logic.

Evaluates parsed expression trees against a mapping of terminal index to
truth value.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

from ..errors import MissingTerminal
from .parser import parse
from .tree import Expression, GateNode, Terminal

Truths = Union[Mapping[int, bool], Sequence[bool]]


class ExpressionEvaluator:
    """
    Evaluator for expression trees.

    Truth values may be given as a mapping (sparse indices) or as a sequence
    indexed by position. Indices present but not referenced by the tree are
    ignored. Evaluation never mutates the tree or the truths.
    """

    def evaluate(self, node: Expression, truths: Truths) -> bool:
        """
        Evaluate an expression tree.

        Args:
            node: Root of the tree to evaluate.
            truths: Terminal index to boolean.

        Returns:
            The verdict.

        Raises:
            MissingTerminal: If a referenced index has no boolean in ``truths``.
        """
        if isinstance(node, Terminal):
            return self._lookup(node.index, truths)

        if isinstance(node, GateNode):
            # Every operand is evaluated, no short-circuit
            values = [self.evaluate(operand, truths) for operand in node.operands]
            return node.gate.apply(*values)

        raise TypeError(f"Not an expression node: {node!r}")

    def _lookup(self, index: int, truths: Truths) -> bool:
        value: Any
        if isinstance(truths, Mapping):
            value = truths.get(index)
        elif 0 <= index < len(truths):
            value = truths[index]
        else:
            value = None

        # Only a definite boolean counts, anything else is not guessed at
        if not isinstance(value, bool):
            raise MissingTerminal(index)
        return value


_default_evaluator = ExpressionEvaluator()


def evaluate(node: Expression, truths: Truths) -> bool:
    """Evaluate a parsed tree against ``truths``."""
    return _default_evaluator.evaluate(node, truths)


def eval_logic(expression: str, truths: Truths) -> bool:
    """
    Parse and evaluate in one step.

    Raises:
        LexError, ParseError: If the expression is malformed.
        MissingTerminal: If a referenced index has no truth value.
    """
    return _default_evaluator.evaluate(parse(expression), truths)
