"""
Logic gates understood by the expression language.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class Gate(str, Enum):
    """Closed set of boolean gates."""

    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    NAND = "NAND"
    NOR = "NOR"
    NOT = "NOT"

    @property
    def arity(self) -> int:
        return 1 if self is Gate.NOT else 2

    @property
    def is_unary(self) -> bool:
        return self.arity == 1

    def apply(self, *operands: bool) -> bool:
        """
        Apply the gate to already evaluated operands.

        Raises:
            ValueError: If the number of operands does not match the arity.
        """
        if len(operands) != self.arity:
            raise ValueError(
                f"{self.value} takes {self.arity} operand(s), got {len(operands)}"
            )

        if self is Gate.NOT:
            return not operands[0]

        left, right = operands
        if self is Gate.AND:
            return left and right
        if self is Gate.OR:
            return left or right
        if self is Gate.XOR:
            return left != right
        if self is Gate.NAND:
            return not (left and right)
        # NOR
        return not (left or right)

    def __str__(self) -> str:
        return self.value


# Keyword table, upper-cased spelling -> gate
KEYWORDS: Dict[str, Gate] = {gate.value: gate for gate in Gate}

BINARY_GATES = frozenset(gate for gate in Gate if not gate.is_unary)


def gate_from_keyword(word: str) -> Optional[Gate]:
    """Look up a gate keyword case-insensitively; None if it is not one."""
    return KEYWORDS.get(word.upper())
