"""
Expression tree produced by the parser.

Nodes are immutable and own their children exclusively, so a parsed tree can
be cached and evaluated against any number of truth mappings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Tuple, Union

from .gates import Gate


@dataclass(frozen=True)
class Terminal:
    """Leaf referencing one requirement by its index."""

    index: int

    def terminals(self) -> FrozenSet[int]:
        return frozenset((self.index,))

    def depth(self) -> int:
        return 0

    def size(self) -> int:
        return 1

    def to_dict(self) -> Dict[str, Any]:
        return {"var": self.index}

    def __str__(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class GateNode:
    """
    A gate applied to its operands.

    ``operands`` holds one child for NOT and two (left, right) for every
    binary gate.
    """

    gate: Gate
    operands: Tuple["Expression", ...]

    def __post_init__(self) -> None:
        if len(self.operands) != self.gate.arity:
            raise ValueError(
                f"{self.gate.value} takes {self.gate.arity} operand(s), "
                f"got {len(self.operands)}"
            )

    @classmethod
    def unary(cls, gate: Gate, operand: "Expression") -> "GateNode":
        return cls(gate, (operand,))

    @classmethod
    def binary(cls, gate: Gate, left: "Expression", right: "Expression") -> "GateNode":
        return cls(gate, (left, right))

    @property
    def left(self) -> "Expression":
        return self.operands[0]

    @property
    def right(self) -> "Expression":
        return self.operands[-1]

    def terminals(self) -> FrozenSet[int]:
        """All terminal indices reachable from this node."""
        found: FrozenSet[int] = frozenset()
        for operand in self.operands:
            found = found | operand.terminals()
        return found

    def depth(self) -> int:
        """Number of nested gate applications, 1 for a flat gate."""
        return 1 + max(operand.depth() for operand in self.operands)

    def size(self) -> int:
        return 1 + sum(operand.size() for operand in self.operands)

    def to_dict(self) -> Dict[str, Any]:
        """JSON Logic style representation, e.g. {"and": [{"var": 0}, {"var": 1}]}."""
        return {self.gate.value.lower(): [operand.to_dict() for operand in self.operands]}

    def __str__(self) -> str:
        if self.gate.is_unary:
            return f"({self.gate.value} {self.operands[0]})"
        return f"({self.left} {self.gate.value} {self.right})"


Expression = Union[Terminal, GateNode]
