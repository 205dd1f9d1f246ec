"""
Logic Analyzer.

Analyzes gating logic for satisfiability, tautologies and unused or
out-of-range requirement references.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .evaluator import ExpressionEvaluator
from .parser import ExpressionParser
from .tree import Expression, GateNode


@dataclass
class TruthRow:
    """One assignment of the referenced terminals and its verdict."""
    assignment: Dict[int, bool]
    result: bool


@dataclass
class AnalysisResult:
    """Result of analyzing one logic expression."""
    expression: str = ""
    terminals: List[int] = field(default_factory=list)
    depth: int = 0
    gate_count: int = 0
    satisfiable: Optional[bool] = None
    tautology: Optional[bool] = None
    unused_requirements: List[int] = field(default_factory=list)
    out_of_range_terminals: List[int] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.out_of_range_terminals

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "expression": self.expression,
            "terminals": self.terminals,
            "depth": self.depth,
            "gate_count": self.gate_count,
            "satisfiable": self.satisfiable,
            "tautology": self.tautology,
            "unused_requirements": self.unused_requirements,
            "out_of_range_terminals": self.out_of_range_terminals,
            "warnings": self.warnings,
            "valid": self.valid,
        }


class LogicAnalyzer:
    """
    Analyzes gating logic.

    Provides:
    - Referenced terminal enumeration
    - Truth table generation
    - Satisfiability and tautology detection
    - Cross-check against the number of requirements
    """

    DEFAULT_MAX_TERMINALS = 12

    def __init__(
        self,
        max_terminals: int = DEFAULT_MAX_TERMINALS,
        parser: Optional[ExpressionParser] = None,
    ):
        """
        Initialize the analyzer.

        Args:
            max_terminals: Largest number of distinct terminals for which a
                truth table is enumerated (2 ** n rows).
            parser: Parser to use for string input.
        """
        self.max_terminals = max_terminals
        self.parser = parser or ExpressionParser()
        self.evaluator = ExpressionEvaluator()

    def analyze(
        self,
        logic: Union[str, Expression],
        requirement_count: Optional[int] = None,
    ) -> AnalysisResult:
        """
        Analyze an expression.

        Args:
            logic: Logic string or an already parsed tree.
            requirement_count: Number of requirements the terminals index into.

        Returns:
            AnalysisResult with analysis details.

        Raises:
            LexError, ParseError: If ``logic`` is a malformed string.
        """
        tree = self.parser.parse(logic) if isinstance(logic, str) else logic
        terminals = sorted(tree.terminals())

        result = AnalysisResult(
            expression=str(tree),
            terminals=terminals,
            depth=tree.depth(),
            gate_count=self._count_gates(tree),
        )

        if len(terminals) <= self.max_terminals:
            verdicts = {row.result for row in self.truth_table(tree)}
            result.satisfiable = True in verdicts
            result.tautology = verdicts == {True}
            if not result.satisfiable:
                result.warnings.append("Logic can never be satisfied")
            elif result.tautology:
                result.warnings.append("Logic is always satisfied")
        else:
            result.warnings.append(
                f"Skipped truth table: {len(terminals)} terminals exceed "
                f"the limit of {self.max_terminals}"
            )

        if requirement_count is not None:
            referenced = set(terminals)
            result.out_of_range_terminals = [
                i for i in terminals if i >= requirement_count
            ]
            result.unused_requirements = [
                i for i in range(requirement_count) if i not in referenced
            ]
            for i in result.out_of_range_terminals:
                result.warnings.append(
                    f"Terminal {i} has no requirement ({requirement_count} defined)"
                )
            for i in result.unused_requirements:
                result.warnings.append(f"Requirement {i} is never referenced")

        return result

    def truth_table(self, tree: Expression) -> Iterator[TruthRow]:
        """
        Enumerate every assignment of the terminals referenced by ``tree``.

        Raises:
            ValueError: If the tree references more than ``max_terminals``.
        """
        terminals = sorted(tree.terminals())
        if len(terminals) > self.max_terminals:
            raise ValueError(
                f"Truth table for {len(terminals)} terminals exceeds the limit "
                f"of {self.max_terminals}"
            )

        for values in itertools.product((False, True), repeat=len(terminals)):
            assignment = dict(zip(terminals, values))
            yield TruthRow(assignment, self.evaluator.evaluate(tree, assignment))

    def equivalent(
        self,
        first: Union[str, Expression],
        second: Union[str, Expression],
    ) -> Tuple[bool, Optional[Dict[int, bool]]]:
        """
        Check whether two expressions agree on every assignment.

        Returns:
            Tuple of (equivalent, counterexample).
        """
        a = self.parser.parse(first) if isinstance(first, str) else first
        b = self.parser.parse(second) if isinstance(second, str) else second

        terminals = sorted(a.terminals() | b.terminals())
        if len(terminals) > self.max_terminals:
            raise ValueError(
                f"Comparison over {len(terminals)} terminals exceeds the limit "
                f"of {self.max_terminals}"
            )

        for values in itertools.product((False, True), repeat=len(terminals)):
            assignment = dict(zip(terminals, values))
            if self.evaluator.evaluate(a, assignment) != self.evaluator.evaluate(b, assignment):
                return False, assignment
        return True, None

    def _count_gates(self, tree: Expression) -> int:
        if isinstance(tree, GateNode):
            return 1 + sum(self._count_gates(operand) for operand in tree.operands)
        return 0
