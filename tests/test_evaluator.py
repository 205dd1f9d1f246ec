"""
Tests for the expression evaluator.
"""

import itertools

import pytest

from backend.requiem.errors import MissingTerminal, ParseError
from backend.requiem.logic import (
    ExpressionEvaluator,
    Gate,
    GateNode,
    Terminal,
    eval_logic,
    evaluate,
    parse,
)

TRUTHS = [True, False, True]


class TestTruthTable:
    """Tests for the documented verdicts with truths [True, False, True]."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("2", True),
            ("1", False),
            ("(NOT 0)", False),
            ("(0 AND 1)", False),
            ("((0 AND 1) OR 2)", True),
            ("(0 XOR 1)", True),
            ("(0 XOR 2)", False),
            ("(0 NAND 1)", True),
            ("(0 NAND 2)", False),
            ("(1 NOR 1)", True),
            ("(0 NOR 1)", False),
        ],
    )
    def test_verdicts(self, source, expected):
        """Test each expression against the fixture truths."""
        assert eval_logic(source, TRUTHS) is expected


class TestGateSemantics:
    """Tests for every gate over every input combination."""

    @pytest.mark.parametrize("a,b", list(itertools.product([False, True], repeat=2)))
    def test_binary_gates(self, a, b):
        """Test binary gates against Python's boolean operators."""
        truths = {0: a, 1: b}
        assert eval_logic("(0 AND 1)", truths) is (a and b)
        assert eval_logic("(0 OR 1)", truths) is (a or b)
        assert eval_logic("(0 XOR 1)", truths) is (a != b)
        assert eval_logic("(0 NAND 1)", truths) is (not (a and b))
        assert eval_logic("(0 NOR 1)", truths) is (not (a or b))

    @pytest.mark.parametrize("a", [False, True])
    def test_not(self, a):
        """Test NOT."""
        assert eval_logic("(NOT 0)", {0: a}) is (not a)

    def test_gate_apply_checks_arity(self):
        """Test Gate.apply rejects the wrong operand count."""
        with pytest.raises(ValueError):
            Gate.AND.apply(True)
        with pytest.raises(ValueError):
            Gate.NOT.apply(True, False)


class TestTruthMappings:
    """Tests for the accepted truth mapping shapes."""

    def test_sequence_and_mapping_agree(self):
        """Test list and dict truths give the same verdict."""
        tree = parse("((0 AND 1) OR 2)")
        assert evaluate(tree, TRUTHS) == evaluate(tree, dict(enumerate(TRUTHS)))

    def test_sparse_mapping(self):
        """Test sparse indices in a dict."""
        assert eval_logic("(100 AND 7)", {7: True, 100: True}) is True

    def test_unreferenced_indices_are_ignored(self):
        """Test extra entries do not change the verdict."""
        tree = parse("(0 OR 1)")
        base = {0: False, 1: True}
        extended = {**base, 2: False, 3: True, 99: False}
        assert evaluate(tree, base) == evaluate(tree, extended)

    def test_mapping_not_mutated(self):
        """Test evaluation leaves the truths untouched."""
        truths = {0: True, 1: False}
        snapshot = dict(truths)
        eval_logic("(NOT (0 AND 1))", truths)
        assert truths == snapshot


class TestMissingTerminal:
    """Tests for missing truth values."""

    def test_missing_index(self):
        """Test index 5 missing from a mapping of 0-4."""
        truths = {i: True for i in range(5)}
        with pytest.raises(MissingTerminal) as exc_info:
            eval_logic("(0 AND 5)", truths)
        assert exc_info.value.index == 5
        assert exc_info.value.details == {"index": 5}

    def test_index_past_end_of_sequence(self):
        """Test a sequence that is too short."""
        with pytest.raises(MissingTerminal):
            eval_logic("3", TRUTHS)

    def test_missing_even_when_other_operand_decides(self):
        """Test no short-circuit hides a missing terminal."""
        with pytest.raises(MissingTerminal):
            eval_logic("(1 AND 9)", TRUTHS)
        with pytest.raises(MissingTerminal):
            eval_logic("(0 OR 9)", TRUTHS)

    def test_none_is_not_a_truth(self):
        """Test an unresolved None entry counts as missing."""
        with pytest.raises(MissingTerminal):
            eval_logic("0", {0: None})

    def test_non_bool_is_not_guessed(self):
        """Test truthy non-bool values are rejected."""
        with pytest.raises(MissingTerminal):
            eval_logic("0", {0: "false"})
        with pytest.raises(MissingTerminal):
            eval_logic("0", {0: 1})


class TestPurity:
    """Tests for reuse of parsed trees."""

    def test_idempotent(self):
        """Test evaluating twice gives the same verdict."""
        tree = parse("((0 XOR 1) NOR (NOT 2))")
        assert evaluate(tree, TRUTHS) == evaluate(tree, TRUTHS)

    def test_reuse_against_new_snapshots(self):
        """Test one tree evaluated against successive mappings."""
        tree = parse("((0 AND 1) OR ((0 NAND 2) OR 3))")
        truths = {0: True, 1: True, 2: True, 3: True}
        assert evaluate(tree, truths) is True
        truths = {**truths, 1: False}
        assert evaluate(tree, truths) is True
        truths = {**truths, 3: False}
        assert evaluate(tree, truths) is False
        truths = {**truths, 2: False}
        assert evaluate(tree, truths) is True
        truths = {**truths, 0: False}
        assert evaluate(tree, truths) is True

    def test_hand_built_tree(self):
        """Test trees built without the parser."""
        tree = GateNode.binary(Gate.NAND, Terminal(0), GateNode.unary(Gate.NOT, Terminal(1)))
        assert ExpressionEvaluator().evaluate(tree, TRUTHS) is False

    def test_gate_node_enforces_arity(self):
        """Test GateNode refuses the wrong number of operands."""
        with pytest.raises(ValueError):
            GateNode(Gate.NOT, (Terminal(0), Terminal(1)))
        with pytest.raises(ValueError):
            GateNode(Gate.OR, (Terminal(0),))

    def test_not_a_node(self):
        """Test arbitrary objects are rejected."""
        with pytest.raises(TypeError):
            evaluate("0", TRUTHS)

    def test_parse_errors_propagate(self):
        """Test eval_logic surfaces parse failures."""
        with pytest.raises(ParseError):
            eval_logic("(0 AND)", TRUTHS)
