"""
Logic engine for requiem.

Provides tokenizing, parsing, evaluation and analysis of gating expressions.
"""

from .gates import Gate
from .tokenizer import MAX_TERMINAL_ID, Token, TokenKind, tokenize
from .tree import Expression, GateNode, Terminal
from .parser import ExpressionParser, parse
from .evaluator import ExpressionEvaluator, Truths, eval_logic, evaluate
from .analyzer import AnalysisResult, LogicAnalyzer, TruthRow

__all__ = [
    "Gate",
    "MAX_TERMINAL_ID",
    "Token",
    "TokenKind",
    "tokenize",
    "Expression",
    "GateNode",
    "Terminal",
    "ExpressionParser",
    "parse",
    "ExpressionEvaluator",
    "Truths",
    "eval_logic",
    "evaluate",
    "AnalysisResult",
    "LogicAnalyzer",
    "TruthRow",
]
