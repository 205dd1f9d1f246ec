"""
Requiem: boolean gating over externally resolved requirements.

This package parses compact logic expressions such as
``"((0 AND 1) OR (NOT 2))"`` whose terminals index into a list of
requirements, and evaluates them against the requirements' verdicts.
"""

from .errors import (
    RequiemError,
    LogicSyntaxError,
    LexError,
    UnexpectedCharacter,
    InvalidNumber,
    ParseError,
    EmptyInput,
    UnbalancedParentheses,
    UnexpectedToken,
    ArityMismatch,
    TrailingInput,
    TooDeep,
    EvalError,
    MissingTerminal,
    DocumentError,
    RequirementFailed,
)
from .logic import (
    Gate,
    Expression,
    GateNode,
    Terminal,
    ExpressionParser,
    ExpressionEvaluator,
    LogicAnalyzer,
    AnalysisResult,
    parse,
    evaluate,
    eval_logic,
    tokenize,
)
from .document import GateDocument, load_document
from .resolver import Requirement, Resolution, resolve_requirements
from .engine import GateEngine

__version__ = "1.0.0"
__all__ = [
    # Errors
    "RequiemError",
    "LogicSyntaxError",
    "LexError",
    "UnexpectedCharacter",
    "InvalidNumber",
    "ParseError",
    "EmptyInput",
    "UnbalancedParentheses",
    "UnexpectedToken",
    "ArityMismatch",
    "TrailingInput",
    "TooDeep",
    "EvalError",
    "MissingTerminal",
    "DocumentError",
    "RequirementFailed",
    # Logic
    "Gate",
    "Expression",
    "GateNode",
    "Terminal",
    "ExpressionParser",
    "ExpressionEvaluator",
    "LogicAnalyzer",
    "AnalysisResult",
    "parse",
    "evaluate",
    "eval_logic",
    "tokenize",
    # Documents and resolution
    "GateDocument",
    "load_document",
    "Requirement",
    "Resolution",
    "resolve_requirements",
    "GateEngine",
]
