"""
Gate engine.

High-level entry point tying parsing, requirement resolution and evaluation
together, with a bounded cache of parsed expression trees.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from .document import GateDocument, load_document
from .errors import MissingTerminal, RequiemError, RequirementFailed
from .logic.evaluator import ExpressionEvaluator, Truths
from .logic.parser import ExpressionParser
from .logic.tree import Expression
from .resolver import RequirementLike, Resolution, resolve_requirements

logger = logging.getLogger(__name__)


class GateEngine:
    """
    Evaluates gating logic.

    Configuration keys:
    - max_depth: Maximum parenthesis nesting accepted by the parser.
    - cache_size: Number of parsed trees kept, 0 disables the cache.
    - timeout: Per-requirement timeout in seconds, None for no limit.
    """

    DEFAULT_CONFIG: Dict[str, Any] = {
        "max_depth": ExpressionParser.DEFAULT_MAX_DEPTH,
        "cache_size": 128,
        "timeout": None,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the engine.

        Args:
            config: Overrides for DEFAULT_CONFIG.
        """
        unknown = set(config or {}) - set(self.DEFAULT_CONFIG)
        if unknown:
            raise ValueError(f"Unknown engine config keys: {sorted(unknown)}")

        self.config = {**self.DEFAULT_CONFIG, **(config or {})}
        self.cache_size = int(self.config["cache_size"])
        self.timeout = self.config["timeout"]
        self.parser = ExpressionParser(max_depth=int(self.config["max_depth"]))
        self.evaluator = ExpressionEvaluator()

        self._cache: "OrderedDict[str, Expression]" = OrderedDict()
        self._lock = threading.Lock()

    def compile(self, logic: str) -> Expression:
        """
        Parse ``logic``, reusing a cached tree when one exists.

        Raises:
            LexError, ParseError: If the logic is malformed. Failures are not cached.
        """
        if self.cache_size <= 0:
            return self.parser.parse(logic)

        with self._lock:
            tree = self._cache.get(logic)
            if tree is not None:
                self._cache.move_to_end(logic)
                logger.debug("Expression cache hit for %r", logic)
                return tree

        tree = self.parser.parse(logic)
        logger.debug("Parsed %r into %s", logic, tree)

        with self._lock:
            self._cache[logic] = tree
            self._cache.move_to_end(logic)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        return tree

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def cached_expressions(self) -> int:
        return len(self._cache)

    def _tree(self, logic: Union[str, Expression]) -> Expression:
        return self.compile(logic) if isinstance(logic, str) else logic

    def evaluate(self, logic: Union[str, Expression], truths: Truths) -> bool:
        """
        Evaluate logic against a completed truth mapping.

        Raises:
            LexError, ParseError: If the logic is malformed.
            MissingTerminal: If a referenced terminal has no truth value.
        """
        return self.evaluator.evaluate(self._tree(logic), truths)

    def check(self, logic: Union[str, Expression], truths: Truths) -> Dict[str, Any]:
        """
        Evaluate logic without raising for malformed logic or missing truths.

        Returns:
            Result dict with success, result and, on failure, the error.
        """
        try:
            result = self.evaluate(logic, truths)
        except RequiemError as e:
            return {
                "success": False,
                "result": None,
                "error": e.message,
                "error_type": type(e).__name__,
                "details": e.details,
            }

        return {
            "success": True,
            "result": result,
            "error": None,
            "error_type": None,
            "details": {},
        }

    async def resolve(
        self,
        logic: Union[str, Expression],
        requirements: Sequence[RequirementLike],
        querier: Any = None,
    ) -> Resolution:
        """Resolve only the requirements the logic actually references."""
        tree = self._tree(logic)
        indices = [i for i in sorted(tree.terminals()) if i < len(requirements)]
        return await resolve_requirements(
            requirements, querier, timeout=self.timeout, indices=indices
        )

    def decide(self, logic: Union[str, Expression], resolution: Resolution) -> bool:
        """
        Evaluate logic against a resolution.

        Raises:
            RequirementFailed: If a referenced requirement failed to resolve.
            MissingTerminal: If a referenced terminal was never resolved.
        """
        try:
            return self.evaluator.evaluate(self._tree(logic), resolution.truths)
        except MissingTerminal as e:
            error = resolution.errors.get(e.index)
            if error is None:
                raise
            raise RequirementFailed(e.index, error) from error

    async def evaluate_requirements(
        self,
        logic: Union[str, Expression],
        requirements: Sequence[RequirementLike],
        querier: Any = None,
    ) -> bool:
        """
        Resolve requirements concurrently, then evaluate the logic.

        Args:
            logic: Logic string or parsed tree.
            requirements: Requirement objects in terminal order.
            querier: Shared client handed to every check.

        Returns:
            The verdict.
        """
        tree = self._tree(logic)
        resolution = await self.resolve(tree, requirements, querier)
        return self.decide(tree, resolution)

    async def retry(
        self,
        logic: Union[str, Expression],
        requirements: Sequence[RequirementLike],
        querier: Any,
        resolution: Resolution,
    ) -> Tuple[bool, Resolution]:
        """
        Re-run only the failed requirements and evaluate again.

        Returns:
            Tuple of (verdict, merged resolution).
        """
        tree = self._tree(logic)
        if resolution.failed:
            logger.info("Retrying requirement(s) %s", resolution.failed)
            retried = await resolve_requirements(
                requirements, querier, timeout=self.timeout, indices=resolution.failed
            )
            resolution = resolution.merged(retried)
        return self.decide(tree, resolution), resolution

    async def evaluate_document(
        self,
        document: Union[GateDocument, str, Mapping[str, Any]],
        querier: Any = None,
        factory: Optional[Callable[[Any], RequirementLike]] = None,
    ) -> bool:
        """
        Evaluate a gate document.

        Args:
            document: Loaded document, or YAML/JSON text, or a decoded mapping.
            querier: Shared client handed to every check.
            factory: Builds a requirement object from each definition; when
                omitted the definitions must already be requirement objects.
        """
        if not isinstance(document, GateDocument):
            document = load_document(document, parser=self.parser)

        if factory is None:
            requirements = list(document.requirements)
        else:
            requirements = [factory(definition) for definition in document.requirements]

        return await self.evaluate_requirements(
            self.compile(document.logic), requirements, querier
        )
