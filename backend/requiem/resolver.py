"""
Requirement resolution.

Runs caller supplied requirement checks concurrently and collects their
verdicts into the terminal truth mapping the evaluator consumes. What a
check does (signature verification, balance lookups, allowlists) is up to
the caller; a requirement is any object with a ``check(querier)`` method,
or a plain callable taking the querier, returning a bool or an awaitable
of one.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Union

logger = logging.getLogger(__name__)


class Requirement(Protocol):
    """A check that resolves to a boolean for a given querier."""

    def check(self, querier: Any) -> Union[bool, Awaitable[bool]]:
        ...


RequirementLike = Union[Requirement, Callable[[Any], Union[bool, Awaitable[bool]]]]


@dataclass
class Resolution:
    """Outcome of resolving a batch of requirements."""

    truths: Dict[int, bool] = field(default_factory=dict)
    errors: Dict[int, BaseException] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.errors

    @property
    def failed(self) -> List[int]:
        return sorted(self.errors)

    def merged(self, other: "Resolution") -> "Resolution":
        """
        Combine with a later resolution, e.g. a retry of the failed indices.

        Entries in ``other`` win over entries in this resolution.
        """
        truths = dict(self.truths)
        errors = dict(self.errors)
        for index, value in other.truths.items():
            truths[index] = value
            errors.pop(index, None)
        for index, error in other.errors.items():
            truths.pop(index, None)
            errors[index] = error
        return Resolution(truths=truths, errors=errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "truths": {str(i): v for i, v in sorted(self.truths.items())},
            "errors": {
                str(i): f"{type(e).__name__}: {e}" for i, e in sorted(self.errors.items())
            },
            "complete": self.complete,
        }


async def _run_check(requirement: RequirementLike, querier: Any) -> bool:
    check = getattr(requirement, "check", None)
    if check is None:
        if not callable(requirement):
            raise TypeError(
                f"Requirement {requirement!r} has no check() method and is not callable"
            )
        check = requirement

    if inspect.iscoroutinefunction(check):
        result = await check(querier)
    else:
        # Blocking checks run in the default executor so they overlap and can time out
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, check, querier)

    if inspect.isawaitable(result):
        result = await result

    if not isinstance(result, bool):
        raise TypeError(
            f"Requirement check returned {type(result).__name__}, expected bool"
        )
    return result


async def resolve_requirements(
    requirements: Sequence[RequirementLike],
    querier: Any = None,
    timeout: Optional[float] = None,
    indices: Optional[Iterable[int]] = None,
) -> Resolution:
    """
    Run requirement checks concurrently.

    Args:
        requirements: Requirements in terminal order, entry i resolves terminal i.
        querier: Shared client handed to every check.
        timeout: Per-check timeout in seconds.
        indices: Only resolve these positions (defaults to all).

    Returns:
        Resolution with a boolean for every check that succeeded and the
        exception for every check that raised, timed out, or returned a
        non-bool. Failed checks never appear in ``truths``. A synchronous
        check that times out keeps running in its worker thread, its result
        is discarded.
    """
    if indices is None:
        selected = list(range(len(requirements)))
    else:
        selected = sorted(set(indices))
        for index in selected:
            if not 0 <= index < len(requirements):
                raise IndexError(
                    f"Requirement index {index} out of range ({len(requirements)} defined)"
                )

    async def run(index: int) -> bool:
        coro = _run_check(requirements[index], querier)
        if timeout is None:
            return await coro
        return await asyncio.wait_for(coro, timeout=timeout)

    results = await asyncio.gather(
        *(run(index) for index in selected), return_exceptions=True
    )

    resolution = Resolution()
    for index, result in zip(selected, results):
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            logger.warning(
                "Requirement %d failed: %s: %s", index, type(result).__name__, result
            )
            resolution.errors[index] = result
        else:
            resolution.truths[index] = result

    logger.debug(
        "Resolved %d requirement(s), %d failed",
        len(selected),
        len(resolution.errors),
    )
    return resolution
