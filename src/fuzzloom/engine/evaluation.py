# src/fuzzloom/engine/evaluation.py
"""Turning user callbacks into verdicts.

A predicate (or command check) fails by returning ``False`` or by raising
any ``Exception``; every other outcome, including ``None``, passes. The
raised exception is kept so reports can chain it as the cause.

Sync entry points refuse awaitables: an ``async def`` predicate handed to
``run_property`` would otherwise "pass" every trial without ever running.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fuzzloom.contracts.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of one predicate evaluation."""

    failed: bool
    error: BaseException | None = None


PASSED = Verdict(failed=False)


def reject_awaitable(result: Any, hint: str) -> Any:
    """Return ``result`` unchanged, or raise if a sync caller got an awaitable.

    Raises:
        ConfigurationError: If ``result`` is awaitable.
    """
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise ConfigurationError(f"Callback returned an awaitable in a synchronous run; use {hint}")
    return result


async def resolve(result: Any) -> Any:
    """Await ``result`` if it is awaitable."""
    if inspect.isawaitable(result):
        return await result
    return result


def evaluate(predicate: Callable[[Any], Any], value: Any) -> Verdict:
    try:
        result = predicate(value)
    except Exception as exc:
        return Verdict(failed=True, error=exc)
    reject_awaitable(result, "run_property_async")
    return Verdict(failed=True) if result is False else PASSED


async def evaluate_async(predicate: Callable[[Any], Any], value: Any) -> Verdict:
    try:
        result = await resolve(predicate(value))
    except Exception as exc:
        return Verdict(failed=True, error=exc)
    return Verdict(failed=True) if result is False else PASSED
