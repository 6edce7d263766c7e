# src/fuzzloom/engine/reporting.py
"""Failure rendering and serialization.

Reports are deterministic: the same failure always renders to the same
bytes, so two replays of one seed can be compared textually. Values are
rendered through fuzzloom.core.canonical (pretty JSON for counterexamples,
compact canonical JSON for command parameters) with repr() as the fallback.
"""

from __future__ import annotations

import json
from typing import Any

from fuzzloom.contracts.errors import SerializedFailure, SerializedModelFailure, SerializedStep
from fuzzloom.contracts.results import ModelFailure, PropertyFailure
from fuzzloom.core.canonical import compact_repr, normalize_for_json, pretty_repr, truncate

# Longest rendering of a single command parameter or test-name value.
MAX_PARAM_LENGTH = 80


def property_replay_call(seed: int, runs: int) -> str:
    return f"fuzzloom.replay(arbitrary, predicate, seed={seed}, runs={runs})"


def model_replay_call(seed: int, runs: int) -> str:
    return f"fuzzloom.replay_model(spec, seed={seed}, runs={runs})"


def _json_safe(value: Any) -> Any:
    try:
        return normalize_for_json(value)
    except (TypeError, ValueError):
        return repr(value)


def _render_property_report(seed: int, runs: int, iterations: int, shrinks: int, counterexample: str) -> str:
    return "\n".join(
        [
            f"property failed after {iterations}/{runs} runs",
            f"seed: {seed}",
            f"shrinks: {shrinks}",
            f"counterexample: {counterexample}",
            f"replay: {property_replay_call(seed, runs)}",
        ]
    )


def format_failure(failure: PropertyFailure[Any]) -> str:
    """Render a property failure as the multi-line report used by assert_property."""
    return _render_property_report(
        failure.seed,
        failure.runs,
        failure.iterations,
        failure.shrinks,
        pretty_repr(failure.counterexample),
    )


def serialize_failure(failure: PropertyFailure[Any]) -> SerializedFailure:
    """JSON-friendly payload of a property failure (survives ``json.dumps``)."""
    return {
        "seed": failure.seed,
        "runs": failure.runs,
        "iterations": failure.iterations,
        "shrinks": failure.shrinks,
        "counterexample": _json_safe(failure.counterexample),
        "message": format_failure(failure),
        "replay": property_replay_call(failure.seed, failure.runs),
    }


def format_serialized_failure(payload: SerializedFailure) -> str:
    """Re-render a serialized property failure, e.g. one read back from CI output."""
    return _render_property_report(
        payload["seed"],
        payload["runs"],
        payload["iterations"],
        payload["shrinks"],
        json.dumps(payload["counterexample"], indent=2, ensure_ascii=False),
    )


def format_param(param: Any) -> str:
    """Parenthesized compact rendering of a step parameter, or '' for None."""
    if param is None:
        return ""
    return f"({truncate(compact_repr(param), MAX_PARAM_LENGTH)})"


def format_model_failure(failure: ModelFailure) -> str:
    """Render a model failure with its numbered command sequence."""
    lines = [
        f"model-based test failed after {failure.iterations}/{failure.runs} runs",
        f"seed: {failure.seed}",
        f"shrinks: {failure.shrinks}",
        "command sequence:",
    ]
    for index, step in enumerate(failure.sequence):
        marker = "  <-- check failed" if index == failure.failed_step else ""
        lines.append(f"  {index + 1}. {step.name}{format_param(step.param)}{marker}")
    lines.append(f"replay: {model_replay_call(failure.seed, failure.runs)}")
    return "\n".join(lines)


def serialize_model_failure(failure: ModelFailure) -> SerializedModelFailure:
    """JSON-friendly payload of a model failure (survives ``json.dumps``)."""
    sequence: list[SerializedStep] = [{"name": step.name, "param": _json_safe(step.param)} for step in failure.sequence]
    return {
        "seed": failure.seed,
        "runs": failure.runs,
        "iterations": failure.iterations,
        "shrinks": failure.shrinks,
        "sequence": sequence,
        "failed_step": failure.failed_step,
        "message": format_model_failure(failure),
        "replay": model_replay_call(failure.seed, failure.runs),
    }


def format_test_name(template: str, value: Any) -> str:
    """Substitute ``%s`` in ``template`` with the compact rendering of ``value``."""
    return template.replace("%s", truncate(compact_repr(value), MAX_PARAM_LENGTH))
