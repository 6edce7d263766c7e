# src/fuzzloom/engine/__init__.py
"""Engine: property and model runners, shrinkers and failure reporting."""

from fuzzloom.engine.model import (
    Command,
    ModelSpec,
    assert_model,
    assert_model_async,
    replay_model,
    replay_model_async,
    run_model,
    run_model_async,
)
from fuzzloom.engine.property import (
    Property,
    assert_property,
    assert_property_async,
    assert_replay,
    assert_replay_async,
    generate_samples,
    replay,
    replay_async,
    run_property,
    run_property_async,
)
from fuzzloom.engine.reporting import (
    format_failure,
    format_model_failure,
    format_serialized_failure,
    format_test_name,
    serialize_failure,
    serialize_model_failure,
)

__all__ = [
    "Command",
    "ModelSpec",
    "Property",
    "assert_model",
    "assert_model_async",
    "assert_property",
    "assert_property_async",
    "assert_replay",
    "assert_replay_async",
    "format_failure",
    "format_model_failure",
    "format_serialized_failure",
    "format_test_name",
    "generate_samples",
    "replay",
    "replay_async",
    "replay_model",
    "replay_model_async",
    "run_model",
    "run_model_async",
    "run_property",
    "run_property_async",
    "serialize_failure",
    "serialize_model_failure",
]
