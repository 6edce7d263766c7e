"""
fuzzloom: property-based and model-based testing with deterministic replay.

Arbitraries (``fuzzloom.gen``) describe input spaces. run_property samples
them, checks a predicate and shrinks the first failure to a small
counterexample; run_model drives random command sequences against a system
and a reference model in lockstep and shrinks the failing sequence. Every
failure report carries the seed needed to replay it exactly.
"""

from fuzzloom import gen
from fuzzloom.arbitraries import Arbitrary, to_arbitrary
from fuzzloom.contracts import (
    ConfigurationError,
    FuzzloomError,
    GenerationError,
    ModelConfig,
    ModelFailedError,
    ModelFailure,
    ModelResult,
    PropertyConfig,
    PropertyFailedError,
    PropertyFailure,
    PropertyResult,
    RunConfig,
    UnsupportedSchemaError,
)
from fuzzloom.core.random_source import RandomSource
from fuzzloom.engine import (
    Command,
    ModelSpec,
    Property,
    assert_model,
    assert_model_async,
    assert_property,
    assert_property_async,
    assert_replay,
    assert_replay_async,
    format_failure,
    format_model_failure,
    format_serialized_failure,
    format_test_name,
    generate_samples,
    replay,
    replay_async,
    replay_model,
    replay_model_async,
    run_model,
    run_model_async,
    run_property,
    run_property_async,
    serialize_failure,
    serialize_model_failure,
)

__version__ = "0.1.0"

__all__ = [
    "Arbitrary",
    "Command",
    "ConfigurationError",
    "FuzzloomError",
    "GenerationError",
    "ModelConfig",
    "ModelFailedError",
    "ModelFailure",
    "ModelResult",
    "ModelSpec",
    "Property",
    "PropertyConfig",
    "PropertyFailedError",
    "PropertyFailure",
    "PropertyResult",
    "RandomSource",
    "RunConfig",
    "UnsupportedSchemaError",
    "__version__",
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
    "gen",
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
    "to_arbitrary",
]
