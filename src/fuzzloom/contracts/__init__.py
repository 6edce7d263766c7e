# src/fuzzloom/contracts/__init__.py
"""Shared contracts: configuration models, errors and run results.

Leaf module - imports nothing else from fuzzloom.
"""

from fuzzloom.contracts.config import ModelConfig, PropertyConfig, RunConfig
from fuzzloom.contracts.errors import (
    ConfigurationError,
    FuzzloomError,
    GenerationError,
    ModelFailedError,
    PropertyFailedError,
    SerializedFailure,
    SerializedModelFailure,
    SerializedStep,
    UnsupportedSchemaError,
)
from fuzzloom.contracts.results import (
    ExecutedStep,
    ModelFailure,
    ModelResult,
    PropertyFailure,
    PropertyResult,
    SequenceStep,
)

__all__ = [
    "ConfigurationError",
    "ExecutedStep",
    "FuzzloomError",
    "GenerationError",
    "ModelConfig",
    "ModelFailedError",
    "ModelFailure",
    "ModelResult",
    "PropertyConfig",
    "PropertyFailedError",
    "PropertyFailure",
    "PropertyResult",
    "RunConfig",
    "SequenceStep",
    "SerializedFailure",
    "SerializedModelFailure",
    "SerializedStep",
    "UnsupportedSchemaError",
]
