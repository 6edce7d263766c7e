# src/fuzzloom/adapters/__init__.py
"""Integrations with host tooling.

- pytest_runner: fuzz_test / model_test / fuzz_each for pytest suites.
- pydantic_schema: arbitrary_for() derives arbitraries from pydantic models.

Import the submodule you need; neither is loaded by ``import fuzzloom``.
"""
