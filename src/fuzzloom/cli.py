# src/fuzzloom/cli.py
"""fuzzloom command line interface.

Entry point for the fuzzloom CLI tool. Targets are ``module:attribute``
references resolved with importlib, e.g. ``fuzzloom check tests.props:sorted_is_idempotent``.
"""

from __future__ import annotations

import asyncio
import importlib
import json
from pathlib import Path
from typing import Any, NoReturn

import typer
import yaml

from fuzzloom import __version__
from fuzzloom.arbitraries.base import Arbitrary
from fuzzloom.contracts.config import ModelConfig, PropertyConfig
from fuzzloom.contracts.errors import ConfigurationError, GenerationError
from fuzzloom.core.canonical import canonical_json
from fuzzloom.core.config_loader import list_presets, load_config
from fuzzloom.engine.model import ModelSpec, run_model, run_model_async
from fuzzloom.engine.property import Property, generate_samples
from fuzzloom.engine.reporting import (
    format_failure,
    format_model_failure,
    serialize_failure,
    serialize_model_failure,
)

__all__ = ["app"]

EXIT_FAILED = 1
EXIT_USAGE = 2

app = typer.Typer(
    name="fuzzloom",
    help="fuzzloom: property-based and model-based testing with deterministic replay.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"fuzzloom version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """fuzzloom: property-based and model-based testing with deterministic replay."""
    from fuzzloom.core.logging import configure_logging

    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(json_output=json_logs, level=log_level)


def _format_error(
    title: str,
    message: str,
    hint: str | None = None,
) -> None:
    """Display a formatted error panel on stderr."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")
    if hint:
        content.append("\n\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    panel = Panel(
        content,
        title=f"[red bold]{title}[/]",
        border_style="red",
        padding=(0, 1),
    )
    console.print(panel)


def _resolve_target(target: str) -> Any:
    """Import ``module:attribute`` (attribute may be dotted).

    Raises:
        typer.Exit: With EXIT_USAGE if the reference cannot be resolved.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        _format_error("Invalid target", f"Expected module:attribute, got {target!r}.", hint="e.g. tests.props:sorted_is_idempotent")
        raise typer.Exit(EXIT_USAGE)

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        _format_error("Invalid target", f"Cannot import module {module_name!r}: {e}")
        raise typer.Exit(EXIT_USAGE) from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            _format_error("Invalid target", f"{module_name!r} has no attribute {attr_path!r}.")
            raise typer.Exit(EXIT_USAGE) from e
    return obj


def _load_run_config[ConfigT: PropertyConfig | ModelConfig](
    config_cls: type[ConfigT],
    preset: str | None,
    config_file: Path | None,
    overrides: dict[str, Any],
) -> ConfigT:
    try:
        return load_config(config_cls, preset=preset, config_file=config_file, cli_overrides=overrides)
    except FileNotFoundError as e:
        _format_error("Configuration not found", str(e), hint="Run 'fuzzloom presets' to list bundled presets.")
        raise typer.Exit(EXIT_USAGE) from e
    except (ConfigurationError, ValueError, yaml.YAMLError) as e:
        _format_error("Invalid configuration", str(e))
        raise typer.Exit(EXIT_USAGE) from e


def _abort_run(target: str, error: GenerationError | ConfigurationError) -> NoReturn:
    """Report a run that stopped before reaching a verdict; never exits with EXIT_FAILED."""
    _format_error(
        "Run aborted",
        f"{target}: {type(error).__name__}: {error}",
        hint="Generators that filter out most values exhaust their attempts; widen the filter or the arbitrary.",
    )
    raise typer.Exit(EXIT_USAGE) from error


@app.command()
def sample(
    target: str = typer.Argument(..., help="module:attribute naming an arbitrary."),
    count: int = typer.Option(10, "--count", "-n", min=0, help="Number of values to generate."),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Seed for the generator stream."),
) -> None:
    """Print generated values, one canonical JSON document per line."""
    arbitrary = _resolve_target(target)
    if not isinstance(arbitrary, Arbitrary) and not callable(arbitrary):
        _format_error("Invalid target", f"{target!r} is a {type(arbitrary).__name__}, not an arbitrary.")
        raise typer.Exit(EXIT_USAGE)

    try:
        for value in generate_samples(arbitrary, count, seed=seed):
            typer.echo(canonical_json(value))
    except (GenerationError, ConfigurationError) as e:
        _format_error("Generation aborted", str(e))
        raise typer.Exit(EXIT_USAGE) from e


@app.command()
def check(
    target: str = typer.Argument(..., help="module:attribute naming a Property or ModelSpec."),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Seed for the run."),
    runs: int | None = typer.Option(None, "--runs", "-r", help="Number of trials."),
    max_shrinks: int | None = typer.Option(None, "--max-shrinks", help="Shrink budget."),
    max_commands: int | None = typer.Option(None, "--max-commands", help="Commands per sequence (models only)."),
    preset: str | None = typer.Option(None, "--preset", "-p", help="Bundled preset to start from."),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="YAML file with run settings."),
    json_output: bool = typer.Option(False, "--json", help="Print the failure as JSON instead of a report."),
) -> None:
    """Run a property or model-based test and report the first failure."""
    subject = _resolve_target(target)
    overrides: dict[str, Any] = {"seed": seed, "runs": runs, "max_shrinks": max_shrinks}

    if isinstance(subject, Property):
        if max_commands is not None:
            _format_error("Invalid option", "--max-commands only applies to model-based targets.")
            raise typer.Exit(EXIT_USAGE)
        property_config = _load_run_config(PropertyConfig, preset, config_file, overrides)
        try:
            if subject.is_async:
                result = asyncio.run(subject.run_async(property_config))
            else:
                result = subject.run(property_config)
        except (GenerationError, ConfigurationError) as e:
            _abort_run(target, e)
        if result.failure is None:
            typer.echo(f"ok: {subject.name} passed {property_config.runs} runs")
            return
        if json_output:
            typer.echo(json.dumps(serialize_failure(result.failure), indent=2))
        else:
            typer.echo(format_failure(result.failure))
        raise typer.Exit(EXIT_FAILED)

    if isinstance(subject, ModelSpec):
        model_config = _load_run_config(ModelConfig, preset, config_file, {**overrides, "max_commands": max_commands})
        try:
            if subject.is_async:
                model_result = asyncio.run(run_model_async(subject, model_config))
            else:
                model_result = run_model(subject, model_config)
        except (GenerationError, ConfigurationError) as e:
            _abort_run(target, e)
        if model_result.failure is None:
            typer.echo(f"ok: {target} passed {model_config.runs} runs")
            return
        if json_output:
            typer.echo(json.dumps(serialize_model_failure(model_result.failure), indent=2))
        else:
            typer.echo(format_model_failure(model_result.failure))
        raise typer.Exit(EXIT_FAILED)

    _format_error(
        "Invalid target",
        f"{target!r} is a {type(subject).__name__}, not a Property or ModelSpec.",
        hint="Wrap a predicate with fuzzloom.Property(name, arbitrary, predicate).",
    )
    raise typer.Exit(EXIT_USAGE)


@app.command()
def presets() -> None:
    """List bundled run presets."""
    for name in list_presets():
        typer.echo(name)
