"""Shard and analyze commands for specshard CLI.

Analyze a specification and split it into budget-sized shards.
"""

import json
from pathlib import Path

import typer

from specshard.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    _error,
    _read_spec_file,
    _setup_logging,
    _success,
    console,
)
from specshard.core.config import load_config
from specshard.core.exceptions import ConfigError
from specshard.core.types import VALID_STRATEGIES, parse_strategy


def shard_command(
    spec: str = typer.Argument(..., help="Path to the spec file"),
    strategy: str | None = typer.Option(
        None,
        "--strategy",
        "-s",
        help=f"Sharding strategy ({'|'.join(VALID_STRATEGIES)})",
    ),
    max_tokens: int | None = typer.Option(
        None,
        "--max-tokens",
        "-m",
        help="Maximum estimated tokens per shard (default 2000)",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory for shard files",
    ),
    preserve_context: bool | None = typer.Option(
        None,
        "--preserve-context/--no-preserve-context",
        help="Link content shards to the metadata shard",
    ),
    include_metadata: bool | None = typer.Option(
        None,
        "--include-metadata/--no-include-metadata",
        help="Prefix written shard files with a metadata header",
    ),
    as_json: bool = typer.Option(False, "--json", help="Output the plan as JSON"),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to specshard.yaml (default: ./specshard.yaml if present)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Analyze a spec and split it into AI-consumable shards.

    Command-line options override values from specshard.yaml.

    Examples:
        specshard shard docs/spec.md                      # Auto strategy
        specshard shard docs/spec.md -s by-section -m 800
        specshard shard docs/spec.md -o shards/           # Write shard files

    """
    from specshard.output.display import display_analysis, display_plan
    from specshard.output.writer import write_shards
    from specshard.sharding.engine import ShardEngine

    _setup_logging(verbose=verbose, quiet=as_json)

    try:
        loaded = load_config(
            config_path=Path(config) if config else None,
            project_path=Path.cwd(),
        )
    except ConfigError as e:
        _error(f"Config error: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    overrides: dict[str, object] = {}
    try:
        if strategy is not None:
            overrides["strategy"] = parse_strategy(strategy)
    except ValueError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None
    if max_tokens is not None:
        if max_tokens <= 0:
            _error(f'Invalid --max-tokens value "{max_tokens}". It must be a positive integer.')
            raise typer.Exit(code=EXIT_ERROR)
        overrides["max_tokens_per_shard"] = max_tokens
    if preserve_context is not None:
        overrides["preserve_context"] = preserve_context
    if include_metadata is not None:
        overrides["include_metadata"] = include_metadata

    options = loaded.sharding.model_copy(update=overrides)
    spec_path, text = _read_spec_file(spec)

    engine = ShardEngine(options, loaded.thresholds)
    result = engine.shard(text)

    if not result.success:
        _error(f"Error sharding spec: {result.error}")
        raise typer.Exit(code=EXIT_ERROR)

    plan = result.plan

    if as_json:
        payload = {
            "success": True,
            "duration_ms": result.duration_ms,
            "plan": plan.model_dump(mode="json", exclude={"shards": {"__all__": {"content"}}}),
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    display_analysis(plan.analysis, console)
    console.print()
    display_plan(plan, console)

    if output:
        try:
            written = write_shards(
                plan,
                Path(output).expanduser(),
                spec_path,
                include_metadata=options.include_metadata,
            )
        except OSError as e:
            _error(f"Failed to write shards: {e}")
            raise typer.Exit(code=EXIT_ERROR) from None
        console.print()
        for path in written:
            _success(path.name)

    console.print(f"\n[dim]Completed in {result.duration_ms}ms[/dim]")


def analyze_command(
    spec: str = typer.Argument(..., help="Path to the spec file"),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to specshard.yaml (default: ./specshard.yaml if present)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Profile a spec and recommend a sharding strategy."""
    from specshard.output.display import display_analysis
    from specshard.sharding.analyzer import analyze_spec

    _setup_logging(verbose=verbose)

    try:
        loaded = load_config(
            config_path=Path(config) if config else None,
            project_path=Path.cwd(),
        )
    except ConfigError as e:
        _error(f"Config error: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    _, text = _read_spec_file(spec)
    display_analysis(analyze_spec(text, loaded.thresholds), console)
