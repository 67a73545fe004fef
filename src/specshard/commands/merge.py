"""Merge command for specshard CLI.

Reconstructs a spec from shard files written by ``specshard shard -o``.
"""

from pathlib import Path

import typer

from specshard.cli_utils import (
    EXIT_ERROR,
    _error,
    _setup_logging,
    _success,
    _warning,
    console,
    err_console,
)


def merge_command(
    plan: str = typer.Argument(..., help="Path to the *-plan.json summary"),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the merged spec to this file instead of stdout",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Merge shard files back into a single spec.

    Missing shard files are reported and exit with an error, but the
    best-effort merge is still written.

    Examples:
        specshard merge shards/spec-plan.json
        specshard merge shards/spec-plan.json -o merged.md

    """
    from specshard.output.display import display_merge
    from specshard.output.loaders import PlanLoadError, load_shards
    from specshard.sharding.merge import merge_shards

    _setup_logging(verbose=verbose)

    try:
        loaded = load_shards(Path(plan).expanduser())
    except PlanLoadError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    for skipped in loaded.files_skipped:
        _warning(f"Skipped shard file: {skipped}")

    result = merge_shards(loaded.shards)

    if output:
        output_path = Path(output).expanduser()
        try:
            output_path.write_text(result.content, encoding="utf-8")
        except OSError as e:
            _error(f"Failed to write {output_path}: {e}")
            raise typer.Exit(code=EXIT_ERROR) from None
        _success(f"Merged {len(loaded.shards)} shards into {output_path}")
    else:
        typer.echo(result.content)

    display_merge(result, console if output else err_console)

    if not result.success:
        raise typer.Exit(code=EXIT_ERROR)
