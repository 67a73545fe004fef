"""specshard command-line interface.

Entry point for the ``specshard`` console script.
"""

import typer

from specshard import __version__
from specshard.cli_utils import console
from specshard.commands.merge import merge_command
from specshard.commands.shard import analyze_command, shard_command

app = typer.Typer(
    name="specshard",
    help="Split large specifications into budget-sized shards and merge them back",
    no_args_is_help=True,
)

app.command("shard")(shard_command)
app.command("analyze")(analyze_command)
app.command("merge")(merge_command)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"specshard {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Split large specifications into budget-sized shards."""


if __name__ == "__main__":
    app()
