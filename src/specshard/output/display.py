"""Human-readable Rich rendering of analyses, plans and merge results."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from specshard.sharding.models import MergeResult, ShardAnalysis, ShardPlan

# Cross-references listed before the rest are summarized
MAX_LISTED_REFERENCES = 10

_TYPE_STYLES = {
    "metadata": "dim",
    "section": "white",
    "requirement": "yellow",
    "scenario": "blue",
    "chunk": "magenta",
}


def display_analysis(analysis: ShardAnalysis, console: Console) -> None:
    table = Table(title="Spec Analysis", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Complexity", f"{analysis.complexity}/100")
    table.add_row("Total Tokens", f"{analysis.total_tokens:,}")
    table.add_row("Lines", str(analysis.total_lines))
    table.add_row("Sections", str(analysis.section_count))
    table.add_row("Requirements", str(analysis.requirement_count))
    table.add_row("Scenarios", str(analysis.scenario_count))
    table.add_row("Recommended Strategy", analysis.recommended_strategy)

    console.print(table)
    console.print(f"[dim]{analysis.recommendation_reason}[/dim]")


def display_plan(plan: ShardPlan, console: Console) -> None:
    """Print the shard table, processing order and cross-references."""
    table = Table(
        title=f"Shard Plan ({len(plan.shards)} shards, {plan.estimated_tokens:,} tokens)",
        show_header=True,
    )
    table.add_column("Id", style="cyan")
    table.add_column("Type")
    table.add_column("Tokens", justify="right")
    table.add_column("Section", style="dim")
    table.add_column("Dependencies", style="dim")

    for shard in plan.shards:
        style = _TYPE_STYLES.get(shard.type, "white")
        table.add_row(
            shard.id,
            f"[{style}]{shard.type}[/{style}]",
            str(shard.token_count or 0),
            shard.section_name or "",
            ", ".join(shard.dependencies),
        )
    console.print(table)

    if plan.recommended_order != [shard.id for shard in plan.shards]:
        console.print("\n[bold]Recommended Processing Order:[/bold]")
        order = " → ".join(f"[cyan]{shard_id}[/cyan]" for shard_id in plan.recommended_order)
        console.print(f"  {order}")

    if plan.cross_references:
        console.print(f"\n[bold]Cross-References ({len(plan.cross_references)}):[/bold]")
        for ref in plan.cross_references[:MAX_LISTED_REFERENCES]:
            console.print(
                f"  [cyan]{ref.from_id}[/cyan] → [cyan]{ref.to_id}[/cyan] "
                f"([yellow]{ref.type}[/yellow])"
            )
        hidden = len(plan.cross_references) - MAX_LISTED_REFERENCES
        if hidden > 0:
            console.print(f"  [dim]... and {hidden} more[/dim]")


def display_merge(result: MergeResult, console: Console) -> None:
    if result.missing_shards:
        console.print(f"[red]Missing shards:[/red] {', '.join(result.missing_shards)}")
    for conflict in result.conflicts or []:
        console.print(
            f"[yellow]{escape(conflict.description)}[/yellow]"
            f" [dim]({', '.join(conflict.shard_ids)})[/dim]"
        )
