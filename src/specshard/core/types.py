"""Core type definitions for specshard.

Literal aliases shared by the models, strategies and CLI.
"""

from __future__ import annotations

from typing import Literal, TypeAlias

# Kind of fragment produced by a strategy
ShardType: TypeAlias = Literal["metadata", "section", "requirement", "scenario", "chunk"]

# Decomposition strategy; "auto" defers to the analyzer recommendation
ShardStrategy: TypeAlias = Literal["by-section", "by-requirement", "by-scenario", "auto"]

# Only "depends-on" edges constrain processing order
ReferenceType: TypeAlias = Literal["references", "depends-on"]

ConflictKind: TypeAlias = Literal["duplicate-content", "duplicate-header"]

VALID_STRATEGIES: tuple[str, ...] = ("by-section", "by-requirement", "by-scenario", "auto")


def parse_strategy(value: str | None) -> ShardStrategy:
    """Parse a strategy name from user input.

    Args:
        value: Strategy name, or None for the default.

    Returns:
        Validated strategy name ("auto" when value is empty).

    Raises:
        ValueError: If value is not a known strategy.

    Examples:
        >>> parse_strategy(None)
        'auto'
        >>> parse_strategy("by-section")
        'by-section'

    """
    if not value:
        return "auto"
    normalized = value.strip().lower()
    if normalized not in VALID_STRATEGIES:
        raise ValueError(
            f'Invalid strategy "{value}". Expected one of: {", ".join(VALID_STRATEGIES)}'
        )
    return normalized  # type: ignore[return-value]
