"""Pluggable sharding strategies.

Each strategy is a function ``(text, options) -> list[Shard]``:

- by-section: one shard per ``##`` section
- by-requirement: one shard per requirement line
- by-scenario: one shard per Scenario/Example block
- auto: structure-driven delegation with a hard per-shard budget
"""

from .auto import AUTO_PREFIX, check_budget, chunk_by_paragraph, shard_auto
from .base import (
    Strategy,
    assign_priorities,
    enforce_budget,
    merge_tiny_shards,
    prefix_ids,
    split_oversized,
    split_to_budget,
)
from .by_requirement import shard_by_requirement
from .by_scenario import shard_by_scenario
from .by_section import shard_by_section, split_sections

# Structural strategies; "auto" needs the analysis and is dispatched separately
STRATEGIES: dict[str, Strategy] = {
    "by-section": shard_by_section,
    "by-requirement": shard_by_requirement,
    "by-scenario": shard_by_scenario,
}

__all__ = [
    "AUTO_PREFIX",
    "STRATEGIES",
    "Strategy",
    "assign_priorities",
    "check_budget",
    "chunk_by_paragraph",
    "enforce_budget",
    "merge_tiny_shards",
    "prefix_ids",
    "shard_auto",
    "shard_by_requirement",
    "shard_by_scenario",
    "shard_by_section",
    "split_oversized",
    "split_sections",
    "split_to_budget",
]
