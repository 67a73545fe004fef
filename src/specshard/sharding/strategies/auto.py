"""Automatic sharding with a hard per-shard budget.

Picks a structural strategy from the document profile, falls back to
fixed-size paragraph chunking, size-splits anything still over budget and
combines runs of tiny shards.
Every id produced here carries the ``auto-`` prefix.
"""

from __future__ import annotations

import logging
from typing import Final

from specshard.core.config import AnalyzerThresholds, ShardOptions
from specshard.core.exceptions import ShardingError

from ..analyzer import DEFAULT_THRESHOLDS, analyze_spec
from ..estimator import estimate_tokens
from ..models import Shard, ShardAnalysis
from .base import (
    assign_priorities,
    document_shard,
    enforce_budget,
    merge_tiny_shards,
    prefix_ids,
    require_content,
    split_to_budget,
)
from .by_requirement import shard_by_requirement
from .by_scenario import shard_by_scenario
from .by_section import shard_by_section

logger = logging.getLogger(__name__)

AUTO_PREFIX: Final[str] = "auto-"


def chunk_by_paragraph(text: str, options: ShardOptions) -> list[Shard]:
    """Fixed-size chunking along paragraph boundaries.

    Args:
        text: Text to chunk.
        options: Sharding options (max_tokens_per_shard is the chunk budget).

    Returns:
        Chunk shards in document order.

    """
    require_content(text)
    pieces = split_to_budget(text, options.max_tokens_per_shard)
    shards = [
        Shard(id=f"chunk-{n}", type="chunk", content=piece)
        for n, piece in enumerate(pieces, start=1)
    ]
    return assign_priorities(shards)


def _delegate(
    text: str,
    options: ShardOptions,
    analysis: ShardAnalysis,
    thresholds: AnalyzerThresholds,
) -> list[Shard]:
    if (
        analysis.scenario_count > thresholds.scenario_dominance
        and analysis.scenario_count > analysis.requirement_count
    ):
        logger.debug("Auto: delegating to scenario strategy")
        return shard_by_scenario(text, options)
    if analysis.requirement_count > thresholds.requirement_heavy:
        logger.debug("Auto: delegating to requirement strategy")
        return shard_by_requirement(text, options)
    if analysis.section_count > 0:
        logger.debug("Auto: delegating to section strategy")
        return shard_by_section(text, options)
    logger.debug("Auto: no usable structure, chunking by paragraph")
    return chunk_by_paragraph(text, options)


def check_budget(shards: list[Shard], budget: int) -> None:
    """Verify that no shard exceeds the budget.

    Raises:
        ShardingError: If a shard is over budget.

    """
    for shard in shards:
        cost = estimate_tokens(shard.content)
        if cost > budget:
            raise ShardingError(
                f"Shard {shard.id} estimated at {cost} tokens exceeds budget of {budget}"
            )


def shard_auto(
    text: str,
    options: ShardOptions,
    analysis: ShardAnalysis | None = None,
    thresholds: AnalyzerThresholds | None = None,
) -> list[Shard]:
    """Shard automatically, guaranteeing every shard fits the budget.

    Args:
        text: Specification text.
        options: Sharding options.
        analysis: Precomputed analysis (computed when None).
        thresholds: Heuristic thresholds used for delegation.

    Returns:
        Shards with ``auto-`` ids, each within max_tokens_per_shard.

    Raises:
        EmptyDocumentError: If text is blank.
        ShardingError: If the budget postcondition cannot be met.

    """
    stripped = require_content(text)
    thresholds = thresholds or DEFAULT_THRESHOLDS
    budget = options.max_tokens_per_shard

    if estimate_tokens(stripped) <= budget:
        logger.debug("Auto: document fits budget of %d, single shard", budget)
        shards = [document_shard(stripped)]
    else:
        analysis = analysis or analyze_spec(text, thresholds)
        shards = _delegate(text, options, analysis, thresholds)

    shards = enforce_budget(prefix_ids(shards, AUTO_PREFIX), budget)
    shards = merge_tiny_shards(shards, budget)
    check_budget(shards, budget)
    return assign_priorities(shards)
