"""ShardEngine: analyze, shard and merge specifications.

The engine ties the pipeline together:

    text -> analyze_spec -> strategy -> estimate_tokens per shard
         -> find_cross_references -> calculate_processing_order -> ShardPlan

Everything is synchronous and pure; an engine instance only holds immutable
options and can be shared freely.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from specshard.core.config import AnalyzerThresholds, ShardOptions
from specshard.core.exceptions import SpecShardError

from .analyzer import analyze_spec
from .estimator import estimate_tokens
from .merge import merge_shards
from .models import CrossReference, MergeResult, Shard, ShardAnalysis, ShardPlan, ShardResult
from .references import find_cross_references
from .sorting import calculate_processing_order
from .strategies import STRATEGIES, check_budget, enforce_budget, shard_auto
from .strategies.base import assign_priorities

logger = logging.getLogger(__name__)


class ShardEngine:
    """Engine for analyzing and sharding specifications.

    Attributes:
        options: Default options for shard().
        thresholds: Analyzer heuristics.

    Example:
        >>> engine = ShardEngine(ShardOptions(max_tokens_per_shard=500))
        >>> result = engine.shard(spec_text)
        >>> if result.success:
        ...     print(result.plan.recommended_order)

    """

    def __init__(
        self,
        options: ShardOptions | None = None,
        thresholds: AnalyzerThresholds | None = None,
    ) -> None:
        """Initialize ShardEngine.

        Args:
            options: Default sharding options.
            thresholds: Analyzer thresholds (defaults when None).

        """
        self.options = options or ShardOptions()
        self.thresholds = thresholds or AnalyzerThresholds()

    def analyze(self, text: str) -> ShardAnalysis:
        """Profile a specification and recommend a strategy."""
        return analyze_spec(text, self.thresholds)

    def estimate_tokens(self, text: str) -> int:
        """Estimate the token cost of text."""
        return estimate_tokens(text)

    def find_dependencies(self, shards: list[Shard]) -> list[CrossReference]:
        """Detect cross-references between shards."""
        return find_cross_references(shards)

    def calculate_processing_order(
        self,
        shards: list[Shard],
        references: list[CrossReference],
    ) -> list[str]:
        """Order shards by dependencies and priority."""
        return calculate_processing_order(shards, references)

    def merge(self, shards: list[Shard]) -> MergeResult:
        """Reconstruct a document from shards."""
        return merge_shards(shards)

    def _resolve_options(
        self,
        options: ShardOptions | None,
        overrides: dict[str, Any],
    ) -> ShardOptions:
        base = options or self.options
        if not overrides:
            return base
        # pydantic's ValidationError is a ValueError, handled by shard()
        return ShardOptions.model_validate({**base.model_dump(), **overrides})

    def _run_strategy(
        self,
        text: str,
        options: ShardOptions,
        analysis: ShardAnalysis,
    ) -> list[Shard]:
        requested = options.strategy
        strategy = analysis.recommended_strategy if requested == "auto" else requested

        if strategy == "auto":
            return shard_auto(text, options, analysis, self.thresholds)

        shards = STRATEGIES[strategy](text, options)
        if requested == "auto":
            # The budget guarantee applies to every auto request
            shards = assign_priorities(enforce_budget(shards, options.max_tokens_per_shard))
            check_budget(shards, options.max_tokens_per_shard)
        return shards

    def shard(
        self,
        text: str,
        options: ShardOptions | None = None,
        **overrides: Any,
    ) -> ShardResult:
        """Break a specification into shards.

        Failures never propagate: the result carries success=False, the
        error message and the analysis.

        Args:
            text: Specification text.
            options: Options for this call (engine defaults when None).
            **overrides: Individual ShardOptions fields to override.

        Returns:
            ShardResult with the generated plan.

        """
        start = time.perf_counter()
        analysis = self.analyze(text)

        try:
            opts = self._resolve_options(options, overrides)
            shards = self._run_strategy(text, opts, analysis)
            shards = [
                shard.model_copy(update={"token_count": estimate_tokens(shard.content)})
                for shard in shards
            ]
            cross_references = find_cross_references(shards)
            order = calculate_processing_order(shards, cross_references)
            plan = ShardPlan(
                shards=shards,
                estimated_tokens=sum(shard.token_count or 0 for shard in shards),
                recommended_order=order,
                cross_references=cross_references,
                analysis=analysis,
            )
        except (SpecShardError, ValueError) as e:
            logger.warning("Sharding failed: %s", e)
            return _failure(analysis, str(e), start)
        except Exception as e:
            logger.exception("Unexpected error while sharding")
            return _failure(analysis, f"Unexpected error: {e}", start)

        logger.info(
            "Sharded spec into %d shards (%d tokens, strategy %s)",
            len(plan.shards),
            plan.estimated_tokens,
            opts.strategy,
        )
        return ShardResult(plan=plan, success=True, duration_ms=_elapsed_ms(start))


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _failure(analysis: ShardAnalysis, error: str, start: float) -> ShardResult:
    return ShardResult(
        plan=ShardPlan(
            shards=[],
            estimated_tokens=0,
            recommended_order=[],
            cross_references=[],
            analysis=analysis,
        ),
        success=False,
        error=error,
        duration_ms=_elapsed_ms(start),
    )
