"""Specification sharding engine.

This subpackage splits a specification into budget-sized shards, detects
cross-references between them, computes a processing order, and merges
shards back into a document.

Example usage:
    >>> from specshard.sharding import ShardEngine, ShardOptions
    >>> engine = ShardEngine(ShardOptions(strategy="by-section"))
    >>> result = engine.shard(spec_text)
    >>> merged = engine.merge(result.plan.shards)

"""

from specshard.core.config import AnalyzerThresholds, ShardOptions

from .analyzer import analyze_spec
from .engine import ShardEngine
from .estimator import estimate_tokens
from .merge import SHARD_SEPARATOR, detect_merge_conflicts, merge_shards
from .models import (
    CrossReference,
    MergeConflict,
    MergeResult,
    Shard,
    ShardAnalysis,
    ShardPlan,
    ShardResult,
)
from .references import find_cross_references
from .security import (
    MAX_SHARD_ID_LENGTH,
    SecurityError,
    validate_shard_id,
    validate_shard_path,
)
from .sorting import calculate_processing_order
from .strategies import (
    shard_auto,
    shard_by_requirement,
    shard_by_scenario,
    shard_by_section,
)

__all__ = [
    # engine
    "ShardEngine",
    "AnalyzerThresholds",
    "ShardOptions",
    # models
    "CrossReference",
    "MergeConflict",
    "MergeResult",
    "Shard",
    "ShardAnalysis",
    "ShardPlan",
    "ShardResult",
    # pipeline steps
    "analyze_spec",
    "calculate_processing_order",
    "estimate_tokens",
    "find_cross_references",
    # strategies
    "shard_auto",
    "shard_by_requirement",
    "shard_by_scenario",
    "shard_by_section",
    # merge
    "SHARD_SEPARATOR",
    "detect_merge_conflicts",
    "merge_shards",
    # security
    "MAX_SHARD_ID_LENGTH",
    "SecurityError",
    "validate_shard_id",
    "validate_shard_path",
]
