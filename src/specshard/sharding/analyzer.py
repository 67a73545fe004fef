"""Structural analysis of specifications.

Profiles raw text by counting sections, requirements and scenarios,
derives a 0-100 complexity score, and recommends a sharding strategy.
Counts come from line-level regex matching only.
"""

from __future__ import annotations

import logging
import math

from specshard.core.config import AnalyzerThresholds
from specshard.core.types import ShardStrategy

from .estimator import estimate_tokens
from .models import ShardAnalysis
from .patterns import (
    SECTION_HEADING_PATTERN,
    fence_mask,
    is_requirement_line,
    is_scenario_start,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS = AnalyzerThresholds()


def _complexity(
    section_count: int,
    requirement_count: int,
    scenario_count: int,
    total_lines: int,
    thresholds: AnalyzerThresholds,
) -> int:
    score = 0.0
    score += min(section_count * thresholds.section_weight, thresholds.section_cap)
    score += min(requirement_count * thresholds.requirement_weight, thresholds.requirement_cap)
    score += min(scenario_count * thresholds.scenario_weight, thresholds.scenario_cap)
    score += min(total_lines / thresholds.lines_divisor, thresholds.lines_cap)
    # Half-up rounding, not banker's rounding
    return max(0, min(math.floor(score + 0.5), 100))


def _recommend(
    section_count: int,
    requirement_count: int,
    scenario_count: int,
    complexity: int,
    total_tokens: int,
    thresholds: AnalyzerThresholds,
) -> tuple[ShardStrategy, str]:
    strategy: ShardStrategy
    if scenario_count > thresholds.scenario_dominance and requirement_count < scenario_count:
        strategy = "by-scenario"
        reason = f"High scenario count ({scenario_count}) suggests scenario-based sharding"
    elif requirement_count > thresholds.requirement_heavy:
        strategy = "by-requirement"
        reason = (
            f"High requirement count ({requirement_count}) suggests requirement-based sharding"
        )
    elif section_count >= thresholds.section_structure:
        strategy = "by-section"
        reason = (
            f"Clear section structure ({section_count} sections) suggests section-based sharding"
        )
    else:
        strategy = "auto"
        reason = "Mixed content structure suggests automatic sharding"

    if complexity > thresholds.auto_complexity and total_tokens > thresholds.auto_token_count:
        strategy = "auto"
        reason = (
            f"High complexity ({complexity}) and token count ({total_tokens}) "
            "suggest auto sharding"
        )

    return strategy, reason


def analyze_spec(
    text: str,
    thresholds: AnalyzerThresholds | None = None,
) -> ShardAnalysis:
    """Profile a specification and recommend a sharding strategy.

    Never raises: blank input yields an all-zero profile.

    Args:
        text: Raw specification text.
        thresholds: Heuristic thresholds (defaults when None).

    Returns:
        Immutable ShardAnalysis.

    """
    thresholds = thresholds or DEFAULT_THRESHOLDS

    if not text or not text.strip():
        return ShardAnalysis(
            recommended_strategy="auto",
            recommendation_reason="Empty document",
        )

    lines = text.splitlines()
    code = fence_mask(lines)

    section_count = 0
    requirement_count = 0
    scenario_count = 0

    for line, is_code in zip(lines, code, strict=True):
        if is_code:
            continue
        if SECTION_HEADING_PATTERN.match(line):
            section_count += 1
        if is_requirement_line(line):
            requirement_count += 1
        if is_scenario_start(line):
            scenario_count += 1

    total_lines = len(lines)
    total_tokens = estimate_tokens(text)
    complexity = _complexity(
        section_count, requirement_count, scenario_count, total_lines, thresholds
    )
    strategy, reason = _recommend(
        section_count, requirement_count, scenario_count, complexity, total_tokens, thresholds
    )

    logger.debug(
        "Analyzed spec: %d sections, %d requirements, %d scenarios, %d lines, "
        "%d tokens, complexity %d -> %s",
        section_count,
        requirement_count,
        scenario_count,
        total_lines,
        total_tokens,
        complexity,
        strategy,
    )

    return ShardAnalysis(
        section_count=section_count,
        requirement_count=requirement_count,
        scenario_count=scenario_count,
        total_lines=total_lines,
        total_tokens=total_tokens,
        complexity=complexity,
        recommended_strategy=strategy,
        recommendation_reason=reason,
    )
