"""Reconstruct a document from a set of shards.

Merging never raises: missing parents or dependencies are reported through
MergeResult.missing_shards, and duplicate content or headings are surfaced
as informational conflicts.
"""

from __future__ import annotations

import logging
from typing import Final

from .models import MergeConflict, MergeResult, Shard
from .patterns import HEADING_PATTERN

logger = logging.getLogger(__name__)

SHARD_SEPARATOR: Final[str] = "\n\n---\n\n"

# Normalized content shorter than this is not reported as duplicated
MIN_DUPLICATE_CONTENT_LENGTH: Final[int] = 100

# Heading text shown in conflict descriptions
MAX_HEADER_PREVIEW: Final[int] = 50


def detect_merge_conflicts(shards: list[Shard]) -> list[MergeConflict]:
    """Find duplicated content and headings across shards.

    Args:
        shards: Shards being merged.

    Returns:
        Conflicts in first-seen order; empty when none.

    """
    conflicts: list[MergeConflict] = []

    content_groups: dict[str, list[str]] = {}
    for shard in shards:
        normalized = shard.content.strip().casefold()
        content_groups.setdefault(normalized, []).append(shard.id)

    for content, ids in content_groups.items():
        if len(ids) > 1 and len(content) > MIN_DUPLICATE_CONTENT_LENGTH:
            conflicts.append(
                MergeConflict(
                    kind="duplicate-content",
                    shard_ids=ids,
                    description="Duplicate content detected",
                )
            )

    header_groups: dict[str, list[str]] = {}
    for shard in shards:
        for match in HEADING_PATTERN.finditer(shard.content):
            header = match.group(0).strip().casefold()
            ids = header_groups.setdefault(header, [])
            if shard.id not in ids:
                ids.append(shard.id)

    for header, ids in header_groups.items():
        if len(ids) > 1:
            preview = header[:MAX_HEADER_PREVIEW]
            suffix = "..." if len(header) > MAX_HEADER_PREVIEW else ""
            conflicts.append(
                MergeConflict(
                    kind="duplicate-header",
                    shard_ids=ids,
                    description=f'Duplicate header: "{preview}{suffix}"',
                )
            )

    return conflicts


def merge_shards(shards: list[Shard]) -> MergeResult:
    """Merge shards into a single document.

    Shards are ordered by ascending priority (stable) and joined with a
    horizontal-rule separator.

    Args:
        shards: Any subset of a plan's shards.

    Returns:
        MergeResult; success is False when a parent or dependency is not
        in the input set.

    """
    if not shards:
        return MergeResult(content="", success=True)

    ordered = sorted(shards, key=lambda s: s.priority)
    present = {shard.id for shard in shards}

    missing: list[str] = []
    for shard in ordered:
        required = [shard.parent_id] if shard.parent_id else []
        required.extend(shard.dependencies)
        for shard_id in required:
            if shard_id not in present and shard_id not in missing:
                missing.append(shard_id)

    content = SHARD_SEPARATOR.join(shard.content for shard in ordered)
    conflicts = detect_merge_conflicts(ordered)

    if missing:
        logger.warning("Merge is missing %d shard(s): %s", len(missing), ", ".join(missing))
    for conflict in conflicts:
        logger.debug("Merge conflict (%s): %s", conflict.kind, conflict.shard_ids)

    return MergeResult(
        content=content,
        success=not missing,
        missing_shards=missing or None,
        conflicts=conflicts or None,
    )
