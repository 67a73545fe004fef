"""Shared helpers for sharding strategies.

Strategies are plain functions ``(text, options) -> list[Shard]``. They do
not estimate costs; the engine annotates shards afterwards. The helpers in
this module are pure: they always return new shard lists.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Protocol

from specshard.core.config import ShardOptions
from specshard.core.exceptions import EmptyDocumentError

from ..estimator import estimate_tokens
from ..merge import SHARD_SEPARATOR
from ..models import Shard

logger = logging.getLogger(__name__)

METADATA_ID = "metadata"
DOCUMENT_ID = "document"

# Blank-line paragraph separators, captured so no text is lost on split
_PARAGRAPH_SPLIT = re.compile(r"(\n[ \t]*\n)")


class Strategy(Protocol):
    """Callable contract shared by all strategies."""

    def __call__(self, text: str, options: ShardOptions) -> list[Shard]: ...


def require_content(text: str) -> str:
    """Return text stripped, rejecting blank documents.

    Raises:
        EmptyDocumentError: If text has no non-whitespace content.

    """
    stripped = text.strip() if text else ""
    if not stripped:
        raise EmptyDocumentError("Cannot shard an empty document")
    return stripped


def unique_id(base: str, used: set[str]) -> str:
    """Return base, or base with a numeric suffix, not yet in used.

    The returned id is added to used.
    """
    candidate = base
    n = 2
    while candidate in used:
        candidate = f"{base}-{n}"
        n += 1
    used.add(candidate)
    return candidate


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(lines).strip()


def document_shard(text: str, shard_id: str = DOCUMENT_ID) -> Shard:
    """Single shard holding the whole document."""
    return Shard(id=shard_id, type="section", content=text.strip())


def assign_priorities(shards: list[Shard]) -> list[Shard]:
    """Number shards by list position (0 = first)."""
    return [
        shard if shard.priority == index else shard.model_copy(update={"priority": index})
        for index, shard in enumerate(shards)
    ]


def _fits(text: str, budget: int) -> bool:
    return estimate_tokens(text.strip()) <= budget


def _split_chars(text: str, budget: int) -> list[str]:
    pieces: list[str] = []
    rest = text
    while rest:
        if _fits(rest, budget):
            pieces.append(rest)
            break
        # Largest prefix that fits; a single character always does
        lo, hi = 1, len(rest)
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if _fits(rest[:mid], budget):
                lo = mid
            else:
                hi = mid - 1
        cut = rest.rfind(" ", 0, lo)
        if cut > lo // 2:
            lo = cut + 1
        pieces.append(rest[:lo])
        rest = rest[lo:]
    return pieces


def _units(text: str, level: int) -> list[str]:
    if level == 0:
        parts = _PARAGRAPH_SPLIT.split(text)
        # Odd indexes are separators; keep each with its preceding paragraph
        units = [
            parts[i] + (parts[i + 1] if i + 1 < len(parts) else "")
            for i in range(0, len(parts), 2)
        ]
        return [u for u in units if u]
    return text.splitlines(keepends=True)


def _pack(text: str, budget: int, level: int) -> list[str]:
    if _fits(text, budget):
        return [text]
    if level >= 2:
        return _split_chars(text, budget)

    units = _units(text, level)
    if len(units) <= 1:
        return _pack(text, budget, level + 1)

    chunks: list[str] = []
    current = ""
    for unit in units:
        if _fits(current + unit, budget):
            current += unit
            continue
        if current:
            chunks.append(current)
            current = ""
        if _fits(unit, budget):
            current = unit
        else:
            chunks.extend(_pack(unit, budget, level + 1))
    if current:
        chunks.append(current)
    return chunks


def split_to_budget(text: str, budget: int) -> list[str]:
    """Split text into pieces whose estimated cost fits the budget.

    Paragraphs are packed greedily; a paragraph that alone exceeds the
    budget is split by lines, and a line that alone exceeds it by
    characters (at a space where possible).

    Args:
        text: Text to split.
        budget: Maximum estimated tokens per piece (positive).

    Returns:
        Non-empty, stripped pieces in document order.

    """
    if budget <= 0:
        raise ValueError(f"budget must be positive, got {budget}")
    pieces = [p.strip() for p in _pack(text, budget, 0)]
    return [p for p in pieces if p]


def split_oversized(shard: Shard, budget: int, used: set[str] | None = None) -> list[Shard]:
    """Split a shard over budget into numbered chunk shards.

    The first part inherits the shard's parent; later parts name the first
    part as their parent, so parts are processed in order.

    Args:
        shard: Shard to check.
        budget: Maximum estimated tokens per shard.
        used: Ids already taken in the plan. Part ids are reserved in it
            and suffixed when they collide.

    Returns:
        [shard] when it fits, otherwise the chunk parts.

    """
    if _fits(shard.content, budget):
        return [shard]

    pieces = split_to_budget(shard.content, budget)
    if len(pieces) == 1:
        return [shard.model_copy(update={"content": pieces[0]})]

    if used is None:
        used = {shard.id}
    part_ids = [unique_id(f"{shard.id}-part-{n}", used) for n in range(1, len(pieces) + 1)]
    head_id = part_ids[0]
    parts = [
        Shard(
            id=part_id,
            type="chunk",
            content=piece,
            priority=shard.priority,
            section_name=shard.section_name,
            parent_id=shard.parent_id if part_id == head_id else head_id,
            dependencies=list(shard.dependencies),
        )
        for part_id, piece in zip(part_ids, pieces, strict=True)
    ]
    logger.debug("Split shard %s into %d chunks", shard.id, len(parts))
    return parts


def _redirect(shards: list[Shard], renamed: dict[str, str]) -> list[Shard]:
    """Point dependencies and parent links at renamed shards."""
    if not renamed:
        return shards

    result: list[Shard] = []
    for shard in shards:
        dependencies: list[str] = []
        for dep in shard.dependencies:
            target = renamed.get(dep, dep)
            if target != shard.id and target not in dependencies:
                dependencies.append(target)
        parent_id = renamed.get(shard.parent_id, shard.parent_id) if shard.parent_id else None
        if parent_id == shard.id:
            parent_id = None
        result.append(
            shard.model_copy(update={"dependencies": dependencies, "parent_id": parent_id})
        )
    return result


def enforce_budget(shards: list[Shard], budget: int) -> list[Shard]:
    """Size-split every shard over budget.

    References to a split shard (dependencies and parent links) are
    redirected to its first part. Part ids never collide with ids already
    in the list.

    Args:
        shards: Shards to check.
        budget: Maximum estimated tokens per shard.

    Returns:
        New shard list where every shard fits the budget.

    """
    used = {shard.id for shard in shards}
    result: list[Shard] = []
    renamed: dict[str, str] = {}
    for shard in shards:
        parts = split_oversized(shard, budget, used)
        if parts[0].id != shard.id:
            renamed[shard.id] = parts[0].id
        result.extend(parts)

    return _redirect(result, renamed)


def _combine(group: list[Shard], used: set[str]) -> Shard:
    first = group[0]
    return Shard(
        id=unique_id(f"{first.id}-merged", used),
        type=first.type,
        content=SHARD_SEPARATOR.join(shard.content for shard in group),
        priority=first.priority,
        section_name=first.section_name,
        parent_id=first.parent_id,
        dependencies=list(first.dependencies),
    )


def merge_tiny_shards(shards: list[Shard], budget: int) -> list[Shard]:
    """Combine runs of tiny shards into single shards.

    A shard is tiny when it costs less than a tenth of the budget. Runs of
    consecutive tiny non-metadata shards are joined with the merge
    separator into a ``<first-id>-merged`` shard for as long as the
    combined content fits the budget. References to a combined shard are
    redirected to the merged one.

    Args:
        shards: Shards within budget.
        budget: Maximum estimated tokens per shard.

    Returns:
        New shard list.

    """
    threshold = budget // 10
    used = {shard.id for shard in shards}
    result: list[Shard] = []
    renamed: dict[str, str] = {}
    group: list[Shard] = []

    def flush() -> None:
        if len(group) > 1:
            merged = _combine(group, used)
            for shard in group:
                renamed[shard.id] = merged.id
            result.append(merged)
        else:
            result.extend(group)
        group.clear()

    for shard in shards:
        if shard.type == "metadata" or estimate_tokens(shard.content) >= threshold:
            flush()
            result.append(shard)
            continue
        candidate = SHARD_SEPARATOR.join(s.content for s in [*group, shard])
        if group and not _fits(candidate, budget):
            flush()
        group.append(shard)
    flush()

    if renamed:
        logger.debug("Merged %d tiny shards", len(renamed))
    return _redirect(result, renamed)


def prefix_ids(shards: list[Shard], prefix: str) -> list[Shard]:
    """Prefix shard ids and every id reference with prefix."""
    return [
        shard.model_copy(
            update={
                "id": f"{prefix}{shard.id}",
                "parent_id": f"{prefix}{shard.parent_id}" if shard.parent_id else None,
                "dependencies": [f"{prefix}{d}" for d in shard.dependencies],
            }
        )
        for shard in shards
    ]
