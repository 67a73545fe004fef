"""Section-based sharding: one shard per ``##`` section."""

from __future__ import annotations

import logging

from specshard.core.config import ShardOptions

from ..models import Shard
from ..patterns import SECTION_HEADING_PATTERN, fence_mask, slugify
from .base import (
    METADATA_ID,
    assign_priorities,
    document_shard,
    join_lines,
    require_content,
    split_oversized,
    unique_id,
)

logger = logging.getLogger(__name__)


def split_sections(text: str) -> tuple[str, list[tuple[str, str]]]:
    """Split text at second-level headings outside code fences.

    Args:
        text: Specification text.

    Returns:
        Tuple of (preamble, [(heading title, section text), ...]). Section
        text includes its heading line.

    """
    lines = text.splitlines()
    code = fence_mask(lines)

    preamble: list[str] = []
    sections: list[tuple[str, list[str]]] = []
    current: list[str] = preamble

    for line, is_code in zip(lines, code, strict=True):
        match = None if is_code else SECTION_HEADING_PATTERN.match(line)
        if match:
            current = [line]
            sections.append((match.group(1).strip(), current))
        else:
            current.append(line)

    return join_lines(preamble), [(title, join_lines(body)) for title, body in sections]


def shard_by_section(text: str, options: ShardOptions) -> list[Shard]:
    """Shard a specification by its ``##`` sections.

    The preamble becomes a metadata shard. Sections over the budget are
    split into numbered chunk shards. Without headings the whole document
    is returned as a single shard.

    Args:
        text: Specification text.
        options: Sharding options.

    Returns:
        Shards in document order with priorities assigned.

    Raises:
        EmptyDocumentError: If text is blank.

    """
    require_content(text)
    preamble, sections = split_sections(text)

    if not sections:
        logger.debug("No sections found, returning whole document")
        return [document_shard(text)]

    used: set[str] = set()
    shards: list[Shard] = []

    metadata_id: str | None = None
    if preamble:
        metadata_id = unique_id(METADATA_ID, used)
        shards.append(Shard(id=metadata_id, type="metadata", content=preamble))

    dependencies = [metadata_id] if options.preserve_context and metadata_id else []

    for index, (title, body) in enumerate(sections, start=1):
        slug = slugify(title)
        shard_id = unique_id(f"section-{slug}" if slug else f"section-{index}", used)
        section = Shard(
            id=shard_id,
            type="section",
            content=body,
            section_name=slug or None,
            dependencies=list(dependencies),
        )
        shards.extend(split_oversized(section, options.max_tokens_per_shard, used))

    logger.debug("Section strategy produced %d shards", len(shards))
    return assign_priorities(shards)
