"""Scenario-based sharding: one shard per Scenario/Example block."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from specshard.core.config import ShardOptions

from ..models import Shard
from ..patterns import (
    REQUIREMENT_TOKEN_PATTERN,
    SCENARIO_START_PATTERN,
    fence_mask,
    is_blank,
    slugify,
)
from .base import (
    METADATA_ID,
    assign_priorities,
    document_shard,
    join_lines,
    require_content,
    unique_id,
)

logger = logging.getLogger(__name__)

MAX_SCENARIO_SLUG_LENGTH = 40


@dataclass
class _ScenarioBlock:
    title: str
    # Nearest non-blank line above the block start
    before: str | None = None
    context: list[str] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    trailing: list[str] = field(default_factory=list)


def _find_requirement(block: _ScenarioBlock) -> str | None:
    """Requirement id in the block, else on the line directly above it."""
    for line in [*block.body, block.before or ""]:
        match = REQUIREMENT_TOKEN_PATTERN.search(line)
        if match:
            return match.group(0).upper()
    return None


def shard_by_scenario(text: str, options: ShardOptions) -> list[Shard]:
    """Shard a specification into one shard per scenario/example block.

    A block runs from its ``Scenario:``/``Example:`` line to the next blank
    line. Lines between blocks become leading context of the next block.
    A related requirement id is noted in the content for information only.

    Args:
        text: Specification text.
        options: Sharding options.

    Returns:
        Shards in document order with priorities assigned, or a single
        document shard when no scenarios are found.

    Raises:
        EmptyDocumentError: If text is blank.

    """
    require_content(text)
    lines = text.splitlines()
    code = fence_mask(lines)

    preamble: list[str] = []
    blocks: list[_ScenarioBlock] = []
    pending: list[str] = []
    in_block = False
    last_line: str | None = None

    for line, is_code in zip(lines, code, strict=True):
        match = None if is_code else SCENARIO_START_PATTERN.match(line)
        if match:
            blocks.append(
                _ScenarioBlock(
                    title=match.group(1).strip(),
                    before=last_line,
                    context=pending,
                    body=[line],
                )
            )
            pending = []
            in_block = True
        elif not blocks:
            preamble.append(line)
        elif in_block and not (is_blank(line) and not is_code):
            blocks[-1].body.append(line)
        else:
            in_block = False
            pending.append(line)
        if not is_blank(line):
            last_line = line

    if not blocks:
        logger.debug("No scenarios found, returning whole document")
        return [document_shard(text)]

    blocks[-1].trailing = pending

    used: set[str] = set()
    shards: list[Shard] = []

    preamble_text = join_lines(preamble)
    metadata_id: str | None = None
    if preamble_text:
        metadata_id = unique_id(METADATA_ID, used)
        shards.append(Shard(id=metadata_id, type="metadata", content=preamble_text))

    dependencies = [metadata_id] if options.preserve_context and metadata_id else []

    for index, block in enumerate(blocks, start=1):
        slug = slugify(block.title, MAX_SCENARIO_SLUG_LENGTH)
        shard_id = unique_id(f"scenario-{slug}" if slug else f"scenario-{index}", used)

        content = join_lines([*block.context, *block.body])
        requirement = _find_requirement(block)
        if requirement:
            content += f"\n\n> Related requirement: {requirement}"
        trailing = join_lines(block.trailing)
        if trailing:
            content += f"\n\n{trailing}"

        shards.append(
            Shard(
                id=shard_id,
                type="scenario",
                content=content,
                dependencies=list(dependencies),
            )
        )

    logger.debug("Scenario strategy produced %d shards", len(shards))
    return assign_priorities(shards)
