"""Requirement-based sharding: one shard per requirement line.

Scenario, step and indented lines following a requirement are kept with it
as a nested block. Other lines between requirements (headings, prose)
become leading context of the next requirement shard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from specshard.core.config import ShardOptions

from ..models import Shard
from ..patterns import (
    REQUIREMENT_TOKEN_PATTERN,
    SECTION_HEADING_PATTERN,
    STEP_PATTERN,
    fence_mask,
    is_blank,
    is_requirement_line,
    is_scenario_start,
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


@dataclass
class _RequirementBlock:
    line: str
    section: str | None
    context: list[str] = field(default_factory=list)
    nested: list[str] = field(default_factory=list)

    def render(self) -> str:
        return join_lines([*self.context, self.line, *self.nested])


def _continues_block(line: str, is_code: bool) -> bool:
    if is_code or is_blank(line):
        return True
    if is_scenario_start(line) or STEP_PATTERN.match(line):
        return True
    return line[:1].isspace()


def _context_summary(count: int) -> str:
    noun = "requirement" if count == 1 else "requirements"
    return f"# Specification Context\n\nThis specification defines {count} {noun}."


def shard_by_requirement(text: str, options: ShardOptions) -> list[Shard]:
    """Shard a specification into one shard per requirement.

    Args:
        text: Specification text.
        options: Sharding options. With preserve_context a metadata shard
            is always emitted and every requirement depends on it.

    Returns:
        Shards in document order with priorities assigned, or a single
        document shard when no requirement lines are found.

    Raises:
        EmptyDocumentError: If text is blank.

    """
    require_content(text)
    lines = text.splitlines()
    code = fence_mask(lines)

    preamble: list[str] = []
    blocks: list[_RequirementBlock] = []
    pending: list[str] = []
    section: str | None = None

    for line, is_code in zip(lines, code, strict=True):
        if not is_code:
            heading = SECTION_HEADING_PATTERN.match(line)
            if heading:
                section = slugify(heading.group(1)) or None
            if is_requirement_line(line):
                blocks.append(_RequirementBlock(line=line, section=section, context=pending))
                pending = []
                continue

        if not blocks:
            preamble.append(line)
        elif not pending and _continues_block(line, is_code):
            blocks[-1].nested.append(line)
        else:
            pending.append(line)

    if not blocks:
        logger.debug("No requirements found, returning whole document")
        return [document_shard(text)]

    # Trailing lines stay with the last requirement
    blocks[-1].nested.extend(pending)

    used: set[str] = set()
    shards: list[Shard] = []

    preamble_text = join_lines(preamble)
    metadata_id: str | None = None
    if preamble_text or options.preserve_context:
        metadata_id = unique_id(METADATA_ID, used)
        shards.append(
            Shard(
                id=metadata_id,
                type="metadata",
                content=preamble_text or _context_summary(len(blocks)),
            )
        )

    dependencies = [metadata_id] if options.preserve_context and metadata_id else []

    for index, block in enumerate(blocks, start=1):
        token = REQUIREMENT_TOKEN_PATTERN.search(block.line)
        base = slugify(token.group(0)) if token else f"requirement-{index}"
        shards.append(
            Shard(
                id=unique_id(base, used),
                type="requirement",
                content=block.render(),
                section_name=block.section,
                dependencies=list(dependencies),
            )
        )

    logger.debug("Requirement strategy produced %d shards", len(shards))
    return assign_priorities(shards)
