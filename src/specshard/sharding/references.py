"""Cross-reference detection between shards.

Scans every shard's content for mentions of other shards:

- another shard's id as a whole word -> "references"
- "see <section name>" phrases matching a known section -> "references"
- a REQ-<n> identifier also present in another shard -> "depends-on"

Cost is O(n^2 * m) for n shards of m characters; plans are built once per
document, so the quadratic pass is acceptable.
"""

from __future__ import annotations

import logging
import re

from .models import CrossReference, Shard
from .patterns import REQUIREMENT_TOKEN_PATTERN, SEE_REFERENCE_PATTERN, slugify
from .security import shard_id_pattern, validate_shard_id

logger = logging.getLogger(__name__)

# Longest section name (in words) tried when resolving "see ..." phrases
MAX_SECTION_NAME_WORDS = 8

_TRAILING_SECTION_WORD = re.compile(r"\s+section$", re.IGNORECASE)


def _section_lookup(shards: list[Shard]) -> dict[str, str]:
    lookup: dict[str, str] = {}
    for shard in shards:
        if shard.section_name:
            lookup.setdefault(shard.section_name.lower(), shard.id)
    return lookup


def _resolve_section(phrase: str, sections: dict[str, str]) -> tuple[str, str] | None:
    """Resolve the longest leading word run of phrase to a section.

    Returns:
        (matched name, shard id), or None.

    """
    words = phrase.split()[:MAX_SECTION_NAME_WORDS]
    for count in range(len(words), 0, -1):
        candidate = _TRAILING_SECTION_WORD.sub("", " ".join(words[:count])).strip()
        if not candidate:
            continue
        key = candidate.lower()
        if key in sections:
            return key, sections[key]
        slug = slugify(candidate)
        if slug and slug in sections:
            return key, sections[slug]
    return None


def find_cross_references(shards: list[Shard]) -> list[CrossReference]:
    """Detect references between shards.

    Args:
        shards: Shards to scan.

    Returns:
        Deduplicated references (by from, to and type), first occurrence kept.

    Raises:
        InvalidShardIdError: If any shard id is unusable. Ids are validated
            before any pattern is built from them.

    """
    ids = [validate_shard_id(shard.id) for shard in shards]
    id_patterns = {shard_id: shard_id_pattern(shard_id) for shard_id in ids}
    sections = _section_lookup(shards)

    references: list[CrossReference] = []

    token_patterns: dict[str, re.Pattern[str]] = {}

    for shard in shards:
        for other_id, pattern in id_patterns.items():
            if other_id != shard.id and pattern.search(shard.content):
                references.append(
                    CrossReference(from_id=shard.id, to_id=other_id, type="references")
                )

        for match in SEE_REFERENCE_PATTERN.finditer(shard.content):
            resolved = _resolve_section(match.group(1), sections)
            if resolved is None:
                continue
            name, target_id = resolved
            if target_id != shard.id:
                references.append(
                    CrossReference(
                        from_id=shard.id,
                        to_id=target_id,
                        type="references",
                        description=f'References section "{name}"',
                    )
                )

        seen_tokens: set[str] = set()
        for match in REQUIREMENT_TOKEN_PATTERN.finditer(shard.content):
            token = match.group(0).upper()
            if token in seen_tokens:
                continue
            seen_tokens.add(token)
            pattern = token_patterns.setdefault(
                token, re.compile(rf"\b{re.escape(token)}\b", re.IGNORECASE)
            )
            for other in shards:
                if other.id != shard.id and pattern.search(other.content):
                    references.append(
                        CrossReference(
                            from_id=shard.id,
                            to_id=other.id,
                            type="depends-on",
                            description=f"References {token}",
                        )
                    )
                    break

    seen: set[tuple[str, str, str]] = set()
    unique: list[CrossReference] = []
    for ref in references:
        key = (ref.from_id, ref.to_id, ref.type)
        if key not in seen:
            seen.add(key)
            unique.append(ref)

    logger.debug("Found %d cross-references between %d shards", len(unique), len(shards))
    return unique
