"""Structural patterns shared by the analyzer, strategies and detector.

Everything here is line-oriented regex matching; there is no semantic
parsing of the specification text.
"""

from __future__ import annotations

import re

# =============================================================================
# Line patterns
# =============================================================================

# ## Section title (exactly two hashes)
SECTION_HEADING_PATTERN = re.compile(r"^##\s+(.+?)\s*#*\s*$")

# # / ## / ### headings used for merge conflict detection
HEADING_PATTERN = re.compile(r"^#{1,3}\s+.+$", re.MULTILINE)

# Opening/closing code fence
FENCE_PATTERN = re.compile(r"^\s*(```|~~~)")

# - MUST ..., * SHALL ...
MODAL_REQUIREMENT_PATTERN = re.compile(
    r"^\s*[-*]\s*(?:MUST|SHOULD|MAY|REQUIRED|SHALL)\s+", re.IGNORECASE
)
# - REQ-001: ...
ID_REQUIREMENT_PATTERN = re.compile(r"^\s*[-*]\s*REQ-\d+[:\s]", re.IGNORECASE)
# - [P0] ...
PRIORITY_REQUIREMENT_PATTERN = re.compile(r"^\s*[-*]\s*\[P[0-2]\].+", re.IGNORECASE)

REQUIREMENT_LINE_PATTERNS: tuple[re.Pattern[str], ...] = (
    MODAL_REQUIREMENT_PATTERN,
    ID_REQUIREMENT_PATTERN,
    PRIORITY_REQUIREMENT_PATTERN,
)

# Scenario: ... / Example: ... (optionally bulleted or bold)
SCENARIO_START_PATTERN = re.compile(
    r"^\s*(?:[-*]\s*)?(?:\*\*)?(?:Scenario|Example)(?:\*\*)?:\s*(?:\*\*)?\s*(.*)$",
    re.IGNORECASE,
)

# Gherkin steps that belong to a scenario block
STEP_PATTERN = re.compile(r"^\s*(?:[-*]\s*)?(?:\*\*)?(?:Given|When|Then|And|But)\b", re.IGNORECASE)

BLANK_LINE_PATTERN = re.compile(r"^\s*$")

# =============================================================================
# Token patterns
# =============================================================================

# REQ-123 requirement identifiers
REQUIREMENT_TOKEN_PATTERN = re.compile(r"\bREQ-\d+\b", re.IGNORECASE)

# "see the Authentication section", "see 'Data Model'"
SEE_REFERENCE_PATTERN = re.compile(r"\bsee\s+(?:the\s+)?[\"']?([^\"'\n.,;:()\[\]]+)", re.IGNORECASE)

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")

MAX_SLUG_LENGTH = 50


def slugify(value: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Convert arbitrary text to a lowercase dash-separated slug.

    Args:
        value: Text to convert.
        max_length: Maximum slug length.

    Returns:
        Slug containing only [a-z0-9-], possibly empty.

    Examples:
        >>> slugify("User Authentication & Sessions")
        'user-authentication-sessions'

    """
    slug = _SLUG_INVALID.sub("-", value.lower()).strip("-")
    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")
    return slug


def is_requirement_line(line: str) -> bool:
    """Check whether a line introduces a requirement."""
    return any(p.match(line) for p in REQUIREMENT_LINE_PATTERNS)


def is_scenario_start(line: str) -> bool:
    """Check whether a line introduces a scenario/example block."""
    return SCENARIO_START_PATTERN.match(line) is not None


def is_blank(line: str) -> bool:
    return BLANK_LINE_PATTERN.match(line) is not None


def fence_mask(lines: list[str]) -> list[bool]:
    """Mark which lines sit inside (or delimit) a fenced code block.

    Args:
        lines: Document lines.

    Returns:
        List parallel to lines; True where the line is code.

    """
    mask: list[bool] = []
    in_fence = False
    for line in lines:
        if FENCE_PATTERN.match(line):
            mask.append(True)
            in_fence = not in_fence
        else:
            mask.append(in_fence)
    return mask
