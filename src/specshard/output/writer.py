"""Write shard plans to disk.

Each shard becomes ``<base>-<shard-id>.md``; content shards optionally get
an HTML-comment metadata header. A ``<base>-plan.json`` summary records
everything needed to load the shards back with load_shards().
"""

from __future__ import annotations

import json
import logging
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Final

from specshard.sharding.models import Shard, ShardPlan

logger = logging.getLogger(__name__)

PLAN_SUFFIX: Final[str] = "-plan.json"

_UNSAFE_SEGMENT = re.compile(r"[^a-zA-Z0-9._-]+")
_SPEC_EXTENSION = re.compile(r"\.(md|txt|spec)$", re.IGNORECASE)


def sanitize_file_segment(value: str) -> str:
    """Replace characters unsafe in filenames with dashes.

    Examples:
        >>> sanitize_file_segment("auth/login flow")
        'auth-login-flow'

    """
    return _UNSAFE_SEGMENT.sub("-", value)


def spec_base_name(spec_path: Path | str) -> str:
    """Filename prefix derived from the spec file name."""
    name = _SPEC_EXTENSION.sub("", Path(spec_path).name)
    return sanitize_file_segment(name) or "spec"


def shard_file_name(base_name: str, shard: Shard) -> str:
    return f"{base_name}-{sanitize_file_segment(shard.id)}.md"


def render_shard_header(shard: Shard) -> str:
    """Render the metadata header prepended to a shard file."""
    lines = [
        "<!--",
        f"Shard: {shard.id}",
        f"Type: {shard.type}",
        f"Tokens: {shard.token_count}",
        f"Priority: {shard.priority}",
    ]
    if shard.section_name:
        lines.append(f"Section: {shard.section_name}")
    if shard.parent_id:
        lines.append(f"Parent: {shard.parent_id}")
    if shard.dependencies:
        lines.append(f"Dependencies: {', '.join(shard.dependencies)}")
    lines.append("-->")
    return "\n".join(lines) + "\n\n"


def render_shard_file(shard: Shard, include_metadata: bool = True) -> str:
    """Render the full file content for a shard."""
    if include_metadata and shard.token_count and shard.type != "metadata":
        return render_shard_header(shard) + shard.content
    return shard.content


def build_plan_summary(plan: ShardPlan, spec_path: Path | str, base_name: str) -> dict[str, Any]:
    """Build the JSON-serializable plan summary.

    Shard content is not duplicated; each entry names its file instead.
    """
    summary = plan.model_dump(mode="json", exclude={"shards"})
    summary["shards"] = [
        {
            **shard.model_dump(mode="json", exclude={"content"}),
            "file": shard_file_name(base_name, shard),
        }
        for shard in plan.shards
    ]
    return {
        "spec_path": str(spec_path),
        "generated_at": datetime.now(UTC).isoformat(),
        "plan": summary,
    }


def write_shards(
    plan: ShardPlan,
    output_dir: Path,
    spec_path: Path | str,
    include_metadata: bool = True,
) -> list[Path]:
    """Write every shard plus the plan summary to output_dir.

    Args:
        plan: Plan to write.
        output_dir: Target directory (created if missing).
        spec_path: Source spec path, used for the filename prefix.
        include_metadata: Prefix content shards with a metadata header.

    Returns:
        Written paths; the plan summary is last.

    """
    output_dir.mkdir(parents=True, exist_ok=True)
    base_name = spec_base_name(spec_path)

    written: list[Path] = []
    for shard in plan.shards:
        path = output_dir / shard_file_name(base_name, shard)
        path.write_text(render_shard_file(shard, include_metadata), encoding="utf-8")
        written.append(path)
        logger.debug("Wrote shard %s to %s", shard.id, path)

    summary_path = output_dir / f"{base_name}{PLAN_SUFFIX}"
    summary = build_plan_summary(plan, spec_path, base_name)
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    written.append(summary_path)

    logger.info("Wrote %d shards and plan summary to %s", len(plan.shards), output_dir)
    return written
