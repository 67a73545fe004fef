"""Load shards written by write_shards() back into Shard objects.

The plan summary provides shard metadata and file names; shard content is
read from the individual files with any metadata header stripped. Files
must stay inside the plan directory.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from specshard.core.exceptions import SpecShardError
from specshard.sharding.models import Shard
from specshard.sharding.security import SecurityError, validate_shard_path

logger = logging.getLogger(__name__)

# Header written by render_shard_header(): <!--\nShard: ...\n-->\n\n
SHARD_HEADER_PATTERN = re.compile(r"\A<!--\nShard: [^\n]*\n.*?-->\n\n?", re.DOTALL)


class PlanLoadError(SpecShardError):
    """Plan summary is missing, unreadable or malformed."""

    pass


@dataclass
class LoadedShards:
    """Result of loading shards from a plan summary.

    Attributes:
        shards: Shards whose files were read.
        files_loaded: Paths of shard files that were read.
        files_skipped: Paths that were missing or rejected.

    """

    shards: list[Shard]
    files_loaded: list[str] = field(default_factory=list)
    files_skipped: list[str] = field(default_factory=list)


def strip_shard_header(text: str) -> str:
    """Remove a leading metadata header, if present."""
    return SHARD_HEADER_PATTERN.sub("", text, count=1)


def load_shards(plan_path: Path) -> LoadedShards:
    """Load shards listed in a plan summary.

    Missing or unreadable shard files are skipped with a warning so a
    partial set can still be merged (the merge then reports what is missing).

    Args:
        plan_path: Path to a ``*-plan.json`` file.

    Returns:
        LoadedShards in plan order.

    Raises:
        PlanLoadError: If the summary cannot be read or parsed.

    """
    try:
        data = json.loads(plan_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise PlanLoadError(f"Cannot read plan summary {plan_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise PlanLoadError(f"Invalid JSON in plan summary {plan_path}: {e}") from e

    try:
        entries = data["plan"]["shards"]
    except (KeyError, TypeError) as e:
        raise PlanLoadError(f"Plan summary {plan_path} has no shard list") from e

    base_dir = plan_path.parent
    result = LoadedShards(shards=[])

    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("file"):
            raise PlanLoadError(f"Malformed shard entry in {plan_path}: {entry!r}")

        file_path = base_dir / entry["file"]
        try:
            validate_shard_path(base_dir, file_path)
        except SecurityError:
            logger.warning("Skipping shard file outside plan directory: %s", entry["file"])
            result.files_skipped.append(str(file_path))
            continue

        if not file_path.is_file():
            logger.warning("Shard file not found: %s", file_path)
            result.files_skipped.append(str(file_path))
            continue

        try:
            raw = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read shard file %s: %s", file_path, e)
            result.files_skipped.append(str(file_path))
            continue

        content = strip_shard_header(raw)
        fields = {k: v for k, v in entry.items() if k != "file"}
        try:
            shard = Shard.model_validate({**fields, "content": content})
        except ValidationError as e:
            raise PlanLoadError(f"Invalid shard entry in {plan_path}: {e}") from e

        result.shards.append(shard)
        result.files_loaded.append(str(file_path))

    logger.debug(
        "Loaded %d shards from %s (%d skipped)",
        len(result.shards),
        plan_path,
        len(result.files_skipped),
    )
    return result
