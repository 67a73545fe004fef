"""Serialization of shard plans to and from disk.

Provides:
- write_shards(): shard files plus a JSON plan summary
- load_shards(): rebuild Shard objects from a plan summary
"""

from specshard.output.loaders import (
    LoadedShards,
    PlanLoadError,
    load_shards,
    strip_shard_header,
)
from specshard.output.writer import (
    PLAN_SUFFIX,
    build_plan_summary,
    render_shard_file,
    render_shard_header,
    sanitize_file_segment,
    spec_base_name,
    write_shards,
)

__all__ = [
    "PLAN_SUFFIX",
    "LoadedShards",
    "PlanLoadError",
    "build_plan_summary",
    "load_shards",
    "render_shard_file",
    "render_shard_header",
    "sanitize_file_segment",
    "spec_base_name",
    "strip_shard_header",
    "write_shards",
]
