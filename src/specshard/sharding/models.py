"""Data models for sharding plans and merge results.

All models are frozen Pydantic models. Steps that enrich a shard (cost
estimation, priority assignment, id prefixing) return updated copies via
``model_copy`` instead of mutating in place.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from specshard.core.types import ConflictKind, ReferenceType, ShardStrategy, ShardType


class Shard(BaseModel):
    """A self-contained fragment of a specification.

    Attributes:
        id: Plan-local identifier, safe for filenames and regex scans.
        type: Kind of fragment.
        content: Literal text of the fragment.
        token_count: Estimated cost, None until estimation runs.
        priority: Processing priority (lower = earlier).
        section_name: Optional slug of the owning section.
        parent_id: Owning shard; the parent is processed first.
        dependencies: Ids of shards this one needs for context.

    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: ShardType
    content: str
    token_count: int | None = None
    priority: int = 0
    section_name: str | None = None
    parent_id: str | None = None
    dependencies: list[str] = Field(default_factory=list)


class ShardAnalysis(BaseModel):
    """Structural profile of a specification."""

    model_config = ConfigDict(frozen=True)

    section_count: int = 0
    requirement_count: int = 0
    scenario_count: int = 0
    total_lines: int = 0
    total_tokens: int = 0
    complexity: int = Field(default=0, ge=0, le=100)
    recommended_strategy: ShardStrategy = "auto"
    recommendation_reason: str = ""


class CrossReference(BaseModel):
    """Directed relationship between two shards.

    An edge ``from_id -> to_id`` of type "depends-on" means from_id needs
    to_id to be processed first.
    """

    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    type: ReferenceType
    description: str | None = None


class ShardPlan(BaseModel):
    """Complete output of one decomposition run."""

    model_config = ConfigDict(frozen=True)

    shards: list[Shard]
    estimated_tokens: int
    recommended_order: list[str]
    cross_references: list[CrossReference]
    analysis: ShardAnalysis

    def get_shard(self, shard_id: str) -> Shard | None:
        """Look up a shard by id.

        Args:
            shard_id: Identifier to look for.

        Returns:
            The matching shard, or None.

        """
        for shard in self.shards:
            if shard.id == shard_id:
                return shard
        return None


class ShardResult(BaseModel):
    """Outcome of ShardEngine.shard().

    On failure ``plan`` carries no shards but still includes the analysis
    for diagnostics.
    """

    model_config = ConfigDict(frozen=True)

    plan: ShardPlan
    success: bool
    error: str | None = None
    duration_ms: int = 0


class MergeConflict(BaseModel):
    """Potential problem found while merging (informational only)."""

    model_config = ConfigDict(frozen=True)

    kind: ConflictKind
    shard_ids: list[str]
    description: str


class MergeResult(BaseModel):
    """Reconstructed document and reconciliation findings."""

    model_config = ConfigDict(frozen=True)

    content: str
    success: bool
    missing_shards: list[str] | None = None
    conflicts: list[MergeConflict] | None = None
