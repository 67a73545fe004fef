"""Configuration models and loading for specshard.

Sharding options and analyzer thresholds are Pydantic models. They can be
overridden from a ``specshard.yaml`` file in the project root or passed
explicitly on the command line.

Usage:
    from specshard.core.config import load_config

    config = load_config(project_path=Path("."))
    budget = config.sharding.max_tokens_per_shard
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from specshard.core.exceptions import ConfigError
from specshard.core.types import ShardStrategy

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME: Final[str] = "specshard.yaml"

# Config files are small; anything larger is almost certainly a mistake
MAX_CONFIG_SIZE: Final[int] = 1_048_576

DEFAULT_MAX_TOKENS: Final[int] = 2000


class ShardOptions(BaseModel):
    """Options controlling a single sharding run.

    Attributes:
        strategy: Decomposition strategy, or "auto" for the recommendation.
        max_tokens_per_shard: Cost budget for a single shard.
        preserve_context: Link content shards to the metadata shard.
        include_metadata: Write metadata headers when serializing shards.

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strategy: ShardStrategy = Field(
        default="auto",
        description="Sharding strategy: by-section, by-requirement, by-scenario or auto",
    )
    max_tokens_per_shard: int = Field(
        default=DEFAULT_MAX_TOKENS,
        gt=0,
        description="Maximum estimated tokens per shard",
    )
    preserve_context: bool = Field(
        default=True,
        description="Make content shards depend on the metadata shard",
    )
    include_metadata: bool = Field(
        default=True,
        description="Prefix written shard files with a metadata header",
    )


class AnalyzerThresholds(BaseModel):
    """Hand-tuned heuristics used by the structural analyzer.

    Defaults reproduce the historical behaviour. The weights and caps feed the
    0-100 complexity score; the counts drive the strategy recommendation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scenario_dominance: int = Field(default=10, ge=0)
    requirement_heavy: int = Field(default=15, ge=0)
    section_structure: int = Field(default=3, ge=1)
    auto_complexity: int = Field(default=70, ge=0, le=100)
    auto_token_count: int = Field(default=4000, ge=0)

    section_weight: float = Field(default=5, ge=0)
    section_cap: float = Field(default=30, ge=0)
    requirement_weight: float = Field(default=3, ge=0)
    requirement_cap: float = Field(default=30, ge=0)
    scenario_weight: float = Field(default=2, ge=0)
    scenario_cap: float = Field(default=20, ge=0)
    lines_divisor: float = Field(default=10, gt=0)
    lines_cap: float = Field(default=20, ge=0)

    @model_validator(mode="after")
    def validate_caps(self) -> Self:
        """Ensure the complexity caps cannot exceed the 0-100 scale."""
        total = self.section_cap + self.requirement_cap + self.scenario_cap + self.lines_cap
        if total > 100:
            raise ValueError(f"complexity caps must sum to at most 100, got {total:g}")
        return self


class Config(BaseModel):
    """Top-level specshard configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sharding: ShardOptions = Field(default_factory=ShardOptions)
    thresholds: AnalyzerThresholds = Field(default_factory=AnalyzerThresholds)


def _read_config_file(path: Path) -> dict[str, object]:
    """Read and parse a YAML config file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed mapping (empty for an empty file).

    Raises:
        ConfigError: If the file is too large, unreadable or not a mapping.

    """
    try:
        size = path.stat().st_size
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if size > MAX_CONFIG_SIZE:
        raise ConfigError(f"Config file {path} exceeds {MAX_CONFIG_SIZE} bytes ({size} bytes)")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_config(
    config_path: Path | None = None,
    project_path: Path | None = None,
) -> Config:
    """Load configuration from YAML, falling back to defaults.

    An explicit config_path must exist. Otherwise ``specshard.yaml`` in
    project_path is used when present.

    Args:
        config_path: Explicit config file path.
        project_path: Project root searched for specshard.yaml.

    Returns:
        Validated Config instance.

    Raises:
        ConfigError: If the file is missing (explicit path), malformed,
            or fails validation.

    """
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        path: Path | None = config_path
    elif project_path is not None and (project_path / PROJECT_CONFIG_NAME).is_file():
        path = project_path / PROJECT_CONFIG_NAME
    else:
        path = None

    if path is None:
        logger.debug("No config file found, using defaults")
        return Config()

    data = _read_config_file(path)
    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config
