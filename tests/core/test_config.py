"""Tests for configuration models and YAML loading.

Tests cover:
- ShardOptions and AnalyzerThresholds validation
- Loading specshard.yaml from a project directory
- Explicit config paths and error handling
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from specshard.core.config import (
    MAX_CONFIG_SIZE,
    PROJECT_CONFIG_NAME,
    AnalyzerThresholds,
    Config,
    ShardOptions,
    load_config,
)
from specshard.core.exceptions import ConfigError


class TestShardOptions:
    """Tests for ShardOptions model."""

    def test_defaults(self) -> None:
        """Defaults match the documented values."""
        options = ShardOptions()

        assert options.strategy == "auto"
        assert options.max_tokens_per_shard == 2000
        assert options.preserve_context is True
        assert options.include_metadata is True

    def test_budget_must_be_positive(self) -> None:
        """Zero or negative budgets are rejected."""
        with pytest.raises(ValidationError):
            ShardOptions(max_tokens_per_shard=0)

    def test_unknown_strategy_rejected(self) -> None:
        """Strategies outside the known set are rejected."""
        with pytest.raises(ValidationError):
            ShardOptions(strategy="by-chapter")

    def test_frozen(self) -> None:
        """Options cannot be mutated."""
        options = ShardOptions()

        with pytest.raises(ValidationError):
            options.max_tokens_per_shard = 10


class TestAnalyzerThresholds:
    """Tests for AnalyzerThresholds model."""

    def test_defaults(self) -> None:
        """Default heuristics."""
        thresholds = AnalyzerThresholds()

        assert thresholds.scenario_dominance == 10
        assert thresholds.requirement_heavy == 15
        assert thresholds.section_structure == 3
        assert thresholds.auto_complexity == 70
        assert thresholds.auto_token_count == 4000

    def test_caps_cannot_exceed_scale(self) -> None:
        """Complexity caps summing over 100 are rejected."""
        with pytest.raises(ValidationError, match="at most 100"):
            AnalyzerThresholds(section_cap=60)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        """No config file -> defaults."""
        assert load_config(project_path=tmp_path) == Config()

    def test_no_arguments_returns_defaults(self) -> None:
        """Calling without paths returns defaults."""
        assert load_config() == Config()

    def test_project_file_loaded(self, tmp_path: Path) -> None:
        """specshard.yaml in the project root is read."""
        (tmp_path / PROJECT_CONFIG_NAME).write_text(
            "sharding:\n"
            "  strategy: by-section\n"
            "  max_tokens_per_shard: 500\n"
            "thresholds:\n"
            "  requirement_heavy: 5\n"
        )

        config = load_config(project_path=tmp_path)

        assert config.sharding.strategy == "by-section"
        assert config.sharding.max_tokens_per_shard == 500
        assert config.sharding.preserve_context is True
        assert config.thresholds.requirement_heavy == 5

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        """An empty YAML file is treated as no overrides."""
        path = tmp_path / PROJECT_CONFIG_NAME
        path.write_text("")

        assert load_config(config_path=path) == Config()

    def test_unknown_top_level_keys_ignored(self, tmp_path: Path) -> None:
        """Unrelated sections do not break loading."""
        path = tmp_path / "custom.yaml"
        path.write_text("editor: vim\n")

        assert load_config(config_path=path) == Config()

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        """A missing explicit path is an error."""
        with pytest.raises(ConfigError, match="not found"):
            load_config(config_path=tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Malformed YAML raises ConfigError."""
        path = tmp_path / PROJECT_CONFIG_NAME
        path.write_text("sharding: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(project_path=tmp_path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        """A YAML list is not a valid config."""
        path = tmp_path / PROJECT_CONFIG_NAME
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(config_path=path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        """Values failing validation raise ConfigError."""
        path = tmp_path / PROJECT_CONFIG_NAME
        path.write_text("sharding:\n  max_tokens_per_shard: -5\n")

        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(config_path=path)

    def test_unknown_sharding_key(self, tmp_path: Path) -> None:
        """Typos inside the sharding section are reported."""
        path = tmp_path / PROJECT_CONFIG_NAME
        path.write_text("sharding:\n  max_token: 5\n")

        with pytest.raises(ConfigError):
            load_config(config_path=path)

    def test_oversized_file(self, tmp_path: Path) -> None:
        """Files over the size limit are rejected before parsing."""
        path = tmp_path / PROJECT_CONFIG_NAME
        path.write_text("#" * (MAX_CONFIG_SIZE + 1))

        with pytest.raises(ConfigError, match="exceeds"):
            load_config(config_path=path)
