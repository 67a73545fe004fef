"""Tests for the specshard CLI.

Tests cover:
- shard command (JSON output, option validation, writing files)
- analyze command
- merge command (round trip, missing shards)
- Config errors and --version
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specshard.cli import app
from specshard.cli_utils import EXIT_CONFIG_ERROR, EXIT_ERROR, EXIT_SUCCESS

runner = CliRunner()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def spec_file(tmp_path: Path, sample_spec: str, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Sample spec on disk, with the working directory set to tmp_path."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "payment.md"
    path.write_text(sample_spec)
    return path


# =============================================================================
# shard
# =============================================================================


class TestShardCommand:
    """Tests for `specshard shard`."""

    def test_json_output(self, spec_file: Path) -> None:
        """--json prints the plan without shard content."""
        result = runner.invoke(app, ["shard", str(spec_file), "-s", "by-section", "--json"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        ids = [s["id"] for s in payload["plan"]["shards"]]
        assert ids[0] == "metadata"
        assert "section-payments" in ids
        assert all("content" not in s for s in payload["plan"]["shards"])
        assert sorted(payload["plan"]["recommended_order"]) == sorted(ids)

    def test_max_tokens_option(self, spec_file: Path) -> None:
        """--max-tokens bounds every shard."""
        result = runner.invoke(app, ["shard", str(spec_file), "-m", "30", "--json"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        shards = json.loads(result.stdout)["plan"]["shards"]
        assert all(s["token_count"] <= 30 for s in shards)

    def test_no_preserve_context(self, spec_file: Path) -> None:
        """--no-preserve-context leaves dependencies empty."""
        result = runner.invoke(
            app,
            ["shard", str(spec_file), "-s", "by-section", "--no-preserve-context", "--json"],
        )

        shards = json.loads(result.stdout)["plan"]["shards"]
        assert all(s["dependencies"] == [] for s in shards)

    def test_table_output(self, spec_file: Path) -> None:
        """Without --json the analysis and plan tables are printed."""
        result = runner.invoke(app, ["shard", str(spec_file), "-s", "by-section"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Spec Analysis" in result.output
        assert "Shard Plan" in result.output

    def test_invalid_strategy(self, spec_file: Path) -> None:
        """Unknown strategies exit with an error."""
        result = runner.invoke(app, ["shard", str(spec_file), "-s", "by-chapter"])

        assert result.exit_code == EXIT_ERROR
        assert "Invalid strategy" in result.output

    def test_non_positive_max_tokens(self, spec_file: Path) -> None:
        """--max-tokens must be positive."""
        result = runner.invoke(app, ["shard", str(spec_file), "-m", "0"])

        assert result.exit_code == EXIT_ERROR
        assert "max-tokens" in result.output

    def test_missing_spec(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing spec file exits with an error."""
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["shard", "missing.md"])

        assert result.exit_code == EXIT_ERROR
        assert "not found" in result.output

    def test_empty_spec(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty spec fails to shard."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "empty.md").write_text("\n")

        result = runner.invoke(app, ["shard", "empty.md"])

        assert result.exit_code == EXIT_ERROR
        assert "Error sharding spec" in result.output

    def test_writes_shard_files(self, spec_file: Path, tmp_path: Path) -> None:
        """-o writes shard files and the plan summary."""
        out = tmp_path / "shards"

        result = runner.invoke(app, ["shard", str(spec_file), "-s", "by-section", "-o", str(out)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert (out / "payment-plan.json").is_file()
        assert (out / "payment-metadata.md").is_file()
        assert (out / "payment-section-reporting.md").is_file()

    def test_config_file_applies(self, spec_file: Path, tmp_path: Path) -> None:
        """specshard.yaml in the working directory sets defaults."""
        (tmp_path / "specshard.yaml").write_text("sharding:\n  strategy: by-requirement\n")

        result = runner.invoke(app, ["shard", str(spec_file), "--json"])

        types = {s["type"] for s in json.loads(result.stdout)["plan"]["shards"]}
        assert types == {"metadata", "requirement"}

    def test_config_error_exit_code(self, spec_file: Path, tmp_path: Path) -> None:
        """A broken config exits with the config error code."""
        (tmp_path / "specshard.yaml").write_text("sharding: [broken\n")

        result = runner.invoke(app, ["shard", str(spec_file)])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Config error" in result.output


# =============================================================================
# analyze
# =============================================================================


class TestAnalyzeCommand:
    """Tests for `specshard analyze`."""

    def test_prints_analysis(self, spec_file: Path) -> None:
        """Analysis table and recommendation are shown."""
        result = runner.invoke(app, ["analyze", str(spec_file)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Spec Analysis" in result.output
        assert "by-section" in result.output

    def test_missing_spec(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing spec file exits with an error."""
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["analyze", "missing.md"])

        assert result.exit_code == EXIT_ERROR


# =============================================================================
# merge
# =============================================================================


class TestMergeCommand:
    """Tests for `specshard merge`."""

    @pytest.fixture
    def plan_file(self, spec_file: Path, tmp_path: Path) -> Path:
        out = tmp_path / "shards"
        result = runner.invoke(app, ["shard", str(spec_file), "-s", "by-section", "-o", str(out)])
        assert result.exit_code == EXIT_SUCCESS, result.output
        return out / "payment-plan.json"

    def test_merge_to_file(self, plan_file: Path, tmp_path: Path, sample_spec: str) -> None:
        """Merged output contains every line of the original spec."""
        merged_path = tmp_path / "merged.md"

        result = runner.invoke(app, ["merge", str(plan_file), "-o", str(merged_path)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        merged = merged_path.read_text()
        for line in sample_spec.splitlines():
            assert line.strip() in merged
        assert "<!--" not in merged

    def test_merge_to_stdout(self, plan_file: Path) -> None:
        """Without -o the merged spec is printed."""
        result = runner.invoke(app, ["merge", str(plan_file)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "## Payments" in result.stdout

    def test_missing_shard_file(self, plan_file: Path) -> None:
        """A deleted shard file is reported and fails the merge."""
        (plan_file.parent / "payment-metadata.md").unlink()

        result = runner.invoke(app, ["merge", str(plan_file)])

        assert result.exit_code == EXIT_ERROR
        assert "Skipped shard file" in result.output
        assert "metadata" in result.output

    def test_missing_plan(self, tmp_path: Path) -> None:
        """A missing plan summary exits with an error."""
        result = runner.invoke(app, ["merge", str(tmp_path / "none-plan.json")])

        assert result.exit_code == EXIT_ERROR


# =============================================================================
# app
# =============================================================================


class TestApp:
    """Tests for the top-level app."""

    def test_version(self) -> None:
        """--version prints the version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == EXIT_SUCCESS
        assert "specshard" in result.output

    def test_commands_registered(self) -> None:
        """shard, analyze and merge are available."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == EXIT_SUCCESS
        for command in ("shard", "analyze", "merge"):
            assert command in result.output
