"""Tests for writing shard plans to disk."""

import json
from pathlib import Path

import pytest

from specshard.output.writer import (
    PLAN_SUFFIX,
    render_shard_file,
    sanitize_file_segment,
    spec_base_name,
    write_shards,
)
from specshard.sharding import Shard, ShardEngine, ShardPlan


@pytest.fixture
def plan(sample_spec: str) -> ShardPlan:
    result = ShardEngine().shard(sample_spec, strategy="by-section")
    assert result.success
    return result.plan


class TestFileNames:
    """Tests for filename helpers."""

    def test_sanitize_replaces_unsafe_characters(self) -> None:
        """Slashes and spaces collapse into dashes."""
        assert sanitize_file_segment("auth/login flow") == "auth-login-flow"
        assert sanitize_file_segment("../etc") == "..-etc"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("docs/payment.md", "payment"),
            ("notes.TXT", "notes"),
            ("api.spec", "api"),
            ("archive.tar.gz", "archive.tar.gz"),
            ("my spec.md", "my-spec"),
        ],
    )
    def test_spec_base_name(self, path: str, expected: str) -> None:
        """Known spec extensions are dropped from the prefix."""
        assert spec_base_name(path) == expected

    def test_spec_base_name_fallback(self) -> None:
        """An extension-only name falls back to 'spec'."""
        assert spec_base_name(".md") == "spec"


class TestRenderShardFile:
    """Tests for render_shard_file."""

    def test_header_for_content_shards(self) -> None:
        """Costed content shards get a metadata header."""
        shard = Shard(
            id="section-a",
            type="section",
            content="## A\nbody",
            token_count=3,
            priority=1,
            section_name="a",
            dependencies=["metadata"],
        )

        rendered = render_shard_file(shard)

        assert rendered.startswith("<!--\nShard: section-a\nType: section\nTokens: 3\n")
        assert "Section: a\n" in rendered
        assert "Dependencies: metadata\n" in rendered
        assert rendered.endswith("-->\n\n## A\nbody")

    def test_no_header_for_metadata_shard(self) -> None:
        """The metadata shard is written verbatim."""
        shard = Shard(id="metadata", type="metadata", content="# Title", token_count=2)

        assert render_shard_file(shard) == "# Title"

    def test_header_disabled(self) -> None:
        """include_metadata=False writes content only."""
        shard = Shard(id="s", type="section", content="text", token_count=1)

        assert render_shard_file(shard, include_metadata=False) == "text"


class TestWriteShards:
    """Tests for write_shards."""

    def test_writes_one_file_per_shard_and_summary(self, plan: ShardPlan, tmp_path: Path) -> None:
        """Every shard gets a file and the summary comes last."""
        out = tmp_path / "out"

        written = write_shards(plan, out, "docs/payment.md")

        assert len(written) == len(plan.shards) + 1
        assert written[-1] == out / f"payment{PLAN_SUFFIX}"
        assert (out / "payment-metadata.md").read_text() == plan.shards[0].content
        assert (out / "payment-section-authentication.md").read_text().startswith("<!--")

    def test_summary_contents(self, plan: ShardPlan, tmp_path: Path) -> None:
        """The summary lists shard files without duplicating content."""
        written = write_shards(plan, tmp_path, "payment.md")

        summary = json.loads(written[-1].read_text())

        assert summary["spec_path"] == "payment.md"
        assert summary["generated_at"]
        entries = summary["plan"]["shards"]
        assert [e["id"] for e in entries] == [s.id for s in plan.shards]
        assert all("content" not in e for e in entries)
        assert entries[1]["file"] == "payment-section-authentication.md"
        assert summary["plan"]["recommended_order"] == plan.recommended_order
        assert summary["plan"]["analysis"]["section_count"] == 3
