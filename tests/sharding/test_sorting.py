"""Tests for shard processing order.

Tests cover:
- depends-on edges and parent links
- Priority tie-breaking among ready shards
- Cycle fallback
- Unknown ids in references
"""

import logging

import pytest

from specshard.sharding.models import CrossReference, Shard
from specshard.sharding.sorting import calculate_processing_order


def _shard(shard_id: str, priority: int = 0, parent_id: str | None = None) -> Shard:
    return Shard(
        id=shard_id, type="section", content=shard_id, priority=priority, parent_id=parent_id
    )


def _depends(from_id: str, to_id: str) -> CrossReference:
    return CrossReference(from_id=from_id, to_id=to_id, type="depends-on")


class TestCalculateProcessingOrder:
    """Tests for calculate_processing_order."""

    def test_no_edges_orders_by_priority(self) -> None:
        """Without edges shards come out by priority."""
        shards = [_shard("a", 2), _shard("b", 0), _shard("c", 1)]

        assert calculate_processing_order(shards, []) == ["b", "c", "a"]

    def test_equal_priority_keeps_input_order(self) -> None:
        """Ties are broken by input position."""
        shards = [_shard("x"), _shard("y"), _shard("z")]

        assert calculate_processing_order(shards, []) == ["x", "y", "z"]

    def test_dependencies_come_first(self) -> None:
        """A depends-on target precedes the dependent shard."""
        shards = [_shard("a", 0), _shard("b", 1), _shard("c", 2)]
        refs = [_depends("a", "c"), _depends("c", "b")]

        assert calculate_processing_order(shards, refs) == ["b", "c", "a"]

    def test_references_do_not_constrain(self) -> None:
        """Plain references never change the order."""
        shards = [_shard("a", 0), _shard("b", 1)]
        refs = [CrossReference(from_id="a", to_id="b", type="references")]

        assert calculate_processing_order(shards, refs) == ["a", "b"]

    def test_parent_precedes_child(self) -> None:
        """A parent is processed before its child regardless of priority."""
        shards = [_shard("child", 0, parent_id="parent"), _shard("parent", 5)]

        assert calculate_processing_order(shards, []) == ["parent", "child"]

    def test_cycle_falls_back_to_priority(self, caplog: pytest.LogCaptureFixture) -> None:
        """Shards in a cycle are appended by priority."""
        shards = [_shard("a", 1), _shard("b", 2), _shard("c", 0)]
        refs = [_depends("a", "b"), _depends("b", "a")]

        with caplog.at_level(logging.INFO):
            order = calculate_processing_order(shards, refs)

        assert order == ["c", "a", "b"]
        assert "cycle" in caplog.text.lower()

    def test_unknown_ids_ignored(self) -> None:
        """Edges naming shards outside the set are skipped."""
        shards = [_shard("a", 0), _shard("b", 1, parent_id="ghost")]
        refs = [_depends("a", "missing"), _depends("missing", "b")]

        assert calculate_processing_order(shards, refs) == ["a", "b"]

    def test_order_is_permutation(self) -> None:
        """Every shard appears exactly once."""
        shards = [_shard(f"s{i}", i % 3) for i in range(10)]
        refs = [_depends(f"s{i}", f"s{i + 1}") for i in range(9)]

        order = calculate_processing_order(shards, refs)

        assert sorted(order) == sorted(s.id for s in shards)
        assert order[0] == "s9"

    def test_empty_input(self) -> None:
        """No shards -> empty order."""
        assert calculate_processing_order([], []) == []
