"""Processing order for shards.

Orders shards topologically over "depends-on" references and parent links,
preferring lower priority among ready shards. Shards caught in a cycle are
appended by priority so the result always covers every shard exactly once.
"""

from __future__ import annotations

import heapq
import logging

from .models import CrossReference, Shard

logger = logging.getLogger(__name__)


def calculate_processing_order(
    shards: list[Shard],
    references: list[CrossReference],
) -> list[str]:
    """Compute a deterministic processing order.

    An edge ``from -> to`` of type "depends-on" requires ``to`` before
    ``from``; a shard's parent precedes the shard. Among ready shards the
    lowest priority goes first, ties broken by input position. Edges naming
    unknown shards are ignored.

    Args:
        shards: Shards to order.
        references: Cross-references between them.

    Returns:
        Permutation of all shard ids.

    """
    index = {shard.id: i for i, shard in enumerate(shards)}
    in_degree = [0] * len(shards)
    successors: list[list[int]] = [[] for _ in shards]

    def add_edge(before: str, after: str) -> None:
        if before not in index or after not in index or before == after:
            return
        successors[index[before]].append(index[after])
        in_degree[index[after]] += 1

    for ref in references:
        if ref.type == "depends-on":
            add_edge(ref.to_id, ref.from_id)

    for shard in shards:
        if shard.parent_id:
            add_edge(shard.parent_id, shard.id)

    ready = [(shard.priority, i) for i, shard in enumerate(shards) if in_degree[i] == 0]
    heapq.heapify(ready)

    order: list[int] = []
    while ready:
        _, current = heapq.heappop(ready)
        order.append(current)
        for successor in successors[current]:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                heapq.heappush(ready, (shards[successor].priority, successor))

    if len(order) < len(shards):
        scheduled = set(order)
        remaining = sorted(
            (i for i in range(len(shards)) if i not in scheduled),
            key=lambda i: (shards[i].priority, i),
        )
        logger.info(
            "Dependency cycle among %d shards, falling back to priority order: %s",
            len(remaining),
            [shards[i].id for i in remaining],
        )
        order.extend(remaining)

    return [shards[i].id for i in order]
