"""Least-cost path search over an :class:`Adjacency` snapshot.

The arena is copied into a NetworkX ``DiGraph`` keyed by integer handle and
searched with Dijkstra (binary heap, O((V + E) log V)). Nodes and edges are
added in handle order, so among equal-cost paths the same one is returned
for the same graph. Only the total cost is guaranteed when several
minimum-cost paths exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import networkx as nx

from graphtoll.domain.errors import NodeNotFound, NoPathExists

if TYPE_CHECKING:
    from graphtoll.domain.adjacency import Adjacency


@dataclass(frozen=True)
class PathResult:
    """Ordered node names from start to goal inclusive, and their total weight."""

    path: tuple[str, ...]
    cost: float

    def to_dict(self) -> dict[str, Any]:
        return {"path": list(self.path), "cost": self.cost}


def build_digraph(graph: Adjacency) -> nx.DiGraph:
    """Copy *graph* into a ``DiGraph`` whose nodes are handles.

    Destination-only nodes are included so they can be reached.
    """
    g = nx.DiGraph()
    g.add_nodes_from(range(len(graph)))
    for handle in range(len(graph)):
        g.add_weighted_edges_from(
            (handle, target, weight) for target, weight in graph.neighbors(handle)
        )
    return g


def shortest_path(graph: Adjacency, start: str, goal: str) -> PathResult:
    """Find the minimum-weight path from *start* to *goal*.

    Args:
        graph: Immutable snapshot to search. Concurrent edge updates that
            commit after the snapshot was taken are not observed.
        start: Source node name.
        goal: Destination node name.

    Raises:
        NodeNotFound: If *start* or *goal* is not a node of *graph*
            (as a source key or as a destination).
        NoPathExists: If *goal* is unreachable from *start*.
    """
    src = graph.handle(start)
    dst = graph.handle(goal)
    if src is None or dst is None:
        missing = [name for name, h in ((start, src), (goal, dst)) if h is None]
        raise NodeNotFound(
            f"Node(s) not found in graph: {', '.join(repr(m) for m in missing)}",
            nodes=missing,
        )

    if src == dst:
        return PathResult(path=(start,), cost=0.0)

    try:
        cost, handles = nx.single_source_dijkstra(
            build_digraph(graph), src, dst, weight="weight"
        )
    except nx.NodeNotFound as exc:
        raise NodeNotFound(str(exc), nodes=[start, goal]) from exc
    except nx.NetworkXNoPath as exc:
        raise NoPathExists(
            f"No path from {start!r} to {goal!r}",
            start=start,
            goal=goal,
        ) from exc

    return PathResult(path=tuple(graph.name(h) for h in handles), cost=float(cost))
