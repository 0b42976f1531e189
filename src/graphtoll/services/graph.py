"""GraphService — graph registration, lookup, edge mutation, and paid routing.

Pipeline for ``create_graph``: VALIDATE → PRICE → CHARGE + PERSIST → RESPOND.
Charging and persisting share one transaction: a refused debit leaves no
graph behind, and a failed insert refunds nothing because nothing was
committed.

``compute_path`` searches an immutable snapshot parsed at the start of the
call, then charges the graph's frozen cost and records a trip in a second
transaction. Failed searches are free.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog

from graphtoll.domain.adjacency import Adjacency
from graphtoll.domain.cost import graph_cost
from graphtoll.domain.errors import EdgeNotFound, GraphNotFound
from graphtoll.domain.ids import generate_id, validate_id
from graphtoll.domain.pathfinding import shortest_path
from graphtoll.services._helpers import now_iso
from graphtoll.services.base import BaseService, service_op
from graphtoll.services.contracts import (
    GraphDetailData,
    GraphListResultData,
    PathResultData,
    TripListResultData,
    dump_validated,
)
from graphtoll.services.ledger import charge
from graphtoll.services.result import ServiceResult
from graphtoll.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from graphtoll.infrastructure.store import StoreTransaction

log = structlog.get_logger(__name__)


def load_graph(txn: StoreTransaction, graph_id: str) -> tuple[Adjacency, float]:
    """Load ``(adjacency, frozen_cost)`` or raise :class:`GraphNotFound`."""
    loaded = txn.graphs.load_adjacency(graph_id) if validate_id(graph_id, "graph") else None
    if loaded is None:
        raise GraphNotFound(f"No graph found with ID: {graph_id}", graph_id=graph_id)
    return loaded


def write_edge(
    txn: StoreTransaction,
    graph_id: str,
    source: str,
    target: str,
    weight: float,
) -> float:
    """Set the weight of an existing edge within an open transaction.

    This is the only code path that rewrites a stored graph. Callers must
    hold ``store.graph_locks.hold(graph_id)`` when the new weight was
    derived from a weight read earlier.

    Returns the previous weight.

    Raises:
        GraphNotFound: If the graph does not exist.
        EdgeNotFound: If ``source -> target`` is not an edge.
        InvalidWeight: If *weight* is not a finite positive number.
    """
    adjacency, _ = load_graph(txn, graph_id)
    previous = adjacency.weight(source, target)
    if previous is None:
        raise EdgeNotFound(
            f"Edge {source!r} -> {target!r} does not exist in graph {graph_id}",
            graph_id=graph_id,
            source=source,
            target=target,
        )
    updated = adjacency.with_weight(source, target, weight)
    txn.graphs.replace_adjacency(graph_id, updated, now=now_iso())
    log.debug(
        "edge.mutated",
        graph_id=graph_id,
        source=source,
        target=target,
        previous=previous,
        weight=weight,
    )
    return previous


class GraphService(BaseService):
    """Handles graph storage and shortest-path execution."""

    # ------------------------------------------------------------------
    # create / read
    # ------------------------------------------------------------------

    @traced
    @service_op("create_graph")
    def create_graph(self, owner_id: str, adjacency: Any) -> ServiceResult:
        """Validate, price, and store a graph, charging *owner_id* its cost.

        Args:
            owner_id: Principal paying for and owning the graph.
            adjacency: Nested mapping ``{node: {neighbor: weight}}``.
        """
        arena = Adjacency.from_mapping(adjacency)
        pricing = self._store.settings.pricing
        cost = graph_cost(arena, node_price=pricing.node_price, edge_price=pricing.edge_price)

        graph_id = generate_id("graph")
        with self._store.transaction() as txn:
            charge(txn, owner_id, cost)
            txn.graphs.insert(
                graph_id, owner_id=owner_id, adjacency=arena, cost=cost, now=now_iso()
            )
            balance = txn.accounts.balance(owner_id) or 0.0

        log.info(
            "graph.created",
            graph_id=graph_id,
            owner_id=owner_id,
            nodes=arena.node_count,
            edges=arena.edge_count,
            cost=cost,
        )
        return ServiceResult(
            ok=True,
            op="create_graph",
            data={
                "graph_id": graph_id,
                "owner_id": owner_id,
                "cost": cost,
                "node_count": arena.node_count,
                "edge_count": arena.edge_count,
                "residual_balance": balance,
            },
        )

    @traced
    @service_op("get_graph")
    def get_graph(self, graph_id: str) -> ServiceResult:
        """Return the full graph record including its adjacency."""
        with self._store.transaction() as txn:
            adjacency, _ = load_graph(txn, graph_id)
            row = txn.graphs.get(graph_id)
            if row is None:
                raise GraphNotFound(f"No graph found with ID: {graph_id}", graph_id=graph_id)

        data = dump_validated(
            GraphDetailData,
            {
                "graph_id": row.id,
                "owner_id": row.owner_id,
                "cost": row.cost,
                "node_count": row.node_count,
                "edge_count": row.edge_count,
                "adjacency": adjacency.to_mapping(),
                "created_at": row.created_at,
                "modified_at": row.modified_at,
            },
        )
        return ServiceResult(ok=True, op="get_graph", data=data)

    @traced
    @service_op("list_graphs")
    def list_graphs(self, *, owner_id: str | None = None) -> ServiceResult:
        """List graph summaries, optionally only those owned by *owner_id*."""
        with self._store.transaction() as txn:
            rows = txn.graphs.list_summaries(owner_id=owner_id)

        items = [{"graph_id": row.pop("id"), **row} for row in rows]
        data = dump_validated(GraphListResultData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op="list_graphs", data=data)

    # ------------------------------------------------------------------
    # mutate_edge — the single write path for edge weights
    # ------------------------------------------------------------------

    @traced
    @service_op("mutate_edge")
    def mutate_edge(self, graph_id: str, source: str, target: str, weight: float) -> ServiceResult:
        """Overwrite the weight of an existing edge.

        The graph's stored cost is not recomputed: an edge update changes
        neither the node count nor the edge count.
        """
        with self._store.graph_locks.hold(graph_id), self._store.transaction() as txn:
            previous = write_edge(txn, graph_id, source, target, weight)
        return ServiceResult(
            ok=True,
            op="mutate_edge",
            data={
                "graph_id": graph_id,
                "source_node": source,
                "target_node": target,
                "previous_weight": previous,
                "new_weight": float(weight),
            },
        )

    # ------------------------------------------------------------------
    # compute_path — Dijkstra + charge + trip record
    # ------------------------------------------------------------------

    @traced
    @service_op("compute_path")
    def compute_path(self, graph_id: str, executor_id: str, start: str, goal: str) -> ServiceResult:
        """Find the least-cost route and charge *executor_id* the graph's frozen cost.

        Args:
            graph_id: Graph to search.
            executor_id: Principal paying for the execution.
            start: Source node name.
            goal: Destination node name.
        """
        with self._store.transaction() as txn:
            snapshot, frozen_cost = load_graph(txn, graph_id)

        with trace_span("dijkstra") as span:
            started = time.perf_counter()
            result = shortest_path(snapshot, start, goal)
            execution_ms = (time.perf_counter() - started) * 1000
            if span:
                span.annotate("nodes", snapshot.node_count)
                span.annotate("edges", snapshot.edge_count)

        trip_id = generate_id("trip")
        with self._store.transaction() as txn:
            charge(txn, executor_id, frozen_cost)
            txn.trips.insert(
                trip_id,
                graph_id=graph_id,
                executor_id=executor_id,
                start_node=start,
                goal_node=goal,
                path=result.path,
                path_cost=result.cost,
                tokens_charged=frozen_cost,
                execution_ms=execution_ms,
                now=now_iso(),
            )
            residual = txn.accounts.balance(executor_id) or 0.0

        log.info(
            "path.computed",
            graph_id=graph_id,
            executor_id=executor_id,
            hops=len(result.path) - 1,
            cost=result.cost,
            charged=frozen_cost,
        )
        data = dump_validated(
            PathResultData,
            {
                "graph_id": graph_id,
                "trip_id": trip_id,
                "start": start,
                "goal": goal,
                "path": list(result.path),
                "cost": result.cost,
                "tokens_charged": frozen_cost,
                "residual_balance": residual,
                "execution_ms": round(execution_ms, 3),
            },
        )
        return ServiceResult(ok=True, op="compute_path", data=data)

    @traced
    @service_op("list_trips")
    def list_trips(
        self,
        *,
        graph_id: str | None = None,
        executor_id: str | None = None,
    ) -> ServiceResult:
        """Recorded path executions, oldest first."""
        with self._store.transaction() as txn:
            items = txn.trips.find(graph_id=graph_id, executor_id=executor_id)
        data = dump_validated(TripListResultData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op="list_trips", data=data)
