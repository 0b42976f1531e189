"""Graph record persistence.

The adjacency is serialized as JSON with source keys in their original
order, which keeps node handles (and path tie-breaking) stable across
reloads.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from graphtoll.domain.adjacency import Adjacency
from graphtoll.infrastructure.database.schema import graphs

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row


class GraphRepository:
    """Encapsulates SQL for the ``graphs`` table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def insert(
        self,
        graph_id: str,
        *,
        owner_id: str,
        adjacency: Adjacency,
        cost: float,
        now: str,
    ) -> None:
        self._conn.execute(
            insert(graphs).values(
                id=graph_id,
                owner_id=owner_id,
                adjacency=json.dumps(adjacency.to_mapping()),
                cost=cost,
                node_count=adjacency.node_count,
                edge_count=adjacency.edge_count,
                created_at=now,
                modified_at=now,
            )
        )

    def get(self, graph_id: str) -> Row[Any] | None:
        return self._conn.execute(select(graphs).where(graphs.c.id == graph_id)).first()

    def load_adjacency(self, graph_id: str) -> tuple[Adjacency, float] | None:
        """Parse the stored graph into a fresh arena.

        Returns ``(adjacency, frozen_cost)``, or None if the graph is unknown.
        """
        row = self._conn.execute(
            select(graphs.c.adjacency, graphs.c.cost).where(graphs.c.id == graph_id)
        ).first()
        if row is None:
            return None
        return Adjacency.from_mapping(json.loads(row.adjacency)), float(row.cost)

    def replace_adjacency(self, graph_id: str, adjacency: Adjacency, *, now: str) -> None:
        """Overwrite the stored adjacency. Cost is never recomputed."""
        self._conn.execute(
            update(graphs)
            .where(graphs.c.id == graph_id)
            .values(adjacency=json.dumps(adjacency.to_mapping()), modified_at=now)
        )

    def list_summaries(self, *, owner_id: str | None = None) -> list[dict[str, Any]]:
        """Graph summaries ordered by creation time."""
        stmt = select(
            graphs.c.id,
            graphs.c.owner_id,
            graphs.c.cost,
            graphs.c.node_count,
            graphs.c.edge_count,
            graphs.c.created_at,
        ).order_by(graphs.c.created_at, graphs.c.id)
        if owner_id is not None:
            stmt = stmt.where(graphs.c.owner_id == owner_id)
        return [dict(row) for row in self._conn.execute(stmt).mappings()]
