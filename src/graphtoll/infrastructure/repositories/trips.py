"""Trip history persistence (one row per paid path computation)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select

from graphtoll.infrastructure.database.schema import trips

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Connection


class TripRepository:
    """Encapsulates SQL for the ``trips`` table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def insert(
        self,
        trip_id: str,
        *,
        graph_id: str,
        executor_id: str,
        start_node: str,
        goal_node: str,
        path: Sequence[str],
        path_cost: float,
        tokens_charged: float,
        execution_ms: float,
        now: str,
    ) -> None:
        self._conn.execute(
            insert(trips).values(
                id=trip_id,
                graph_id=graph_id,
                executor_id=executor_id,
                start_node=start_node,
                goal_node=goal_node,
                path=json.dumps(list(path)),
                path_cost=path_cost,
                tokens_charged=tokens_charged,
                execution_ms=execution_ms,
                executed_at=now,
            )
        )

    def find(
        self,
        *,
        graph_id: str | None = None,
        executor_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Trips matching the filters, oldest first, with ``path`` decoded."""
        stmt = select(trips).order_by(trips.c.executed_at, trips.c.id)
        if graph_id is not None:
            stmt = stmt.where(trips.c.graph_id == graph_id)
        if executor_id is not None:
            stmt = stmt.where(trips.c.executor_id == executor_id)

        items: list[dict[str, Any]] = []
        for row in self._conn.execute(stmt).mappings():
            item = dict(row)
            item["path"] = json.loads(item["path"])
            items.append(item)
        return items
