"""Weight-update request persistence with atomic status transitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from graphtoll.infrastructure.database.schema import weight_requests

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row


class WeightRequestRepository:
    """Encapsulates SQL for the ``weight_requests`` table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def insert(
        self,
        request_id: str,
        *,
        graph_id: str,
        source_node: str,
        target_node: str,
        proposed_weight: float,
        proposer_id: str,
        now: str,
    ) -> None:
        self._conn.execute(
            insert(weight_requests).values(
                id=request_id,
                graph_id=graph_id,
                source_node=source_node,
                target_node=target_node,
                proposed_weight=proposed_weight,
                proposer_id=proposer_id,
                status="pending",
                created_at=now,
            )
        )

    def get(self, request_id: str) -> Row[Any] | None:
        return self._conn.execute(
            select(weight_requests).where(weight_requests.c.id == request_id)
        ).first()

    def transition(
        self,
        request_id: str,
        *,
        from_status: str,
        to_status: str,
        now: str,
        applied_weight: float | None = None,
    ) -> bool:
        """Move a request from *from_status* to *to_status*.

        The status check and the write are a single conditional UPDATE.
        Returns False when the request was not in *from_status*, i.e. a
        competing decision already won.
        """
        result = self._conn.execute(
            update(weight_requests)
            .where(
                weight_requests.c.id == request_id,
                weight_requests.c.status == from_status,
            )
            .values(status=to_status, decided_at=now, applied_weight=applied_weight)
        )
        return result.rowcount == 1

    def find(
        self,
        *,
        status: str | None = None,
        graph_id: str | None = None,
        since: str | None = None,
        until: str | None = None,
        until_exclusive: bool = False,
    ) -> list[dict[str, Any]]:
        """Requests matching all given filters, oldest first.

        *since* and *until* bound ``created_at`` (ISO 8601 strings);
        *since* is inclusive, *until* inclusive unless *until_exclusive*.
        """
        stmt = select(weight_requests).order_by(
            weight_requests.c.created_at, weight_requests.c.id
        )
        if status is not None:
            stmt = stmt.where(weight_requests.c.status == status)
        if graph_id is not None:
            stmt = stmt.where(weight_requests.c.graph_id == graph_id)
        if since is not None:
            stmt = stmt.where(weight_requests.c.created_at >= since)
        if until is not None:
            if until_exclusive:
                stmt = stmt.where(weight_requests.c.created_at < until)
            else:
                stmt = stmt.where(weight_requests.c.created_at <= until)
        return [dict(row) for row in self._conn.execute(stmt).mappings()]
