"""ModerationService — weight proposals, arbiter decisions, and history.

Small corrections are blended into the edge weight immediately; large ones
wait in ``weight_requests`` for an arbiter. Both paths, and approval, read
the current weight and write the new one while holding the graph lock, so
concurrent updates to the same graph never lose a write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from graphtoll.config.models import ModerationConfig
from graphtoll.domain.adjacency import is_positive_weight
from graphtoll.domain.errors import (
    AlreadyDecided,
    EdgeNotFound,
    InvalidWeight,
    RequestNotFound,
)
from graphtoll.domain.ids import generate_id, validate_id
from graphtoll.domain.moderation import (
    RequestStatus,
    Verdict,
    blend,
    classify,
    deviation,
    is_valid_transition,
    parse_decision,
)
from graphtoll.services._helpers import now_iso, parse_time_bound
from graphtoll.services.base import BaseService, service_op
from graphtoll.services.contracts import (
    DecisionResultData,
    ProposalResultData,
    WeightRequestListResultData,
    dump_validated,
)
from graphtoll.services.graph import load_graph, write_edge
from graphtoll.services.result import ServiceResult
from graphtoll.services.telemetry import traced

if TYPE_CHECKING:
    from graphtoll.infrastructure.store import Store, StoreTransaction

log = structlog.get_logger(__name__)


class ModerationService(BaseService):
    """Proposals, arbiter decisions, and the request log."""

    def __init__(self, store: Store, config: ModerationConfig | None = None) -> None:
        super().__init__(store)
        self._config = config if config is not None else store.settings.moderation

    @property
    def config(self) -> ModerationConfig:
        return self._config

    # ------------------------------------------------------------------
    # propose
    # ------------------------------------------------------------------

    @traced
    @service_op("propose_update")
    def propose_update(
        self,
        graph_id: str,
        source: str,
        target: str,
        proposed_weight: float,
        proposer_id: str,
    ) -> ServiceResult:
        """Submit a new weight for ``source -> target``.

        Returns ``outcome="auto_applied"`` with the blended ``new_weight``,
        or ``outcome="queued"`` with the ``request_id`` of the pending
        request. Queued proposals leave the graph untouched.
        """
        if not is_positive_weight(proposed_weight):
            raise InvalidWeight(
                f"Proposed weight must be a finite positive number, got {proposed_weight!r}",
                weight=proposed_weight,
            )
        proposed = float(proposed_weight)

        with self._store.graph_locks.hold(graph_id), self._store.transaction() as txn:
            adjacency, _ = load_graph(txn, graph_id)
            current = adjacency.weight(source, target)
            if current is None:
                raise EdgeNotFound(
                    f"Edge {source!r} -> {target!r} does not exist in graph {graph_id}",
                    graph_id=graph_id,
                    source=source,
                    target=target,
                )

            verdict = classify(current, proposed, threshold=self._config.auto_apply_threshold)
            payload: dict[str, Any] = {
                "outcome": str(verdict),
                "graph_id": graph_id,
                "source_node": source,
                "target_node": target,
                "current_weight": current,
                "proposed_weight": proposed,
                "deviation": deviation(current, proposed),
            }
            if verdict is Verdict.AUTO_APPLY:
                new_weight = blend(current, proposed, alpha=self._config.alpha)
                write_edge(txn, graph_id, source, target, new_weight)
                payload["new_weight"] = new_weight
            else:
                request_id = generate_id("request")
                txn.requests.insert(
                    request_id,
                    graph_id=graph_id,
                    source_node=source,
                    target_node=target,
                    proposed_weight=proposed,
                    proposer_id=proposer_id,
                    now=now_iso(),
                )
                payload["request_id"] = request_id

        log.info(
            "weight.proposed",
            graph_id=graph_id,
            source=source,
            target=target,
            proposer_id=proposer_id,
            outcome=payload["outcome"],
        )
        data = dump_validated(ProposalResultData, payload)
        return ServiceResult(ok=True, op="propose_update", data=data)

    # ------------------------------------------------------------------
    # decide
    # ------------------------------------------------------------------

    @traced
    @service_op("decide_update")
    def decide_update(self, request_id: str, decision: str) -> ServiceResult:
        """Approve or reject a pending request. Each request is decided once.

        Approval blends the proposal against the edge's weight at approval
        time, not the weight the proposal was measured against. If the
        graph or edge has gone away, approval fails and the request stays
        pending.
        """
        status = parse_decision(decision)

        with self._store.transaction() as txn:
            row = txn.requests.get(request_id) if validate_id(request_id, "request") else None
        if row is None:
            raise RequestNotFound(f"No request found with ID: {request_id}", request_id=request_id)
        if not is_valid_transition(row.status, status):
            raise AlreadyDecided(
                f"Request {request_id} is already {row.status}",
                request_id=request_id,
                status=row.status,
            )

        payload: dict[str, Any] = {
            "request_id": request_id,
            "graph_id": row.graph_id,
            "status": str(status),
        }
        if status is RequestStatus.REJECTED:
            with self._store.transaction() as txn:
                self._transition(txn, request_id, status)
        else:
            with self._store.graph_locks.hold(row.graph_id), self._store.transaction() as txn:
                adjacency, _ = load_graph(txn, row.graph_id)
                current = adjacency.weight(row.source_node, row.target_node)
                if current is None:
                    raise EdgeNotFound(
                        f"Edge {row.source_node!r} -> {row.target_node!r} "
                        f"no longer exists in graph {row.graph_id}",
                        graph_id=row.graph_id,
                        source=row.source_node,
                        target=row.target_node,
                    )
                new_weight = blend(current, row.proposed_weight, alpha=self._config.alpha)
                write_edge(txn, row.graph_id, row.source_node, row.target_node, new_weight)
                self._transition(txn, request_id, status, applied_weight=new_weight)
            payload["previous_weight"] = current
            payload["new_weight"] = new_weight

        log.info("weight.decided", request_id=request_id, graph_id=row.graph_id, status=str(status))
        data = dump_validated(DecisionResultData, payload)
        return ServiceResult(ok=True, op="decide_update", data=data)

    @staticmethod
    def _transition(
        txn: StoreTransaction,
        request_id: str,
        status: RequestStatus,
        *,
        applied_weight: float | None = None,
    ) -> None:
        """Close a pending request, or raise if a competing decision won."""
        won = txn.requests.transition(
            request_id,
            from_status=RequestStatus.PENDING,
            to_status=status,
            now=now_iso(),
            applied_weight=applied_weight,
        )
        if not won:
            raise AlreadyDecided(
                f"Request {request_id} was decided concurrently",
                request_id=request_id,
            )

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    @traced
    @service_op("list_pending")
    def list_pending(self, *, graph_id: str | None = None) -> ServiceResult:
        """Requests awaiting a decision, oldest first."""
        with self._store.transaction() as txn:
            items = txn.requests.find(status=RequestStatus.PENDING, graph_id=graph_id)
        filters = {"graph_id": graph_id} if graph_id else {}
        data = dump_validated(
            WeightRequestListResultData,
            {"count": len(items), "items": items, "filters": filters},
        )
        return ServiceResult(ok=True, op="list_pending", data=data)

    @traced
    @service_op("update_history")
    def update_history(
        self,
        *,
        graph_id: str | None = None,
        since: str | None = None,
        until: str | None = None,
    ) -> ServiceResult:
        """Every request in any status, filtered by graph and creation time.

        Args:
            graph_id: Restrict to one graph.
            since: Inclusive lower bound (``YYYY-MM-DD`` or ISO datetime).
            until: Upper bound; a bare date includes that whole day.
        """
        since_iso = parse_time_bound(since)[0] if since else None
        until_iso, until_exclusive = parse_time_bound(until, upper=True) if until else (None, False)

        with self._store.transaction() as txn:
            items = txn.requests.find(
                graph_id=graph_id,
                since=since_iso,
                until=until_iso,
                until_exclusive=until_exclusive,
            )

        filters = {
            key: value
            for key, value in (("graph_id", graph_id), ("since", since), ("until", until))
            if value
        }
        data = dump_validated(
            WeightRequestListResultData,
            {"count": len(items), "items": items, "filters": filters},
        )
        return ServiceResult(ok=True, op="update_history", data=data)
