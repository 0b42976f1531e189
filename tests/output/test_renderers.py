"""Tests for operation-specific Rich renderers."""

from graphtoll.output.renderers import render_quiet, render_result
from graphtoll.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


_REQUEST = {
    "id": "req_000000000001",
    "graph_id": "gph_000000000001",
    "source_node": "A",
    "target_node": "B",
    "proposed_weight": 20.0,
    "proposer_id": "carol",
    "status": "approved",
    "applied_weight": 11.0,
    "created_at": "2025-01-01T00:00:00.000000+00:00",
    "decided_at": "2025-01-02T00:00:00.000000+00:00",
}


# ── Errors ───────────────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("compute_path", "NO_PATH", "No path from 'C' to 'A'"))
        assert "ERROR" in output
        assert "compute_path" in output
        assert "No path from 'C' to 'A'" in output
        assert "NO_PATH" in output

    def test_verbose_shows_detail(self) -> None:
        result = _err("create_graph", "INSUFFICIENT_TOKENS", "short", required=0.26)
        output = render_result(result, verbose=True)
        assert "detail" in output
        assert "required: 0.26" in output

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="test"))


# ── Mutations ────────────────────────────────────────────────────────


class TestMutationRenderer:
    def test_create_graph(self) -> None:
        output = render_result(
            _ok(
                "create_graph",
                graph_id="gph_000000000001",
                owner_id="alice",
                cost=0.26,
                node_count=3,
                edge_count=3,
                residual_balance=0.74,
            )
        )
        assert "OK" in output
        assert "gph_000000000001" in output
        assert "cost: 0.26" in output
        assert "residual_balance: 0.74" in output

    def test_queued_proposal(self) -> None:
        output = render_result(
            _ok(
                "propose_update",
                outcome="queued",
                graph_id="gph_000000000001",
                source_node="A",
                target_node="B",
                current_weight=10.0,
                proposed_weight=20.0,
                deviation=1.0,
                new_weight=None,
                request_id="req_000000000001",
            )
        )
        assert "queued" in output
        assert "req_000000000001" in output
        assert "new_weight" not in output

    def test_verbose_telemetry(self) -> None:
        result = ServiceResult(
            ok=True,
            op="refill",
            data={"principal_id": "alice", "new_balance": 1.0},
            meta={"telemetry": {"name": "LedgerService.refill", "duration_ms": 1.5}},
        )
        output = render_result(result, verbose=True)
        assert "LedgerService.refill" in output


# ── Tables ───────────────────────────────────────────────────────────


class TestTables:
    def test_graph_list(self) -> None:
        item = {
            "graph_id": "gph_000000000001",
            "owner_id": "alice",
            "cost": 0.26,
            "node_count": 3,
            "edge_count": 3,
            "created_at": "2025-01-01T00:00:00.000000+00:00",
        }
        output = render_result(_ok("list_graphs", count=1, items=[item]))
        assert "gph_000000000001" in output
        assert "1 graphs" in output

    def test_request_history(self) -> None:
        output = render_result(
            _ok("update_history", count=1, items=[_REQUEST], filters={"since": "2025-01-01"})
        )
        assert "req_000000000001" in output
        assert "approved" in output
        assert "since=2025-01-01" in output

    def test_accounts(self) -> None:
        items = [{"principal_id": "alice", "balance": 2.5, "modified_at": "2025-01-01"}]
        output = render_result(_ok("list_accounts", count=1, items=items))
        assert "alice" in output
        assert "2.50" in output


class TestGraphDetail:
    def test_lists_edges(self) -> None:
        output = render_result(
            _ok(
                "get_graph",
                graph_id="gph_000000000001",
                owner_id="alice",
                cost=0.26,
                node_count=3,
                edge_count=3,
                adjacency={"A": {"B": 3.0, "C": 5.0}, "B": {"C": 1.0}},
                created_at="2025-01-01",
                modified_at="2025-01-01",
            )
        )
        assert "gph_000000000001" in output
        assert "A → B  3" in output
        assert "B → C  1" in output


class TestPathRenderer:
    def test_chain(self) -> None:
        output = render_result(
            _ok(
                "compute_path",
                graph_id="gph_000000000001",
                trip_id="trp_000000000001",
                start="A",
                goal="C",
                path=["A", "B", "C"],
                cost=4.0,
                tokens_charged=0.26,
                residual_balance=0.74,
                execution_ms=0.02,
            )
        )
        assert "A → B → C" in output
        assert "Path cost: 4.0" in output
        assert "tokens_charged: 0.26" in output
        assert "trp_000000000001" not in output


class TestGenericRenderer:
    def test_unknown_op(self) -> None:
        output = render_result(_ok("mystery", nested={"a": 1}, plain="x"))
        assert 'nested: {"a":1}' in output
        assert "plain: x" in output


class TestRenderQuiet:
    def test_items_ids(self) -> None:
        items = [{"principal_id": "alice"}, {"principal_id": "bob"}]
        assert render_quiet(_ok("list_accounts", items=items)) == "alice\nbob"

    def test_graph_ids(self) -> None:
        assert render_quiet(_ok("list_graphs", items=[{"graph_id": "gph_1"}])) == "gph_1"
