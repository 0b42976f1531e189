"""Tests for the per-table repositories."""

from __future__ import annotations

import pytest

from graphtoll.domain.adjacency import Adjacency
from graphtoll.infrastructure.store import Store

_T0 = "2025-01-01T00:00:00.000000+00:00"
_T1 = "2025-01-02T00:00:00.000000+00:00"
_T2 = "2025-01-03T00:00:00.000000+00:00"


class TestAccountRepository:
    def test_unknown_balance_is_none(self, store: Store) -> None:
        with store.transaction() as txn:
            assert txn.accounts.balance("nobody") is None

    def test_ensure_only_creates_once(self, store: Store) -> None:
        with store.transaction() as txn:
            assert txn.accounts.ensure("alice", opening_balance=2.0, now=_T0)
            assert not txn.accounts.ensure("alice", opening_balance=99.0, now=_T1)
            assert txn.accounts.balance("alice") == 2.0

    def test_debit_admitted(self, store: Store) -> None:
        with store.transaction() as txn:
            txn.accounts.ensure("alice", opening_balance=1.0, now=_T0)
            assert txn.accounts.debit("alice", 0.26, now=_T1)
            assert txn.accounts.balance("alice") == 0.74

    def test_debit_exact_balance(self, store: Store) -> None:
        with store.transaction() as txn:
            txn.accounts.ensure("alice", opening_balance=0.26, now=_T0)
            assert txn.accounts.debit("alice", 0.26, now=_T1)
            assert txn.accounts.balance("alice") == 0.0

    def test_debit_refused(self, store: Store) -> None:
        with store.transaction() as txn:
            txn.accounts.ensure("alice", opening_balance=0.25, now=_T0)
            assert not txn.accounts.debit("alice", 0.26, now=_T1)
            assert txn.accounts.balance("alice") == 0.25

    def test_debit_unknown_refused(self, store: Store) -> None:
        with store.transaction() as txn:
            assert not txn.accounts.debit("nobody", 0.01, now=_T1)

    def test_credit_returns_new_balance(self, store: Store) -> None:
        with store.transaction() as txn:
            txn.accounts.ensure("alice", opening_balance=1.5, now=_T0)
            assert txn.accounts.credit("alice", 2.25, now=_T1) == 3.75

    def test_balances_do_not_drift(self, store: Store) -> None:
        with store.transaction() as txn:
            txn.accounts.ensure("alice", opening_balance=0.0, now=_T0)
            for _ in range(10):
                txn.accounts.credit("alice", 0.1, now=_T1)
            assert txn.accounts.balance("alice") == 1.0

    def test_list_all_sorted(self, store: Store) -> None:
        with store.transaction() as txn:
            txn.accounts.ensure("carol", opening_balance=1.0, now=_T0)
            txn.accounts.ensure("alice", opening_balance=2.0, now=_T0)
            items = txn.accounts.list_all()
        assert [i["principal_id"] for i in items] == ["alice", "carol"]
        assert items[0] == {"principal_id": "alice", "balance": 2.0, "modified_at": _T0}


class TestGraphRepository:
    def test_load_preserves_order(self, store: Store) -> None:
        adj = Adjacency.from_mapping({"B": {"A": 1.0}, "A": {"C": 2.0}})
        with store.transaction() as txn:
            txn.graphs.insert("gph_000000000001", owner_id="o", adjacency=adj, cost=0.24, now=_T0)
            loaded = txn.graphs.load_adjacency("gph_000000000001")
        assert loaded is not None
        reloaded, cost = loaded
        assert reloaded.names == adj.names
        assert cost == 0.24

    def test_load_unknown(self, store: Store) -> None:
        with store.transaction() as txn:
            assert txn.graphs.load_adjacency("gph_ffffffffffff") is None
            assert txn.graphs.get("gph_ffffffffffff") is None

    def test_replace_keeps_cost(self, store: Store) -> None:
        adj = Adjacency.from_mapping({"A": {"B": 1.0}})
        with store.transaction() as txn:
            txn.graphs.insert("gph_000000000001", owner_id="o", adjacency=adj, cost=0.12, now=_T0)
            txn.graphs.replace_adjacency("gph_000000000001", adj.with_weight("A", "B", 5), now=_T1)
            row = txn.graphs.get("gph_000000000001")
            loaded = txn.graphs.load_adjacency("gph_000000000001")
        assert row.cost == 0.12
        assert row.modified_at == _T1
        assert row.created_at == _T0
        assert loaded is not None
        assert loaded[0].weight("A", "B") == 5.0

    def test_list_summaries_filter(self, store: Store) -> None:
        adj = Adjacency.from_mapping({"A": {"B": 1.0}})
        with store.transaction() as txn:
            txn.graphs.insert(
                "gph_000000000001", owner_id="alice", adjacency=adj, cost=0.12, now=_T0
            )
            txn.graphs.insert("gph_000000000002", owner_id="bob", adjacency=adj, cost=0.12, now=_T1)
            everything = txn.graphs.list_summaries()
            mine = txn.graphs.list_summaries(owner_id="alice")
        assert [g["id"] for g in everything] == ["gph_000000000001", "gph_000000000002"]
        assert [g["id"] for g in mine] == ["gph_000000000001"]
        assert "adjacency" not in mine[0]


class TestWeightRequestRepository:
    def _insert(self, store: Store, request_id: str, *, now: str, graph_id: str = "gph_a") -> None:
        with store.transaction() as txn:
            txn.requests.insert(
                request_id,
                graph_id=graph_id,
                source_node="A",
                target_node="B",
                proposed_weight=20.0,
                proposer_id="carol",
                now=now,
            )

    def test_transition_once(self, store: Store) -> None:
        self._insert(store, "req_1", now=_T0)
        with store.transaction() as txn:
            assert txn.requests.transition(
                "req_1", from_status="pending", to_status="approved", now=_T1, applied_weight=11.0
            )
            assert not txn.requests.transition(
                "req_1", from_status="pending", to_status="rejected", now=_T2
            )
            row = txn.requests.get("req_1")
        assert row.status == "approved"
        assert row.applied_weight == 11.0
        assert row.decided_at == _T1

    def test_transition_unknown(self, store: Store) -> None:
        with store.transaction() as txn:
            assert not txn.requests.transition(
                "req_missing", from_status="pending", to_status="approved", now=_T1
            )

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({}, ["req_1", "req_2", "req_3"]),
            ({"graph_id": "gph_b"}, ["req_3"]),
            ({"since": _T1}, ["req_2", "req_3"]),
            ({"until": _T1}, ["req_1", "req_2"]),
            ({"until": _T1, "until_exclusive": True}, ["req_1"]),
            ({"since": _T1, "until": _T1}, ["req_2"]),
        ],
    )
    def test_find_filters(self, store: Store, kwargs: dict, expected: list[str]) -> None:
        self._insert(store, "req_1", now=_T0)
        self._insert(store, "req_2", now=_T1)
        self._insert(store, "req_3", now=_T2, graph_id="gph_b")
        with store.transaction() as txn:
            items = txn.requests.find(**kwargs)
        assert [i["id"] for i in items] == expected

    def test_find_by_status(self, store: Store) -> None:
        self._insert(store, "req_1", now=_T0)
        self._insert(store, "req_2", now=_T1)
        with store.transaction() as txn:
            txn.requests.transition("req_1", from_status="pending", to_status="rejected", now=_T2)
            pending = txn.requests.find(status="pending")
        assert [i["id"] for i in pending] == ["req_2"]


class TestTripRepository:
    def test_path_decoded(self, store: Store) -> None:
        adj = Adjacency.from_mapping({"A": {"B": 1.0}})
        with store.transaction() as txn:
            txn.graphs.insert("gph_000000000001", owner_id="o", adjacency=adj, cost=0.12, now=_T0)
            txn.trips.insert(
                "trp_1",
                graph_id="gph_000000000001",
                executor_id="bob",
                start_node="A",
                goal_node="B",
                path=("A", "B"),
                path_cost=1.0,
                tokens_charged=0.12,
                execution_ms=0.5,
                now=_T1,
            )
            items = txn.trips.find(executor_id="bob")
            none = txn.trips.find(executor_id="alice")
        assert len(items) == 1
        assert items[0]["path"] == ["A", "B"]
        assert none == []
