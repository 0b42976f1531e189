"""Shared pytest fixtures and test helpers for graphtoll tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from graphtoll.config.settings import GraphtollSettings
from graphtoll.infrastructure.database.engine import init_database
from graphtoll.infrastructure.store import Store
from graphtoll.services.telemetry import _current_span, disable_telemetry

# A -> B (3), B -> C (1), A -> C (5): cheapest A -> C goes through B for 4.
TRIANGLE: dict[str, dict[str, float]] = {
    "A": {"B": 3, "C": 5},
    "B": {"C": 1},
}
# Two sources, three edges.
TRIANGLE_COST = 0.26


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's GRAPHTOLL_* environment out of every test."""
    for var in ("GRAPHTOLL_CONFIG", "GRAPHTOLL_PRINCIPAL", "GRAPHTOLL_VERBOSE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """The CLI's --verbose flag enables telemetry for the whole context."""
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "test.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def settings(tmp_path: Path) -> GraphtollSettings:
    return GraphtollSettings.from_cli(root=tmp_path)


@pytest.fixture
def store(settings: GraphtollSettings) -> Generator[Store]:
    """Fully initialized store on a temp directory."""
    s = Store(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def fund(store: Store, principal_id: str, amount: float) -> float:
    """Refill *principal_id*, asserting success. Returns the new balance."""
    from graphtoll.services.ledger import LedgerService

    result = LedgerService(store).refill(principal_id, amount)
    assert result.ok, result.error
    return result.data["new_balance"]


def balance_of(store: Store, principal_id: str) -> float:
    from graphtoll.services.ledger import LedgerService

    return LedgerService(store).balance(principal_id).data["balance"]


def create_graph(
    store: Store,
    owner_id: str = "alice",
    adjacency: dict[str, Any] | None = None,
    *,
    funds: float = 10.0,
) -> str:
    """Fund *owner_id*, create a graph, and return its ID."""
    from graphtoll.services.graph import GraphService

    if funds:
        fund(store, owner_id, funds)
    result = GraphService(store).create_graph(owner_id, adjacency or TRIANGLE)
    assert result.ok, result.error
    return result.data["graph_id"]


def edge_weight(store: Store, graph_id: str, source: str, target: str) -> float | None:
    """Read a stored edge weight directly."""
    with store.transaction() as txn:
        loaded = txn.graphs.load_adjacency(graph_id)
    assert loaded is not None
    return loaded[0].weight(source, target)
