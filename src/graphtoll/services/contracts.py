"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer so key regressions (for example ``graph_id`` vs ``id``)
fail fast in tests and during development.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


# --- Graphs ---


class GraphSummary(BaseModel):
    """One row of ``GraphService.list_graphs``."""

    graph_id: str
    owner_id: str
    cost: float
    node_count: int
    edge_count: int
    created_at: str


class GraphListResultData(BaseModel):
    """Payload contract for ``GraphService.list_graphs``."""

    count: int
    items: list[GraphSummary]


class GraphDetailData(BaseModel):
    """Payload contract for ``GraphService.get_graph``."""

    graph_id: str
    owner_id: str
    cost: float
    node_count: int
    edge_count: int
    adjacency: dict[str, dict[str, float]]
    created_at: str
    modified_at: str


class PathResultData(BaseModel):
    """Payload contract for ``GraphService.compute_path``."""

    graph_id: str
    trip_id: str
    start: str
    goal: str
    path: list[str]
    cost: float
    tokens_charged: float
    residual_balance: float
    execution_ms: float


class TripItem(BaseModel):
    """One recorded path execution."""

    model_config = ConfigDict(extra="ignore")

    id: str
    graph_id: str
    executor_id: str
    start_node: str
    goal_node: str
    path: list[str]
    path_cost: float
    tokens_charged: float
    execution_ms: float
    executed_at: str


class TripListResultData(BaseModel):
    """Payload contract for ``GraphService.list_trips``."""

    count: int
    items: list[TripItem]


# --- Weight updates ---


class WeightRequestItem(BaseModel):
    """One weight-update request row."""

    model_config = ConfigDict(extra="ignore")

    id: str
    graph_id: str
    source_node: str
    target_node: str
    proposed_weight: float
    proposer_id: str
    status: Literal["pending", "approved", "rejected"]
    applied_weight: float | None = None
    created_at: str
    decided_at: str | None = None


class WeightRequestListResultData(BaseModel):
    """Payload contract for ``list_pending`` and ``update_history``."""

    count: int
    items: list[WeightRequestItem]
    filters: dict[str, str] = Field(default_factory=dict)


class ProposalResultData(BaseModel):
    """Payload contract for ``ModerationService.propose_update``."""

    outcome: Literal["auto_applied", "queued"]
    graph_id: str
    source_node: str
    target_node: str
    current_weight: float
    proposed_weight: float
    deviation: float
    new_weight: float | None = None
    request_id: str | None = None


class DecisionResultData(BaseModel):
    """Payload contract for ``ModerationService.decide_update``."""

    request_id: str
    graph_id: str
    status: Literal["approved", "rejected"]
    previous_weight: float | None = None
    new_weight: float | None = None


# --- Ledger ---


class AccountItem(BaseModel):
    """One token account."""

    principal_id: str
    balance: float
    modified_at: str


class AccountListResultData(BaseModel):
    """Payload contract for ``LedgerService.list_accounts``."""

    count: int
    items: list[AccountItem]
