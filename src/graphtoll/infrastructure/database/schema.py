"""SQLAlchemy Core table definitions for the graphtoll database.

Graph adjacency is stored as a JSON document per graph; it is only ever
rewritten whole, under the per-graph lock held by the service layer.
Timestamps are ISO 8601 UTC strings with microsecond precision so that
lexicographic order equals chronological order.
"""

from __future__ import annotations

from sqlalchemy import REAL, Column, ForeignKey, Index, Integer, MetaData, Table, Text

metadata = MetaData()

accounts = Table(
    "accounts",
    metadata,
    Column("principal_id", Text, primary_key=True),
    Column("balance", REAL, nullable=False, default=0.0, server_default="0.0"),
    Column("created_at", Text, nullable=False),
    Column("modified_at", Text, nullable=False),
)

graphs = Table(
    "graphs",
    metadata,
    Column("id", Text, primary_key=True),
    Column("owner_id", Text, nullable=False),
    Column("adjacency", Text, nullable=False),  # JSON object of objects
    Column("cost", REAL, nullable=False),  # frozen at creation
    Column("node_count", Integer, nullable=False),
    Column("edge_count", Integer, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("modified_at", Text, nullable=False),
)

# No foreign key on graph_id: requests outlive their graph for history.
weight_requests = Table(
    "weight_requests",
    metadata,
    Column("id", Text, primary_key=True),
    Column("graph_id", Text, nullable=False),
    Column("source_node", Text, nullable=False),
    Column("target_node", Text, nullable=False),
    Column("proposed_weight", REAL, nullable=False),
    Column("proposer_id", Text, nullable=False),
    Column("status", Text, nullable=False, default="pending", server_default="pending"),
    Column("applied_weight", REAL),  # set on approval
    Column("created_at", Text, nullable=False),
    Column("decided_at", Text),
)

trips = Table(
    "trips",
    metadata,
    Column("id", Text, primary_key=True),
    Column("graph_id", Text, ForeignKey("graphs.id"), nullable=False),
    Column("executor_id", Text, nullable=False),
    Column("start_node", Text, nullable=False),
    Column("goal_node", Text, nullable=False),
    Column("path", Text, nullable=False),  # JSON array
    Column("path_cost", REAL, nullable=False),
    Column("tokens_charged", REAL, nullable=False),
    Column("execution_ms", REAL, nullable=False),
    Column("executed_at", Text, nullable=False),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_graphs_owner", graphs.c.owner_id)
Index("ix_weight_requests_status", weight_requests.c.status)
Index("ix_weight_requests_graph", weight_requests.c.graph_id)
Index("ix_weight_requests_created", weight_requests.c.created_at)
Index("ix_trips_graph", trips.c.graph_id)
Index("ix_trips_executor", trips.c.executor_id)
