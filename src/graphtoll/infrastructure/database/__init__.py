"""SQLite database engine and schema via SQLAlchemy Core."""

from graphtoll.infrastructure.database.engine import create_db_engine, init_database
from graphtoll.infrastructure.database.schema import (
    accounts,
    graphs,
    metadata,
    trips,
    weight_requests,
)

__all__ = [
    "accounts",
    "create_db_engine",
    "graphs",
    "init_database",
    "metadata",
    "trips",
    "weight_requests",
]
