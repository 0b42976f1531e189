"""Connection-bound repositories encapsulating SQL per table.

Each repository wraps the ``Connection`` of an open store transaction;
commit or rollback is the caller's responsibility.
"""

from graphtoll.infrastructure.repositories.accounts import AccountRepository
from graphtoll.infrastructure.repositories.graphs import GraphRepository
from graphtoll.infrastructure.repositories.requests import WeightRequestRepository
from graphtoll.infrastructure.repositories.trips import TripRepository

__all__ = [
    "AccountRepository",
    "GraphRepository",
    "TripRepository",
    "WeightRequestRepository",
]
