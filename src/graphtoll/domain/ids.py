"""ID patterns, validation, and generation.

Every persisted record gets a prefixed random identifier:
``gph_`` for graphs, ``req_`` for weight-update requests and ``trp_`` for
trips, followed by 12 lowercase hex characters taken from a UUID4.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import uuid

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "graph": re.compile(r"^gph_[0-9a-f]{12}$"),
    "request": re.compile(r"^req_[0-9a-f]{12}$"),
    "trip": re.compile(r"^trp_[0-9a-f]{12}$"),
}

TYPE_PREFIXES: dict[str, str] = {
    "graph": "gph_",
    "request": "req_",
    "trip": "trp_",
}


def generate_id(record_type: str) -> str:
    """Generate a fresh identifier for *record_type*.

    Raises:
        KeyError: If *record_type* has no registered prefix.
    """
    prefix = TYPE_PREFIXES[record_type]
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def validate_id(record_id: str, record_type: str) -> bool:
    """Check whether *record_id* matches the expected pattern for *record_type*."""
    pattern = ID_PATTERNS.get(record_type)
    if pattern is None:
        return False
    return pattern.match(record_id) is not None
