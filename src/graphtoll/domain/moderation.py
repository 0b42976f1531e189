"""Weight-update moderation rules.

A proposal is compared against the edge's current weight ``w``:

- ``|proposed - w| / w <= threshold``: applied at once as an exponential
  moving average, ``alpha * w + (1 - alpha) * proposed``.
- otherwise: filed as a ``pending`` request for an arbiter.

Requests move ``pending -> approved`` or ``pending -> rejected`` exactly
once. Both terminal states are final.
"""

from __future__ import annotations

from enum import StrEnum

from graphtoll.domain.errors import InvalidDecision

DEFAULT_ALPHA = 0.9
DEFAULT_THRESHOLD = 0.5


class RequestStatus(StrEnum):
    """Lifecycle status of a weight-update request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Verdict(StrEnum):
    """What to do with a fresh proposal."""

    AUTO_APPLY = "auto_applied"
    QUEUE = "queued"


REQUEST_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["approved", "rejected"],
    "approved": [],
    "rejected": [],
}


def is_valid_transition(current: str, target: str) -> bool:
    """Check if a request may move from *current* to *target*."""
    return target in REQUEST_TRANSITIONS.get(current, [])


def parse_decision(value: str) -> RequestStatus:
    """Parse an arbiter decision; only terminal statuses are accepted.

    Raises:
        InvalidDecision: If *value* is not ``approved`` or ``rejected``.
    """
    if value not in (RequestStatus.APPROVED, RequestStatus.REJECTED):
        raise InvalidDecision(
            f"Invalid decision {value!r}. Use 'approved' or 'rejected'",
            decision=value,
        )
    return RequestStatus(value)


def deviation(current: float, proposed: float) -> float:
    """Relative deviation of *proposed* from *current* (0.4 means 40%)."""
    return abs(proposed - current) / current


def classify(current: float, proposed: float, *, threshold: float = DEFAULT_THRESHOLD) -> Verdict:
    """Decide whether a proposal is auto-applied or queued for review."""
    if deviation(current, proposed) <= threshold:
        return Verdict.AUTO_APPLY
    return Verdict.QUEUE


def blend(current: float, proposed: float, *, alpha: float = DEFAULT_ALPHA) -> float:
    """Exponential-moving-average blend biased toward *current*.

    Raises:
        ValueError: If *alpha* is outside the open interval (0, 1).
    """
    if not 0 < alpha < 1:
        msg = f"alpha must be in (0, 1), got {alpha}"
        raise ValueError(msg)
    return alpha * current + (1 - alpha) * proposed
