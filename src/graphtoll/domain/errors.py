"""Error taxonomy shared by every layer.

Each failure kind has a stable machine-readable :class:`ErrorCode`.
Domain code raises a :class:`GraphtollError` subclass; the service layer
translates it into a ``ServiceResult`` with ``ok=False``. Raising inside a
store transaction rolls back every write of the surrounding operation.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Machine-readable error kinds surfaced in ``ServiceError.code``."""

    INVALID_GRAPH = "INVALID_GRAPH"
    GRAPH_NOT_FOUND = "GRAPH_NOT_FOUND"
    NODE_NOT_FOUND = "NODE_NOT_FOUND"
    EDGE_NOT_FOUND = "EDGE_NOT_FOUND"
    NO_PATH = "NO_PATH"
    INVALID_WEIGHT = "INVALID_WEIGHT"
    INSUFFICIENT_TOKENS = "INSUFFICIENT_TOKENS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    ALREADY_DECIDED = "ALREADY_DECIDED"
    INVALID_DECISION = "INVALID_DECISION"
    INVALID_FILTER = "INVALID_FILTER"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GraphtollError(Exception):
    """Base class for recoverable domain failures.

    Attributes:
        code: Stable error kind.
        message: Human-readable explanation.
        detail: Structured context (ids, node names, amounts).
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidGraph(GraphtollError):
    code = ErrorCode.INVALID_GRAPH


class GraphNotFound(GraphtollError):
    code = ErrorCode.GRAPH_NOT_FOUND


class NodeNotFound(GraphtollError):
    code = ErrorCode.NODE_NOT_FOUND


class EdgeNotFound(GraphtollError):
    code = ErrorCode.EDGE_NOT_FOUND


class NoPathExists(GraphtollError):
    code = ErrorCode.NO_PATH


class InvalidWeight(GraphtollError):
    code = ErrorCode.INVALID_WEIGHT


class InsufficientTokens(GraphtollError):
    code = ErrorCode.INSUFFICIENT_TOKENS


class InvalidAmount(GraphtollError):
    code = ErrorCode.INVALID_AMOUNT


class RequestNotFound(GraphtollError):
    code = ErrorCode.REQUEST_NOT_FOUND


class AlreadyDecided(GraphtollError):
    code = ErrorCode.ALREADY_DECIDED


class InvalidDecision(GraphtollError):
    code = ErrorCode.INVALID_DECISION


class InvalidFilter(GraphtollError):
    code = ErrorCode.INVALID_FILTER
