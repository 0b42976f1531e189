"""BaseService — abstract foundation for all graphtoll services.

Every service receives a :class:`Store` at construction time. The Store
provides transactional access to the database and the per-graph locks.
Services own their transaction boundaries via ``self._store.transaction()``.

Domain failures are raised as :class:`GraphtollError` subclasses, which
rolls back the open transaction; :func:`service_op` turns them into a
failed :class:`ServiceResult` at the method boundary.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Concatenate, ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from graphtoll.domain.errors import ErrorCode, GraphtollError
from graphtoll.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from graphtoll.infrastructure.store import Store

logger = logging.getLogger(__name__)

_P = ParamSpec("_P")
_S = TypeVar("_S", bound="BaseService")


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class LedgerService(BaseService):
            @service_op("refill")
            def refill(self, principal_id: str, amount: float) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store


def failure(op: str, exc: GraphtollError) -> ServiceResult:
    """Build the failed result for a domain error."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=str(exc.code), message=exc.message, detail=exc.detail),
    )


def service_op(
    op: str,
) -> Callable[
    [Callable[Concatenate[_S, _P], ServiceResult]],
    Callable[Concatenate[_S, _P], ServiceResult],
]:
    """Decorator: translate raised errors into a failed ``ServiceResult``.

    - :class:`GraphtollError` becomes its own stable error code.
    - :class:`SQLAlchemyError` becomes the opaque ``INTERNAL_ERROR`` and
      is logged with its traceback. No retry is attempted.

    Anything else propagates.
    """

    def decorator(
        func: Callable[Concatenate[_S, _P], ServiceResult],
    ) -> Callable[Concatenate[_S, _P], ServiceResult]:
        @functools.wraps(func)
        def wrapper(self: _S, *args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
            try:
                return func(self, *args, **kwargs)
            except GraphtollError as exc:
                logger.debug("%s failed: %s (%s)", op, exc.message, exc.code)
                return failure(op, exc)
            except SQLAlchemyError:
                logger.exception("Store failure during %s", op)
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code=str(ErrorCode.INTERNAL_ERROR),
                        message="Internal store error",
                    ),
                )

        return wrapper

    return decorator
