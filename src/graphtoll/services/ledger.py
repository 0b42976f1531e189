"""LedgerService — per-principal token balances.

Every paid operation (graph creation, path execution) debits through
:func:`charge` inside the caller's own transaction, so the debit and the
effect it pays for commit or roll back together.

Unknown principals have an implicit balance of 0. An account row is
created by the first credit, seeded with ``[ledger] opening_balance``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from graphtoll.domain.errors import InsufficientTokens, InvalidAmount
from graphtoll.services._helpers import now_iso
from graphtoll.services.base import BaseService, service_op
from graphtoll.services.contracts import AccountListResultData, dump_validated
from graphtoll.services.result import ServiceResult
from graphtoll.services.telemetry import get_current_span, traced

if TYPE_CHECKING:
    from graphtoll.infrastructure.store import StoreTransaction

log = structlog.get_logger(__name__)


def _check_amount(amount: float) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidAmount(f"Amount must be a number, got {amount!r}", amount=amount)
    try:
        finite = math.isfinite(amount)
    except OverflowError:
        finite = False
    if not finite or amount < 0:
        raise InvalidAmount(f"Amount must be a non-negative number, got {amount}", amount=amount)
    return float(amount)


def charge(txn: StoreTransaction, principal_id: str, amount: float) -> None:
    """Debit *amount* from *principal_id* within an open transaction.

    Raises:
        InvalidAmount: If *amount* is negative or not finite.
        InsufficientTokens: If the balance does not cover *amount*.
            Nothing is written.
    """
    amount = _check_amount(amount)
    if amount == 0:
        return
    if not txn.accounts.debit(principal_id, amount, now=now_iso()):
        balance = txn.accounts.balance(principal_id) or 0.0
        log.info("debit.refused", principal_id=principal_id, amount=amount, balance=balance)
        raise InsufficientTokens(
            f"Insufficient tokens: {amount} required, {balance} available",
            principal_id=principal_id,
            required=amount,
            available=balance,
        )
    span = get_current_span()
    if span:
        span.charge(amount)


def deposit(
    txn: StoreTransaction,
    principal_id: str,
    amount: float,
    *,
    opening_balance: float,
) -> float:
    """Credit *amount* within an open transaction and return the new balance."""
    amount = _check_amount(amount)
    now = now_iso()
    txn.accounts.ensure(principal_id, opening_balance=opening_balance, now=now)
    return txn.accounts.credit(principal_id, amount, now=now)


class LedgerService(BaseService):
    """Token balances: debit, credit, refill, and inspection."""

    @traced
    @service_op("debit")
    def debit(self, principal_id: str, amount: float) -> ServiceResult:
        """Subtract *amount*; fails with no mutation if the balance is short."""
        with self._store.transaction() as txn:
            charge(txn, principal_id, amount)
            balance = txn.accounts.balance(principal_id) or 0.0
        return ServiceResult(
            ok=True,
            op="debit",
            data={"principal_id": principal_id, "amount": float(amount), "balance": balance},
        )

    @traced
    @service_op("credit")
    def credit(self, principal_id: str, amount: float) -> ServiceResult:
        """Add *amount* (≥ 0), creating the account if needed."""
        opening = self._store.settings.ledger.opening_balance
        with self._store.transaction() as txn:
            balance = deposit(txn, principal_id, amount, opening_balance=opening)
        return ServiceResult(
            ok=True,
            op="credit",
            data={"principal_id": principal_id, "amount": float(amount), "balance": balance},
        )

    @traced
    @service_op("refill")
    def refill(self, principal_id: str, amount: float) -> ServiceResult:
        """Administrative top-up. Returns the new balance."""
        opening = self._store.settings.ledger.opening_balance
        with self._store.transaction() as txn:
            new_balance = deposit(txn, principal_id, amount, opening_balance=opening)
        log.info("tokens.refilled", principal_id=principal_id, amount=amount, balance=new_balance)
        return ServiceResult(
            ok=True,
            op="refill",
            data={
                "principal_id": principal_id,
                "amount": float(amount),
                "new_balance": new_balance,
            },
        )

    @traced
    @service_op("balance")
    def balance(self, principal_id: str) -> ServiceResult:
        """Current balance (0 for principals without an account)."""
        with self._store.transaction() as txn:
            balance = txn.accounts.balance(principal_id)
        return ServiceResult(
            ok=True,
            op="balance",
            data={"principal_id": principal_id, "balance": balance or 0.0},
        )

    @traced
    @service_op("list_accounts")
    def list_accounts(self) -> ServiceResult:
        """Every account and its balance."""
        with self._store.transaction() as txn:
            items = txn.accounts.list_all()
        data = dump_validated(AccountListResultData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op="list_accounts", data=data)
