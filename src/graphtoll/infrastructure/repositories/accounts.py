"""Token account persistence with atomic compare-and-decrement."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlalchemy.dialects.sqlite import insert

from graphtoll.infrastructure.database.schema import accounts

if TYPE_CHECKING:
    from sqlalchemy import Connection

# Balances are re-rounded on every write so repeated fractional debits
# (0.1 + 0.02 + ...) do not accumulate binary floating point drift.
BALANCE_PRECISION = 6


class AccountRepository:
    """Encapsulates SQL for the ``accounts`` table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def balance(self, principal_id: str) -> float | None:
        """Current balance, or None if the principal has no account."""
        row = self._conn.execute(
            select(accounts.c.balance).where(accounts.c.principal_id == principal_id)
        ).first()
        return None if row is None else float(row.balance)

    def ensure(self, principal_id: str, *, opening_balance: float, now: str) -> bool:
        """Create the account if missing. Returns True if it was created."""
        result = self._conn.execute(
            insert(accounts)
            .values(
                principal_id=principal_id,
                balance=opening_balance,
                created_at=now,
                modified_at=now,
            )
            .on_conflict_do_nothing(index_elements=[accounts.c.principal_id])
        )
        return result.rowcount == 1

    def debit(self, principal_id: str, amount: float, *, now: str) -> bool:
        """Subtract *amount* only if the balance covers it.

        The balance check and the decrement are one UPDATE statement, so
        concurrent debits can never drive the balance below zero.
        Returns True if the debit was admitted.
        """
        result = self._conn.execute(
            update(accounts)
            .where(
                accounts.c.principal_id == principal_id,
                accounts.c.balance >= amount,
            )
            .values(
                balance=func.round(accounts.c.balance - amount, BALANCE_PRECISION),
                modified_at=now,
            )
        )
        return result.rowcount == 1

    def credit(self, principal_id: str, amount: float, *, now: str) -> float:
        """Add *amount* to an existing account and return the new balance.

        Raises:
            sqlalchemy.exc.NoResultFound: If the account does not exist.
        """
        balance = self._conn.execute(
            update(accounts)
            .where(accounts.c.principal_id == principal_id)
            .values(
                balance=func.round(accounts.c.balance + amount, BALANCE_PRECISION),
                modified_at=now,
            )
            .returning(accounts.c.balance)
        ).scalar_one()
        return float(balance)

    def list_all(self) -> list[dict[str, Any]]:
        """Every account ordered by principal id."""
        rows = self._conn.execute(
            select(accounts.c.principal_id, accounts.c.balance, accounts.c.modified_at).order_by(
                accounts.c.principal_id
            )
        ).mappings()
        return [dict(row) for row in rows]
