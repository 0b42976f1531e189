"""Command group: token balances."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphtoll.commands._base import GtGroup
from graphtoll.services.ledger import LedgerService

if TYPE_CHECKING:
    from graphtoll.commands._context import AppContext

_TOKENS_EXAMPLES = """\
  graphtoll --principal alice tokens balance
  graphtoll tokens balance bob
  graphtoll tokens refill alice 100
  graphtoll tokens accounts"""


@click.group(cls=GtGroup, examples=_TOKENS_EXAMPLES)
@click.pass_obj
def tokens(app: AppContext) -> None:
    """Inspect and top up token balances."""


@tokens.command(
    examples="""\
  graphtoll --principal alice tokens balance
  graphtoll tokens balance bob"""
)
@click.argument("principal_id", required=False)
@click.pass_obj
def balance(app: AppContext, principal_id: str | None) -> None:
    """Show a balance (defaults to the acting principal)."""
    who = principal_id or app.require_principal()
    app.emit(LedgerService(app.store).balance(who))


@tokens.command(examples="  graphtoll tokens refill alice 100")
@click.argument("principal_id")
@click.argument("amount", type=float)
@click.pass_obj
def refill(app: AppContext, principal_id: str, amount: float) -> None:
    """Add AMOUNT tokens to PRINCIPAL_ID."""
    app.emit(LedgerService(app.store).refill(principal_id, amount))


@tokens.command(examples="  graphtoll --json tokens accounts")
@click.pass_obj
def accounts(app: AppContext) -> None:
    """List every account and its balance."""
    app.emit(LedgerService(app.store).list_accounts())
