"""Command group: edge-weight proposals and arbitration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphtoll.commands._base import GtGroup
from graphtoll.services.moderation import ModerationService

if TYPE_CHECKING:
    from graphtoll.commands._context import AppContext

_WEIGHTS_EXAMPLES = """\
  graphtoll --principal carol weights propose gph_0123456789ab A B 14
  graphtoll weights pending
  graphtoll weights decide req_0123456789ab approved
  graphtoll weights history --graph gph_0123456789ab --since 2025-01-01"""


@click.group(cls=GtGroup, examples=_WEIGHTS_EXAMPLES)
@click.pass_obj
def weights(app: AppContext) -> None:
    """Propose edge weights and decide queued proposals."""


@weights.command(
    examples="""\
  graphtoll --principal carol weights propose gph_0123456789ab A B 14
  graphtoll --principal carol --json weights propose gph_0123456789ab A B 40"""
)
@click.argument("graph_id")
@click.argument("source")
@click.argument("target")
@click.argument("weight", type=float)
@click.pass_obj
def propose(app: AppContext, graph_id: str, source: str, target: str, weight: float) -> None:
    """Propose WEIGHT for the edge SOURCE -> TARGET.

    Close proposals are blended in at once; distant ones are queued.
    """
    proposer = app.require_principal()
    svc = ModerationService(app.store)
    app.emit(svc.propose_update(graph_id, source, target, weight, proposer))


@weights.command(
    examples="""\
  graphtoll weights decide req_0123456789ab approved
  graphtoll weights decide req_0123456789ab rejected"""
)
@click.argument("request_id")
@click.argument("decision", type=click.Choice(["approved", "rejected"]))
@click.pass_obj
def decide(app: AppContext, request_id: str, decision: str) -> None:
    """Approve or reject a pending request."""
    app.emit(ModerationService(app.store).decide_update(request_id, decision))


@weights.command(examples="  graphtoll weights pending --graph gph_0123456789ab")
@click.option("--graph", "graph_id", default=None, help="Only requests on this graph.")
@click.pass_obj
def pending(app: AppContext, graph_id: str | None) -> None:
    """List requests awaiting a decision."""
    app.emit(ModerationService(app.store).list_pending(graph_id=graph_id))


@weights.command(
    examples="""\
  graphtoll weights history
  graphtoll weights history --since 2025-01-01 --until 2025-01-31
  graphtoll --json weights history --graph gph_0123456789ab"""
)
@click.option("--graph", "graph_id", default=None, help="Only requests on this graph.")
@click.option("--since", default=None, help="Created on or after (YYYY-MM-DD or ISO datetime).")
@click.option("--until", default=None, help="Created on or before (YYYY-MM-DD or ISO datetime).")
@click.pass_obj
def history(app: AppContext, graph_id: str | None, since: str | None, until: str | None) -> None:
    """List weight-update requests in every status."""
    svc = ModerationService(app.store)
    app.emit(svc.update_history(graph_id=graph_id, since=since, until=until))
