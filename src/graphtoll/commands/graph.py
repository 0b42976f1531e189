"""Command group: graph registration, inspection, and paid path queries."""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING

import click

from graphtoll.commands._base import GtGroup
from graphtoll.services.graph import GraphService

if TYPE_CHECKING:
    from graphtoll.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  graphtoll --principal alice graph create city.json
  echo '{"A": {"B": 3}}' | graphtoll --principal alice graph create -
  graphtoll graph list --owner alice
  graphtoll graph show gph_0123456789ab
  graphtoll --principal bob graph path gph_0123456789ab A C
  graphtoll graph trips --executor bob"""


@click.group(cls=GtGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Register graphs and run paid shortest-path queries."""


@graph.command(
    examples="""\
  graphtoll --principal alice graph create city.json
  cat city.json | graphtoll --principal alice --json graph create -"""
)
@click.argument("adjacency_file", type=click.File("r"))
@click.pass_obj
def create(app: AppContext, adjacency_file: IO[str]) -> None:
    """Store a graph read from a JSON file (``-`` for stdin).

    The file holds a nested object ``{node: {neighbor: weight}}``. The
    acting principal is charged the graph's cost.
    """
    owner = app.require_principal()
    try:
        adjacency = json.load(adjacency_file)
    except ValueError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="ADJACENCY_FILE") from exc
    app.emit(GraphService(app.store).create_graph(owner, adjacency))


@graph.command(examples="  graphtoll graph show gph_0123456789ab")
@click.argument("graph_id")
@click.pass_obj
def show(app: AppContext, graph_id: str) -> None:
    """Show a graph and its edges."""
    app.emit(GraphService(app.store).get_graph(graph_id))


@graph.command(
    "list",
    examples="""\
  graphtoll graph list
  graphtoll graph list --owner alice""",
)
@click.option("--owner", default=None, help="Only graphs owned by this principal.")
@click.pass_obj
def list_cmd(app: AppContext, owner: str | None) -> None:
    """List stored graphs."""
    app.emit(GraphService(app.store).list_graphs(owner_id=owner))


@graph.command(
    examples="""\
  graphtoll --principal bob graph path gph_0123456789ab A C
  graphtoll --principal bob -v graph path gph_0123456789ab A C"""
)
@click.argument("graph_id")
@click.argument("start")
@click.argument("goal")
@click.pass_obj
def path(app: AppContext, graph_id: str, start: str, goal: str) -> None:
    """Find the least-cost route from START to GOAL.

    The acting principal is charged the graph's cost when a route exists.
    """
    executor = app.require_principal()
    app.emit(GraphService(app.store).compute_path(graph_id, executor, start, goal))


@graph.command(
    examples="""\
  graphtoll graph trips
  graphtoll graph trips --graph gph_0123456789ab --executor bob"""
)
@click.option("--graph", "graph_id", default=None, help="Only trips on this graph.")
@click.option("--executor", default=None, help="Only trips paid by this principal.")
@click.pass_obj
def trips(app: AppContext, graph_id: str | None, executor: str | None) -> None:
    """List recorded path executions."""
    app.emit(GraphService(app.store).list_trips(graph_id=graph_id, executor_id=executor))
