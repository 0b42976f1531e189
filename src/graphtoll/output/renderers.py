"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from graphtoll.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from graphtoll.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract an ID from a list item (graphs, trips, requests, accounts)."""
    if isinstance(item, dict):
        for key in ("id", "graph_id", "principal_id"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="gt.ok")
    op = Text(f"  {result.op}", style="gt.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="gt.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="gt.id")
    elif "balance" in key or key in ("cost", "amount", "tokens_charged"):
        v = Text(str(value), style="gt.tokens")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"

    extras: list[str] = []
    if span_data.get("tokens"):
        extras.append(f"tokens={span_data['tokens']}")
    for ak, av in span_data.get("annotations", {}).items():
        extras.append(f"{ak}={av}")
    if extras:
        line += f"  ({', '.join(extras)})"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _table(*columns: str) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for col in columns:
        table.add_column(col)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="gt.error")
    op = Text(f"  {result.op}", style="gt.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)
    if err:
        console.print(Text(f"  code: {err.code}", style="dim"))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


_MUTATION_KEYS = (
    "graph_id",
    "request_id",
    "principal_id",
    "owner_id",
    "outcome",
    "status",
    "source_node",
    "target_node",
    "node_count",
    "edge_count",
    "cost",
    "current_weight",
    "proposed_weight",
    "previous_weight",
    "new_weight",
    "amount",
    "balance",
    "new_balance",
    "residual_balance",
)


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/propose/decide/refill style results."""
    _status_line(console, result)
    for key in _MUTATION_KEYS:
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Graph renderers ───────────────────────────────────────────────────


def _render_graph_detail(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_graph as a panel listing every edge."""
    d = result.data
    lines = [
        f"owner: {d.get('owner_id')}",
        f"cost: {d.get('cost')}",
        f"nodes: {d.get('node_count')}  edges: {d.get('edge_count')}",
        f"created: {d.get('created_at')}",
    ]
    edges = [
        f"  {src} → {dst}  {weight:g}"
        for src, neighbors in d.get("adjacency", {}).items()
        for dst, weight in neighbors.items()
    ]
    if edges:
        lines.append("")
        lines.extend(edges)
    title = str(d.get("graph_id", "?"))
    console.print(Panel("\n".join(lines), title=title, border_style="dim", expand=False))
    if verbose:
        _render_meta(console, result)


def _render_graph_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_graphs as a table."""
    items = result.data.get("items", [])
    table = _table("ID", "Owner", "Nodes", "Edges", "Cost")
    if verbose:
        table.add_column("Created", style="dim")
    for item in items:
        row = [
            Text(str(item["graph_id"]), style="gt.id"),
            str(item["owner_id"]),
            str(item["node_count"]),
            str(item["edge_count"]),
            Text(f"{item['cost']:.2f}", style="gt.tokens"),
        ]
        if verbose:
            row.append(str(item["created_at"]))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} graphs")


def _render_path(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render compute_path as a node chain with the charge."""
    d = result.data
    chain = " → ".join(f"[gt.node]{node}[/gt.node]" for node in d.get("path", []))
    console.print(chain)
    console.print(f"\nPath cost: {d.get('cost')}")
    _field(console, "tokens_charged", d.get("tokens_charged"))
    _field(console, "residual_balance", d.get("residual_balance"))
    if verbose:
        _field(console, "trip_id", d.get("trip_id"))
        _field(console, "execution_ms", d.get("execution_ms"))
        _render_meta(console, result)


def _render_trip_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_trips as a table."""
    items = result.data.get("items", [])
    table = _table("Trip", "Graph", "Executor", "Route", "Cost", "Charged")
    if verbose:
        table.add_column("Executed", style="dim")
    for item in items:
        row = [
            Text(str(item["id"]), style="gt.id"),
            str(item["graph_id"]),
            str(item["executor_id"]),
            " → ".join(item["path"]),
            f"{item['path_cost']:g}",
            Text(f"{item['tokens_charged']:.2f}", style="gt.tokens"),
        ]
        if verbose:
            row.append(str(item["executed_at"]))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} trips")


# ── Moderation renderers ──────────────────────────────────────────────


def _render_request_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render list_pending / update_history as a table."""
    items = result.data.get("items", [])
    table = _table("Request", "Graph", "Edge", "Proposed", "Proposer", "Status")
    table.add_column("Applied", justify="right")
    if verbose:
        table.add_column("Created", style="dim")
        table.add_column("Decided", style="dim")
    for item in items:
        status = str(item["status"])
        applied = item.get("applied_weight")
        row = [
            Text(str(item["id"]), style="gt.id"),
            str(item["graph_id"]),
            f"{item['source_node']} → {item['target_node']}",
            f"{item['proposed_weight']:g}",
            str(item["proposer_id"]),
            Text(status, style=style_for_status(status)),
            "" if applied is None else f"{applied:g}",
        ]
        if verbose:
            row.extend([str(item["created_at"]), str(item.get("decided_at") or "")])
        table.add_row(*row)
    console.print(table)

    filters = result.data.get("filters") or {}
    summary = f"\n{result.data.get('count', len(items))} requests"
    if filters:
        summary += " (" + ", ".join(f"{k}={v}" for k, v in filters.items()) + ")"
    console.print(summary)


# ── Ledger renderers ──────────────────────────────────────────────────


def _render_account_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render list_accounts as a table."""
    items = result.data.get("items", [])
    table = _table("Principal", "Balance")
    if verbose:
        table.add_column("Modified", style="dim")
    for item in items:
        row = [
            Text(str(item["principal_id"]), style="gt.id"),
            Text(f"{item['balance']:.2f}", style="gt.tokens"),
        ]
        if verbose:
            row.append(str(item["modified_at"]))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} accounts")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Graphs
    "create_graph": _render_mutation,
    "mutate_edge": _render_mutation,
    "get_graph": _render_graph_detail,
    "list_graphs": _render_graph_table,
    "compute_path": _render_path,
    "list_trips": _render_trip_table,
    # Moderation
    "propose_update": _render_mutation,
    "decide_update": _render_mutation,
    "list_pending": _render_request_table,
    "update_history": _render_request_table,
    # Ledger
    "debit": _render_mutation,
    "credit": _render_mutation,
    "refill": _render_mutation,
    "balance": _render_mutation,
    "list_accounts": _render_account_table,
}
