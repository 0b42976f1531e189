"""Graph pricing — the token cost of creating and executing a graph.

``cost = node_price * source_count + edge_price * edge_count``, rounded to
two decimals half-up. Nodes that only appear as destinations are free.
The price is computed once at creation and frozen with the graph; every
later execution charges the stored amount.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from graphtoll.domain.adjacency import Adjacency

NODE_PRICE = 0.10
EDGE_PRICE = 0.02

_CENT = Decimal("0.01")


def graph_cost(
    adjacency: Adjacency,
    *,
    node_price: float = NODE_PRICE,
    edge_price: float = EDGE_PRICE,
) -> float:
    """Price *adjacency* in tokens.

    Prices go through ``Decimal(str(...))`` so ``0.1 * 3`` rounds as
    ``0.30`` rather than ``0.30000000000000004``.

    Examples:
        A graph ``{"A": {"B": 3, "C": 5}, "B": {"C": 1}}`` has two source
        nodes and three edges: ``0.10 * 2 + 0.02 * 3 = 0.26``.
    """
    total = (
        Decimal(str(node_price)) * adjacency.source_count
        + Decimal(str(edge_price)) * adjacency.edge_count
    )
    return float(total.quantize(_CENT, rounding=ROUND_HALF_UP))
