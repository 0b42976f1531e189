"""Adjacency — immutable, integer-handle arena for weighted directed graphs.

Graphs arrive as untyped nested mappings (``{"A": {"B": 3}}``). They are
validated once, at the boundary, and interned into an arena:

- Every node name gets a dense integer handle. Source keys are interned
  first, in mapping order, so handles ``0 .. source_count - 1`` are exactly
  the source keys. Nodes that only appear as destinations follow in order
  of first appearance.
- Outgoing edges are stored per handle as ``{target_handle: weight}`` so
  edge lookup is O(1) without probing string keys.

An ``Adjacency`` is never mutated. :meth:`with_weight` returns a new arena,
which is what makes path search run against a stable snapshot.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from graphtoll.domain.errors import InvalidGraph, InvalidWeight


def is_positive_weight(value: Any) -> bool:
    """True for finite, strictly positive ints or floats (bools excluded).

    Ints too large for a float are rejected rather than rounded to ``inf``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value) and value > 0
    except OverflowError:
        return False


def _total_is_finite(out: Iterable[Mapping[int, float]]) -> bool:
    """True if the sum of every edge weight is finite.

    This bounds every path cost, so no search can overflow to ``inf``.
    """
    return math.isfinite(sum(w for edges in out for w in edges.values()))


class Adjacency:
    """Validated weighted digraph with O(1) edge lookup by handle."""

    __slots__ = ("_names", "_index", "_out", "_source_count")

    def __init__(
        self,
        names: tuple[str, ...],
        out: tuple[Mapping[int, float], ...],
        source_count: int,
    ) -> None:
        self._names = names
        self._index = {name: handle for handle, name in enumerate(names)}
        self._out = out
        self._source_count = source_count

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, raw: Any) -> Adjacency:
        """Validate a nested mapping and intern it into an arena.

        Raises:
            InvalidGraph: If *raw* is not a non-empty mapping of mappings
                with non-empty string node names and positive numeric weights.
        """
        if not isinstance(raw, Mapping):
            raise InvalidGraph("Graph must be a mapping of node -> {neighbor: weight}")
        if not raw:
            raise InvalidGraph("Graph must contain at least one node")

        names: list[str] = []
        index: dict[str, int] = {}

        def intern(name: Any) -> int:
            if not isinstance(name, str) or not name:
                raise InvalidGraph(f"Node names must be non-empty strings, got {name!r}")
            handle = index.get(name)
            if handle is None:
                handle = len(names)
                index[name] = handle
                names.append(name)
            return handle

        for source in raw:
            intern(source)
        source_count = len(names)

        out: list[dict[int, float]] = [{} for _ in range(source_count)]
        for source, neighbors in raw.items():
            if not isinstance(neighbors, Mapping):
                raise InvalidGraph(
                    f"Neighbors of {source!r} must be a mapping of node -> weight",
                    node=source,
                )
            edges = out[index[source]]
            for target, weight in neighbors.items():
                if not is_positive_weight(weight):
                    raise InvalidGraph(
                        f"Weight of {source!r} -> {target!r} must be a positive number, "
                        f"got {weight!r}",
                        source=source,
                        target=target,
                    )
                target_handle = intern(target)
                if target_handle >= len(out):
                    out.append({})
                edges[target_handle] = float(weight)

        if not _total_is_finite(out):
            raise InvalidGraph("Total edge weight is too large to represent")

        return cls(
            tuple(names),
            tuple(MappingProxyType(edges) for edges in out),
            source_count,
        )

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def source_count(self) -> int:
        """Number of distinct source keys (the priced node count)."""
        return self._source_count

    @property
    def node_count(self) -> int:
        """Number of distinct nodes, destinations included."""
        return len(self._names)

    @property
    def edge_count(self) -> int:
        """Total number of directed edges."""
        return sum(len(edges) for edges in self._out)

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._names)

    # ------------------------------------------------------------------
    # Handle access
    # ------------------------------------------------------------------

    def handle(self, name: str) -> int | None:
        """Return the handle for *name*, or None if the node is unknown."""
        return self._index.get(name)

    def name(self, handle: int) -> str:
        return self._names[handle]

    def neighbors(self, handle: int) -> Iterator[tuple[int, float]]:
        """Yield ``(target_handle, weight)`` for every outgoing edge."""
        yield from self._out[handle].items()

    def weight(self, source: str, target: str) -> float | None:
        """Weight of ``source -> target``, or None if the edge is absent."""
        src = self._index.get(source)
        dst = self._index.get(target)
        if src is None or dst is None:
            return None
        return self._out[src].get(dst)

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def with_weight(self, source: str, target: str, weight: float) -> Adjacency:
        """Return a copy with ``source -> target`` set to *weight*.

        Raises:
            InvalidWeight: If *weight* is not a finite positive number, or
                would push the total edge weight past the float range.
            KeyError: If the edge does not exist.
        """
        if not is_positive_weight(weight):
            raise InvalidWeight(
                f"Weight must be a positive number, got {weight!r}",
                source=source,
                target=target,
            )
        if self.weight(source, target) is None:
            raise KeyError((source, target))

        src = self._index[source]
        dst = self._index[target]
        edges = dict(self._out[src])
        edges[dst] = float(weight)
        out = list(self._out)
        out[src] = MappingProxyType(edges)
        if not _total_is_finite(out):
            raise InvalidWeight(
                f"Weight {weight!r} makes the total edge weight too large to represent",
                source=source,
                target=target,
            )
        return Adjacency(self._names, tuple(out), self._source_count)

    def to_mapping(self) -> dict[str, dict[str, float]]:
        """Render back to the nested-mapping form (source keys in original order)."""
        return {
            self._names[src]: {self._names[dst]: w for dst, w in self._out[src].items()}
            for src in range(self._source_count)
        }
