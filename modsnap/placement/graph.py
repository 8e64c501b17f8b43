"""Connectivity graph — undirected edges between joined connection points."""

from __future__ import annotations


def edge_key(a: str, b: str) -> tuple[str, str]:
    """Canonical key of the unordered pair {a, b}."""
    return (a, b) if a < b else (b, a)


class ConnectivityGraph:
    """Adjacency sets over connection-point ids.

    Every edge is a committed snap.  Adjacency is kept symmetric and a
    vertex whose last edge goes away is dropped, so ``snapped_points``
    only ever lists points that are actually joined.
    """

    def __init__(self) -> None:
        self._adjacency: dict[str, set[str]] = {}
        self._edges: set[tuple[str, str]] = set()

    def connect(self, a: str, b: str) -> None:
        if not a or not b or a == b:
            return
        self._adjacency.setdefault(a, set()).add(b)
        self._adjacency.setdefault(b, set()).add(a)
        self._edges.add(edge_key(a, b))

    def disconnect(self, a: str, b: str) -> None:
        if not a or not b or a == b:
            return
        self._adjacency.get(a, set()).discard(b)
        self._adjacency.get(b, set()).discard(a)
        self._edges.discard(edge_key(a, b))
        self._prune(a)
        self._prune(b)

    def remove_point(self, point_id: str) -> list[tuple[str, str]]:
        """Drop every edge touching *point_id*.

        Returns the removed edges as ``(point_id, neighbour)`` pairs.
        """
        removed = [(point_id, n) for n in sorted(self._adjacency.get(point_id, ()))]
        for _, neighbour in removed:
            self.disconnect(point_id, neighbour)
        return removed

    def remove_module_points(self, point_ids: list[str]) -> list[tuple[str, str]]:
        removed: list[tuple[str, str]] = []
        for pid in point_ids:
            removed.extend(self.remove_point(pid))
        return removed

    # ── Queries ────────────────────────────────────────────────────

    def neighbors(self, point_id: str) -> set[str]:
        return set(self._adjacency.get(point_id, ()))

    def has_edge(self, a: str, b: str) -> bool:
        return edge_key(a, b) in self._edges

    @property
    def edges(self) -> list[tuple[str, str]]:
        return sorted(self._edges)

    @property
    def snapped_points(self) -> list[str]:
        return sorted(self._adjacency)

    def __len__(self) -> int:
        return len(self._edges)

    def _prune(self, point_id: str) -> None:
        if not self._adjacency.get(point_id):
            self._adjacency.pop(point_id, None)
