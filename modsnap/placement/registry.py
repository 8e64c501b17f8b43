"""Connection-point registry — owns every module's connection points.

Points reference their module by id only.  The registry keeps an
explicit module-id → ordered point-id index; that order (and the global
first-registration order of ``points``) is what the resolver iterates,
so it doubles as the snap tie-break.
"""

from __future__ import annotations

import logging

from .models import (
    ConnectionPoint, PointInput, PointState, UnknownPointId, make_point_id,
)


log = logging.getLogger(__name__)


class ConnectionPointRegistry:
    """Connection points of every module, with their occupancy and pairing."""

    def __init__(self) -> None:
        self._points: dict[str, ConnectionPoint] = {}
        self._module_points: dict[str, list[str]] = {}

    # ── Registration ───────────────────────────────────────────────

    def register(self, module_id: str, points: list[PointInput]) -> list[str]:
        """Replace the point set of *module_id*.

        Points whose key is already known keep their occupancy and
        pairing, so refreshed geometry never breaks an existing joint.
        Returns the ids of points that were dropped.
        """
        first_time = module_id not in self._module_points
        next_ids: list[str] = []

        for p in points:
            point_id = make_point_id(module_id, p.key)
            existing = self._points.get(point_id)
            if existing is not None:
                existing.local_position = tuple(p.local_position)
                existing.name = p.name
            else:
                self._points[point_id] = ConnectionPoint(
                    id=point_id,
                    module_id=module_id,
                    key=p.key,
                    local_position=tuple(p.local_position),
                    name=p.name,
                )
            if point_id not in next_ids:
                next_ids.append(point_id)

        dropped = [
            pid for pid in self._module_points.get(module_id, [])
            if pid not in next_ids
        ]
        for pid in dropped:
            del self._points[pid]

        self._module_points[module_id] = next_ids

        if first_time:
            log.info("Module %s registered %d connection points", module_id, len(next_ids))
        return dropped

    def unregister(self, module_id: str) -> list[str]:
        """Delete all points owned by *module_id*; returns their ids."""
        point_ids = self._module_points.pop(module_id, [])
        for pid in point_ids:
            self._points.pop(pid, None)
        return point_ids

    # ── Occupancy ──────────────────────────────────────────────────

    def set_occupancy(
        self,
        point_id: str,
        state: PointState,
        pair_id: str | None = None,
    ) -> None:
        point = self._points.get(point_id)
        if point is None:
            return
        point.state = state
        point.paired_with = pair_id if state is PointState.OCCUPIED else None

    def occupy_pair(self, a: str, b: str) -> None:
        self.set_occupancy(a, PointState.OCCUPIED, b)
        self.set_occupancy(b, PointState.OCCUPIED, a)

    def free_pair(self, a: str, b: str) -> None:
        self.set_occupancy(a, PointState.FREE)
        self.set_occupancy(b, PointState.FREE)

    # ── Queries ────────────────────────────────────────────────────

    def __contains__(self, point_id: object) -> bool:
        return point_id in self._points

    def get(self, point_id: str) -> ConnectionPoint | None:
        return self._points.get(point_id)

    def require(self, point_id: str) -> ConnectionPoint:
        point = self._points.get(point_id)
        if point is None:
            raise UnknownPointId(point_id)
        return point

    @property
    def points(self) -> list[ConnectionPoint]:
        """Every point, in first-registration order."""
        return list(self._points.values())

    @property
    def module_ids(self) -> list[str]:
        return list(self._module_points)

    def point_ids_of(self, module_id: str) -> list[str]:
        return list(self._module_points.get(module_id, []))

    def points_of(self, module_id: str) -> list[ConnectionPoint]:
        return [self._points[pid] for pid in self._module_points.get(module_id, [])]

    def free_points(self) -> list[ConnectionPoint]:
        return [p for p in self._points.values() if p.state is PointState.FREE]

    def occupied_points(self) -> list[ConnectionPoint]:
        return [p for p in self._points.values() if p.state is PointState.OCCUPIED]
