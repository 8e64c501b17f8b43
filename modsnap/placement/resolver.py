"""Snap resolver — nearest free connection-point pair within the threshold.

The resolver only reads the store and the registry; the orchestrator is
the one that commits its answers.
"""

from __future__ import annotations

import logging

from .config import SNAP_RULES, SnapRules
from .geometry import (
    distance, flush_on_dominant_axis, point_world_position, projected_half_extents,
    rotate_y,
)
from .models import ConnectionPoint, PlacedModule, SnapResult, Vec3
from .registry import ConnectionPointRegistry
from .store import PlacementStore


log = logging.getLogger(__name__)


class SnapResolver:
    """Finds the point pair a dragged module should snap to, and where it lands."""

    def __init__(
        self,
        store: PlacementStore,
        registry: ConnectionPointRegistry,
        rules: SnapRules = SNAP_RULES,
    ) -> None:
        self.store = store
        self.registry = registry
        self.rules = rules

    def resolve_snap(
        self,
        moving_module_id: str,
        desired_position: Vec3,
    ) -> SnapResult | None:
        """Find the best snap for a module about to move to *desired_position*.

        Every free point of the moving module (evaluated at the desired
        position) is paired with every free point on the other modules.
        The closest pair within ``snap_threshold`` wins; on equal
        distances the first pair in registration order is kept.

        Returns None when no pair qualifies.
        """
        moving = self.store.get(moving_module_id)
        if moving is None:
            return None

        moving_free = [p for p in self.registry.points_of(moving_module_id) if p.is_free]
        if not moving_free:
            return None
        static_free = [
            p for p in self.registry.free_points()
            if p.module_id != moving_module_id
        ]
        if not static_free:
            return None

        best: tuple[float, ConnectionPoint, ConnectionPoint, Vec3, Vec3] | None = None

        for moving_point in moving_free:
            moving_world = point_world_position(moving_point, moving, desired_position)

            for static_point in static_free:
                static_module = self.store.get(static_point.module_id)
                if static_module is None:
                    continue
                static_world = point_world_position(static_point, static_module)

                d = distance(moving_world, static_world)
                if d > self.rules.snap_threshold:
                    continue
                if best is None or d < best[0]:
                    best = (d, moving_point, static_point, moving_world, static_world)

        if best is None:
            return None

        d, moving_point, static_point, moving_world, static_world = best
        static_module = self.store.get(static_point.module_id)
        aligned = _translate(desired_position, moving_world, static_world)
        position = self._flush(moving, aligned, static_module)

        log.debug("Snap candidate %s -> %s (d=%.3f)", moving_point.id, static_point.id, d)
        return SnapResult(
            position=position,
            moving_point_id=moving_point.id,
            static_point_id=static_point.id,
            distance=d,
        )

    def aligned_position_for_pair(
        self,
        moving_module_id: str,
        moving_point_id: str,
        static_point_id: str,
    ) -> Vec3 | None:
        """Position that joins an already-chosen point pair flush.

        Applies the same point alignment and zero-gap slide as
        ``resolve_snap``, from the modules' current transforms.  The
        result does not depend on where the moving module currently is,
        so applying it twice gives the same position.
        """
        moving = self.store.get(moving_module_id)
        moving_point = self.registry.get(moving_point_id)
        static_point = self.registry.get(static_point_id)
        if moving is None or moving_point is None or static_point is None:
            return None
        static_module = self.store.get(static_point.module_id)
        if static_module is None:
            return None

        # centre = partner point - our rotated offset
        static_world = point_world_position(static_point, static_module)
        offset = rotate_y(moving_point.local_position, moving.rotation_y)
        aligned = _translate(static_world, offset, (0.0, 0.0, 0.0))
        return self._flush(moving, aligned, static_module)

    def _flush(
        self,
        moving: PlacedModule,
        aligned: Vec3,
        static_module: PlacedModule,
    ) -> Vec3:
        hx, hz = projected_half_extents(moving)
        shx, shz = projected_half_extents(static_module)
        return flush_on_dominant_axis(
            aligned, hx, hz,
            static_module.position, shx, shz,
            eps=self.rules.overlap_epsilon,
        )


def _translate(position: Vec3, source: Vec3, target: Vec3) -> Vec3:
    """Shift *position* by the vector that carries *source* onto *target*."""
    return (
        position[0] + target[0] - source[0],
        position[1] + target[1] - source[1],
        position[2] + target[2] - source[2],
    )
