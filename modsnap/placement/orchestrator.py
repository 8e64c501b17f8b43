"""Placement orchestrator — the single writer over store, registry and graph.

Each public method handles one stimulus from the view layer (drag
update, selection click, rotation commit, geometry report) and leaves
the three stores consistent before it returns.

Per-module state machine::

    free ──move_with_snap finds a pair──▶ snapped
    snapped ──select (click)──▶ free, with a hold anchor at the detach spot

While a hold anchor is active, drags that stay within ``release_radius``
of it move the module freely but never search for snaps, so a module
that was just pulled off its partner does not jump straight back.
"""

from __future__ import annotations

import logging
from typing import Callable

from modsnap.catalog.models import ModulePreset

from .config import SNAP_RULES, SnapRules
from .geometry import ground_distance
from .graph import ConnectivityGraph, edge_key
from .models import PointInput, PointState, SnapEvent, Vec3
from .registry import ConnectionPointRegistry
from .resolver import SnapResolver
from .serialization import scene_to_dict
from .store import PlacementStore


log = logging.getLogger(__name__)

SnapListener = Callable[[SnapEvent], None]


class PlacementOrchestrator:
    """Applies view-layer stimuli to the store, registry and graph together."""

    def __init__(
        self,
        store: PlacementStore | None = None,
        registry: ConnectionPointRegistry | None = None,
        graph: ConnectivityGraph | None = None,
        rules: SnapRules = SNAP_RULES,
    ) -> None:
        self.rules = rules
        self.store = store if store is not None else PlacementStore(rules)
        self.registry = registry if registry is not None else ConnectionPointRegistry()
        self.graph = graph if graph is not None else ConnectivityGraph()
        self.resolver = SnapResolver(self.store, self.registry, rules)

        self._hold_anchors: dict[str, Vec3] = {}
        self._last_snap_edge: dict[str, tuple[str, str]] = {}
        self._edge_movers: dict[tuple[str, str], str] = {}    # edge -> module that snapped onto it
        self._listeners: list[SnapListener] = []

    # ── Notifications ──────────────────────────────────────────────

    def subscribe(self, listener: SnapListener) -> None:
        """Call *listener* with a SnapEvent for every newly reported snap."""
        self._listeners.append(listener)

    def is_held(self, module_id: str) -> bool:
        return module_id in self._hold_anchors

    # ── Stimuli ────────────────────────────────────────────────────

    def add_module(
        self,
        preset: ModulePreset,
        desired_position: Vec3 | None = None,
    ) -> str:
        return self.store.place(preset, desired_position)

    def move_with_snap(self, module_id: str, desired_position: Vec3) -> bool:
        """Apply one drag update.  Returns True if the module snapped.

        Unknown ids, the anchor and snapped (non-movable) modules are
        ignored.
        """
        module = self.store.get(module_id)
        if module is None or module.is_anchor or not module.movable:
            log.debug("Drag ignored for %s", module_id)
            return False

        hold = self._hold_anchors.get(module_id)
        if hold is not None:
            if ground_distance(desired_position, hold) <= self.rules.release_radius:
                self._release_edges(module_id)
                self.store.move(module_id, desired_position)
                return False
            del self._hold_anchors[module_id]
            log.debug("Hold released for %s", module_id)

        self._release_edges(module_id)

        result = self.resolver.resolve_snap(module_id, desired_position)
        if result is None:
            self.store.move(module_id, desired_position)
            self._last_snap_edge.pop(module_id, None)
            return False

        moving_id, static_id = result.moving_point_id, result.static_point_id
        self.store.move(module_id, result.position)
        self.graph.connect(moving_id, static_id)
        self.registry.occupy_pair(moving_id, static_id)
        key = edge_key(moving_id, static_id)
        self._edge_movers[key] = module_id

        aligned = self.resolver.aligned_position_for_pair(module_id, moving_id, static_id)
        if aligned is not None:
            self.store.move(module_id, aligned)

        self.store.set_movable(module_id, False)
        if self.store.selected_id == module_id:
            self.store.clear_selection()

        if self._last_snap_edge.get(module_id) != key:
            self._last_snap_edge[module_id] = key
            log.info("Snapped %s: %s <-> %s", module_id, moving_id, static_id)
            self._notify(SnapEvent(
                module_id=module_id,
                moving_point_id=moving_id,
                static_point_id=static_id,
                position=module.position,
            ))
        return True

    def select(self, module_id: str) -> None:
        """Select a module; clicking a snapped module detaches it."""
        module = self.store.get(module_id)
        if module is None or module.is_anchor:
            return

        if not module.movable:
            released = self._release_edges(module_id)
            self.store.set_movable(module_id, True)
            self._hold_anchors[module_id] = module.position
            log.info("Detached %s (%d joints released)", module_id, released)

        self.store.select(module_id)

    def clear_selection(self) -> None:
        self.store.clear_selection()

    def rotate(self, module_id: str, position: Vec3, rotation_y: float) -> None:
        if module_id not in self.store:
            return
        self.store.rotate(module_id, position, rotation_y)
        self._reglue(module_id)

    def report_bounds(self, module_id: str, size_x: float, size_z: float) -> None:
        if self.store.set_footprint(module_id, size_x, size_z):
            self._reglue(module_id)

    def report_points(self, module_id: str, points: list[PointInput]) -> None:
        if module_id not in self.store:
            log.debug("Point report for unknown module %s ignored", module_id)
            return
        dropped = self.registry.register(module_id, points)
        self._free_removed(self.graph.remove_module_points(dropped))
        self._reglue(module_id)

    def remove_module(self, module_id: str) -> None:
        if module_id not in self.store:
            return
        was_anchor = self.store.anchor_id == module_id

        point_ids = self.registry.point_ids_of(module_id)
        self._free_removed(self.graph.remove_module_points(point_ids))
        self.registry.unregister(module_id)
        self._hold_anchors.pop(module_id, None)
        self._last_snap_edge.pop(module_id, None)
        self.store.remove(module_id)

        new_anchor_id = self.store.anchor_id
        if was_anchor and new_anchor_id is not None:
            self._hold_anchors.pop(new_anchor_id, None)
            self._reglue(new_anchor_id)

    # ── Views ──────────────────────────────────────────────────────

    def check_consistency(self) -> list[str]:
        """List violations of the occupancy/graph invariant (empty if none)."""
        problems: list[str] = []
        for point in self.registry.points:
            neighbours = self.graph.neighbors(point.id)
            if point.state is PointState.OCCUPIED:
                if neighbours != {point.paired_with}:
                    problems.append(
                        f"{point.id}: occupied with {point.paired_with}, "
                        f"graph neighbours {sorted(neighbours)}")
            elif neighbours:
                problems.append(f"{point.id}: free but joined to {sorted(neighbours)}")
        for a, b in self.graph.edges:
            if a not in self.registry or b not in self.registry:
                problems.append(f"edge {a}|{b} references an unknown point")
            if (a, b) not in self._edge_movers:
                problems.append(f"edge {a}|{b} has no recorded mover")
        for a, b in self._edge_movers:
            if not self.graph.has_edge(a, b):
                problems.append(f"mover recorded for missing edge {a}|{b}")
        return problems

    def snapshot(self) -> dict:
        return scene_to_dict(self)

    # ── Internals ──────────────────────────────────────────────────

    def _notify(self, event: SnapEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _release_edges(self, module_id: str) -> int:
        """Disconnect every edge touching the module's points."""
        removed = self.graph.remove_module_points(self.registry.point_ids_of(module_id))
        self._free_removed(removed)
        return len(removed)

    def _free_removed(self, removed: list[tuple[str, str]]) -> None:
        for a, b in removed:
            self.registry.free_pair(a, b)
            self._edge_movers.pop(edge_key(a, b), None)

    def _reglue(self, module_id: str) -> None:
        """Keep joints flush after *module_id*'s geometry changed.

        A snapped module is first re-aligned against the partner it
        snapped onto; then every snapped module that snapped onto it
        follows.  One pass; partners of partners are not revisited.
        """
        module = self.store.get(module_id)
        if module is None:
            return

        joints = [
            (point_id, other_id)
            for point_id in self.registry.point_ids_of(module_id)
            for other_id in sorted(self.graph.neighbors(point_id))
        ]

        if not module.is_anchor and not module.movable:
            for point_id, other_id in joints:
                if self._edge_movers.get(edge_key(point_id, other_id)) == module_id:
                    self._align(module_id, point_id, other_id)
                    break

        for point_id, other_id in joints:
            other = self.registry.get(other_id)
            if other is None:
                continue
            if self._edge_movers.get(edge_key(point_id, other_id)) != other.module_id:
                continue
            partner = self.store.get(other.module_id)
            if partner is None or partner.is_anchor or partner.movable:
                continue
            self._align(other.module_id, other_id, point_id)

    def _align(self, module_id: str, point_id: str, partner_point_id: str) -> None:
        aligned = self.resolver.aligned_position_for_pair(module_id, point_id, partner_point_id)
        if aligned is not None:
            self.store.move(module_id, aligned)
