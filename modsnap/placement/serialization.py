"""Scene serialization — JSON-safe snapshot for the view layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .geometry import footprints_intersect, point_world_position
from .models import ConnectionPoint, PlacedModule

if TYPE_CHECKING:
    from .orchestrator import PlacementOrchestrator


def module_to_dict(m: PlacedModule, *, selected: bool = False, held: bool = False) -> dict:
    return {
        "id": m.id,
        "preset_id": m.preset_id,
        "model_path": m.model_path,
        "position": list(m.position),
        "rotation_y": m.rotation_y,
        "size_x": m.size_x,
        "size_z": m.size_z,
        "is_anchor": m.is_anchor,
        "movable": m.movable,
        "selected": selected,
        "held": held,
    }


def point_to_dict(p: ConnectionPoint, module: PlacedModule | None) -> dict:
    return {
        "id": p.id,
        "module_id": p.module_id,
        "key": p.key,
        "name": p.name,
        "local_position": list(p.local_position),
        "world_position": list(point_world_position(p, module)) if module else None,
        "state": p.state.value,
        "paired_with": p.paired_with,
    }


def find_overlaps(modules: list[PlacedModule]) -> list[list[str]]:
    """Pairs of module ids whose footprints intersect (flush joins excluded).

    Only the anchor is kept clear automatically; this lets the view
    flag collisions between the other modules.
    """
    overlaps: list[list[str]] = []
    for i, a in enumerate(modules):
        for b in modules[i + 1:]:
            if footprints_intersect(a, b):
                overlaps.append([a.id, b.id])
    return overlaps


def scene_to_dict(orch: PlacementOrchestrator) -> dict:
    """Serialize the whole scene: modules, points, joints and overlaps."""
    store, registry, graph = orch.store, orch.registry, orch.graph
    modules = store.modules
    return {
        "anchor_id": store.anchor_id,
        "selected_id": store.selected_id,
        "modules": [
            module_to_dict(
                m,
                selected=m.id == store.selected_id,
                held=orch.is_held(m.id),
            )
            for m in modules
        ],
        "points": [
            point_to_dict(p, store.get(p.module_id))
            for p in registry.points
        ],
        "edges": [list(e) for e in graph.edges],
        "snapped_points": graph.snapped_points,
        "overlaps": find_overlaps(modules),
    }
