"""Placement store — owns the placed module records.

The first module ever placed is the anchor: it sits at the origin, can
never be moved or selected, and every other module is kept clear of its
footprint.  Removing the anchor promotes the next-inserted module.
"""

from __future__ import annotations

import logging
import math
import uuid

from modsnap.catalog.models import ModulePreset

from .config import SNAP_RULES, SnapRules
from .geometry import ground_distance, projected_half_extents, push_clear_of
from .models import (
    CenterReserved, MissingDropTarget, PlacedModule, UnknownModuleId, Vec3,
)


log = logging.getLogger(__name__)

ORIGIN: Vec3 = (0.0, 0.0, 0.0)


class PlacementStore:
    """Ordered collection of placed modules plus the current selection."""

    def __init__(self, rules: SnapRules = SNAP_RULES) -> None:
        self.rules = rules
        self._modules: dict[str, PlacedModule] = {}
        self.selected_id: str | None = None

    # ── Queries ────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    @property
    def modules(self) -> list[PlacedModule]:
        """All modules in insertion order (anchor first)."""
        return list(self._modules.values())

    @property
    def anchor(self) -> PlacedModule | None:
        return next(iter(self._modules.values()), None)

    @property
    def anchor_id(self) -> str | None:
        anchor = self.anchor
        return anchor.id if anchor else None

    def get(self, module_id: str) -> PlacedModule | None:
        return self._modules.get(module_id)

    def require(self, module_id: str) -> PlacedModule:
        module = self._modules.get(module_id)
        if module is None:
            raise UnknownModuleId(module_id)
        return module

    # ── Placement ──────────────────────────────────────────────────

    def place(
        self,
        preset: ModulePreset,
        desired_position: Vec3 | None = None,
    ) -> str:
        """Add a module for *preset* and return its id.

        The first module becomes the anchor at the origin and ignores
        *desired_position*.  Later modules need a drop position away
        from the origin; they are pushed clear of the anchor and
        selected.

        Raises
        ------
        MissingDropTarget
            No *desired_position* for a non-anchor module.
        CenterReserved
            *desired_position* is on the origin.
        """
        module_id = uuid.uuid4().hex

        if not self._modules:
            self._modules[module_id] = PlacedModule(
                id=module_id,
                preset_id=preset.id,
                model_path=preset.model_path,
                position=ORIGIN,
                size_x=self.rules.default_module_size,
                size_z=self.rules.default_module_size,
                is_anchor=True,
                movable=False,
            )
            self.selected_id = None
            log.info("Anchor %s placed (%s)", module_id, preset.id)
            return module_id

        if desired_position is None:
            raise MissingDropTarget(preset.id)
        if ground_distance(desired_position, ORIGIN) <= self.rules.center_reserved_radius:
            raise CenterReserved(preset.id, desired_position)

        module = PlacedModule(
            id=module_id,
            preset_id=preset.id,
            model_path=preset.model_path,
            position=tuple(desired_position),
            size_x=self.rules.default_module_size,
            size_z=self.rules.default_module_size,
        )
        module.position = self._clear_of_anchor(module, module.position)
        self._modules[module_id] = module
        self.selected_id = module_id
        log.info("Placed %s (%s) at (%.2f, %.2f)",
                 module_id, preset.id, module.position[0], module.position[2])
        return module_id

    def move(self, module_id: str, position: Vec3) -> None:
        module = self._modules.get(module_id)
        if module is None or module.is_anchor:
            return
        module.position = self._clear_of_anchor(module, tuple(position))

    def rotate(self, module_id: str, position: Vec3, rotation_y: float) -> None:
        module = self._modules.get(module_id)
        if module is None:
            return
        if module.is_anchor:
            module.position = (0.0, module.position[1], 0.0)
            return
        module.rotation_y = rotation_y
        module.position = self._clear_of_anchor(module, tuple(position))

    def set_footprint(self, module_id: str, size_x: float, size_z: float) -> bool:
        """Record a module's footprint; returns True if it changed."""
        module = self._modules.get(module_id)
        if module is None:
            return False

        safe_x = self._sanitize_size(size_x)
        safe_z = self._sanitize_size(size_z)
        if (module.size_x, module.size_z) == (safe_x, safe_z):
            return False

        module.size_x = safe_x
        module.size_z = safe_z
        if module.is_anchor:
            self._revalidate_all()
        else:
            module.position = self._clear_of_anchor(module, module.position)
        return True

    def set_movable(self, module_id: str, movable: bool) -> None:
        module = self._modules.get(module_id)
        if module is None or module.is_anchor:
            return
        module.movable = movable

    def remove(self, module_id: str) -> bool:
        """Delete a module; returns True if it existed.

        Removing the anchor promotes the next-inserted module: it is
        pinned to the origin, frozen, deselected, and every remaining
        module is re-checked against its footprint.
        """
        module = self._modules.pop(module_id, None)
        if module is None:
            return False

        if self.selected_id == module_id:
            self.selected_id = None

        if module.is_anchor and self._modules:
            anchor = self.anchor
            anchor.is_anchor = True
            anchor.movable = False
            anchor.position = (0.0, anchor.position[1], 0.0)
            if self.selected_id == anchor.id:
                self.selected_id = None
            log.info("Anchor %s removed, promoted %s", module_id, anchor.id)
            self._revalidate_all()
        else:
            log.info("Removed %s", module_id)
        return True

    # ── Selection ──────────────────────────────────────────────────

    def select(self, module_id: str) -> None:
        module = self._modules.get(module_id)
        if module is None or module.is_anchor:
            return
        self.selected_id = module_id

    def clear_selection(self) -> None:
        self.selected_id = None

    # ── Internals ──────────────────────────────────────────────────

    def _sanitize_size(self, size: float) -> float:
        if not math.isfinite(size) or size <= 0:
            return self.rules.default_module_size
        return max(size, self.rules.min_module_size)

    def _clear_of_anchor(self, module: PlacedModule, position: Vec3) -> Vec3:
        """Anchor-overlap correction for a candidate position of *module*."""
        anchor = self.anchor
        if anchor is None or anchor.id == module.id:
            return position

        hx, hz = projected_half_extents(module)
        ahx, ahz = projected_half_extents(anchor)
        corrected = push_clear_of(
            position, hx, hz,
            anchor.position, ahx, ahz,
            clearance=self.rules.clearance,
            eps=self.rules.overlap_epsilon,
        )
        if corrected != position:
            log.debug("Pushed %s clear of anchor: (%.2f, %.2f) -> (%.2f, %.2f)",
                      module.id, position[0], position[2], corrected[0], corrected[2])
        return corrected

    def _revalidate_all(self) -> None:
        for module in self._modules.values():
            if not module.is_anchor:
                module.position = self._clear_of_anchor(module, module.position)
