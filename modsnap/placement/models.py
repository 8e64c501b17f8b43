"""Placement dataclasses and the placement error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


Vec3 = tuple[float, float, float]


# ── Placed modules ─────────────────────────────────────────────────


@dataclass
class PlacedModule:
    """One module instance on the ground plane."""

    id: str
    preset_id: str
    model_path: str
    position: Vec3
    rotation_y: float = 0.0     # yaw in radians, about +Y
    size_x: float = 6.0         # full footprint extent along local X
    size_z: float = 6.0         # full footprint extent along local Z
    is_anchor: bool = False
    movable: bool = True

    @property
    def half_x(self) -> float:
        return self.size_x / 2

    @property
    def half_z(self) -> float:
        return self.size_z / 2


# ── Connection points ──────────────────────────────────────────────


class PointState(str, Enum):
    FREE = "free"
    OCCUPIED = "occupied"


@dataclass
class PointInput:
    """A connection point as reported by the view layer for one module."""

    key: str
    local_position: Vec3
    name: str = ""


@dataclass
class ConnectionPoint:
    """A named attachment point on a module's surface.

    Only the module-local offset is stored; the world position is a
    function of the owning module's transform and is derived on demand
    (see ``geometry.point_world_position``).
    """

    id: str                     # "<module_id>:<key>"
    module_id: str
    key: str
    local_position: Vec3
    name: str = ""
    state: PointState = PointState.FREE
    paired_with: str | None = None

    @property
    def is_free(self) -> bool:
        return self.state is PointState.FREE


def make_point_id(module_id: str, key: str) -> str:
    return f"{module_id}:{key}"


# ── Snap results ───────────────────────────────────────────────────


@dataclass(frozen=True)
class SnapResult:
    """Best snap candidate for a moving module."""

    position: Vec3
    moving_point_id: str
    static_point_id: str
    distance: float


@dataclass(frozen=True)
class SnapEvent:
    """Notification of a snap that was not the last one reported for the module."""

    module_id: str
    moving_point_id: str
    static_point_id: str
    position: Vec3


# ── Errors ─────────────────────────────────────────────────────────


class PlacementError(Exception):
    """Raised when a placement request cannot be honoured."""

    def __init__(self, module_id: str, reason: str) -> None:
        self.module_id = module_id
        self.reason = reason
        super().__init__(f"'{module_id}': {reason}")


class MissingDropTarget(PlacementError):
    """A non-anchor module was added without a world position."""

    def __init__(self, preset_id: str) -> None:
        super().__init__(preset_id, "a drop position is required once the anchor exists")


class CenterReserved(PlacementError):
    """A non-anchor module was dropped on the origin."""

    def __init__(self, preset_id: str, position: Vec3) -> None:
        self.position = position
        super().__init__(
            preset_id,
            f"position ({position[0]:.3f}, {position[2]:.3f}) is reserved for the anchor",
        )


class UnknownModuleId(PlacementError):
    def __init__(self, module_id: str) -> None:
        super().__init__(module_id, "no such module")


class UnknownPointId(PlacementError):
    def __init__(self, point_id: str) -> None:
        super().__init__(point_id, "no such connection point")
