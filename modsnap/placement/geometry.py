"""Low-level geometry helpers for placement and snapping.

Conventions: Y is up, the ground plane is X/Z, yaw rotates about +Y with
the right-hand rule (a local +X offset at yaw = π/2 points along world -Z).
"""

from __future__ import annotations

import math

from shapely.affinity import rotate as shapely_rotate
from shapely.geometry import Polygon, box as shapely_box

from .models import ConnectionPoint, PlacedModule, Vec3


QUARTER_TURN = math.pi / 2


# ── Transforms ─────────────────────────────────────────────────────


def rotate_y(local: Vec3, rotation_y: float) -> Vec3:
    """Rotate a module-local offset by yaw about the vertical axis."""
    x, y, z = local
    cos_r = math.cos(rotation_y)
    sin_r = math.sin(rotation_y)
    return (x * cos_r + z * sin_r, y, -x * sin_r + z * cos_r)


def local_to_world(local: Vec3, position: Vec3, rotation_y: float) -> Vec3:
    """Transform a module-local offset to world coordinates."""
    rx, ry, rz = rotate_y(local, rotation_y)
    return (position[0] + rx, position[1] + ry, position[2] + rz)


def point_world_position(
    point: ConnectionPoint,
    module: PlacedModule,
    position: Vec3 | None = None,
) -> Vec3:
    """World position of a connection point.

    *position* overrides the module's committed position, which lets the
    resolver evaluate a module at its desired (not yet committed) spot.
    """
    return local_to_world(
        point.local_position,
        module.position if position is None else position,
        module.rotation_y,
    )


def distance(a: Vec3, b: Vec3) -> float:
    return math.dist(a, b)


def ground_distance(a: Vec3, b: Vec3) -> float:
    """Distance between two points projected onto the ground plane."""
    return math.hypot(a[0] - b[0], a[2] - b[2])


def projected_half_extents(module: PlacedModule) -> tuple[float, float]:
    """World-axis (half_x, half_z) of a module's footprint at its yaw.

    At quarter turns this is the body half-dims with X and Z swapped at
    90° and 270°; in between it is the half-size of the rotated
    rectangle's axis-aligned bounds.
    """
    cos_r = abs(math.cos(module.rotation_y))
    sin_r = abs(math.sin(module.rotation_y))
    return (
        cos_r * module.half_x + sin_r * module.half_z,
        sin_r * module.half_x + cos_r * module.half_z,
    )


# ── Rotation input ─────────────────────────────────────────────────


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [-π, π]."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return angle


def snap_to_quarter_turn(angle: float) -> float:
    """Round a yaw to the nearest multiple of π/2."""
    return round(normalize_angle(angle) / QUARTER_TURN) * QUARTER_TURN


# ── Overlap avoidance ──────────────────────────────────────────────


def _direction(offset: float, eps: float) -> float:
    # Vanishing offsets always resolve towards the positive axis.
    if abs(offset) < eps:
        return 1.0
    return 1.0 if offset > 0 else -1.0


def push_clear_of(
    position: Vec3, half_x: float, half_z: float,
    other_position: Vec3, other_half_x: float, other_half_z: float,
    *,
    clearance: float,
    eps: float,
) -> Vec3:
    """Push a footprint outside another one if the two rectangles intersect.

    The push runs along whichever axis needs the smaller displacement
    (X on a tie) and leaves *clearance* beyond full separation.  Returns
    *position* unchanged when the rectangles are apart or only touching.
    """
    dx = position[0] - other_position[0]
    dz = position[2] - other_position[2]
    overlap_x = half_x + other_half_x - abs(dx)
    overlap_z = half_z + other_half_z - abs(dz)
    if overlap_x <= eps or overlap_z <= eps:
        return position

    x, y, z = position
    if overlap_x <= overlap_z:
        x = other_position[0] + _direction(dx, eps) * (half_x + other_half_x + clearance)
    else:
        z = other_position[2] + _direction(dz, eps) * (half_z + other_half_z + clearance)
    return (x, y, z)


def flush_on_dominant_axis(
    position: Vec3, half_x: float, half_z: float,
    static_position: Vec3, static_half_x: float, static_half_z: float,
    *,
    eps: float,
) -> Vec3:
    """Slide a footprint so it sits exactly flush against another one.

    The connection axis is whichever of X/Z carries the larger centre
    separation (X on a tie).  Only that coordinate changes: it is set so
    the two footprints are exactly the sum of their half extents apart,
    on the side the module already occupies.
    """
    dx = position[0] - static_position[0]
    dz = position[2] - static_position[2]

    x, y, z = position
    if abs(dx) >= abs(dz):
        x = static_position[0] + _direction(dx, eps) * (half_x + static_half_x)
    else:
        z = static_position[2] + _direction(dz, eps) * (half_z + static_half_z)
    return (x, y, z)


# ── Footprint polygons ─────────────────────────────────────────────


def footprint_polygon(module: PlacedModule) -> Polygon:
    """The module's footprint rectangle on the ground plane (X → x, Z → y)."""
    cx, _, cz = module.position
    rect = shapely_box(
        cx - module.half_x, cz - module.half_z,
        cx + module.half_x, cz + module.half_z,
    )
    if module.rotation_y == 0:
        return rect
    # Yaw about +Y turns the X/Z plane clockwise when viewed as (x, z).
    return shapely_rotate(rect, -module.rotation_y, origin=(cx, cz), use_radians=True)


def footprints_intersect(a: PlacedModule, b: PlacedModule, eps: float = 1e-9) -> bool:
    """True if two footprints overlap by more than *eps* area.

    Rectangles that merely share an edge (a flush join) do not count.
    """
    return footprint_polygon(a).intersection(footprint_polygon(b)).area > eps
