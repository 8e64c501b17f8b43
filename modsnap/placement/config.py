"""Shared tuning constants for placement and snapping.

The store (anchor-overlap correction, footprint sanitizing), the resolver
(snap search, zero-gap join) and the orchestrator (unsnap hysteresis) all
read their distances from this single source of truth.

All distances are in scene length units (the ground plane is X/Z).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SnapRules:
    """Geometric rules for placing and joining modules."""

    snap_threshold: float = 0.3
    """Maximum world distance between two free connection points for them
    to be a snap candidate.  A pair exactly at the threshold is eligible."""

    release_radius: float = 0.45
    """Ground-plane drag distance from the detach point that must be
    exceeded before a just-detached module may snap again."""

    clearance: float = 0.1
    """Gap left between a module and the anchor when the anchor-overlap
    correction pushes the module out."""

    center_reserved_radius: float = 0.01
    """Drops closer than this to the origin are rejected; the origin
    belongs to the anchor."""

    default_module_size: float = 6.0
    """Footprint extent used before bounds are reported, and when a
    reported extent is not a positive finite number."""

    min_module_size: float = 0.5
    """Smallest footprint extent accepted from a bounds report."""

    overlap_epsilon: float = 1e-9
    """Overlaps at or below this count as touching, not intersecting.
    Also the threshold below which a centre offset counts as zero."""


# Module-level singleton, importable everywhere.
SNAP_RULES = SnapRules()
