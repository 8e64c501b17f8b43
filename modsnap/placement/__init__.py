"""Placement — places modules on the ground plane and snaps them together.

Submodules:
  config        SnapRules tuning constants (snap threshold, release radius, …).
  models        Dataclasses (PlacedModule, ConnectionPoint, SnapResult, …) and errors.
  geometry      Yaw transforms, footprint extents, overlap push, flush join.
  store         PlacementStore — placed modules, anchor role, selection.
  registry      ConnectionPointRegistry — connection points and occupancy.
  graph         ConnectivityGraph — undirected joints between points.
  resolver      SnapResolver — nearest point pair within the threshold.
  orchestrator  PlacementOrchestrator — drag/select/geometry stimuli.
  serialization Scene snapshot for the view layer.
"""

from .config import SnapRules, SNAP_RULES
from .models import (
    PlacedModule, ConnectionPoint, PointInput, PointState, SnapResult, SnapEvent,
    PlacementError, MissingDropTarget, CenterReserved, UnknownModuleId, UnknownPointId,
)
from .store import PlacementStore
from .registry import ConnectionPointRegistry
from .graph import ConnectivityGraph, edge_key
from .resolver import SnapResolver
from .orchestrator import PlacementOrchestrator
from .serialization import scene_to_dict

__all__ = [
    # Config
    "SnapRules", "SNAP_RULES",
    # Models
    "PlacedModule", "ConnectionPoint", "PointInput", "PointState",
    "SnapResult", "SnapEvent",
    # Errors
    "PlacementError", "MissingDropTarget", "CenterReserved",
    "UnknownModuleId", "UnknownPointId",
    # Stores
    "PlacementStore", "ConnectionPointRegistry", "ConnectivityGraph", "edge_key",
    # Algorithms
    "SnapResolver", "PlacementOrchestrator",
    # Serialization
    "scene_to_dict",
]
