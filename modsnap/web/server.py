"""
FastAPI web server — turns view-layer stimuli into orchestrator calls.

The 3D viewer owns rendering, picking and pointer → ground conversion;
it posts one request per stimulus (drag update, click, rotation commit,
geometry report) and redraws from the returned scene snapshot.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from modsnap.catalog import catalog_to_dict, get_preset, load_catalog
from modsnap.placement import (
    PlacementError, PlacementOrchestrator, PointInput, SnapEvent,
    UnknownModuleId, UnknownPointId,
)
from modsnap.placement.geometry import snap_to_quarter_turn
from modsnap.placement.models import Vec3
from modsnap.placement.serialization import module_to_dict, point_to_dict


log = logging.getLogger(__name__)

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="modsnap")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _catalog_path() -> Path | None:
    env = os.environ.get("MODSNAP_CATALOG")
    return Path(env) if env else None


# ── Session state (persists across requests) ───────────────────────

_lock = threading.Lock()                 # one stimulus at a time
_catalog = load_catalog(_catalog_path())
_pending_events: list[SnapEvent] = []    # filled by the snap listener


def _new_orchestrator() -> PlacementOrchestrator:
    orch = PlacementOrchestrator()
    orch.subscribe(_pending_events.append)
    return orch


_orch = _new_orchestrator()


# ── Models ─────────────────────────────────────────────────────────

class AddModuleRequest(BaseModel):
    preset_id: str
    position: list[float] | None = None


class DragRequest(BaseModel):
    position: list[float]


class RotateRequest(BaseModel):
    position: list[float]
    rotation_y: float


class BoundsRequest(BaseModel):
    size_x: float
    size_z: float


class PointReport(BaseModel):
    key: str
    local_position: list[float]
    name: str = ""


class PointsRequest(BaseModel):
    points: list[PointReport]


def _vec3(values: list[float]) -> Vec3:
    if len(values) != 3:
        raise HTTPException(422, f"Expected 3 coordinates, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


def _event_to_dict(e: SnapEvent) -> dict:
    return {
        "module_id": e.module_id,
        "moving_point_id": e.moving_point_id,
        "static_point_id": e.static_point_id,
        "position": list(e.position),
    }


# ── Routes ─────────────────────────────────────────────────────────

@app.post("/api/reset")
def reset_scene():
    """Drop every placed module and start an empty scene."""
    global _orch
    with _lock:
        _pending_events.clear()
        _orch = _new_orchestrator()
    return {"status": "ok"}


@app.get("/api/catalog")
def get_catalog():
    return catalog_to_dict(_catalog)


@app.get("/api/scene")
def get_scene():
    with _lock:
        return _orch.snapshot()


@app.post("/api/modules")
def add_module(req: AddModuleRequest):
    """Place a preset.  The first module becomes the anchor at the origin."""
    preset = get_preset(_catalog, req.preset_id)
    if preset is None:
        raise HTTPException(404, f"Unknown preset '{req.preset_id}'")
    position = _vec3(req.position) if req.position is not None else None
    with _lock:
        try:
            module_id = _orch.add_module(preset, position)
        except PlacementError as e:
            raise HTTPException(400, str(e))
        return {"module_id": module_id, "scene": _orch.snapshot()}


@app.get("/api/modules/{module_id}")
def get_module(module_id: str):
    with _lock:
        try:
            module = _orch.store.require(module_id)
        except UnknownModuleId as e:
            raise HTTPException(404, str(e))
        return module_to_dict(
            module,
            selected=_orch.store.selected_id == module_id,
            held=_orch.is_held(module_id),
        )


@app.delete("/api/modules/{module_id}")
def remove_module(module_id: str):
    with _lock:
        _orch.remove_module(module_id)
        return _orch.snapshot()


@app.post("/api/modules/{module_id}/drag")
def drag_module(module_id: str, req: DragRequest):
    """One drag update.  ``snap_event`` is set only for a newly reported snap;
    the viewer should stop the drag whenever ``snapped`` is true."""
    position = _vec3(req.position)
    with _lock:
        _pending_events.clear()
        snapped = _orch.move_with_snap(module_id, position)
        event = _pending_events.pop() if _pending_events else None
        return {
            "snapped": snapped,
            "snap_event": _event_to_dict(event) if event else None,
            "scene": _orch.snapshot(),
        }


@app.post("/api/modules/{module_id}/rotate")
def rotate_module(module_id: str, req: RotateRequest):
    """Commit a rotation; the raw yaw is rounded to the nearest quarter turn."""
    position = _vec3(req.position)
    with _lock:
        _orch.rotate(module_id, position, snap_to_quarter_turn(req.rotation_y))
        return _orch.snapshot()


@app.post("/api/modules/{module_id}/select")
def select_module(module_id: str):
    with _lock:
        _orch.select(module_id)
        return _orch.snapshot()


@app.post("/api/selection/clear")
def clear_selection():
    with _lock:
        _orch.clear_selection()
        return _orch.snapshot()


@app.post("/api/modules/{module_id}/bounds")
def report_bounds(module_id: str, req: BoundsRequest):
    with _lock:
        _orch.report_bounds(module_id, req.size_x, req.size_z)
        return _orch.snapshot()


@app.post("/api/modules/{module_id}/points")
def report_points(module_id: str, req: PointsRequest):
    points = [
        PointInput(key=p.key, local_position=_vec3(p.local_position), name=p.name)
        for p in req.points
    ]
    with _lock:
        _orch.report_points(module_id, points)
        return _orch.snapshot()


@app.get("/api/points/{point_id}")
def get_point(point_id: str):
    with _lock:
        try:
            point = _orch.registry.require(point_id)
        except UnknownPointId as e:
            raise HTTPException(404, str(e))
        return point_to_dict(point, _orch.store.get(point.module_id))


def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    log.info("Catalog: %d presets, %d errors", len(_catalog.presets), len(_catalog.errors))
    uvicorn.run("modsnap.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
