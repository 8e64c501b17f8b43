"""Catalog loader — reads a module catalog JSON file, parses and validates it.

The file holds a JSON list of items in the catalog service's shape::

    {"id": 12, "name": "Studio", "moduleType": {"name": "Living"},
     "moduleImage": "...", "glbFile": "...", "price": 41000,
     "noOfBathrooms": 1, "noOfBedrooms": 1}
"""

from __future__ import annotations

import json
from pathlib import Path

from .models import ModulePreset, ValidationError, CatalogResult


CATALOG_PATH = Path(__file__).resolve().parent.parent.parent / "catalog" / "modules.json"


# ── Parsing ────────────────────────────────────────────────────────

def parse_preset(data: dict) -> ModulePreset:
    """Build a preset from one catalog item, filling display defaults."""
    module_type = data.get("moduleType") or {}
    return ModulePreset(
        id=str(data["id"]),
        name=data.get("name") or "Unnamed Module",
        model_path=data.get("glbFile") or "",
        category=module_type.get("name") or "General",
        thumbnail_path=data.get("moduleImage") or "",
        price=data.get("price") or 0,
        bathrooms=data.get("noOfBathrooms") or 0,
        bedrooms=data.get("noOfBedrooms") or 0,
    )


# ── Validation ─────────────────────────────────────────────────────

def _validate_item(index: int, data: object) -> list[ValidationError]:
    if not isinstance(data, dict):
        return [ValidationError(index, "<item>", "Must be an object")]
    errs: list[ValidationError] = []
    if data.get("id") in (None, ""):
        errs.append(ValidationError(index, "id", "Missing"))
    if not data.get("glbFile"):
        errs.append(ValidationError(index, "glbFile", "Missing 3D asset path"))
    for key in ("price", "noOfBathrooms", "noOfBedrooms"):
        value = data.get(key)
        if value is not None and (not isinstance(value, (int, float)) or value < 0):
            errs.append(ValidationError(index, key, "Must be a non-negative number"))
    return errs


# ── Public API ─────────────────────────────────────────────────────

def parse_catalog(items: list) -> CatalogResult:
    """Parse a list of catalog items, collecting errors instead of raising."""
    presets: list[ModulePreset] = []
    errors: list[ValidationError] = []
    seen: set[str] = set()

    for i, item in enumerate(items):
        item_errs = _validate_item(i, item)
        if item_errs:
            errors.extend(item_errs)
            continue
        preset = parse_preset(item)
        if preset.id in seen:
            errors.append(ValidationError(i, "id", f"Duplicate preset ID '{preset.id}'"))
            continue
        seen.add(preset.id)
        presets.append(preset)

    return CatalogResult(presets=presets, errors=errors)


def load_catalog(path: Path | None = None) -> CatalogResult:
    """Load and validate the catalog file.

    A missing file yields an empty catalog; an unreadable one yields a
    single error.
    """
    path = path or CATALOG_PATH
    if not path.exists():
        return CatalogResult(presets=[], errors=[])
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        return CatalogResult(presets=[], errors=[ValidationError(-1, "<file>", str(e))])
    if not isinstance(data, list):
        return CatalogResult(
            presets=[], errors=[ValidationError(-1, "<file>", "Expected a JSON list")])
    return parse_catalog(data)


def get_preset(result: CatalogResult, preset_id: str) -> ModulePreset | None:
    """Look up a single preset by ID."""
    for p in result.presets:
        if p.id == preset_id:
            return p
    return None
