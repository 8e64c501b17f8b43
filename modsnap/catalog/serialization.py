"""Catalog serialization — convert dataclasses to JSON-safe dicts."""

from __future__ import annotations

from .models import ModulePreset, CatalogResult


def catalog_to_dict(result: CatalogResult) -> dict:
    """Serialize a CatalogResult to a JSON-safe dict for the web API."""
    return {
        "ok": result.ok,
        "preset_count": len(result.presets),
        "presets": [preset_to_dict(p) for p in result.presets],
        "errors": [{"entry_index": e.entry_index, "field": e.field, "message": e.message}
                   for e in result.errors],
    }


def preset_to_dict(p: ModulePreset) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "category": p.category,
        "thumbnail_path": p.thumbnail_path,
        "model_path": p.model_path,
        "price": p.price,
        "bathrooms": p.bathrooms,
        "bedrooms": p.bedrooms,
    }
