"""Module catalog — load, validate, query, and serialize module presets."""

from .models import ModulePreset, ValidationError, CatalogResult
from .loader import load_catalog, parse_catalog, parse_preset, get_preset, CATALOG_PATH
from .serialization import catalog_to_dict, preset_to_dict

__all__ = [
    # Models
    "ModulePreset", "ValidationError", "CatalogResult",
    # Loader
    "load_catalog", "parse_catalog", "parse_preset", "get_preset", "CATALOG_PATH",
    # Serialization
    "catalog_to_dict", "preset_to_dict",
]
