"""Catalog dataclasses — typed representations of module catalog entries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModulePreset:
    """A prefabricated module as offered by the catalog."""

    id: str
    name: str
    model_path: str                     # 3D asset (GLB) reference
    category: str = "General"
    thumbnail_path: str = ""
    price: float = 0
    bathrooms: int = 0
    bedrooms: int = 0


@dataclass
class ValidationError:
    entry_index: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"[entry {self.entry_index}] {self.field}: {self.message}"


@dataclass
class CatalogResult:
    """Result of loading the catalog — presets + any validation errors."""
    presets: list[ModulePreset]
    errors: list[ValidationError]

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0
