# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""Resolution of per-category bundle layout settings and spacing rules."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence, TypeVar

from models import CATEGORY_KEYS, SUPPORTED_BUNDLE_SPACING, CableLayout

T = TypeVar("T")

DEFAULT_CABLE_SPACING_MM = 1.0

DEFAULT_CATEGORY_SETTINGS: dict[str, dict[str, Any]] = {
    "mv": {"max_rows": 2, "max_columns": 2, "bundle_spacing": "2D", "trefoil": False},
    "power": {"max_rows": 3, "max_columns": 20, "bundle_spacing": "2D", "trefoil": False},
    "vfd": {"max_rows": 3, "max_columns": 20, "bundle_spacing": "2D", "trefoil": False},
    "control": {"max_rows": 7, "max_columns": 20, "bundle_spacing": "2D", "trefoil": False},
}


@dataclass(frozen=True)
class CategorySettings:
    max_rows: int
    max_columns: int
    bundle_spacing: str
    trefoil: bool = False

    @property
    def capacity(self) -> int:
        return max(1, self.max_rows * self.max_columns)


def ensure_positive_integer(value: Any, fallback: int) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number) or number < 1:
        return fallback
    return int(math.floor(number))


def resolve_category_settings(layout: CableLayout | None, category: str) -> CategorySettings:
    if category not in CATEGORY_KEYS:
        raise ValueError(f"unknown cable category: {category!r}")
    defaults = DEFAULT_CATEGORY_SETTINGS[category]
    override = layout.for_category(category) if layout is not None else None

    max_rows = ensure_positive_integer(
        override.max_rows if override else None,
        ensure_positive_integer(defaults["max_rows"], 1),
    )
    max_columns = ensure_positive_integer(
        override.max_columns if override else None,
        ensure_positive_integer(defaults["max_columns"], 1),
    )
    bundle_spacing = defaults["bundle_spacing"]
    if override and override.bundle_spacing in SUPPORTED_BUNDLE_SPACING:
        bundle_spacing = override.bundle_spacing
    trefoil = defaults["trefoil"]
    if override and override.trefoil is not None:
        trefoil = override.trefoil
    return CategorySettings(max_rows, max_columns, bundle_spacing, trefoil)


def resolve_cable_spacing(layout: CableLayout | None) -> float:
    spacing = layout.cable_spacing if layout is not None else None
    if spacing is not None and math.isfinite(spacing) and spacing >= 0:
        return float(spacing)
    return DEFAULT_CABLE_SPACING_MM


def bundle_spacing_value(mode: str | None, max_diameter: float, base_spacing: float) -> float:
    """Horizontal gap placed after a bundle whose largest cable is ``max_diameter``."""
    if mode == "0":
        return 0.0
    if mode == "1D":
        return max_diameter if max_diameter > 0 else base_spacing
    if mode == "2D":
        return max_diameter * 2 if max_diameter > 0 else base_spacing * 2
    return base_spacing


def split_into_bundles(items: Sequence[T], capacity: int) -> list[list[T]]:
    size = max(1, capacity)
    return [list(items[i : i + size]) for i in range(0, len(items), size)]
