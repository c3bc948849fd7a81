# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""Cable classification: diameter bands, purpose categories, and tray routing filters."""

from __future__ import annotations

import math
from typing import Any, Iterable

from models import CATEGORY_KEYS, CableModel

BAND_0_8 = "0-8"
BAND_8_1_15 = "8.1-15"
BAND_15_1_21 = "15.1-21"
BAND_21_1_30 = "21.1-30"
BAND_30_1_40 = "30.1-40"
BAND_40_1_45 = "40.1-45"
BAND_45_1_60 = "45.1-60"
BAND_60_PLUS = "60+"

# (inclusive upper bound, label); anything above the last bound is 60+
DIAMETER_BANDS: list[tuple[float, str]] = [
    (8, BAND_0_8),
    (15, BAND_8_1_15),
    (21, BAND_15_1_21),
    (30, BAND_21_1_30),
    (40, BAND_30_1_40),
    (45, BAND_40_1_45),
    (60, BAND_45_1_60),
]
BAND_ORDER = [label for _, label in DIAMETER_BANDS] + [BAND_60_PLUS]

GROUNDING_PURPOSE = "grounding"


def valid_diameter(value: Any) -> float | None:
    """Return a usable diameter in mm, or None when missing/NaN/non-positive."""
    if value is None or isinstance(value, bool):
        return None
    try:
        diameter = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(diameter) or diameter <= 0:
        return None
    return diameter


def determine_cable_diameter_group(diameter: Any) -> str:
    value = valid_diameter(diameter)
    if value is None:
        return BAND_0_8
    for upper, label in DIAMETER_BANDS:
        if value <= upper:
            return label
    return BAND_60_PLUS


def match_cable_category(purpose: str | None) -> str | None:
    """Map a free-text cable purpose to mv/vfd/power/control.

    The checks run in a fixed order, so "medium voltage power feed" is mv and
    "vfd power" is vfd.
    """
    if not purpose:
        return None
    normalized = purpose.strip().lower()
    if not normalized:
        return None
    if normalized.startswith("mv") or "medium voltage" in normalized:
        return "mv"
    if "vfd" in normalized:
        return "vfd"
    if normalized.startswith("power") or " power" in normalized:
        return "power"
    if "control" in normalized:
        return "control"
    return None


def routing_contains_tray(routing: str | None, tray_name: str) -> bool:
    if not routing:
        return False
    target = tray_name.strip().lower()
    if not target:
        return False
    return any(segment.strip().lower() == target for segment in routing.split("/"))


def filter_cables_by_tray(cables: Iterable[CableModel], tray_name: str) -> list[CableModel]:
    return [cable for cable in cables if routing_contains_tray(cable.routing, tray_name)]


def is_grounding_purpose(purpose: str | None) -> bool:
    return purpose is not None and purpose.strip().lower() == GROUNDING_PURPOSE


def build_cable_bundles(cables: Iterable[CableModel]) -> dict[str, dict[str, list[CableModel]]]:
    """Group cables into category -> diameter band -> cables.

    Categories come out in mv/power/vfd/control order and bands in ascending
    order; empty entries are omitted and uncategorised cables are dropped.
    """
    grouped: dict[str, dict[str, list[CableModel]]] = {key: {} for key in CATEGORY_KEYS}
    for cable in cables:
        category = match_cable_category(cable.purpose)
        if category is None:
            continue
        band = determine_cable_diameter_group(cable.diameter_mm)
        grouped[category].setdefault(band, []).append(cable)

    bundles: dict[str, dict[str, list[CableModel]]] = {}
    for category in CATEGORY_KEYS:
        bands = grouped[category]
        if not bands:
            continue
        bundles[category] = {band: bands[band] for band in BAND_ORDER if band in bands}
    return bundles
