# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""Tray cross-section packing and free-width estimation.

Cables are grouped by purpose category and diameter band, split into
bundles of at most ``max_rows * max_columns`` cables and laid side by side.
Only the bottom row of each bundle takes up tray width; stacked rows take
up height. The result is the occupied width and the free width percentage.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable

from models import CATEGORY_KEYS, CableLayout, CableModel, TrayModel
from services.classify import (
    determine_cable_diameter_group,
    filter_cables_by_tray,
    is_grounding_purpose,
    match_cable_category,
    valid_diameter,
)
from services.layout import (
    CategorySettings,
    bundle_spacing_value,
    resolve_cable_spacing,
    resolve_category_settings,
    split_into_bundles,
)

logger = logging.getLogger(__name__)

MV_TYPE_A_PURPOSE = "type a (pink color) for mv cables"


@dataclass(frozen=True)
class TrayFreeSpaceMetrics:
    occupied_width_mm: float | None
    free_width_percent: float | None
    calculation_available: bool


UNAVAILABLE = TrayFreeSpaceMetrics(None, None, False)


@dataclass(frozen=True)
class PackedBundle:
    category: str
    band: str
    diameters: tuple[float, ...]
    settings: CategorySettings

    @property
    def max_diameter(self) -> float:
        return self.diameters[0] if self.diameters else 0.0

    @property
    def bottom_row(self) -> tuple[float, ...]:
        return self.diameters[: min(len(self.diameters), self.settings.max_columns)]

    @property
    def slots_filled(self) -> int:
        return min(len(self.diameters), self.settings.capacity)


def is_mv_type_a_tray(tray: TrayModel) -> bool:
    return bool(tray.purpose) and tray.purpose.strip().lower() == MV_TYPE_A_PURPOSE


def _positive_width(tray: TrayModel) -> float | None:
    width = tray.width_mm
    if width is None or not math.isfinite(width) or width <= 0:
        return None
    return float(width)


def _group_diameters(
    cables: Iterable[Any],
) -> tuple[dict[str, dict[str, list[float]]], bool]:
    """Return category -> band -> diameters, and whether a categorised cable lacks a diameter."""
    groups: dict[str, dict[str, list[float]]] = {key: {} for key in CATEGORY_KEYS}
    missing = False
    for cable in cables:
        category = match_cable_category(cable.purpose)
        if category is None:
            continue
        diameter = valid_diameter(cable.diameter_mm)
        if diameter is None:
            missing = True
            continue
        band = determine_cable_diameter_group(diameter)
        groups[category].setdefault(band, []).append(diameter)
    return groups, missing


def _plan_from_groups(
    groups: dict[str, dict[str, list[float]]], layout: CableLayout | None
) -> list[PackedBundle]:
    plan: list[PackedBundle] = []
    for category in CATEGORY_KEYS:
        entries = [(band, d) for band, d in groups[category].items() if d]
        if not entries:
            continue
        settings = resolve_category_settings(layout, category)
        entries.sort(key=lambda entry: max(entry[1]), reverse=True)
        for band, diameters in entries:
            ordered = sorted(diameters, reverse=True)
            for bundle in split_into_bundles(ordered, settings.capacity):
                plan.append(PackedBundle(category, band, tuple(bundle), settings))
    return plan


def plan_tray_bundles(cables: Iterable[Any], layout: CableLayout | None) -> list[PackedBundle]:
    """Ordered bundle plan across mv, power, vfd and control.

    Categorised cables without a usable diameter are left out of the plan;
    ``calculate_tray_free_space_metrics`` treats their presence as fatal.
    """
    groups, _ = _group_diameters(cables)
    return _plan_from_groups(groups, layout)


def calculate_tray_free_space_metrics(
    tray: TrayModel | None,
    cables: Iterable[Any],
    layout: CableLayout | None,
    spacing_between_cables_mm: float,
    consider_bundle_spacing_as_free: bool,
) -> TrayFreeSpaceMetrics:
    if tray is None or is_mv_type_a_tray(tray):
        return UNAVAILABLE

    tray_width = _positive_width(tray)
    spacing = (
        spacing_between_cables_mm
        if math.isfinite(spacing_between_cables_mm) and spacing_between_cables_mm >= 0
        else 0.0
    )

    groups, missing = _group_diameters(cables)
    if missing:
        logger.debug("free space unavailable for tray %s: missing cable diameter", tray.name)
        return UNAVAILABLE

    plan = _plan_from_groups(groups, layout)
    if not plan:
        return TrayFreeSpaceMetrics(0.0, 100.0 if tray_width is not None else None, True)

    total_bottom_row = 0.0
    total_within = 0.0
    total_bundle_spacing = 0.0
    last_index = len(plan) - 1
    for index, bundle in enumerate(plan):
        total_bottom_row += sum(bundle.bottom_row)
        total_within += max(0, bundle.slots_filled - 1) * spacing
        if index != last_index:
            total_bundle_spacing += bundle_spacing_value(
                bundle.settings.bundle_spacing, bundle.max_diameter, spacing
            )

    occupied = total_bottom_row + total_within
    if not consider_bundle_spacing_as_free:
        occupied += total_bundle_spacing

    if tray_width is None:
        return TrayFreeSpaceMetrics(occupied, None, True)
    free_percent = max(0.0, (tray_width - occupied) / tray_width * 100)
    return TrayFreeSpaceMetrics(occupied, free_percent, True)


def tray_cables_for_free_space(tray: TrayModel, cables: Iterable[CableModel]) -> list[CableModel]:
    return [
        cable
        for cable in filter_cables_by_tray(cables, tray.name)
        if not is_grounding_purpose(cable.purpose)
    ]


def compute_tray_free_space_metrics(
    tray: TrayModel, cables: Iterable[CableModel], layout: CableLayout | None
) -> TrayFreeSpaceMetrics:
    return calculate_tray_free_space_metrics(
        tray,
        tray_cables_for_free_space(tray, cables),
        layout,
        resolve_cable_spacing(layout),
        bool(layout.consider_bundle_spacing_as_free) if layout is not None else False,
    )


def compute_tray_free_space_percent(
    tray: TrayModel, cables: Iterable[CableModel], layout: CableLayout | None
) -> float | None:
    metrics = compute_tray_free_space_metrics(tray, cables, layout)
    if not metrics.calculation_available:
        return None
    return metrics.free_width_percent


def compute_tray_free_space_by_tray_id(
    trays: Iterable[TrayModel], cables: Iterable[CableModel], layout: CableLayout | None
) -> dict[str, float | None]:
    cable_list = list(cables)
    return {
        tray.id: compute_tray_free_space_percent(tray, cable_list, layout) for tray in trays
    }
