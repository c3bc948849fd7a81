# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""Deterministic per-tray analysis of a cable tray project."""

from __future__ import annotations

import json
import logging
import re
from hashlib import sha256
from typing import Any

from models import CableModel, ProjectInput, TrayModel
from services.classify import (
    filter_cables_by_tray,
    is_grounding_purpose,
    match_cable_category,
    valid_diameter,
)
from services.free_space import (
    calculate_tray_free_space_metrics,
    is_mv_type_a_tray,
    plan_tray_bundles,
    tray_cables_for_free_space,
)
from services.layout import resolve_cable_spacing
from services.supports import calculate_supports, calculate_weight_load

logger = logging.getLogger(__name__)


def natural_sort_key(value: str) -> tuple[int, Any, str]:
    match = re.search(r"(\d+)$", value)
    if not match:
        return (1, value, value)
    return (0, int(match.group(1)), value)


def deterministic_id(prefix: str, canonical: str, length: int = 16) -> str:
    return f"{prefix}_{sha256(canonical.encode('utf-8')).hexdigest()[:length]}"


def cable_label(cable: CableModel) -> str:
    return cable.tag or cable.id


def _missing_diameter_cables(cables: list[CableModel]) -> list[CableModel]:
    return [
        c
        for c in cables
        if match_cable_category(c.purpose) is not None and valid_diameter(c.diameter_mm) is None
    ]


def _analyze_tray(
    project: ProjectInput, tray: TrayModel, warnings: list[str]
) -> dict[str, Any]:
    layout = project.settings.layout
    routed = filter_cables_by_tray(project.cables, tray.name)
    counted = tray_cables_for_free_space(tray, project.cables)
    grounding = [c for c in routed if is_grounding_purpose(c.purpose)]

    metrics = calculate_tray_free_space_metrics(
        tray,
        counted,
        layout,
        resolve_cable_spacing(layout),
        layout.consider_bundle_spacing_as_free,
    )
    if is_mv_type_a_tray(tray):
        warnings.append(f"Tray {tray.name}: free space is not calculated for MV type A trays")
    elif not metrics.calculation_available:
        missing = ", ".join(cable_label(c) for c in _missing_diameter_cables(counted))
        warnings.append(f"Tray {tray.name}: free space unavailable, missing diameter for {missing}")
    elif metrics.free_width_percent is None:
        warnings.append(f"Tray {tray.name}: width unknown, free percentage unavailable")
    elif (
        tray.width_mm is not None
        and metrics.occupied_width_mm is not None
        and metrics.occupied_width_mm > tray.width_mm
    ):
        warnings.append(
            f"Tray {tray.name}: cables need {metrics.occupied_width_mm:.1f} mm "
            f"of {tray.width_mm:g} mm width"
        )

    bundles: list[dict[str, Any]] = []
    plan = [] if is_mv_type_a_tray(tray) else plan_tray_bundles(counted, layout)
    for seq, bundle in enumerate(plan, start=1):
        bundles.append(
            {
                "bundle_id": deterministic_id(
                    "bun", f"{tray.id}|{bundle.category}|{bundle.band}|{seq}"
                ),
                "seq": seq,
                "category": bundle.category,
                "band": bundle.band,
                "cable_count": len(bundle.diameters),
                "max_diameter_mm": bundle.max_diameter,
                "bottom_row_width_mm": sum(bundle.bottom_row),
                "max_rows": bundle.settings.max_rows,
                "max_columns": bundle.settings.max_columns,
                "bundle_spacing": bundle.settings.bundle_spacing,
            }
        )

    supports = calculate_supports(
        tray.length_mm,
        project.settings.supports.distance_m,
        project.settings.supports.weight_kg,
        tray.type,
    )
    weights = calculate_weight_load(
        tray.weight_kg_per_m,
        supports.weight_per_m_kg,
        [c.weight_kg_per_m for c in routed],
        supports.length_m,
    )

    return {
        "tray_id": tray.id,
        "name": tray.name,
        "type": tray.type,
        "purpose": tray.purpose,
        "width_mm": tray.width_mm,
        "height_mm": tray.height_mm,
        "length_mm": tray.length_mm,
        "cable_ids": [c.id for c in counted],
        "grounding_cable_ids": [c.id for c in grounding],
        "occupied_width_mm": metrics.occupied_width_mm,
        "free_width_percent": metrics.free_width_percent,
        "calculation_available": metrics.calculation_available,
        "bundles": bundles,
        "supports": supports.as_dict(),
        "weights": weights.as_dict(),
    }


def analyze(project: ProjectInput) -> dict[str, Any]:
    warnings: list[str] = []
    trays = [
        _analyze_tray(project, tray, warnings)
        for tray in sorted(project.trays, key=lambda t: natural_sort_key(t.name))
    ]

    routed_ids = {cable_id for tray in trays for cable_id in tray["cable_ids"]}
    routed_ids.update(cable_id for tray in trays for cable_id in tray["grounding_cable_ids"])
    unrouted = [c for c in project.cables if c.id not in routed_ids]
    for cable in unrouted:
        warnings.append(f"Cable {cable_label(cable)}: routing matches no tray")

    input_hash = sha256(
        json.dumps(project.model_dump(), sort_keys=True).encode("utf-8")
    ).hexdigest()
    available = [t for t in trays if t["free_width_percent"] is not None]
    logger.debug(
        "analyzed %d trays, %d cables, %d warnings", len(trays), len(project.cables), len(warnings)
    )
    return {
        "project": project.model_dump(),
        "input_hash": input_hash,
        "trays": trays,
        "unrouted_cables": [
            {"cable_id": c.id, "tag": c.tag, "routing": c.routing} for c in unrouted
        ],
        "warnings": warnings,
        "metrics": {
            "tray_count": len(trays),
            "cable_count": len(project.cables),
            "unrouted_cable_count": len(unrouted),
            "bundle_count": sum(len(t["bundles"]) for t in trays),
            "available_tray_count": len(available),
            "min_free_width_percent": (
                min(t["free_width_percent"] for t in available) if available else None
            ),
        },
    }
