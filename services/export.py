# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""Export helpers for tray CSV, bundle CSV, and result JSON."""

from __future__ import annotations

import csv
import io
import json
from typing import Any

TRAY_COLUMNS = [
    "project_id",
    "revision_id",
    "tray_id",
    "name",
    "type",
    "purpose",
    "width_mm",
    "height_mm",
    "length_mm",
    "cable_count",
    "occupied_width_mm",
    "free_width_percent",
    "calculation_available",
    "supports_count",
    "total_load_per_m_kg",
    "total_load_per_m_kn",
]

BUNDLE_COLUMNS = [
    "tray_name",
    "seq",
    "bundle_id",
    "category",
    "band",
    "cable_count",
    "max_diameter_mm",
    "bottom_row_width_mm",
]


def _round(value: float | None, digits: int = 2) -> float | str:
    return "" if value is None else round(value, digits)


def trays_csv(result: dict[str, Any], project_id: str, revision_id: str | None = None) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=TRAY_COLUMNS)
    writer.writeheader()
    for t in result["trays"]:
        row = {
            **t,
            "project_id": project_id,
            "revision_id": revision_id or "",
            "cable_count": len(t["cable_ids"]),
            "occupied_width_mm": _round(t["occupied_width_mm"]),
            "free_width_percent": _round(t["free_width_percent"]),
            "supports_count": t["supports"].get("supports_count"),
            "total_load_per_m_kg": _round(t["weights"].get("total_load_per_m_kg"), 3),
            "total_load_per_m_kn": _round(t["weights"].get("total_load_per_m_kn"), 4),
        }
        writer.writerow({k: "" if row.get(k) is None else row[k] for k in TRAY_COLUMNS})
    return buf.getvalue()


def bundle_rows(result: dict[str, Any]) -> list[dict[str, Any]]:
    """Flatten the bundle plan of every tray for UI and CSV exports."""
    rows: list[dict[str, Any]] = []
    for t in result.get("trays", []):
        for b in t.get("bundles", []):
            rows.append({**b, "tray_name": t["name"]})
    return rows


def bundles_csv(result: dict[str, Any]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=BUNDLE_COLUMNS)
    writer.writeheader()
    for row in bundle_rows(result):
        writer.writerow({k: row.get(k, "") for k in BUNDLE_COLUMNS})
    return buf.getvalue()


def result_json(result: dict[str, Any]) -> str:
    return json.dumps(result, ensure_ascii=False, indent=2, default=str)
