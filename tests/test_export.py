# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
from __future__ import annotations

import csv
import io
import json

from services.analyzer import analyze
from services.export import BUNDLE_COLUMNS, TRAY_COLUMNS, bundle_rows, bundles_csv, result_json, trays_csv


def test_trays_csv_has_one_row_per_tray(sample_project) -> None:
    result = analyze(sample_project)
    text = trays_csv(result, "prj_x", "rev_y")
    rows = list(csv.DictReader(io.StringIO(text)))

    assert list(rows[0].keys()) == TRAY_COLUMNS
    assert [r["name"] for r in rows] == ["TR-2", "TR-10"]
    assert rows[0]["project_id"] == "prj_x"
    assert rows[0]["revision_id"] == "rev_y"
    assert rows[0]["free_width_percent"] == "66.0"
    assert rows[1]["supports_count"] == "5"
    assert rows[0]["total_load_per_m_kg"] == ""


def test_trays_csv_leaves_unavailable_values_blank(sample_project_payload) -> None:
    from models import ProjectInput

    sample_project_payload["cables"][3]["diameter_mm"] = None
    result = analyze(ProjectInput.model_validate(sample_project_payload))
    rows = list(csv.DictReader(io.StringIO(trays_csv(result, "prj_x"))))
    assert rows[0]["free_width_percent"] == ""
    assert rows[0]["calculation_available"] == "False"
    assert rows[0]["revision_id"] == ""


def test_bundle_rows_and_csv(sample_project) -> None:
    result = analyze(sample_project)
    rows = bundle_rows(result)
    assert [(r["tray_name"], r["seq"]) for r in rows] == [
        ("TR-2", 1),
        ("TR-2", 2),
        ("TR-10", 1),
        ("TR-10", 2),
        ("TR-10", 3),
    ]
    parsed = list(csv.DictReader(io.StringIO(bundles_csv(result))))
    assert list(parsed[0].keys()) == BUNDLE_COLUMNS
    assert parsed[2]["category"] == "power"


def test_result_json_round_trips(sample_project) -> None:
    result = analyze(sample_project)
    assert json.loads(result_json(result)) == json.loads(json.dumps(result))
