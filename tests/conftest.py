# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).

from __future__ import annotations

from typing import Any

import pytest

from models import CableLayout, CableModel, ProjectInput, TrayModel


def make_tray(**overrides: Any) -> TrayModel:
    data: dict[str, Any] = {
        "id": "T1",
        "name": "T1",
        "type": "KL 100.603 F",
        "purpose": "Type B",
        "width_mm": 100,
        "height_mm": 100,
        "length_mm": 10000,
    }
    data.update(overrides)
    return TrayModel.model_validate(data)


_cable_seq = 0


def make_cable(purpose: str, diameter: float | None, routing: str = "T1", **overrides: Any) -> CableModel:
    global _cable_seq
    _cable_seq += 1
    data: dict[str, Any] = {
        "id": f"C{_cable_seq}",
        "tag": f"CBL-{_cable_seq}",
        "routing": routing,
        "purpose": purpose,
        "diameter_mm": diameter,
    }
    data.update(overrides)
    return CableModel.model_validate(data)


def make_layout(**overrides: Any) -> CableLayout:
    return CableLayout.model_validate(overrides)


@pytest.fixture
def sample_project_payload() -> dict[str, Any]:
    return {
        "version": 1,
        "project": {"name": "plant-a"},
        "trays": [
            {
                "id": "T10",
                "name": "TR-10",
                "type": "KL 100.603 F",
                "purpose": "Type B",
                "width_mm": 300,
                "height_mm": 100,
                "length_mm": 6000,
                "weight_kg_per_m": 4.2,
            },
            {
                "id": "T2",
                "name": "TR-2",
                "purpose": "Type BC",
                "width_mm": 200,
                "height_mm": 60,
                "length_mm": 3000,
            },
        ],
        "cables": [
            {"id": "C1", "tag": "P-001", "routing": "TR-2/TR-10", "purpose": "Power", "diameter_mm": 20, "weight_kg_per_m": 0.8},
            {"id": "C2", "tag": "P-002", "routing": "TR-10", "purpose": "LV power", "diameter_mm": 12, "weight_kg_per_m": 0.4},
            {"id": "C3", "tag": "V-001", "routing": "TR-10", "purpose": "VFD", "diameter_mm": 35, "to_location": "M1"},
            {"id": "C4", "tag": "K-001", "routing": "TR-2", "purpose": "Control", "diameter_mm": 8},
            {"id": "C5", "tag": "G-001", "routing": "TR-10", "purpose": "Grounding", "diameter_mm": 16, "weight_kg_per_m": 0.2},
            {"id": "C6", "tag": "X-001", "routing": "TR-99", "purpose": "Power", "diameter_mm": 10},
        ],
        "settings": {"supports": {"distance_m": 1.5, "weight_kg": 1.2}},
    }


@pytest.fixture
def sample_project(sample_project_payload: dict[str, Any]) -> ProjectInput:
    return ProjectInput.model_validate(sample_project_payload)
