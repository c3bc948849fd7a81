# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from models import CableLayout, ProjectInput


def _base_project() -> dict[str, object]:
    return {
        "version": 1,
        "project": {"name": "p1"},
        "trays": [{"id": "T1", "name": "TR-1"}, {"id": "T2", "name": "TR-2"}],
        "cables": [{"id": "C1", "routing": "TR-1", "purpose": "Power", "diameter_mm": 12}],
    }


def test_minimal_project_uses_default_settings() -> None:
    project = ProjectInput.model_validate(_base_project())
    assert project.settings.layout.consider_bundle_spacing_as_free is False
    assert project.settings.drawing.scale == 1.0
    assert project.settings.supports.distance_m is None


def test_rejects_duplicate_tray_ids() -> None:
    payload = _base_project()
    payload["trays"] = [{"id": "T1", "name": "A"}, {"id": "T1", "name": "B"}]
    with pytest.raises(ValueError, match="tray ids must be unique"):
        ProjectInput.model_validate(payload)


def test_rejects_tray_names_differing_only_in_case() -> None:
    payload = _base_project()
    payload["trays"] = [{"id": "T1", "name": "TR-1"}, {"id": "T2", "name": " tr-1"}]
    with pytest.raises(ValueError, match="tray names must be unique"):
        ProjectInput.model_validate(payload)


def test_rejects_duplicate_cable_ids() -> None:
    payload = _base_project()
    payload["cables"] = [{"id": "C1"}, {"id": "C1"}]
    with pytest.raises(ValueError, match="cable ids must be unique"):
        ProjectInput.model_validate(payload)


def test_rejects_blank_tray_name() -> None:
    payload = _base_project()
    payload["trays"] = [{"id": "T1", "name": "  "}]
    with pytest.raises(ValueError, match="name must not be blank"):
        ProjectInput.model_validate(payload)


def test_rejects_unknown_fields() -> None:
    payload = _base_project()
    payload["cables"] = [{"id": "C1", "colour": "red"}]
    with pytest.raises(ValidationError):
        ProjectInput.model_validate(payload)


def test_rejects_non_positive_drawing_scale() -> None:
    payload = _base_project()
    payload["settings"] = {"drawing": {"scale": 0}}
    with pytest.raises(ValidationError):
        ProjectInput.model_validate(payload)


def test_layout_from_yaml() -> None:
    raw = """
cable_spacing: 2
consider_bundle_spacing_as_free: true
power:
  max_rows: 2
  bundle_spacing: 1D
  trefoil: true
control:
  bundle_spacing: 0
"""
    layout = CableLayout.model_validate(yaml.safe_load(raw))
    assert layout.cable_spacing == 2
    assert layout.for_category("power").bundle_spacing == "1D"
    assert layout.for_category("power").trefoil is True
    assert layout.for_category("control").bundle_spacing == "0"
    assert layout.for_category("mv") is None
    with pytest.raises(ValueError, match="unknown cable category"):
        layout.for_category("lighting")
