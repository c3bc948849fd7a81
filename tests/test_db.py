# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
from __future__ import annotations

import pytest

from db import Database
from services.analyzer import analyze


def test_db_save_revision(tmp_path, sample_project) -> None:
    db = Database(str(tmp_path / "test.db"))
    db.init_db()
    result = analyze(sample_project)
    project_id, revision_id = db.save_revision("plant-a", "note", "x: y", result)
    assert project_id.startswith("prj_")
    assert revision_id.startswith("rev_")

    rev = db.get_revision(revision_id)
    assert rev is not None
    assert rev["input_hash"] == result["input_hash"]

    tray_rows = db.list_tray_results(revision_id)
    assert [r["name"] for r in tray_rows] == ["TR-2", "TR-10"]
    assert tray_rows[0]["cable_count"] == 2
    assert tray_rows[0]["free_width_percent"] == pytest.approx(66)
    assert tray_rows[0]["calculation_available"] == 1


def test_db_save_revision_twice_with_same_result(tmp_path, sample_project) -> None:
    db = Database(str(tmp_path / "test.db"))
    db.init_db()
    result = analyze(sample_project)
    project_id_1, revision_id_1 = db.save_revision("db", "note-1", "x: y", result)
    project_id_2, revision_id_2 = db.save_revision("db", "note-2", "x: y", result)

    assert project_id_1 == project_id_2
    assert revision_id_1 != revision_id_2
    assert len(db.list_revisions(project_id_1)) == 2
    assert [p["name"] for p in db.list_projects()] == ["db"]


def test_db_trial_round_trip(tmp_path, sample_project) -> None:
    db = Database(str(tmp_path / "nested" / "test.db"))
    db.init_db()
    db.save_trial("t-1", "x: y", analyze(sample_project))
    row = db.get_trial("t-1")
    assert row is not None
    assert row["input_yaml"] == "x: y"
    assert db.get_trial("missing") is None


def test_db_connect_rolls_back_on_exception(tmp_path) -> None:
    db = Database(str(tmp_path / "test.db"))
    db.init_db()

    with pytest.raises(RuntimeError):
        with db.connect() as conn:
            conn.execute(
                "INSERT INTO project(project_id,name,created_at,updated_at) VALUES(?,?,?,?)",
                ("prj_test", "test", "2026-01-01T00:00:00+00:00", "2026-01-01T00:00:00+00:00"),
            )
            raise RuntimeError("forced error")

    with db.connect() as conn:
        row = conn.execute("SELECT * FROM project WHERE project_id=?", ("prj_test",)).fetchone()
    assert row is None
