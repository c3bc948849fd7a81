# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
from __future__ import annotations

import io

import yaml

SAMPLE_YAML = b"""version: 1
project:
  name: sample
trays:
  - id: T1
    name: TR-1
    purpose: Type B
    width_mm: 300
    height_mm: 100
    length_mm: 6000
cables:
  - id: C1
    tag: P-001
    routing: TR-1
    purpose: Power
    diameter_mm: 20
  - id: C2
    tag: V-001
    routing: TR-1
    purpose: VFD
    diameter_mm: 18
settings:
  layout:
    control:
      bundle_spacing: 0
"""


def _make_client(tmp_db_path: str):
    import os
    import sys
    from pathlib import Path

    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    os.environ["TRAYFILL_DB"] = tmp_db_path
    from app import create_app

    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def _upload(client, payload: bytes = SAMPLE_YAML, follow_redirects: bool = False):
    return client.post(
        "/upload",
        data={"project_yaml": (io.BytesIO(payload), "project.yaml")},
        content_type="multipart/form-data",
        follow_redirects=follow_redirects,
    )


def _save(client) -> str:
    resp = client.post("/save", data={"project_name": "sample", "note": "first"})
    assert resp.status_code == 302
    location = resp.headers["Location"]
    return location.split("revision_id=")[1]


def test_index_redirects_to_upload(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    resp = client.get("/")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/upload")


def test_upload_without_file_shows_flash(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    resp = client.post("/upload", data={}, follow_redirects=True)
    assert resp.status_code == 200
    assert b"Please select project.yaml" in resp.data


def test_upload_bad_yaml_shows_flash(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    resp = _upload(client, b": invalid: yaml: [", follow_redirects=True)
    assert resp.status_code == 200
    assert b"YAML parse error" in resp.data


def test_upload_invalid_schema_shows_flash(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    bad = yaml.safe_dump(
        {
            "project": {"name": "x"},
            "trays": [{"id": "T1", "name": "A"}, {"id": "T2", "name": "a"}],
        }
    ).encode("utf-8")
    resp = _upload(client, bad, follow_redirects=True)
    assert resp.status_code == 200
    assert b"Validation error" in resp.data
    assert b"tray names must be unique" in resp.data


def test_upload_stores_only_trial_id_in_session(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    resp = _upload(client)
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/trial")
    with client.session_transaction() as sess:
        assert set(sess.keys()) == {"trial_id"}


def test_trial_page_shows_trays_and_drawings(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    _upload(client)
    resp = client.get("/trial")
    assert resp.status_code == 200
    assert b"TR-1" in resp.data
    assert b"Cables bundles laying concept for tray TR-1" in resp.data
    assert b"<circle" in resp.data


def test_trial_without_upload_redirects(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    resp = client.get("/trial", follow_redirects=True)
    assert b"No active trial" in resp.data


def test_save_and_export(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    _upload(client)
    revision_id = _save(client)

    detail = client.get(f"/revisions/{revision_id}/export/trays.csv")
    assert detail.status_code == 200
    assert detail.mimetype == "text/csv"
    assert b"TR-1" in detail.data

    bundles = client.get(f"/revisions/{revision_id}/export/bundles.csv")
    assert bundles.status_code == 200
    assert b"power" in bundles.data

    result = client.get(f"/revisions/{revision_id}/export/result.json")
    assert result.status_code == 200
    assert result.get_json()["trays"][0]["tray_id"] == "T1"


def test_project_detail_lists_revision(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    _upload(client)
    resp = client.post("/save", data={"project_name": "sample"}, follow_redirects=True)
    assert resp.status_code == 200
    assert b"Saved revision" in resp.data
    assert b"trays.csv" in resp.data


def test_tray_svg_route(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    _upload(client)
    revision_id = _save(client)

    resp = client.get(f"/revisions/{revision_id}/trays/T1.svg")
    assert resp.status_code == 200
    assert resp.mimetype == "image/svg+xml"
    assert resp.data.count(b"<circle") == 2
    assert b"<line" in resp.data

    assert client.get(f"/revisions/{revision_id}/trays/T9.svg").status_code == 404


def test_unknown_revision_returns_404(tmp_path) -> None:
    client = _make_client(str(tmp_path / "t.db"))
    for path in (
        "/revisions/rev_missing/export/trays.csv",
        "/revisions/rev_missing/export/bundles.csv",
        "/revisions/rev_missing/export/result.json",
        "/revisions/rev_missing/trays/T1.svg",
    ):
        assert client.get(path).status_code == 404
