# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""SQLite persistence layer for project revisions and per-tray results."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from hashlib import sha256
from pathlib import Path
from typing import Any, Iterator

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS project (
  project_id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS revision (
  revision_id TEXT PRIMARY KEY,
  project_id TEXT NOT NULL,
  created_at TEXT NOT NULL,
  note TEXT,
  input_yaml TEXT NOT NULL,
  input_hash TEXT NOT NULL,
  result_json TEXT NOT NULL,
  FOREIGN KEY(project_id) REFERENCES project(project_id)
);
CREATE TABLE IF NOT EXISTS trial (
    trial_id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    input_yaml TEXT NOT NULL,
    result_json TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS tray_result (
  revision_id TEXT NOT NULL,
  tray_id TEXT NOT NULL,
  name TEXT NOT NULL,
  cable_count INTEGER NOT NULL,
  occupied_width_mm REAL,
  free_width_percent REAL,
  calculation_available INTEGER NOT NULL,
  PRIMARY KEY(revision_id, tray_id),
  FOREIGN KEY(revision_id) REFERENCES revision(revision_id)
);
CREATE INDEX IF NOT EXISTS idx_tray_result_revision ON tray_result(revision_id);
"""


class Database:
    def __init__(self, path: str = "trayfill.db"):
        self.path = path

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(SCHEMA)

    def save_revision(
        self, project_name: str, note: str | None, input_yaml: str, result: dict[str, Any]
    ) -> tuple[str, str]:
        now = datetime.now(timezone.utc).isoformat()
        project_id = f"prj_{sha256(project_name.encode('utf-8')).hexdigest()[:16]}"
        revision_id = (
            f"rev_{sha256((project_name + now + input_yaml).encode('utf-8')).hexdigest()[:16]}"
        )
        with self.connect() as conn:
            conn.execute(
                "INSERT INTO project(project_id,name,created_at,updated_at) VALUES(?,?,?,?) ON CONFLICT(project_id) DO UPDATE SET updated_at=excluded.updated_at,name=excluded.name",
                (project_id, project_name, now, now),
            )
            conn.execute(
                "INSERT INTO revision(revision_id,project_id,created_at,note,input_yaml,input_hash,result_json) VALUES(?,?,?,?,?,?,?)",
                (
                    revision_id,
                    project_id,
                    now,
                    note or "",
                    input_yaml,
                    result["input_hash"],
                    json.dumps(result, default=str),
                ),
            )
            for tray in result["trays"]:
                conn.execute(
                    "INSERT INTO tray_result(revision_id,tray_id,name,cable_count,occupied_width_mm,free_width_percent,calculation_available) VALUES(?,?,?,?,?,?,?)",
                    (
                        revision_id,
                        tray["tray_id"],
                        tray["name"],
                        len(tray["cable_ids"]),
                        tray["occupied_width_mm"],
                        tray["free_width_percent"],
                        int(tray["calculation_available"]),
                    ),
                )
        logger.info("saved revision %s for project %s", revision_id, project_id)
        return project_id, revision_id

    def list_projects(self) -> list[sqlite3.Row]:
        with self.connect() as conn:
            return conn.execute(
                "SELECT p.*, COUNT(r.revision_id) AS revision_count FROM project p "
                "LEFT JOIN revision r ON r.project_id = p.project_id "
                "GROUP BY p.project_id ORDER BY p.updated_at DESC"
            ).fetchall()

    def list_revisions(self, project_id: str) -> list[sqlite3.Row]:
        with self.connect() as conn:
            return conn.execute(
                "SELECT revision_id,project_id,created_at,note,input_hash FROM revision "
                "WHERE project_id=? ORDER BY created_at DESC",
                (project_id,),
            ).fetchall()

    def get_revision(self, revision_id: str) -> sqlite3.Row | None:
        with self.connect() as conn:
            return conn.execute(
                "SELECT * FROM revision WHERE revision_id=?", (revision_id,)
            ).fetchone()

    def list_tray_results(self, revision_id: str) -> list[sqlite3.Row]:
        with self.connect() as conn:
            return conn.execute(
                "SELECT * FROM tray_result WHERE revision_id=? ORDER BY rowid", (revision_id,)
            ).fetchall()

    def save_trial(self, trial_id: str, input_yaml: str, result: dict[str, Any]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self.connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO trial(trial_id,created_at,input_yaml,result_json) VALUES(?,?,?,?)",
                (trial_id, now, input_yaml, json.dumps(result, default=str)),
            )

    def get_trial(self, trial_id: str) -> sqlite3.Row | None:
        with self.connect() as conn:
            return conn.execute("SELECT * FROM trial WHERE trial_id=?", (trial_id,)).fetchone()
