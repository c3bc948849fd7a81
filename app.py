# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""Flask WebUI for the trayfill cable tray free-space calculator."""

from __future__ import annotations

import json
import logging
import os
from uuid import uuid4

import yaml
from flask import Flask, Response, flash, redirect, render_template, request, session, url_for
from pydantic import ValidationError
from yaml import YAMLError

from db import Database
from models import ProjectInput, TrayModel
from services.analyzer import analyze
from services.classify import filter_cables_by_tray
from services.export import bundle_rows, bundles_csv, result_json, trays_csv
from services.render_svg import render_tray_svg


def _render_tray(project: ProjectInput, tray: TrayModel) -> str:
    drawing = project.settings.drawing
    return render_tray_svg(
        tray,
        filter_cables_by_tray(project.cables, tray.name),
        project.settings.layout,
        drawing.scale,
        drawing.spacing_mm,
    )


def create_app() -> Flask:
    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "dev-secret")
    app.config["MAX_CONTENT_LENGTH"] = 1024 * 1024

    db = Database(os.environ.get("TRAYFILL_DB", "trayfill.db"))
    db.init_db()

    @app.get("/")
    def index() -> str:
        return redirect(url_for("upload"))

    @app.route("/upload", methods=["GET", "POST"])
    def upload() -> str | Response:
        if request.method == "POST":
            file = request.files.get("project_yaml")
            if not file or not file.filename:
                flash("Please select project.yaml")
                return redirect(url_for("upload"))
            raw = file.read().decode("utf-8")
            try:
                data = yaml.safe_load(raw)
            except YAMLError as exc:
                flash(f"YAML parse error: {exc}")
                return redirect(url_for("upload"))
            try:
                project = ProjectInput.model_validate(data)
            except ValidationError as exc:
                flash(f"Validation error: {exc.error_count()} error(s): {exc.errors()[0]['msg']}")
                return redirect(url_for("upload"))
            trial_id = str(uuid4())
            db.save_trial(trial_id, raw, analyze(project))
            session["trial_id"] = trial_id
            return redirect(url_for("trial"))
        projects = db.list_projects()
        return render_template("upload.html", projects=projects)

    @app.get("/trial")
    def trial() -> str | Response:
        trial_id = session.get("trial_id")
        row = db.get_trial(trial_id) if trial_id else None
        if not row:
            flash("No active trial")
            return redirect(url_for("upload"))
        result = json.loads(row["result_json"])
        project = ProjectInput.model_validate(yaml.safe_load(row["input_yaml"]))
        return render_template(
            "trial.html",
            result=result,
            bundles=bundle_rows(result),
            tray_svgs={tray.id: _render_tray(project, tray) for tray in project.trays},
        )

    @app.post("/save")
    def save() -> Response:
        trial_id = session.get("trial_id")
        row = db.get_trial(trial_id) if trial_id else None
        if not row:
            flash("No active trial")
            return redirect(url_for("upload"))
        result = json.loads(row["result_json"])
        project_name = (
            request.form.get("project_name", "").strip() or result["project"]["project"]["name"]
        )
        note = request.form.get("note")
        project_id, revision_id = db.save_revision(project_name, note, row["input_yaml"], result)
        flash(f"Saved revision {revision_id}")
        return redirect(url_for("project_detail", project_id=project_id, revision_id=revision_id))

    @app.get("/projects/<project_id>")
    def project_detail(project_id: str) -> str:
        revision_id = request.args.get("revision_id")
        revisions = db.list_revisions(project_id)
        if not revision_id and revisions:
            revision_id = revisions[0]["revision_id"]
        chosen = db.get_revision(revision_id) if revision_id else None
        result = json.loads(chosen["result_json"]) if chosen else None
        tray_results = db.list_tray_results(chosen["revision_id"]) if chosen else []
        return render_template(
            "project_detail.html",
            project_id=project_id,
            revisions=revisions,
            chosen=chosen,
            result=result,
            tray_results=tray_results,
        )

    @app.get("/revisions/<revision_id>/export/trays.csv")
    def export_trays(revision_id: str) -> Response:
        rev = db.get_revision(revision_id)
        if not rev:
            return Response("not found", status=404)
        result = json.loads(rev["result_json"])
        csv_text = trays_csv(result, rev["project_id"], revision_id)
        return Response(
            csv_text,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={revision_id}_trays.csv"},
        )

    @app.get("/revisions/<revision_id>/export/bundles.csv")
    def export_bundles(revision_id: str) -> Response:
        rev = db.get_revision(revision_id)
        if not rev:
            return Response("not found", status=404)
        return Response(
            bundles_csv(json.loads(rev["result_json"])),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={revision_id}_bundles.csv"},
        )

    @app.get("/revisions/<revision_id>/export/result.json")
    def export_result(revision_id: str) -> Response:
        rev = db.get_revision(revision_id)
        if not rev:
            return Response("not found", status=404)
        return Response(result_json(json.loads(rev["result_json"])), mimetype="application/json")

    @app.get("/revisions/<revision_id>/trays/<tray_id>.svg")
    def tray_svg(revision_id: str, tray_id: str) -> Response:
        rev = db.get_revision(revision_id)
        if not rev:
            return Response("not found", status=404)
        project = ProjectInput.model_validate(yaml.safe_load(rev["input_yaml"]))
        tray = next((t for t in project.trays if t.id == tray_id), None)
        if tray is None:
            return Response("not found", status=404)
        return Response(_render_tray(project, tray), mimetype="image/svg+xml")

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(host="0.0.0.0", port=5000, debug=True)
