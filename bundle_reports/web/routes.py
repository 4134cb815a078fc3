## routes.py
from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify, render_template, request, send_file

from bundle_reports.domain.models import HTML_KIND, JSON_KIND, PLACEHOLDER_SOURCE
from bundle_reports.repositories.report_repository import ReportRepository

JSON_MIMETYPE = "application/json"
HTML_MIMETYPE = "text/html"


def create_blueprint(report_repo: ReportRepository) -> Blueprint:
    bp = Blueprint("web", __name__)

    @bp.before_app_request
    def log_request():
        current_app.logger.info("Received request: %s %s", request.method, request.path)

    def send_report_file(name: str, fmt: str, mimetype: str):
        path = report_repo.find_file(name, fmt)
        if path is None:
            current_app.logger.info("%s report not found: %s", fmt.upper(), name)
            abort(404)
        try:
            # Served as opaque bytes; a half-written file is the client's problem
            return send_file(path, mimetype=mimetype, max_age=0)
        except FileNotFoundError:
            current_app.logger.info("%s report disappeared before it could be read: %s", fmt.upper(), name)
            abort(404)

    @bp.get("/")
    @bp.get("/index.html")
    def index():
        try:
            reports = report_repo.list_reports()
        except OSError as e:
            current_app.logger.exception("Failed to list reports for the index page")
            return render_template(
                "index.html", reports=[], error=f"Error loading reports: {e}", placeholder_source=PLACEHOLDER_SOURCE
            )
        return render_template("index.html", reports=reports, error=None, placeholder_source=PLACEHOLDER_SOURCE)

    @bp.get("/api/reports")
    def list_reports():
        try:
            reports = report_repo.list_reports()
        except OSError:
            current_app.logger.exception("Error reading reports directory")
            return jsonify({"error": "Failed to list reports"}), 500
        return jsonify([r.to_dict() for r in reports])

    @bp.get("/api/reports/<name>")
    def report_json(name: str):
        return send_report_file(name, JSON_KIND, JSON_MIMETYPE)

    @bp.get("/report/<name>")
    @bp.get("/html-report/<name>")
    def report_html(name: str):
        return send_report_file(name, HTML_KIND, HTML_MIMETYPE)

    return bp
