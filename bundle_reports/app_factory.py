#############################
#
# Composition root.
# create_app() builds the Flask catalog server; create_report_service() wires the
# producer pipeline for the CLI. Both take an AppSettings so tests can point them
# at a temporary reports directory.
#
#   Presentation (Flask blueprint, web/routes.py)
#      |
#   Service layer (services/: locator, extractor, namer, report_service)
#      |
#   Repository (repositories/report_repository.py, flat reports directory)
#      |
#   External systems (build command, git, filesystem)
#############################

from __future__ import annotations

from typing import Optional

from flask import Flask

from bundle_reports.config.ini_config import AppSettings, IniConfig
from bundle_reports.repositories.report_repository import ReportRepository
from bundle_reports.services.report_namer import ReportNamer
from bundle_reports.services.report_service import ReportService
from bundle_reports.services.stats_extractor import StatsExtractor
from bundle_reports.services.stats_locator import StatsLocator
from bundle_reports.web.filters import register_filters
from bundle_reports.web.routes import create_blueprint


def load_settings() -> AppSettings:
    return IniConfig.from_env_or_default().load_settings()


def create_report_repository(settings: AppSettings) -> ReportRepository:
    return ReportRepository(reports_dir=settings.reports_dir, atomic_writes=settings.atomic_writes)


def create_report_service(settings: Optional[AppSettings] = None) -> ReportService:
    settings = settings or load_settings()

    locator = StatsLocator(
        stats_file=settings.stats_file,
        alternative_stats_files=settings.alternative_stats_files,
        build_command=settings.build_command,
        project_dir=settings.project_dir,
        build_env=dict(settings.build_env),
    )

    return ReportService(
        locator=locator,
        extractor=StatsExtractor(),
        namer=ReportNamer(cwd=settings.project_dir),
        report_repo=create_report_repository(settings),
    )


def create_app(settings: Optional[AppSettings] = None) -> Flask:
    settings = settings or load_settings()

    report_repo = create_report_repository(settings)

    app = Flask(__name__)
    register_filters(app)
    app.register_blueprint(create_blueprint(report_repo))

    report_repo.ensure_dir()

    app.config["HOST"] = settings.host
    app.config["PORT"] = settings.port
    app.config["DEBUG"] = settings.debug
    app.config["REPORTS_DIR"] = str(settings.reports_dir)

    return app
