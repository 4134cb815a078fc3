from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from bundle_reports.domain.models import HTML_KIND, GenerationResult, to_iso_utc
from bundle_reports.repositories.report_repository import ReportRepository
from bundle_reports.services.report_namer import ReportNamer
from bundle_reports.services.stats_extractor import StatsExtractor
from bundle_reports.services.stats_locator import StatsLocator

logger = logging.getLogger(__name__)


@dataclass
class ReportService:
    """
    Service layer: one producer run, locate -> extract -> name -> store.
    Locator and storage failures propagate; extraction never aborts the run.
    """
    locator: StatsLocator
    extractor: StatsExtractor
    namer: ReportNamer
    report_repo: ReportRepository
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)

    def generate(self) -> GenerationResult:
        logger.info("Starting bundle analysis report generation...")

        located = self.locator.locate()
        logger.info("Using %s file: %s", located.kind, located.path)

        report_name = self.namer.name()
        artifact = self.extractor.extract(located.path, located.kind)
        if not artifact.extracted:
            logger.warning("Stats data could not be fully extracted (%s). The HTML report is still kept.",
                           artifact.kind)

        html_source = located.path if located.kind == HTML_KIND else None
        saved = self.report_repo.save(artifact, report_name, html_source=html_source)

        return GenerationResult(
            report_name=report_name,
            report_path=saved.json_path,
            html_report_path=saved.html_path,
            data_extraction_success=artifact.extracted,
            timestamp=to_iso_utc(self.clock()),
        )
