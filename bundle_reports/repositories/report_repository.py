from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from bundle_reports.domain.errors import InvalidReportNameError
from bundle_reports.domain.models import HTML_KIND, JSON_KIND, RawStats, Report, SavedReport, StatsArtifact

logger = logging.getLogger(__name__)

# Order formats are reported in; the JSON file is the canonical one for size/date.
FORMATS = (JSON_KIND, HTML_KIND)


def serialize_artifact(artifact: StatsArtifact) -> str:
    """Text written to <name>.json. Raw build-tool stats are kept verbatim."""
    if isinstance(artifact, RawStats):
        return artifact.text
    return json.dumps(artifact.to_payload(), indent=2)


def validate_report_name(name: str) -> str:
    name = name or ""
    if (
        not name
        or name != name.strip()
        or name.startswith(".")
        or "/" in name
        or "\\" in name
        or "\x00" in name
        or Path(name).name != name
    ):
        raise InvalidReportNameError(f"Invalid report name: {name!r}")
    return name


@dataclass
class ReportRepository:
    """
    Repository pattern: the reports directory is the system of record.
    One flat directory of <name>.json / <name>.html files, re-read on every call.

    Writes are not atomic by default: a reader may observe a partial file while a
    report is being written. Set ``atomic_writes`` to write to a temp file and rename.
    """
    reports_dir: Path
    atomic_writes: bool = False

    def ensure_dir(self) -> Path:
        if not self.reports_dir.exists():
            self.reports_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Created reports directory: %s", self.reports_dir)
        return self.reports_dir

    def path_for(self, name: str, fmt: str) -> Path:
        if fmt not in FORMATS:
            raise ValueError(f"Unknown report format: {fmt}")
        return self.reports_dir / f"{validate_report_name(name)}.{fmt}"

    # -----------------------------
    # Writing
    # -----------------------------
    def _write_atomic(self, target: Path, data: bytes) -> None:
        fd, tmp = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def save(self, artifact: StatsArtifact, name: str, html_source: Optional[Path] = None) -> SavedReport:
        self.ensure_dir()

        json_path = self.path_for(name, JSON_KIND)
        data = serialize_artifact(artifact).encode("utf-8")
        if self.atomic_writes:
            self._write_atomic(json_path, data)
        else:
            json_path.write_bytes(data)
        logger.info("Bundle analysis report saved to: %s", json_path)

        html_path: Optional[Path] = None
        if html_source is not None:
            html_path = self.path_for(name, HTML_KIND)
            if self.atomic_writes:
                self._write_atomic(html_path, Path(html_source).read_bytes())
            else:
                shutil.copyfile(html_source, html_path)
            logger.info("HTML report saved to: %s", html_path)

        return SavedReport(json_path=json_path, html_path=html_path)

    # -----------------------------
    # Reading
    # -----------------------------
    def list_reports(self) -> list[Report]:
        """
        Groups files by base name and merges formats. Size/date come from the JSON
        file when present, else from the HTML file. Newest first.
        A missing directory is an empty catalog; an unreadable one raises OSError.
        """
        if not self.reports_dir.exists():
            return []

        found: dict[str, dict[str, os.stat_result]] = {}
        for entry in os.scandir(self.reports_dir):
            if entry.name.startswith("."):
                continue
            base, _, ext = entry.name.rpartition(".")
            if not base or ext not in FORMATS:
                continue
            try:
                if not entry.is_file():
                    continue
                st = entry.stat()
            except FileNotFoundError:
                # removed between listing and stat
                continue
            found.setdefault(base, {})[ext] = st

        reports: list[Report] = []
        for base, stats in found.items():
            canonical = stats.get(JSON_KIND) or stats[HTML_KIND]
            reports.append(
                Report(
                    name=base,
                    date=datetime.fromtimestamp(canonical.st_mtime, tz=timezone.utc),
                    size=canonical.st_size,
                    formats=tuple(f for f in FORMATS if f in stats),
                )
            )

        reports.sort(key=lambda r: (r.date, r.name), reverse=True)
        return reports

    def find_file(self, name: str, fmt: str) -> Optional[Path]:
        """Path of an existing report file, or None (also for names that are not valid)."""
        try:
            path = self.path_for(name, fmt)
        except InvalidReportNameError:
            return None
        return path if path.is_file() else None
