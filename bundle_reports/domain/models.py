######## models.py
########

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

JSON_KIND = "json"
HTML_KIND = "html"

PLACEHOLDER_SOURCE = "Next.js Bundle Analyzer (HTML Report)"
EXTRACTION_FAILED_NOTE = "Data extraction failed. Please view the HTML report directly."
STATS_UNREADABLE_NOTE = "Data extraction failed. The stats file could not be read and no HTML report is available."


def to_iso_utc(dt: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a trailing Z, e.g. 2024-05-01T09:30:12.345Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class Asset:
    name: str
    size: int
    parsed_size: Optional[int] = None
    gzip_size: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "size": self.size}
        if self.parsed_size is not None:
            out["parsedSize"] = self.parsed_size
        if self.gzip_size is not None:
            out["gzipSize"] = self.gzip_size
        return out


@dataclass(frozen=True)
class LocatedStats:
    path: Path
    kind: str                   # "json" | "html"


# -----------------------------
# StatsArtifact variants
# -----------------------------
@dataclass(frozen=True)
class RawStats:
    """Stats JSON exactly as the build tool wrote it."""
    text: str
    source_path: Path

    kind = "raw"
    extracted = True

    @property
    def payload(self) -> Any:
        return json.loads(self.text)

    def to_payload(self) -> Any:
        return self.payload


@dataclass(frozen=True)
class CanonicalStats:
    """Object recovered from the data embedded in an analyzer HTML page."""
    payload: Any
    source_path: Path

    kind = "canonical"
    extracted = True

    def to_payload(self) -> Any:
        return self.payload


@dataclass(frozen=True)
class DegradedStats:
    """No embedded data was found; the HTML file itself stands in as one asset."""
    pseudo_asset: Asset
    html_path: Path
    source: str = PLACEHOLDER_SOURCE

    kind = "degraded"
    extracted = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "assets": [self.pseudo_asset.to_dict()],
            "source": self.source,
            "htmlPath": str(self.html_path),
        }


@dataclass(frozen=True)
class ExtractionFailed:
    """Embedded data was found but could not be parsed."""
    errors: tuple[str, ...]
    html_path: Path
    fragment: str = ""

    kind = "extraction_failed"
    extracted = False

    def to_payload(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "assets": [],
            "errors": list(self.errors),
            "htmlPath": str(self.html_path),
        }
        if self.fragment:
            out["fragment"] = self.fragment
        return out


@dataclass(frozen=True)
class ExtractionNote:
    """The located source could not be read; ``note`` says whether an HTML copy is worth opening."""
    timestamp: str
    note: str = EXTRACTION_FAILED_NOTE
    html_report_available: bool = True

    kind = "note"
    extracted = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "note": self.note,
            "htmlReportAvailable": self.html_report_available,
            "timestamp": self.timestamp,
        }


StatsArtifact = Union[RawStats, CanonicalStats, DegradedStats, ExtractionFailed, ExtractionNote]


# -----------------------------
# Stored reports
# -----------------------------
@dataclass(frozen=True)
class SavedReport:
    json_path: Path
    html_path: Optional[Path] = None


@dataclass(frozen=True)
class Report:
    name: str
    date: datetime
    size: int
    formats: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "date": to_iso_utc(self.date),
            "size": self.size,
            "formats": list(self.formats),
        }


@dataclass(frozen=True)
class GenerationResult:
    report_name: str
    report_path: Path
    html_report_path: Optional[Path]
    data_extraction_success: bool
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "reportName": self.report_name,
            "reportPath": str(self.report_path),
            "htmlReportPath": str(self.html_report_path) if self.html_report_path else None,
            "dataExtractionSuccess": self.data_extraction_success,
            "timestamp": self.timestamp,
        }
