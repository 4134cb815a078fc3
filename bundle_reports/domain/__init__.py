from .errors import BuildCommandError, InvalidReportNameError, ReportsError, StatsNotFoundError
from .models import (
    Asset,
    CanonicalStats,
    DegradedStats,
    ExtractionFailed,
    ExtractionNote,
    GenerationResult,
    LocatedStats,
    RawStats,
    Report,
    SavedReport,
    StatsArtifact,
)

__all__ = [
    "Asset",
    "BuildCommandError",
    "CanonicalStats",
    "DegradedStats",
    "ExtractionFailed",
    "ExtractionNote",
    "GenerationResult",
    "InvalidReportNameError",
    "LocatedStats",
    "RawStats",
    "Report",
    "ReportsError",
    "SavedReport",
    "StatsArtifact",
    "StatsNotFoundError",
]
