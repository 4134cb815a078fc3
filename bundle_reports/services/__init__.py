from .report_namer import ReportNamer
from .report_service import ReportService
from .stats_extractor import EmbeddedDataMatcher, RegexMatcher, ScriptObjectMatcher, StatsExtractor
from .stats_locator import StatsLocator

__all__ = [
    "EmbeddedDataMatcher",
    "RegexMatcher",
    "ScriptObjectMatcher",
    "ReportNamer",
    "ReportService",
    "StatsExtractor",
    "StatsLocator",
]
