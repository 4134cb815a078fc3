from __future__ import annotations

from typing import Optional


class ReportsError(Exception):
    """Base class for pipeline failures that should stop a CI run."""


class StatsNotFoundError(ReportsError):
    pass


class BuildCommandError(StatsNotFoundError):
    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class InvalidReportNameError(ReportsError, ValueError):
    pass
