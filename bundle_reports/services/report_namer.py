from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from bundle_reports.domain.models import to_iso_utc

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

BRANCH_COMMAND = ("git", "rev-parse", "--abbrev-ref", "HEAD")
REVISION_COMMAND = ("git", "rev-parse", "--short", "HEAD")

# Takes an argv tuple and returns the command's stripped stdout; raises on failure.
GitQuery = Callable[[tuple[str, ...]], str]


def file_safe_timestamp(dt: datetime) -> str:
    """2024-05-01T09:30:12.345Z -> 2024-05-01T09-30-12-345Z"""
    return to_iso_utc(dt).replace(":", "-").replace(".", "-")


def _safe_segment(value: str) -> str:
    # Branch names like feature/x must not create sub-directories in the store
    return value.replace("/", "-").replace("\\", "-").strip() or UNKNOWN


@dataclass
class ReportNamer:
    """Builds `branch-revision-timestamp` report names."""
    cwd: Optional[Path] = None
    git: Optional[GitQuery] = None
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)

    def _run_git(self, argv: tuple[str, ...]) -> str:
        if self.git is not None:
            return self.git(argv)
        proc = subprocess.run(
            list(argv),
            capture_output=True,
            text=True,
            check=True,
            cwd=str(self.cwd) if self.cwd else None,
        )
        return proc.stdout.strip()

    def _query(self, argv: tuple[str, ...]) -> str:
        try:
            value = self._run_git(argv)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Unable to get git info (%s). Using %r.", " ".join(argv), UNKNOWN)
            logger.debug("git query failed: %s", e)
            return UNKNOWN
        return _safe_segment(value or "")

    def git_info(self) -> tuple[str, str]:
        return self._query(BRANCH_COMMAND), self._query(REVISION_COMMAND)

    def name(self) -> str:
        branch, revision = self.git_info()
        return f"{branch}-{revision}-{file_safe_timestamp(self.clock())}"
