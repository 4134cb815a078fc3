from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

from bundle_reports.domain.errors import BuildCommandError, StatsNotFoundError
from bundle_reports.domain.models import HTML_KIND, JSON_KIND, LocatedStats

logger = logging.getLogger(__name__)

# Runs the build command; must return an object with a ``returncode``.
BuildRunner = Callable[..., subprocess.CompletedProcess]


def _kind_for(path: Path) -> str:
    return HTML_KIND if path.suffix.lower() == ".html" else JSON_KIND


@dataclass
class StatsLocator:
    """
    Finds build-analysis output on disk.
    Search order: primary stats file first, then the alternates in the order given.
    When nothing is found the build command is run once and the same search repeated.
    """
    stats_file: Path
    alternative_stats_files: Sequence[Path]
    build_command: str
    project_dir: Path
    build_env: dict[str, str] = field(default_factory=dict)
    runner: BuildRunner = subprocess.run

    def candidates(self) -> list[Path]:
        return [Path(self.stats_file), *[Path(p) for p in self.alternative_stats_files]]

    def search(self) -> Optional[LocatedStats]:
        for i, candidate in enumerate(self.candidates()):
            if candidate.is_file():
                if i > 0:
                    logger.info("Found file at location: %s", candidate)
                return LocatedStats(path=candidate, kind=_kind_for(candidate))
        return None

    def run_build(self) -> None:
        cmd = shlex.split(self.build_command)
        if not cmd:
            raise BuildCommandError("No build command configured.")

        env = {**os.environ, **self.build_env}
        logger.info("No stats files found. Running build: %s", self.build_command)

        # stdout/stderr are inherited; no timeout on purpose so long builds are not cut off
        try:
            proc = self.runner(cmd, cwd=str(self.project_dir), env=env, check=False)
        except OSError as e:
            raise BuildCommandError(f"Failed to execute build command: {e}") from e

        if proc.returncode != 0:
            raise BuildCommandError(
                f"Build command exited with status {proc.returncode}: {self.build_command}",
                returncode=proc.returncode,
            )

    def locate(self) -> LocatedStats:
        found = self.search()
        if found:
            return found

        self.run_build()

        found = self.search()
        if found:
            logger.info("Build generated %s file at: %s", found.kind, found.path)
            return found

        raise StatsNotFoundError(
            "Failed to find stats file or HTML report after build. Looked in: "
            + ", ".join(str(p) for p in self.candidates())
        )
