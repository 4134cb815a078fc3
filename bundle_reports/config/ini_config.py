########## ini_config.py

from __future__ import annotations

import os
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

INI_DEFAULT_NAME = "bundle_reports.ini"

DEFAULT_PORT = 3001
DEFAULT_STATS_FILE = ".next/stats.json"
DEFAULT_ALTERNATIVE_STATS_FILES = (
    ".next/analyze/client.json",   # client bundles
    ".next/analyze/server.json",   # server bundles
    ".next/analyze/client.html",
    ".next/analyze/edge.html",
    ".next/analyze/nodejs.html",
)
DEFAULT_BUILD_COMMAND = "npm run build"
DEFAULT_BUILD_ENV = "ANALYZE=true"


@dataclass(frozen=True)
class AuditThresholds:
    """Minimum category scores (0-100) handed to the external auditing tool."""
    performance: float = 60.0
    accessibility: float = 80.0
    best_practices: float = 90.0
    seo: float = 90.0

    def as_assertions(self) -> dict[str, list]:
        return {
            "categories:performance": ["error", {"minScore": self.performance / 100}],
            "categories:accessibility": ["error", {"minScore": self.accessibility / 100}],
            "categories:best-practices": ["error", {"minScore": self.best_practices / 100}],
            "categories:seo": ["error", {"minScore": self.seo / 100}],
        }


@dataclass(frozen=True)
class AppSettings:
    reports_dir: Path
    project_dir: Path

    stats_file: Path
    alternative_stats_files: tuple[Path, ...]

    build_command: str
    build_env: dict[str, str]

    atomic_writes: bool

    host: str
    port: int
    debug: bool

    thresholds: AuditThresholds = field(default_factory=AuditThresholds)


def _parse_bool(raw: str, key: str) -> bool:
    # Same vocabulary as ConfigParser.getboolean, so env and INI values agree
    value = raw.strip().lower()
    if value not in ConfigParser.BOOLEAN_STATES:
        raise ValueError(f"Invalid boolean for {key}: {raw!r}")
    return ConfigParser.BOOLEAN_STATES[value]


def _parse_number(raw: str, key: str, kind=int):
    try:
        return kind(raw.strip())
    except ValueError as e:
        raise ValueError(f"Invalid number for {key}: {raw!r}") from e


def _parse_env_pairs(raw: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid build env entry (expected KEY=VALUE): {item!r}")
        pairs[key.strip()] = value.strip()
    return pairs


class IniConfig:
    """
    Adapter around ConfigParser and environment overrides.
    Keeps INI handling out of the pipeline and server code.
    Precedence for every setting: environment > INI > built-in default.
    """

    def __init__(self, ini_path: Optional[Path] = None, *, required: bool = False):
        self._ini_path = ini_path
        self._cfg = ConfigParser()
        if ini_path is not None:
            read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
            if not read_ok and required:
                raise FileNotFoundError(f"INI file not found or unreadable: {ini_path}")

    @staticmethod
    def from_env_or_default(environ: Optional[Mapping[str, str]] = None) -> "IniConfig":
        env = os.environ if environ is None else environ
        ini_raw = (env.get("APP_INI") or "").strip()
        # An explicit APP_INI must exist; the working-directory default is optional
        if ini_raw:
            return IniConfig(Path(ini_raw), required=True)
        return IniConfig(Path.cwd() / INI_DEFAULT_NAME)

    def _get(self, section: str, key: str) -> str:
        if not self._cfg.has_section(section):
            return ""
        return (self._cfg.get(section, key, fallback="") or "").strip()

    def _resolve(self, raw: str, base: Path) -> Path:
        raw = os.path.expandvars(os.path.expanduser(raw))
        p = Path(raw)
        return p if p.is_absolute() else (base / p)

    def load_settings(self, environ: Optional[Mapping[str, str]] = None) -> AppSettings:
        env = os.environ if environ is None else environ

        def pick(env_key: Optional[str], section: str, key: str, default: str) -> str:
            if env_key:
                raw = (env.get(env_key) or "").strip()
                if raw:
                    return raw
            return self._get(section, key) or default

        # Paths: INI values are relative to project_dir, environment values to the working directory
        project_dir = self._resolve(pick(None, "paths", "project_dir", "."), Path.cwd()).resolve()

        def pick_path(env_key: str, section: str, key: str, default: str) -> Path:
            raw = (env.get(env_key) or "").strip()
            if raw:
                return self._resolve(raw, Path.cwd())
            return self._resolve(self._get(section, key) or default, project_dir)

        reports_dir = pick_path("REPORTS_DIR", "paths", "reports_dir", "reports")
        stats_file = pick_path("STATS_FILE", "paths", "stats_file", DEFAULT_STATS_FILE)

        alternatives_raw = self._get("paths", "alternative_stats_files")
        alternatives = (
            [a.strip() for a in alternatives_raw.split(",") if a.strip()]
            if alternatives_raw
            else list(DEFAULT_ALTERNATIVE_STATS_FILES)
        )
        alternative_stats_files = tuple(self._resolve(a, project_dir) for a in alternatives)

        # Build
        build_command = pick(None, "build", "command", DEFAULT_BUILD_COMMAND)
        build_env = _parse_env_pairs(pick(None, "build", "env", DEFAULT_BUILD_ENV))

        # Store
        atomic_writes = _parse_bool(pick("REPORTS_ATOMIC_WRITES", "store", "atomic_writes", "no"), "atomic_writes")

        # Server
        host = pick(None, "server", "host", "127.0.0.1")
        port = _parse_number(pick("BUNDLE_REPORT_PORT", "server", "port", str(DEFAULT_PORT)), "port")
        debug = _parse_bool(pick(None, "server", "debug", "no"), "debug")

        # Audit thresholds (consumed only by the external auditing tool)
        defaults = AuditThresholds()
        thresholds = AuditThresholds(
            performance=_parse_number(
                pick("PERF_THRESHOLD", "audit", "performance", str(defaults.performance)), "performance", float),
            accessibility=_parse_number(
                pick("A11Y_THRESHOLD", "audit", "accessibility", str(defaults.accessibility)), "accessibility", float),
            best_practices=_parse_number(
                pick("BP_THRESHOLD", "audit", "best_practices", str(defaults.best_practices)), "best_practices", float),
            seo=_parse_number(pick("SEO_THRESHOLD", "audit", "seo", str(defaults.seo)), "seo", float),
        )

        return AppSettings(
            reports_dir=reports_dir,
            project_dir=project_dir,
            stats_file=stats_file,
            alternative_stats_files=alternative_stats_files,
            build_command=build_command,
            build_env=build_env,
            atomic_writes=atomic_writes,
            host=host,
            port=port,
            debug=debug,
            thresholds=thresholds,
        )
