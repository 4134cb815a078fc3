from __future__ import annotations

from pathlib import Path

import pytest

from bundle_reports.config.ini_config import (
    DEFAULT_ALTERNATIVE_STATS_FILES,
    AuditThresholds,
    IniConfig,
)


def _write_ini(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "bundle_reports.ini"
    p.write_text(text, encoding="utf-8")
    return p


def test_defaults_without_ini_or_env(tmp_path: Path):
    settings = IniConfig(None).load_settings(environ={})

    assert settings.port == 3001
    assert settings.host == "127.0.0.1"
    assert settings.debug is False
    assert settings.atomic_writes is False
    assert settings.reports_dir == Path.cwd().resolve() / "reports"
    assert settings.stats_file == Path.cwd().resolve() / ".next/stats.json"
    assert [p.relative_to(Path.cwd().resolve()).as_posix() for p in settings.alternative_stats_files] == list(
        DEFAULT_ALTERNATIVE_STATS_FILES
    )
    assert settings.build_command == "npm run build"
    assert settings.build_env == {"ANALYZE": "true"}
    assert settings.thresholds == AuditThresholds()


def test_ini_values_resolve_against_project_dir(tmp_path: Path):
    ini = _write_ini(
        tmp_path,
        f"""
[paths]
project_dir = {tmp_path}
reports_dir = out/reports
stats_file = build/stats.json
alternative_stats_files = build/a.json, build/b.html

[build]
command = yarn build --profile
env = ANALYZE=true, NODE_ENV=production

[store]
atomic_writes = yes

[server]
host = 0.0.0.0
port = 8080
debug = true
""",
    )

    settings = IniConfig(ini).load_settings(environ={})

    assert settings.project_dir == tmp_path.resolve()
    assert settings.reports_dir == tmp_path.resolve() / "out/reports"
    assert settings.stats_file == tmp_path.resolve() / "build/stats.json"
    assert settings.alternative_stats_files == (
        tmp_path.resolve() / "build/a.json",
        tmp_path.resolve() / "build/b.html",
    )
    assert settings.build_command == "yarn build --profile"
    assert settings.build_env == {"ANALYZE": "true", "NODE_ENV": "production"}
    assert settings.atomic_writes is True
    assert (settings.host, settings.port, settings.debug) == ("0.0.0.0", 8080, True)


def test_environment_overrides_ini(tmp_path: Path):
    ini = _write_ini(tmp_path, "[server]\nport = 8080\n[paths]\nreports_dir = from_ini\n")
    env = {
        "BUNDLE_REPORT_PORT": "4000",
        "REPORTS_DIR": str(tmp_path / "from_env"),
        "STATS_FILE": str(tmp_path / "custom.json"),
        "REPORTS_ATOMIC_WRITES": "1",
        "PERF_THRESHOLD": "75",
        "SEO_THRESHOLD": "95.5",
    }

    settings = IniConfig(ini).load_settings(environ=env)

    assert settings.port == 4000
    assert settings.reports_dir == tmp_path / "from_env"
    assert settings.stats_file == tmp_path / "custom.json"
    assert settings.atomic_writes is True
    assert settings.thresholds.performance == 75.0
    assert settings.thresholds.seo == 95.5
    assert settings.thresholds.accessibility == 80.0


@pytest.mark.parametrize(
    "env, key",
    [
        ({"BUNDLE_REPORT_PORT": "eighty"}, "port"),
        ({"REPORTS_ATOMIC_WRITES": "maybe"}, "atomic_writes"),
        ({"A11Y_THRESHOLD": "high"}, "accessibility"),
    ],
)
def test_invalid_values_name_the_key(env, key):
    with pytest.raises(ValueError, match=key):
        IniConfig(None).load_settings(environ=env)


def test_explicit_app_ini_must_exist(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        IniConfig.from_env_or_default({"APP_INI": str(tmp_path / "missing.ini")})


def test_default_ini_is_optional(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    settings = IniConfig.from_env_or_default({}).load_settings(environ={})

    assert settings.reports_dir == tmp_path.resolve() / "reports"


def test_thresholds_become_min_score_assertions():
    assertions = AuditThresholds(performance=70, accessibility=85, best_practices=90, seo=100).as_assertions()

    assert assertions["categories:performance"] == ["error", {"minScore": 0.7}]
    assert assertions["categories:accessibility"] == ["error", {"minScore": 0.85}]
    assert assertions["categories:seo"] == ["error", {"minScore": 1.0}]


def test_relative_env_paths_resolve_against_working_dir(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    ini = _write_ini(tmp_path, f"[paths]\nproject_dir = {tmp_path / 'app'}\n")

    settings = IniConfig(ini).load_settings(environ={"REPORTS_DIR": "out", "STATS_FILE": "build/stats.json"})

    assert settings.reports_dir == Path.cwd() / "out"
    assert settings.stats_file == Path.cwd() / "build/stats.json"
    assert settings.project_dir == (tmp_path / "app").resolve()


@pytest.mark.parametrize("raw, expected", [("on", True), ("YES", True), ("1", True), ("off", False), ("0", False)])
def test_env_and_ini_booleans_agree(tmp_path: Path, raw: str, expected: bool):
    ini = _write_ini(tmp_path, f"[store]\natomic_writes = {raw}\n")

    from_ini = IniConfig(ini).load_settings(environ={}).atomic_writes
    from_env = IniConfig(None).load_settings(environ={"REPORTS_ATOMIC_WRITES": raw}).atomic_writes

    assert from_ini is from_env is expected
