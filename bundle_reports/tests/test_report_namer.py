from __future__ import annotations

import subprocess
from datetime import datetime, timedelta, timezone

from bundle_reports.services.report_namer import (
    BRANCH_COMMAND,
    REVISION_COMMAND,
    ReportNamer,
    file_safe_timestamp,
)

FIXED_NOW = datetime(2024, 5, 1, 9, 30, 12, 345000, tzinfo=timezone.utc)


# -----------------------------
# Test doubles
# -----------------------------
class FakeGit:
    def __init__(self, answers: dict):
        self.answers = answers
        self.calls = []

    def __call__(self, argv):
        self.calls.append(argv)
        answer = self.answers[argv]
        if isinstance(answer, Exception):
            raise answer
        return answer


def test_name_is_branch_revision_timestamp():
    git = FakeGit({BRANCH_COMMAND: "main", REVISION_COMMAND: "abc1234"})
    namer = ReportNamer(git=git, clock=lambda: FIXED_NOW)

    assert namer.name() == "main-abc1234-2024-05-01T09-30-12-345Z"
    assert git.calls == [BRANCH_COMMAND, REVISION_COMMAND]


def test_timestamp_segment_has_no_colons_or_dots():
    stamp = file_safe_timestamp(FIXED_NOW)

    assert ":" not in stamp
    assert "." not in stamp


def test_git_failure_falls_back_to_unknown():
    git = FakeGit({
        BRANCH_COMMAND: subprocess.CalledProcessError(128, list(BRANCH_COMMAND)),
        REVISION_COMMAND: FileNotFoundError("git"),
    })
    namer = ReportNamer(git=git, clock=lambda: FIXED_NOW)

    assert namer.name() == "unknown-unknown-2024-05-01T09-30-12-345Z"


def test_only_failing_query_falls_back():
    git = FakeGit({BRANCH_COMMAND: "develop", REVISION_COMMAND: OSError("boom")})

    assert ReportNamer(git=git, clock=lambda: FIXED_NOW).git_info() == ("develop", "unknown")


def test_branch_with_slash_stays_a_single_file_name():
    git = FakeGit({BRANCH_COMMAND: "feature/login", REVISION_COMMAND: "abc1234"})

    name = ReportNamer(git=git, clock=lambda: FIXED_NOW).name()

    assert "/" not in name
    assert name.startswith("feature-login-abc1234-")


def test_names_differ_one_second_apart():
    git = FakeGit({BRANCH_COMMAND: "main", REVISION_COMMAND: "abc1234"})
    times = iter([FIXED_NOW, FIXED_NOW + timedelta(seconds=1)])
    namer = ReportNamer(git=git, clock=lambda: next(times))

    assert namer.name() != namer.name()


def test_naive_clock_is_treated_as_utc():
    git = FakeGit({BRANCH_COMMAND: "main", REVISION_COMMAND: "abc1234"})
    namer = ReportNamer(git=git, clock=lambda: datetime(2024, 1, 2, 3, 4, 5))

    assert namer.name().endswith("2024-01-02T03-04-05-000Z")
