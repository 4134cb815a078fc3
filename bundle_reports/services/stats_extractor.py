from __future__ import annotations

import json
import logging
import re
from bisect import bisect_left
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence

from bundle_reports.domain.models import (
    HTML_KIND,
    STATS_UNREADABLE_NOTE,
    Asset,
    CanonicalStats,
    DegradedStats,
    ExtractionFailed,
    ExtractionNote,
    RawStats,
    StatsArtifact,
    to_iso_utc,
)

logger = logging.getLogger(__name__)

_UNDEFINED_RE = re.compile(r"\bundefined\b")
_NAN_RE = re.compile(r"\bNaN\b")


@dataclass(frozen=True)
class Match:
    matcher: str
    text: str


class EmbeddedDataMatcher:
    """Strategy interface: find an embedded object literal in an HTML page."""

    def find(self, html: str) -> Optional[Match]:
        raise NotImplementedError


@dataclass(frozen=True)
class RegexMatcher(EmbeddedDataMatcher):
    name: str
    pattern: re.Pattern
    group: int = 1

    def find(self, html: str) -> Optional[Match]:
        m = self.pattern.search(html)
        if not m or not m.group(self.group):
            return None
        return Match(matcher=self.name, text=m.group(self.group))


_SCRIPT_RE = re.compile(r"<script[^>]*>([\s\S]*?)</script>", re.IGNORECASE)
_STRUCTURE_RE = re.compile(r"[{}\"'\\]")


def object_spans(text: str) -> Iterator[tuple[int, int]]:
    """(start, end) of every closed `{...}` literal in one pass, string literals respected.

    A `{` that never closes (e.g. inside a regex literal) stays on the stack and
    does not hide the objects that follow it.
    """
    opened: list[int] = []
    quote = None
    skip = -1
    for m in _STRUCTURE_RE.finditer(text):
        i = m.start()
        if i == skip:
            continue
        ch = text[i]
        if quote:
            if ch == "\\":
                skip = i + 1
            elif ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch == "{":
            opened.append(i)
        elif ch == "}" and opened:
            yield opened.pop(), i + 1


@dataclass(frozen=True)
class ScriptObjectMatcher(EmbeddedDataMatcher):
    """Last resort: the first object literal inside a <script> that mentions the key."""
    name: str = "script object with assets"
    key: str = '"assets"'

    def find(self, html: str) -> Optional[Match]:
        for script in _SCRIPT_RE.finditer(html):
            body = script.group(1)
            keys = [m.start() for m in re.finditer(re.escape(self.key), body)]
            if not keys:
                continue
            best: Optional[tuple[int, int]] = None
            for start, end in object_spans(body):
                k = bisect_left(keys, start)
                if k < len(keys) and keys[k] + len(self.key) <= end and (best is None or start < best[0]):
                    best = (start, end)
            if best is not None:
                return Match(matcher=self.name, text=body[best[0]:best[1]])
        return None


DEFAULT_MATCHERS: tuple[EmbeddedDataMatcher, ...] = (
    RegexMatcher("window.chartData", re.compile(r"window\.chartData\s*=\s*(\{[\s\S]*?\});")),
    RegexMatcher("var chartData", re.compile(r"var\s+chartData\s*=\s*(\{[\s\S]*?\});")),
    RegexMatcher(
        "var stats/data/webjackData",
        re.compile(r"var\s+(stats|data|webjackData)\s*=\s*(\{[\s\S]*?\});"),
        group=2,
    ),
    ScriptObjectMatcher(),
)


def first_match(matchers: Sequence[EmbeddedDataMatcher], html: str) -> Optional[Match]:
    """Try each matcher in order; the first one that finds something wins."""
    for matcher in matchers:
        found = matcher.find(html)
        if found is not None:
            return found
    return None


def normalize_js_literal(text: str) -> str:
    """Turn the non-JSON tokens analyzer pages emit (undefined, NaN) into null."""
    return _NAN_RE.sub("null", _UNDEFINED_RE.sub("null", text))


@dataclass
class StatsExtractor:
    """
    Produces a StatsArtifact from a located stats file. Never raises:
    anything that cannot be recovered becomes a degraded artifact.
    """
    matchers: Sequence[EmbeddedDataMatcher] = DEFAULT_MATCHERS
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)

    def extract(self, path: Path, kind: str) -> StatsArtifact:
        path = Path(path)
        if kind == HTML_KIND:
            return self.extract_html(path)
        return self.extract_json(path)

    def extract_json(self, path: Path) -> StatsArtifact:
        try:
            return RawStats(text=path.read_text(encoding="utf-8"), source_path=path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read stats file %s: %s", path, e)
            return ExtractionNote(
                timestamp=to_iso_utc(self.clock()),
                note=STATS_UNREADABLE_NOTE,
                html_report_available=False,
            )

    def extract_html(self, path: Path) -> StatsArtifact:
        logger.info("Extracting stats data from HTML report: %s", path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            logger.warning("Could not read HTML report %s: %s", path, e)
            return ExtractionNote(timestamp=to_iso_utc(self.clock()))

        html = raw.decode("utf-8", errors="replace")
        found = first_match(self.matchers, html)

        if found is None:
            logger.warning("Could not extract data from HTML. Creating minimal compatible structure.")
            return DegradedStats(
                pseudo_asset=Asset(name=path.stem, size=len(raw), parsed_size=0, gzip_size=0),
                html_path=path,
            )

        logger.info("Found data with %s pattern", found.matcher)
        try:
            payload = json.loads(normalize_js_literal(found.text))
        except ValueError as e:
            logger.error("Error parsing extracted stats data: %s", e)
            return ExtractionFailed(
                errors=(f"Error parsing stats data from HTML report ({found.matcher} pattern): {e}",),
                html_path=path,
                fragment=found.text,
            )

        return CanonicalStats(payload=payload, source_path=path)
