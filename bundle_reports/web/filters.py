from __future__ import annotations

from datetime import datetime

from bundle_reports.domain.models import to_iso_utc

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_bytes(size: int, decimals: int = 2) -> str:
    """Human-readable size at 1024 scale, e.g. 1536 -> '1.5 KB'."""
    if not size:
        return "0 Bytes"
    i = 0
    while i < len(_SIZE_UNITS) - 1 and size >= 1024 ** (i + 1):
        i += 1
    value = round(size / (1024 ** i), decimals)
    # drop trailing zeros the same way the client-side formatter does
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".") if decimals else f"{value:.0f}"
    return f"{text} {_SIZE_UNITS[i]}"


def format_date(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def register_filters(app) -> None:
    app.add_template_filter(format_bytes, "format_bytes")
    app.add_template_filter(format_date, "format_date")
    app.add_template_filter(to_iso_utc, "iso_utc")
