from datetime import datetime, timezone

import pytest

from bundle_reports.web.filters import format_bytes, format_date


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 Bytes"),
        (1, "1 Bytes"),
        (1023, "1023 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1100, "1.07 KB"),
        (1024 ** 2, "1 MB"),
        (5 * 1024 ** 3 + 1024 ** 3 // 4, "5.25 GB"),
        (3 * 1024 ** 4, "3072 GB"),     # GB is the largest unit
    ],
)
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


def test_format_date_is_utc():
    assert format_date(datetime(2024, 5, 1, 9, 30, 12, tzinfo=timezone.utc)) == "2024-05-01 09:30:12 UTC"
