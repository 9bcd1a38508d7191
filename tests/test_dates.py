"""Tests for server timestamp conversion."""

from datetime import datetime, timedelta, timezone

import pytest

from itemshare.dates import date_from_golang
from itemshare.errors import MalformedResponseError


def test_utc_with_nanoseconds():
    assert date_from_golang("2026-03-04T05:06:07.123456789Z") == datetime(
        2026, 3, 4, 5, 6, 7, 123456, tzinfo=timezone.utc
    )


def test_short_fraction_is_padded():
    assert date_from_golang("2026-03-04T05:06:07.5Z").microsecond == 500000


def test_offset_is_kept():
    parsed = date_from_golang("2026-03-04T05:06:07-05:00")
    assert parsed.utcoffset() == timedelta(hours=-5)


@pytest.mark.parametrize("value", [None, "", "0001-01-01T00:00:00Z"])
def test_empty_values(value):
    assert date_from_golang(value) is None


def test_invalid_raises():
    with pytest.raises(MalformedResponseError):
        date_from_golang("next tuesday")
