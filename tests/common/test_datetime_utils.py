from datetime import date, datetime

import pytest

from shift_tracker.common.datetime_utils import duration_ms, format_duration, parse_iso_date
from shift_tracker.core.exceptions import ValidationError


def test_format_duration_pads_each_part():
    assert format_duration(3_661_000) == "01:01:01"


def test_format_duration_floors_to_whole_seconds():
    assert format_duration(999) == "00:00:00"
    assert format_duration(59_999) == "00:00:59"


def test_format_duration_hours_are_not_wrapped():
    assert format_duration(100 * 3600 * 1000) == "100:00:00"


def test_format_duration_negative_is_zero():
    assert format_duration(-5000) == "00:00:00"


def test_duration_ms_between_datetimes():
    start = datetime(2025, 3, 1, 8, 0, 0)
    end = datetime(2025, 3, 1, 16, 30, 15)
    assert duration_ms(start, end) == (8 * 3600 + 30 * 60 + 15) * 1000


def test_parse_iso_date():
    assert parse_iso_date(" 2025-02-28 ") == date(2025, 2, 28)
    with pytest.raises(ValidationError):
        parse_iso_date("28/02/2025")


@pytest.mark.parametrize("value", [20250301, None, ["2025-03-01"], ""])
def test_parse_iso_date_rejects_non_strings(value):
    with pytest.raises(ValidationError):
        parse_iso_date(value)
