from __future__ import annotations

from datetime import datetime
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hentrack.domain.dates import DateFilter, matches_date_filter, one_month_before

NOW = datetime(2024, 1, 3, 15, 30)  # a Wednesday


@pytest.mark.parametrize(
    "raw, expected",
    [("week", DateFilter.WEEK), ("Today", DateFilter.TODAY), ("MONTH", DateFilter.MONTH), ("", DateFilter.ALL), ("bogus", DateFilter.ALL), (None, DateFilter.ALL)],
)
def test_parse_date_filter(raw, expected):
    assert DateFilter.parse(raw) is expected


def test_today_is_calendar_day_not_24_hours():
    assert matches_date_filter(datetime(2024, 1, 3, 0, 1), DateFilter.TODAY, NOW)
    assert not matches_date_filter(datetime(2024, 1, 2, 23, 59), DateFilter.TODAY, NOW)


def test_week_starts_on_monday():
    assert matches_date_filter(datetime(2024, 1, 1), DateFilter.WEEK, NOW)
    assert not matches_date_filter(datetime(2023, 12, 31), DateFilter.WEEK, NOW)


def test_week_spanning_new_year():
    assert matches_date_filter(datetime(2024, 12, 30), DateFilter.WEEK, datetime(2025, 1, 1))


def test_month_bucket():
    assert matches_date_filter(datetime(2024, 1, 31), DateFilter.MONTH, NOW)
    assert not matches_date_filter(datetime(2023, 1, 3), DateFilter.MONTH, NOW)


def test_all_matches_anything():
    assert matches_date_filter(datetime(1999, 1, 1), DateFilter.ALL, NOW)


def test_one_month_before_clamps_to_month_end():
    assert one_month_before(datetime(2024, 3, 31, 8)) == datetime(2024, 2, 29, 8)
    assert one_month_before(datetime(2024, 1, 15)) == datetime(2023, 12, 15)
