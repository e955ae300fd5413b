"""Calendar date buckets used by the note, photo and breeding list filters."""
from __future__ import annotations

from datetime import datetime
from enum import Enum


class DateFilter(str, Enum):
    ALL = "All"
    TODAY = "Today"
    WEEK = "Week"
    MONTH = "Month"

    @classmethod
    def parse(cls, value: str | None) -> "DateFilter":
        """Accept a label ("Week") or a name ("week"); anything else means ALL."""
        text = (value or "").strip()
        if not text:
            return cls.ALL
        for member in cls:
            if text.lower() in (member.value.lower(), member.name.lower()):
                return member
        return cls.ALL


def is_same_day(value: datetime, now: datetime) -> bool:
    return value.date() == now.date()


def is_same_week(value: datetime, now: datetime) -> bool:
    # ISO weeks start on Monday; year is the ISO year so week 1 spanning new year matches
    return value.isocalendar()[:2] == now.isocalendar()[:2]


def is_same_month(value: datetime, now: datetime) -> bool:
    return (value.year, value.month) == (now.year, now.month)


def matches_date_filter(value: datetime, date_filter: DateFilter, now: datetime) -> bool:
    """Calendar containment test, never a rolling window."""
    if date_filter == DateFilter.TODAY:
        return is_same_day(value, now)
    if date_filter == DateFilter.WEEK:
        return is_same_week(value, now)
    if date_filter == DateFilter.MONTH:
        return is_same_month(value, now)
    return True


def one_month_before(now: datetime) -> datetime:
    """Same day of the previous month, clamped to that month's last day."""
    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = now.day
    while True:
        try:
            return now.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1
