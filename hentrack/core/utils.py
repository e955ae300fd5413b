"""
Utility helpers shared across routers/services.

Free-text form fields (egg counts, weight, temperature, humidity) are parsed
leniently: anything that is not a number becomes None instead of an error.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Iterable, Optional


def parse_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    # nan and inf are floats but not usable measurements
    if not math.isfinite(number):
        return None
    return number


def parse_optional_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into a naive local datetime.

    Aware values are converted to local wall-clock time so they compare with
    the rest of the collection.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def normalize_tags(values: Iterable[Any] | None) -> list[str]:
    """Trim, drop blanks and de-duplicate tags keeping first-seen order.

    A plain string is read as a comma-separated list.
    """
    if isinstance(values, str):
        values = values.split(",")
    tags: list[str] = []
    for value in values or []:
        tag = str(value or "").strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def clean_text(value: Any) -> str:
    return str(value or "").strip()


def optional_text(value: Any) -> Optional[str]:
    text = clean_text(value)
    return text or None
