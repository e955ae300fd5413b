"""
Build records from submitted form payloads.

Text fields are trimmed; numeric fields typed as free text (weight, egg counts,
temperature, humidity) become None when they do not parse. Only the fields a
record cannot exist without are validated. On edit, keys missing from the
payload keep their current values and the record id never changes.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from hentrack.core.utils import (
    clean_text,
    normalize_tags,
    optional_text,
    parse_optional_datetime,
    parse_optional_float,
    parse_optional_int,
)
from hentrack.domain.models import (
    BreedingRecord,
    BreedingStatus,
    CandlingResult,
    ChickenGender,
    DevelopmentStage,
    EggLayingCapacity,
    HatchingRecord,
    Hen,
    IncubationRecord,
    Note,
    NoteType,
    Photo,
    expected_hatch_date_for,
)
from hentrack.services.errors import InvalidFormError

EnumT = TypeVar("EnumT", bound=Enum)


def parse_choice(enum_cls: Type[EnumT], value: Any, default: EnumT) -> EnumT:
    """Accept the canonical label ("Day 1-3") or the member name ("day_1_3")."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    for member in enum_cls:
        if text.lower() in (str(member.value).lower(), member.name.lower()):
            return member
    raise InvalidFormError(f"Invalid {enum_cls.__name__}: {text}")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def _required_text(payload: Mapping[str, Any], key: str, current: Optional[str] = None) -> str:
    value = clean_text(payload[key]) if key in payload else (current or "")
    if not value:
        raise InvalidFormError(f"{key} is required")
    return value


def _required_int(payload: Mapping[str, Any], key: str, current: Optional[int] = None) -> int:
    if key not in payload:
        if current is None:
            raise InvalidFormError(f"{key} is required")
        return current
    value = parse_optional_int(payload[key])
    if value is None or value < 0:
        raise InvalidFormError(f"{key} must be a non-negative whole number")
    return value


def _date(payload: Mapping[str, Any], key: str, current: Optional[datetime], now: datetime) -> datetime:
    if key not in payload:
        return current or now
    raw = payload[key]
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return current or now
    value = parse_optional_datetime(raw)
    if value is None:
        raise InvalidFormError(f"{key} must be an ISO-8601 date")
    return value


def _non_negative(value: Optional[int]) -> Optional[int]:
    if value is None or value < 0:
        return None
    return value


def _tags(value: Any, key: str = "tags") -> list[str]:
    if value is None or isinstance(value, (str, list, tuple)):
        return normalize_tags(value)
    raise InvalidFormError(f"{key} must be a list or a comma-separated string")


def _optional(payload: Mapping[str, Any], key: str, current: Any, parse) -> Any:
    return parse(payload[key]) if key in payload else current


def hen_from_form(payload: Mapping[str, Any], now: datetime, existing: Optional[Hen] = None) -> Hen:
    generation = _optional(payload, "generation", existing.generation if existing else 1, parse_optional_int)
    hen = Hen(
        name=_required_text(payload, "name", existing.name if existing else None),
        breed=_required_text(payload, "breed", existing.breed if existing else None),
        birth_date=_date(payload, "birth_date", existing.birth_date if existing else None, now),
        gender=parse_choice(ChickenGender, payload.get("gender"), existing.gender if existing else ChickenGender.HEN),
        feather_color=clean_text(payload["feather_color"]) if "feather_color" in payload else (existing.feather_color if existing else ""),
        weight=_optional(payload, "weight", existing.weight if existing else None, parse_optional_float),
        breeding_status=parse_choice(
            BreedingStatus,
            payload.get("breeding_status"),
            existing.breeding_status if existing else BreedingStatus.ACTIVE,
        ),
        parent_hen_id=_optional(payload, "parent_hen_id", existing.parent_hen_id if existing else None, optional_text),
        parent_rooster_id=_optional(
            payload, "parent_rooster_id", existing.parent_rooster_id if existing else None, optional_text
        ),
        generation=max(1, generation or 1),
        egg_laying_capacity=parse_choice(
            EggLayingCapacity,
            payload.get("egg_laying_capacity"),
            existing.egg_laying_capacity if existing else EggLayingCapacity.UNKNOWN,
        ),
        photo_url=_optional(payload, "photo_url", existing.photo_url if existing else None, optional_text),
        local_photo_path=_optional(
            payload, "local_photo_path", existing.local_photo_path if existing else None, optional_text
        ),
    )
    if existing:
        hen.id = existing.id
    return hen


def note_from_form(payload: Mapping[str, Any], now: datetime, existing: Optional[Note] = None) -> Note:
    note = Note(
        title=_required_text(payload, "title", existing.title if existing else None),
        content=_required_text(payload, "content", existing.content if existing else None),
        date=_date(payload, "date", existing.date if existing else None, now),
        hen_id=_required_text(payload, "hen_id", existing.hen_id if existing else None),
        type=parse_choice(NoteType, payload.get("type"), existing.type if existing else NoteType.GENERAL),
        tags=_optional(payload, "tags", list(existing.tags) if existing else [], _tags),
        photo_url=_optional(payload, "photo_url", existing.photo_url if existing else None, optional_text),
    )
    if existing:
        note.id = existing.id
    return note


def photo_from_form(payload: Mapping[str, Any], now: datetime, existing: Optional[Photo] = None) -> Photo:
    photo = Photo(
        date=_date(payload, "date", existing.date if existing else None, now),
        hen_id=_required_text(payload, "hen_id", existing.hen_id if existing else None),
        image_url=_optional(payload, "image_url", existing.image_url if existing else None, optional_text),
        local_photo_path=_optional(
            payload, "local_photo_path", existing.local_photo_path if existing else None, optional_text
        ),
        caption=_optional(payload, "caption", existing.caption if existing else None, optional_text),
        tags=_optional(payload, "tags", list(existing.tags) if existing else [], _tags),
    )
    if existing:
        photo.id = existing.id
    return photo


def _success_rate(value: Any) -> Optional[float]:
    rate = parse_optional_float(value)
    # a zero rate from the slider means "not recorded"
    if rate is None or rate <= 0:
        return None
    return min(rate, 1.0)


def breeding_record_from_form(
    payload: Mapping[str, Any], now: datetime, existing: Optional[BreedingRecord] = None
) -> BreedingRecord:
    record = BreedingRecord(
        hen_id=_required_text(payload, "hen_id", existing.hen_id if existing else None),
        rooster_id=_required_text(payload, "rooster_id", existing.rooster_id if existing else None),
        date=_date(payload, "date", existing.date if existing else None, now),
        notes=_optional(payload, "notes", existing.notes if existing else None, optional_text),
        success_rate=_optional(payload, "success_rate", existing.success_rate if existing else None, _success_rate),
        eggs_collected=_optional(
            payload,
            "eggs_collected",
            existing.eggs_collected if existing else None,
            lambda v: _non_negative(parse_optional_int(v)),
        ),
        eggs_fertilized=_optional(
            payload,
            "eggs_fertilized",
            existing.eggs_fertilized if existing else None,
            lambda v: _non_negative(parse_optional_int(v)),
        ),
    )
    if existing:
        record.id = existing.id
    return record


def incubation_record_from_form(
    payload: Mapping[str, Any], now: datetime, existing: Optional[IncubationRecord] = None
) -> IncubationRecord:
    """Expected hatch date is always derived from the start date."""
    start_date = _date(payload, "start_date", existing.start_date if existing else None, now)
    record = IncubationRecord(
        breeding_record_id=_required_text(
            payload, "breeding_record_id", existing.breeding_record_id if existing else None
        ),
        start_date=start_date,
        expected_hatch_date=expected_hatch_date_for(start_date),
        eggs_count=_required_int(payload, "eggs_count", existing.eggs_count if existing else None),
        temperature=_optional(payload, "temperature", existing.temperature if existing else None, parse_optional_float),
        humidity=_optional(payload, "humidity", existing.humidity if existing else None, parse_optional_float),
        candling_results=list(existing.candling_results) if existing else [],
        notes=_optional(payload, "notes", existing.notes if existing else None, optional_text),
    )
    if existing:
        record.id = existing.id
    return record


def candling_result_from_form(payload: Mapping[str, Any], now: datetime) -> CandlingResult:
    return CandlingResult(
        date=_date(payload, "date", None, now),
        egg_number=_required_int(payload, "egg_number"),
        is_fertile=_parse_bool(payload.get("is_fertile")),
        development_stage=parse_choice(DevelopmentStage, payload.get("development_stage"), DevelopmentStage.DAY_1_3),
        notes=optional_text(payload.get("notes")),
    )


def hatching_record_from_form(
    payload: Mapping[str, Any], now: datetime, existing: Optional[HatchingRecord] = None
) -> HatchingRecord:
    weak = _optional(payload, "weak_chicks", existing.weak_chicks if existing else 0, parse_optional_int)
    record = HatchingRecord(
        incubation_record_id=_required_text(
            payload, "incubation_record_id", existing.incubation_record_id if existing else None
        ),
        hatch_date=_date(payload, "hatch_date", existing.hatch_date if existing else None, now),
        chicks_count=_required_int(payload, "chicks_count", existing.chicks_count if existing else None),
        healthy_chicks=_required_int(payload, "healthy_chicks", existing.healthy_chicks if existing else None),
        weak_chicks=max(0, weak or 0),
        notes=_optional(payload, "notes", existing.notes if existing else None, optional_text),
        chick_ids=_optional(
            payload, "chick_ids", list(existing.chick_ids) if existing else [], lambda v: _tags(v, "chick_ids")
        ),
    )
    if existing:
        record.id = existing.id
    return record
