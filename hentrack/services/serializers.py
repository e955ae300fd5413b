"""JSON views of records for the API, with derived fields evaluated at ``now``."""
from __future__ import annotations

from datetime import datetime

from hentrack.domain.models import (
    BreedingRecord,
    BreedingStatistics,
    DashboardSummary,
    ExportInfo,
    HatchingRecord,
    Hen,
    HenStatistics,
    IncubationRecord,
    Note,
    Photo,
    TipOfTheDay,
)
from hentrack.repositories.codec import to_primitive
from hentrack.services.display import display_for
from hentrack.services.statistics import percentage


def hen_to_dict(hen: Hen, now: datetime) -> dict:
    data = to_primitive(hen)
    data.update(
        age=hen.age_at(now),
        can_breed=hen.can_breed_at(now),
        gender_icon=display_for(hen.gender)["icon"],
        status_color=display_for(hen.breeding_status)["color"],
    )
    return data


def note_to_dict(note: Note) -> dict:
    data = to_primitive(note)
    data["hashtags"] = note.hashtags
    data["type_icon"] = display_for(note.type)["icon"]
    return data


def photo_to_dict(photo: Photo) -> dict:
    return to_primitive(photo)


def breeding_record_to_dict(record: BreedingRecord) -> dict:
    data = to_primitive(record)
    data["success_rate_percentage"] = percentage(record.success_rate)
    data["fertility_rate"] = record.fertility_rate
    return data


def incubation_record_to_dict(record: IncubationRecord, now: datetime) -> dict:
    data = to_primitive(record)
    data.update(
        days_until_hatch=record.days_until_hatch_at(now),
        is_hatching_soon=record.is_hatching_soon_at(now),
        is_overdue=record.is_overdue_at(now),
        fertile_eggs=record.fertile_eggs,
    )
    return data


def hatching_record_to_dict(record: HatchingRecord) -> dict:
    return to_primitive(record)


def dashboard_to_dict(summary: DashboardSummary, now: datetime) -> dict:
    return {
        "total_hens": summary.total_hens,
        "total_roosters": summary.total_roosters,
        "active_breeders": summary.active_breeders,
        "incubation_records": summary.incubation_records,
        "hatching_success_rate": summary.hatching_success_rate,
        "hatching_success_percentage": percentage(summary.hatching_success_rate),
        "recent_breedings": [breeding_record_to_dict(r) for r in summary.recent_breedings],
        "recent_hens": [hen_to_dict(h, now) for h in summary.recent_hens],
    }


def breeding_statistics_to_dict(stats: BreedingStatistics) -> dict:
    data = to_primitive(stats)
    data["average_success_percentage"] = percentage(stats.average_success_rate)
    return data


def hen_statistics_to_dict(stats: HenStatistics) -> dict:
    return {
        "notes_count": stats.notes_count,
        "photos_count": stats.photos_count,
        "breeding_records_count": stats.breeding_records_count,
        "monthly_notes_count": stats.monthly_notes_count,
        "recent_notes": [note_to_dict(n) for n in stats.recent_notes],
        "recent_breedings": [breeding_record_to_dict(r) for r in stats.recent_breedings],
    }


def export_info_to_dict(info: ExportInfo) -> dict:
    return to_primitive(info)


def tip_to_dict(tip: TipOfTheDay) -> dict:
    return to_primitive(tip)
