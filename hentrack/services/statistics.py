"""
Dashboard and breeding figures computed from the in-memory collections.

Everything here is a pure function of its arguments and is recomputed on every
call; nothing is cached.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from hentrack.domain.dates import one_month_before
from hentrack.domain.models import (
    BreedingRecord,
    BreedingStatistics,
    DashboardSummary,
    HatchingRecord,
    Hen,
    HenStatistics,
    IncubationRecord,
    Note,
    Photo,
)

INBREEDING_PENALTY = 0.25
RECENT_BREEDINGS_LIMIT = 5
RECENT_HENS_LIMIT = 3
HEN_RECENT_NOTES_LIMIT = 5
HEN_RECENT_BREEDINGS_LIMIT = 3

HenLookup = Callable[[str], Optional[Hen]]


def hatching_success_rate(
    incubations: Sequence[IncubationRecord],
    hatchings: Sequence[HatchingRecord],
) -> float:
    """Hatching records per incubation; 0.0 when nothing was incubated."""
    if not incubations:
        return 0.0
    return len(hatchings) / len(incubations)


def recent_breedings(records: Iterable[BreedingRecord], limit: int = RECENT_BREEDINGS_LIMIT) -> list[BreedingRecord]:
    return sorted(records, key=lambda r: r.date, reverse=True)[:limit]


def dashboard_summary(
    hens: Sequence[Hen],
    breedings: Sequence[BreedingRecord],
    incubations: Sequence[IncubationRecord],
    hatchings: Sequence[HatchingRecord],
    now: datetime,
) -> DashboardSummary:
    return DashboardSummary(
        total_hens=sum(1 for h in hens if h.is_hen),
        total_roosters=sum(1 for h in hens if h.is_rooster),
        active_breeders=sum(1 for h in hens if h.can_breed_at(now)),
        incubation_records=len(incubations),
        hatching_success_rate=hatching_success_rate(incubations, hatchings),
        recent_breedings=recent_breedings(breedings),
        recent_hens=sorted(hens, key=lambda h: h.birth_date, reverse=True)[:RECENT_HENS_LIMIT],
    )


def breeding_statistics(
    breedings: Sequence[BreedingRecord],
    hatchings: Sequence[HatchingRecord],
) -> BreedingStatistics:
    """
    Totals across all breeding records.

    ``average_success_rate`` divides the sum of the recorded rates by the total
    number of records, so records without a rate pull the average down.
    """
    total = len(breedings)
    rates = [r.success_rate for r in breedings if r.success_rate is not None]
    return BreedingStatistics(
        total_breedings=total,
        successful_breedings=sum(1 for r in breedings if r.is_successful),
        average_success_rate=sum(rates) / max(total, 1),
        total_eggs_collected=sum(r.eggs_collected for r in breedings if r.eggs_collected is not None),
        total_eggs_fertilized=sum(r.eggs_fertilized for r in breedings if r.eggs_fertilized is not None),
        total_chicks_hatched=sum(h.chicks_count for h in hatchings),
    )


def hen_statistics(
    notes: Sequence[Note],
    photos: Sequence[Photo],
    breedings: Sequence[BreedingRecord],
    now: datetime,
) -> HenStatistics:
    """Figures for a single bird; callers pass only that bird's records."""
    month_ago = one_month_before(now)
    return HenStatistics(
        notes_count=len(notes),
        photos_count=len(photos),
        breeding_records_count=len(breedings),
        monthly_notes_count=sum(1 for n in notes if n.date >= month_ago),
        recent_notes=sorted(notes, key=lambda n: n.date, reverse=True)[:HEN_RECENT_NOTES_LIMIT],
        recent_breedings=recent_breedings(breedings, HEN_RECENT_BREEDINGS_LIMIT),
    )


def pedigree(hen: Hen, lookup: HenLookup, generations: int = 3) -> list[Hen]:
    """Maternal line only: mother, grandmother, ... up to ``generations`` deep."""
    line: list[Hen] = []
    current = hen
    for _ in range(max(0, generations)):
        if not current.parent_hen_id:
            break
        parent = lookup(current.parent_hen_id)
        if parent is None:
            break
        line.append(parent)
        current = parent
    return line


def inbreeding_coefficient(hen: Hen, lookup: HenLookup) -> float:
    """
    Rough flag for related parents: 0.25 when both parents resolve and share a
    recorded mother id or a recorded father id, otherwise 0.0.

    Ids are compared as stored, so two parents with no recorded mother also
    count as sharing one.
    """
    if not hen.parent_hen_id or not hen.parent_rooster_id:
        return 0.0
    mother = lookup(hen.parent_hen_id)
    father = lookup(hen.parent_rooster_id)
    if mother is None or father is None:
        return 0.0
    if mother.parent_hen_id == father.parent_hen_id or mother.parent_rooster_id == father.parent_rooster_id:
        return INBREEDING_PENALTY
    return 0.0


def percentage(rate: Optional[float]) -> str:
    if rate is None:
        return "N/A"
    return f"{int(rate * 100)}%"
