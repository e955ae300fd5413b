"""
Flock records: birds, their notes and photos, breeding, incubation and hatching.

Records are plain dataclasses. References between them (parent ids, hen ids,
breeding/incubation ids) are bare identifiers that may point at records that
were deleted; callers resolve them through the store and treat a miss as
"unknown".
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from uuid import uuid4

INCUBATION_PERIOD_DAYS = 21
HATCHING_SOON_DAYS = 3
SUCCESSFUL_BREEDING_THRESHOLD = 0.5


def new_id() -> str:
    return str(uuid4())


class ChickenGender(str, Enum):
    HEN = "Hen"
    ROOSTER = "Rooster"


class BreedingStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    RETIRED = "Retired"
    DECEASED = "Deceased"


class EggLayingCapacity(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    POOR = "Poor"
    UNKNOWN = "Unknown"


class DevelopmentStage(str, Enum):
    DAY_1_3 = "Day 1-3"
    DAY_4_7 = "Day 4-7"
    DAY_8_14 = "Day 8-14"
    DAY_15_21 = "Day 15-21"


class NoteType(str, Enum):
    BREEDING = "Breeding"
    INCUBATION = "Incubation"
    HATCHING = "Hatching"
    GENETICS = "Genetics"
    PEDIGREE = "Pedigree"
    HEALTH = "Health"
    BEHAVIOR = "Behavior"
    FEEDING = "Feeding"
    GENERAL = "General"


def whole_years_between(start: datetime, end: datetime) -> int:
    """Completed calendar years from start to end (negative if end is earlier)."""
    years = end.year - start.year
    if years > 0 and (end.month, end.day, end.time()) < (start.month, start.day, start.time()):
        years -= 1
    elif years < 0 and (end.month, end.day, end.time()) > (start.month, start.day, start.time()):
        years += 1
    return years


@dataclass
class Hen:
    """A bird of the flock; roosters are hens with ``gender == ROOSTER``."""

    name: str
    breed: str
    birth_date: datetime
    gender: ChickenGender
    id: str = field(default_factory=new_id)
    feather_color: str = ""
    weight: Optional[float] = None
    breeding_status: BreedingStatus = BreedingStatus.ACTIVE
    parent_hen_id: Optional[str] = None
    parent_rooster_id: Optional[str] = None
    generation: int = 1
    egg_laying_capacity: EggLayingCapacity = EggLayingCapacity.UNKNOWN
    photo_url: Optional[str] = None
    local_photo_path: Optional[str] = None

    def age_at(self, now: datetime) -> int:
        return max(0, whole_years_between(self.birth_date, now))

    def can_breed_at(self, now: datetime) -> bool:
        return self.breeding_status == BreedingStatus.ACTIVE and self.age_at(now) >= 1

    @property
    def age(self) -> int:
        return self.age_at(datetime.now())

    @property
    def can_breed(self) -> bool:
        return self.can_breed_at(datetime.now())

    @property
    def is_active(self) -> bool:
        return self.breeding_status == BreedingStatus.ACTIVE

    @property
    def is_hen(self) -> bool:
        return self.gender == ChickenGender.HEN

    @property
    def is_rooster(self) -> bool:
        return self.gender == ChickenGender.ROOSTER


@dataclass
class Note:
    title: str
    content: str
    date: datetime
    hen_id: str
    id: str = field(default_factory=new_id)
    type: NoteType = NoteType.GENERAL
    tags: list[str] = field(default_factory=list)
    photo_url: Optional[str] = None

    @property
    def hashtags(self) -> list[str]:
        return [f"#{tag}" for tag in self.tags]

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


@dataclass
class Photo:
    date: datetime
    hen_id: str
    id: str = field(default_factory=new_id)
    image_url: Optional[str] = None
    local_photo_path: Optional[str] = None
    caption: Optional[str] = None
    tags: list[str] = field(default_factory=list)


@dataclass
class BreedingRecord:
    """One mating of a hen with a rooster on a given date."""

    hen_id: str
    rooster_id: str
    date: datetime
    id: str = field(default_factory=new_id)
    notes: Optional[str] = None
    success_rate: Optional[float] = None
    eggs_collected: Optional[int] = None
    eggs_fertilized: Optional[int] = None

    @property
    def fertility_rate(self) -> Optional[float]:
        if self.eggs_collected is None or self.eggs_fertilized is None or self.eggs_collected <= 0:
            return None
        return self.eggs_fertilized / self.eggs_collected

    @property
    def is_successful(self) -> bool:
        return (self.success_rate or 0.0) > SUCCESSFUL_BREEDING_THRESHOLD


@dataclass
class CandlingResult:
    date: datetime
    egg_number: int
    is_fertile: bool
    development_stage: DevelopmentStage
    id: str = field(default_factory=new_id)
    notes: Optional[str] = None


def expected_hatch_date_for(start_date: datetime) -> datetime:
    return start_date + timedelta(days=INCUBATION_PERIOD_DAYS)


@dataclass
class IncubationRecord:
    breeding_record_id: str
    start_date: datetime
    expected_hatch_date: datetime
    eggs_count: int
    id: str = field(default_factory=new_id)
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    candling_results: list[CandlingResult] = field(default_factory=list)
    notes: Optional[str] = None

    @classmethod
    def create(
        cls,
        breeding_record_id: str,
        start_date: datetime,
        eggs_count: int,
        *,
        temperature: Optional[float] = None,
        humidity: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> IncubationRecord:
        return cls(
            id=new_id(),
            breeding_record_id=breeding_record_id,
            start_date=start_date,
            expected_hatch_date=expected_hatch_date_for(start_date),
            eggs_count=eggs_count,
            temperature=temperature,
            humidity=humidity,
            notes=notes,
        )

    def rescheduled(self, start_date: datetime) -> IncubationRecord:
        """Copy with a new start date and the matching expected hatch date."""
        return replace(self, start_date=start_date, expected_hatch_date=expected_hatch_date_for(start_date))

    def with_candling_result(self, result: CandlingResult) -> IncubationRecord:
        return replace(self, candling_results=[*self.candling_results, result])

    def days_until_hatch_at(self, now: datetime) -> int:
        # timedelta.days floors, so any moment past the expected date is negative
        return (self.expected_hatch_date - now).days

    def is_hatching_soon_at(self, now: datetime) -> bool:
        return 0 <= self.days_until_hatch_at(now) <= HATCHING_SOON_DAYS

    def is_overdue_at(self, now: datetime) -> bool:
        return self.days_until_hatch_at(now) < 0

    @property
    def days_until_hatch(self) -> int:
        return self.days_until_hatch_at(datetime.now())

    @property
    def is_hatching_soon(self) -> bool:
        return self.is_hatching_soon_at(datetime.now())

    @property
    def is_overdue(self) -> bool:
        return self.is_overdue_at(datetime.now())

    @property
    def fertile_eggs(self) -> int:
        return sum(1 for result in self.candling_results if result.is_fertile)


@dataclass
class HatchingRecord:
    incubation_record_id: str
    hatch_date: datetime
    chicks_count: int
    healthy_chicks: int
    id: str = field(default_factory=new_id)
    weak_chicks: int = 0
    notes: Optional[str] = None
    chick_ids: list[str] = field(default_factory=list)


@dataclass
class ExportInfo:
    last_export_date: Optional[datetime] = None
    total_exports: int = 0


@dataclass
class TipOfTheDay:
    text: str
    id: str = field(default_factory=new_id)
    is_useful: Optional[bool] = None


@dataclass(frozen=True)
class DashboardSummary:
    total_hens: int
    total_roosters: int
    active_breeders: int
    incubation_records: int
    hatching_success_rate: float
    recent_breedings: list[BreedingRecord]
    recent_hens: list[Hen]


@dataclass(frozen=True)
class BreedingStatistics:
    total_breedings: int
    successful_breedings: int
    average_success_rate: float
    total_eggs_collected: int
    total_eggs_fertilized: int
    total_chicks_hatched: int


@dataclass(frozen=True)
class HenStatistics:
    notes_count: int
    photos_count: int
    breeding_records_count: int
    monthly_notes_count: int
    recent_notes: list[Note]
    recent_breedings: list[BreedingRecord]
