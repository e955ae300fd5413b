"""Icons and colors for enum values, kept out of the domain records."""
from __future__ import annotations

from enum import Enum

from hentrack.domain.models import BreedingStatus, ChickenGender, EggLayingCapacity, NoteType

GENDER_ICONS = {
    ChickenGender.HEN: "🐔",
    ChickenGender.ROOSTER: "🐓",
}

BREEDING_STATUS_COLORS = {
    BreedingStatus.ACTIVE: "green",
    BreedingStatus.INACTIVE: "orange",
    BreedingStatus.RETIRED: "gray",
    BreedingStatus.DECEASED: "red",
}

EGG_LAYING_COLORS = {
    EggLayingCapacity.EXCELLENT: "green",
    EggLayingCapacity.GOOD: "blue",
    EggLayingCapacity.AVERAGE: "yellow",
    EggLayingCapacity.POOR: "red",
    EggLayingCapacity.UNKNOWN: "gray",
}

NOTE_TYPE_ICONS = {
    NoteType.BREEDING: "❤️",
    NoteType.INCUBATION: "🥚",
    NoteType.HATCHING: "🐣",
    NoteType.GENETICS: "🧬",
    NoteType.PEDIGREE: "👨‍👩‍👧‍👦",
    NoteType.HEALTH: "🏥",
    NoteType.BEHAVIOR: "🐓",
    NoteType.FEEDING: "🌾",
    NoteType.GENERAL: "📝",
}

NOTE_TYPE_COLORS = {
    NoteType.BREEDING: "pink",
    NoteType.INCUBATION: "yellow",
    NoteType.HATCHING: "orange",
    NoteType.GENETICS: "purple",
    NoteType.PEDIGREE: "blue",
    NoteType.HEALTH: "red",
    NoteType.BEHAVIOR: "blue",
    NoteType.FEEDING: "green",
    NoteType.GENERAL: "gray",
}

# enum type -> (icons, colors)
_TABLES: dict[type, tuple[dict, dict]] = {
    ChickenGender: (GENDER_ICONS, {}),
    BreedingStatus: ({}, BREEDING_STATUS_COLORS),
    EggLayingCapacity: ({}, EGG_LAYING_COLORS),
    NoteType: (NOTE_TYPE_ICONS, NOTE_TYPE_COLORS),
}


def display_for(variant: Enum) -> dict:
    """Label plus optional icon/color for one enum value."""
    icons, colors = _TABLES.get(type(variant), ({}, {}))
    return {
        "label": variant.value,
        "icon": icons.get(variant),
        "color": colors.get(variant),
    }


def display_tables() -> dict[str, list[dict]]:
    return {
        "gender": [display_for(v) for v in ChickenGender],
        "breeding_status": [display_for(v) for v in BreedingStatus],
        "egg_laying_capacity": [display_for(v) for v in EggLayingCapacity],
        "note_type": [display_for(v) for v in NoteType],
    }
