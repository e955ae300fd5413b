"""Tip of the Day: a random breeding tip shown on the dashboard."""
from __future__ import annotations

import random
from dataclasses import replace
from typing import Optional

from hentrack.domain.models import TipOfTheDay

BREEDING_TIPS = (
    "Keep detailed records of all breeding pairs for genetic tracking.",
    "Monitor egg fertility rates to assess breeding success.",
    "Maintain proper temperature and humidity during incubation.",
    "Candle eggs regularly to check development progress.",
    "Record hatch rates to improve breeding program.",
    "Avoid excessive inbreeding to maintain genetic diversity.",
    "Select breeding pairs based on desired traits.",
    "Keep separate records for each breeding season.",
    "Monitor chick health and development after hatching.",
    "Document any genetic abnormalities or health issues.",
    "Track egg production capacity of breeding hens.",
    "Maintain optimal nutrition for breeding birds.",
    "Record environmental conditions during breeding.",
    "Monitor mating behavior and success rates.",
    "Keep detailed pedigree records for future reference.",
    "Assess breeding performance regularly.",
    "Document any breeding complications or issues.",
    "Track genetic traits across generations.",
    "Monitor chick survival rates post-hatching.",
    "Record any behavioral changes during breeding season.",
    "Maintain proper lighting conditions for breeding.",
    "Document any health issues in breeding stock.",
    "Track feed consumption during breeding periods.",
    "Monitor egg quality and shell strength.",
    "Record any environmental stressors during breeding.",
    "Document successful breeding combinations.",
    "Track genetic diversity in your flock.",
    "Monitor breeding season timing and success.",
    "Record any breeding-related injuries or issues.",
    "Document chick growth and development rates.",
    "Track breeding efficiency over time.",
    "Monitor genetic health of breeding stock.",
    "Record any breeding program improvements.",
    "Document successful genetic trait combinations.",
    "Track breeding season productivity.",
    "Monitor genetic diversity maintenance.",
    "Record any breeding-related health protocols.",
    "Document chick quality and vigor.",
    "Track breeding program ROI and success rates.",
    "Monitor genetic trait inheritance patterns.",
)


class TipService:
    """Holds the current tip; feedback lives only in memory."""

    def __init__(self, tips: tuple[str, ...] = BREEDING_TIPS, rng: Optional[random.Random] = None) -> None:
        self.tips = tips or BREEDING_TIPS
        self._rng = rng or random.Random()
        self.current_tip: TipOfTheDay = self.pick()

    def pick(self) -> TipOfTheDay:
        self.current_tip = TipOfTheDay(text=self._rng.choice(self.tips))
        return self.current_tip

    def mark_tip_as_useful(self, is_useful: bool) -> TipOfTheDay:
        self.current_tip = replace(self.current_tip, is_useful=bool(is_useful))
        return self.current_tip
