"""Growth stages, their stat ceilings, and species growth rates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ..clock import TICKS_PER_DAY, to_micro


class GrowthStage(str, Enum):
    """Ordered maturity phases. Comparisons follow age, not spelling."""

    BABY = "baby"
    CHILD = "child"
    TEEN = "teen"
    YOUNG_ADULT = "young_adult"
    ADULT = "adult"

    @property
    def rank(self) -> int:
        return _STAGE_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, GrowthStage):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, GrowthStage):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, GrowthStage):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, GrowthStage):
            return NotImplemented
        return self.rank >= other.rank

    # str's __hash__ is dropped once comparisons are overridden.
    __hash__ = str.__hash__

    @classmethod
    def from_value(cls, value: "GrowthStage | str") -> "GrowthStage":
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        # "youngAdult", "young adult" and "YOUNG_ADULT" all name the same stage.
        camel = "".join(f"_{char.lower()}" if char.isupper() else char for char in text)
        for candidate in (
            text.lower().replace(" ", "_").replace("-", "_"),
            camel.lstrip("_"),
        ):
            try:
                return cls(candidate)
            except ValueError:
                continue
        raise ValueError(f"Unknown growth stage: {value}")

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


_STAGE_ORDER: tuple[GrowthStage, ...] = tuple(GrowthStage)


class GrowthRate(str, Enum):
    """How quickly a species gains a battle stat on each stage transition."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_value(cls, value: "GrowthRate | str") -> "GrowthRate":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM

    @property
    def stage_gain(self) -> int:
        return _GROWTH_RATE_GAINS[self]


_GROWTH_RATE_GAINS: Mapping[GrowthRate, int] = MappingProxyType(
    {GrowthRate.LOW: 1, GrowthRate.MEDIUM: 3, GrowthRate.HIGH: 5}
)

BATTLE_STAT_NAMES: tuple[str, ...] = (
    "strength",
    "endurance",
    "agility",
    "precision",
    "fortitude",
    "cunning",
)

SUBSTAGE_COUNT = 3


@dataclass(frozen=True, slots=True)
class StageDefinition:
    stage: GrowthStage
    min_age_ticks: int
    care_stat_max: int
    care_life_max: int
    min_sleep_ticks: int


STAGE_DEFINITIONS: Mapping[GrowthStage, StageDefinition] = MappingProxyType(
    {
        GrowthStage.BABY: StageDefinition(
            GrowthStage.BABY, 0, to_micro(50), to_micro(72), 1920
        ),
        GrowthStage.CHILD: StageDefinition(
            GrowthStage.CHILD, 60 * TICKS_PER_DAY, to_micro(80), to_micro(120), 1680
        ),
        GrowthStage.TEEN: StageDefinition(
            GrowthStage.TEEN, 150 * TICKS_PER_DAY, to_micro(120), to_micro(168), 1440
        ),
        GrowthStage.YOUNG_ADULT: StageDefinition(
            GrowthStage.YOUNG_ADULT,
            240 * TICKS_PER_DAY,
            to_micro(160),
            to_micro(240),
            1200,
        ),
        GrowthStage.ADULT: StageDefinition(
            GrowthStage.ADULT, 360 * TICKS_PER_DAY, to_micro(200), to_micro(336), 960
        ),
    }
)


def stage_definition(stage: GrowthStage | str) -> StageDefinition:
    return STAGE_DEFINITIONS[GrowthStage.from_value(stage)]


def next_stage(stage: GrowthStage) -> GrowthStage | None:
    index = stage.rank + 1
    if index >= len(_STAGE_ORDER):
        return None
    return _STAGE_ORDER[index]


__all__ = [
    "BATTLE_STAT_NAMES",
    "GrowthRate",
    "GrowthStage",
    "STAGE_DEFINITIONS",
    "SUBSTAGE_COUNT",
    "StageDefinition",
    "next_stage",
    "stage_definition",
]
