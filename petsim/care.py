"""Care stat decay, waste, sickness and the care-life pool."""

from __future__ import annotations

import math
from dataclasses import replace

from .clock import to_display, to_micro
from .energy import restore_energy
from .models.content import ItemDef
from .models.pet import (
    MAX_WASTE_COUNT,
    SICKNESS_COUNTDOWN_TICKS,
    WASTE_INTERVAL_MIN_TICKS,
    WASTE_INTERVAL_SPREAD_TICKS,
    CareStats,
    HealthState,
    Pet,
    Waste,
)
from .models.progression import GrowthStage, stage_definition
from .rng import RandomSource

# Micro points lost per tick by each care stat.
CARE_DECAY_AWAKE = 50
CARE_DECAY_SLEEPING = 25

# (minimum waste count, happiness decay multiplier), highest first.
WASTE_HAPPINESS_MULTIPLIERS: tuple[tuple[int, float], ...] = (
    (7, 3.0),
    (5, 2.0),
    (3, 1.5),
)

HIGH_WASTE_THRESHOLD = 7
SICKNESS_RATE_PER_WASTE = 2

# Care-life drain per tick keyed by how many care stats display as zero.
CARE_LIFE_DRAIN_BY_EMPTY_STATS = {0: 0, 1: 8, 2: 25, 3: 50}
CARE_LIFE_DRAIN_HIGH_WASTE = 8
CARE_LIFE_DRAIN_SICK = 20
CARE_LIFE_DRAIN_INJURED = 10

# (minimum lowest-care percentage, recovery per tick), highest first.
CARE_LIFE_RECOVERY: tuple[tuple[int, int], ...] = (
    (100, 25),
    (75, 16),
    (50, 8),
)


def care_stat_max(stage: GrowthStage) -> int:
    return stage_definition(stage).care_stat_max


def care_life_max(stage: GrowthStage) -> int:
    return stage_definition(stage).care_life_max


def waste_happiness_multiplier(waste_count: int) -> float:
    for threshold, multiplier in WASTE_HAPPINESS_MULTIPLIERS:
        if waste_count >= threshold:
            return multiplier
    return 1.0


def decay_care(care: CareStats, *, sleeping: bool, waste_count: int) -> CareStats:
    base = CARE_DECAY_SLEEPING if sleeping else CARE_DECAY_AWAKE
    happiness_loss = math.floor(base * waste_happiness_multiplier(waste_count))
    return CareStats(
        satiety=max(0, care.satiety - base),
        hydration=max(0, care.hydration - base),
        happiness=max(0, care.happiness - happiness_loss),
    )


def next_waste_interval(rng: RandomSource) -> int:
    return WASTE_INTERVAL_MIN_TICKS + math.floor(rng.next() * WASTE_INTERVAL_SPREAD_TICKS)


def advance_waste(waste: Waste, rng: RandomSource) -> Waste:
    """Count down to the next waste event; the only random draw in a pet tick."""

    remaining = waste.ticks_until_next - 1
    if remaining > 0:
        return Waste(count=waste.count, ticks_until_next=remaining)
    return Waste(
        count=min(MAX_WASTE_COUNT, waste.count + 1),
        ticks_until_next=next_waste_interval(rng),
    )


def advance_sickness(
    health: HealthState, countdown: int, waste_count: int
) -> tuple[HealthState, int]:
    countdown = max(0, countdown - SICKNESS_RATE_PER_WASTE * waste_count)
    if countdown == 0 and health is HealthState.HEALTHY:
        return HealthState.SICK, SICKNESS_COUNTDOWN_TICKS
    return health, countdown


def care_life_delta(
    care: CareStats, stage: GrowthStage, waste_count: int, health: HealthState
) -> int:
    empty = sum(1 for value in care.values() if to_display(value) == 0)
    drain = CARE_LIFE_DRAIN_BY_EMPTY_STATS[empty]
    if waste_count >= HIGH_WASTE_THRESHOLD:
        drain += CARE_LIFE_DRAIN_HIGH_WASTE
    if health is HealthState.SICK:
        drain += CARE_LIFE_DRAIN_SICK
    elif health is HealthState.INJURED:
        drain += CARE_LIFE_DRAIN_INJURED
    if drain:
        return -drain

    maximum = care_stat_max(stage)
    lowest_percent = min(care.values()) * 100 // maximum if maximum else 0
    for threshold, recovery in CARE_LIFE_RECOVERY:
        if lowest_percent >= threshold:
            return recovery
    return 0


def adjust_care_life(
    care_life: int,
    care: CareStats,
    stage: GrowthStage,
    waste_count: int,
    health: HealthState,
) -> int:
    value = care_life + care_life_delta(care, stage, waste_count, health)
    return max(0, min(care_life_max(stage), value))


def clamp_care(care: CareStats, stage: GrowthStage) -> CareStats:
    maximum = care_stat_max(stage)
    return CareStats(
        satiety=max(0, min(maximum, care.satiety)),
        hydration=max(0, min(maximum, care.hydration)),
        happiness=max(0, min(maximum, care.happiness)),
    )


def apply_item(pet: Pet, item: ItemDef) -> Pet:
    """Apply an item's care effects to ``pet`` and return the updated pet."""

    care = clamp_care(
        CareStats(
            satiety=pet.care.satiety + to_micro(item.satiety),
            hydration=pet.care.hydration + to_micro(item.hydration),
            happiness=pet.care.happiness + to_micro(item.happiness),
        ),
        pet.stage,
    )
    energy = restore_energy(pet.energy, to_micro(item.energy), pet.stage)
    health = pet.health
    sick_countdown = pet.sick_countdown
    if item.cures and health is not HealthState.HEALTHY:
        health = HealthState.HEALTHY
        sick_countdown = SICKNESS_COUNTDOWN_TICKS
    return replace(
        pet, care=care, energy=energy, health=health, sick_countdown=sick_countdown
    )


def clean_waste(pet: Pet) -> Pet:
    return replace(pet, waste=replace(pet.waste, count=0))


__all__ = [
    "CARE_DECAY_AWAKE",
    "CARE_DECAY_SLEEPING",
    "adjust_care_life",
    "advance_sickness",
    "advance_waste",
    "apply_item",
    "care_life_delta",
    "care_life_max",
    "care_stat_max",
    "clamp_care",
    "clean_waste",
    "decay_care",
    "next_waste_interval",
    "waste_happiness_multiplier",
]
