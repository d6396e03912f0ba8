"""Growth stage arithmetic and stage transitions."""

from __future__ import annotations

from dataclasses import replace

from .clock import TICKS_PER_MONTH
from .models.content import DEFAULT_SPECIES, Species
from .models.pet import Growth, Pet
from .models.progression import (
    STAGE_DEFINITIONS,
    SUBSTAGE_COUNT,
    GrowthStage,
    next_stage,
)

_STAGES_BY_AGE = tuple(
    sorted(STAGE_DEFINITIONS.values(), key=lambda definition: definition.min_age_ticks)
)


def stage_from_age(age_ticks: int) -> GrowthStage:
    """Return the growth stage for an age. A pure function of ``age_ticks``."""

    stage = _STAGES_BY_AGE[0].stage
    for definition in _STAGES_BY_AGE:
        if age_ticks >= definition.min_age_ticks:
            stage = definition.stage
        else:
            break
    return stage


def substage_length(stage: GrowthStage) -> int:
    following = next_stage(stage)
    if following is None:
        return TICKS_PER_MONTH
    duration = (
        STAGE_DEFINITIONS[following].min_age_ticks
        - STAGE_DEFINITIONS[stage].min_age_ticks
    )
    return max(1, duration // SUBSTAGE_COUNT)


def substage_for_age(age_ticks: int, stage: GrowthStage | None = None) -> int:
    stage = stage or stage_from_age(age_ticks)
    into_stage = max(0, age_ticks - STAGE_DEFINITIONS[stage].min_age_ticks)
    return max(1, min(SUBSTAGE_COUNT, 1 + into_stage // substage_length(stage)))


def ticks_until_next_stage(age_ticks: int) -> int | None:
    following = next_stage(stage_from_age(age_ticks))
    if following is None:
        return None
    return STAGE_DEFINITIONS[following].min_age_ticks - age_ticks


def apply_stage_transition(
    pet: Pet, new_stage: GrowthStage, species: Species | None = None
) -> Pet:
    """Move ``pet`` forward to ``new_stage``, granting one set of gains per step.

    Raised maxima come from the stage tables; current values are kept, so the
    pet has room to grow into its new ceilings.
    """

    if new_stage <= pet.stage:
        return pet
    gains = (species or DEFAULT_SPECIES).stage_gains()
    battle_stats = pet.battle_stats
    stage = pet.stage
    while stage < new_stage:
        stage = next_stage(stage)
        battle_stats = battle_stats.with_gains(gains)
    growth = replace(pet.growth, stage=new_stage)
    return replace(pet, growth=growth, battle_stats=battle_stats)


def advance_growth(pet: Pet, species: Species | None = None) -> Pet:
    age = pet.growth.age_ticks + 1
    stage = stage_from_age(age)
    if stage > pet.stage:
        pet = apply_stage_transition(pet, stage, species)
    stage = pet.stage
    growth = Growth(
        stage=stage,
        substage=substage_for_age(age, stage),
        birth_time_ms=pet.growth.birth_time_ms,
        age_ticks=age,
    )
    return replace(pet, growth=growth)


__all__ = [
    "advance_growth",
    "apply_stage_transition",
    "stage_from_age",
    "substage_for_age",
    "substage_length",
    "ticks_until_next_stage",
]
