"""Tests for stage arithmetic and stage transitions."""

from __future__ import annotations

from dataclasses import replace

import pytest

from petsim.clock import TICKS_PER_MONTH
from petsim.growth import (
    advance_growth,
    apply_stage_transition,
    stage_from_age,
    substage_for_age,
    ticks_until_next_stage,
)
from petsim.models import BattleStats, GrowthStage
from petsim.registry import ContentRegistry
from petsim.rng import ScriptedRandom
from petsim.tick import advance_one_tick


@pytest.mark.parametrize(
    ("age", "stage"),
    [
        (0, GrowthStage.BABY),
        (172_799, GrowthStage.BABY),
        (172_800, GrowthStage.CHILD),
        (432_000, GrowthStage.TEEN),
        (691_200, GrowthStage.YOUNG_ADULT),
        (1_036_800, GrowthStage.ADULT),
        (5_000_000, GrowthStage.ADULT),
    ],
)
def test_stage_from_age(age: int, stage: GrowthStage) -> None:
    assert stage_from_age(age) is stage
    assert stage_from_age(age) is stage_from_age(age)


def test_substages_split_each_stage_in_three() -> None:
    assert substage_for_age(0) == 1
    assert substage_for_age(57_599) == 1
    assert substage_for_age(57_600) == 2
    assert substage_for_age(172_799) == 3


def test_adult_substages_advance_monthly() -> None:
    assert substage_for_age(1_036_800) == 1
    assert substage_for_age(1_036_800 + TICKS_PER_MONTH) == 2
    assert substage_for_age(1_036_800 + 10 * TICKS_PER_MONTH) == 3


def test_ticks_until_next_stage() -> None:
    assert ticks_until_next_stage(172_790) == 10
    assert ticks_until_next_stage(1_036_800) is None


def test_advance_growth_crosses_stage_once(make_pet, registry: ContentRegistry) -> None:
    pet = make_pet()
    pet = replace(pet, growth=replace(pet.growth, age_ticks=172_799, substage=3))
    species = registry.species("sproutling")

    grown = advance_growth(pet, species)
    assert grown.stage is GrowthStage.CHILD
    assert grown.growth.age_ticks == 172_800
    assert grown.growth.substage == 1
    assert grown.battle_stats == BattleStats(
        strength=3, endurance=5, agility=1, precision=3, fortitude=3, cunning=1
    )

    again = advance_growth(grown, species)
    assert again.battle_stats == grown.battle_stats


def test_skipped_stages_each_grant_gains(make_pet, registry: ContentRegistry) -> None:
    pet = apply_stage_transition(make_pet(), GrowthStage.TEEN, registry.species("emberfox"))
    assert pet.stage is GrowthStage.TEEN
    assert pet.battle_stats.strength == 10
    assert pet.battle_stats.endurance == 2


def test_stage_transition_keeps_current_values(make_pet) -> None:
    pet = make_pet()
    pet = replace(pet, growth=replace(pet.growth, age_ticks=172_799))
    grown = advance_one_tick(pet, ScriptedRandom([0.5]))
    assert grown.stage is GrowthStage.CHILD
    # Care and energy keep their values; only the ceilings move.
    assert grown.care.satiety == pet.care.satiety - 50
    assert grown.energy == pet.energy
