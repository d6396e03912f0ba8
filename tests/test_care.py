"""Tests for care decay, waste, sickness and the care-life pool."""

from __future__ import annotations

from dataclasses import replace

from petsim.care import (
    adjust_care_life,
    advance_sickness,
    advance_waste,
    apply_item,
    care_life_delta,
    care_life_max,
    care_stat_max,
    decay_care,
)
from petsim.energy import energy_cap_for_stage
from petsim.models import CareStats, GrowthStage, HealthState, SleepActivity, Waste
from petsim.models.pet import MAX_WASTE_COUNT, SICKNESS_COUNTDOWN_TICKS
from petsim.registry import ContentRegistry
from petsim.rng import ScriptedRandom
from petsim.tick import advance_one_tick


FULL = CareStats.full(50_000)


def test_awake_and_asleep_decay() -> None:
    assert decay_care(FULL, sleeping=False, waste_count=0) == CareStats(49_950, 49_950, 49_950)
    assert decay_care(FULL, sleeping=True, waste_count=0) == CareStats(49_975, 49_975, 49_975)


def test_waste_speeds_up_happiness_decay() -> None:
    assert decay_care(FULL, sleeping=False, waste_count=3).happiness == 50_000 - 75
    assert decay_care(FULL, sleeping=False, waste_count=5).happiness == 50_000 - 100
    assert decay_care(FULL, sleeping=False, waste_count=9).happiness == 50_000 - 150
    assert decay_care(FULL, sleeping=False, waste_count=9).satiety == 50_000 - 50


def test_decay_stops_at_zero() -> None:
    nearly_empty = CareStats(10, 0, 30)
    assert decay_care(nearly_empty, sleeping=False, waste_count=0) == CareStats(0, 0, 0)


def test_waste_event_reschedules_from_rng() -> None:
    waste = advance_waste(Waste(count=0, ticks_until_next=1), ScriptedRandom([0.5]))
    assert waste == Waste(count=1, ticks_until_next=360)

    waiting = advance_waste(Waste(count=2, ticks_until_next=10), ScriptedRandom([0.5]))
    assert waiting == Waste(count=2, ticks_until_next=9)


def test_waste_count_is_capped() -> None:
    waste = advance_waste(
        Waste(count=MAX_WASTE_COUNT, ticks_until_next=1), ScriptedRandom([0.0])
    )
    assert waste.count == MAX_WASTE_COUNT


def test_sickness_countdown_scales_with_waste() -> None:
    assert advance_sickness(HealthState.HEALTHY, 100, 3) == (HealthState.HEALTHY, 94)
    assert advance_sickness(HealthState.HEALTHY, 100, 0) == (HealthState.HEALTHY, 100)
    assert advance_sickness(HealthState.HEALTHY, 4, 2) == (
        HealthState.SICK,
        SICKNESS_COUNTDOWN_TICKS,
    )


def test_care_life_drains_with_empty_stats() -> None:
    stage = GrowthStage.BABY
    healthy = HealthState.HEALTHY
    assert care_life_delta(CareStats(0, 0, 0), stage, 0, healthy) == -50
    assert care_life_delta(CareStats(0, 0, 5_000), stage, 0, healthy) == -25
    assert care_life_delta(CareStats(0, 40_000, 40_000), stage, 0, healthy) == -8
    assert care_life_delta(CareStats(0, 40_000, 40_000), stage, 7, HealthState.SICK) == -36


def test_care_life_recovers_when_well_cared_for() -> None:
    stage = GrowthStage.BABY
    healthy = HealthState.HEALTHY
    assert care_life_delta(FULL, stage, 0, healthy) == 25
    assert care_life_delta(CareStats(40_000, 50_000, 50_000), stage, 0, healthy) == 16
    assert care_life_delta(CareStats(25_000, 50_000, 50_000), stage, 0, healthy) == 8
    assert care_life_delta(CareStats(10_000, 50_000, 50_000), stage, 0, healthy) == 0


def test_care_life_is_clamped() -> None:
    maximum = care_life_max(GrowthStage.BABY)
    assert adjust_care_life(maximum, FULL, GrowthStage.BABY, 0, HealthState.HEALTHY) == maximum
    assert adjust_care_life(20, CareStats(0, 0, 0), GrowthStage.BABY, 0, HealthState.HEALTHY) == 0


def test_stats_stay_in_bounds_over_long_neglect(make_pet) -> None:
    pet = make_pet()
    rng = ScriptedRandom([0.0, 0.99, 0.4])
    for _ in range(5_000):
        pet = advance_one_tick(pet, rng)
        care_max = care_stat_max(pet.stage)
        assert all(0 <= value <= care_max for value in pet.care.values())
        assert 0 <= pet.energy <= energy_cap_for_stage(pet.stage)
        assert 0 <= pet.care_life <= care_life_max(pet.stage)
        assert 0 <= pet.waste.count <= MAX_WASTE_COUNT

    assert pet.care == CareStats(0, 0, 0)
    assert pet.care_life == 0
    assert pet.waste.count > 0


def test_sleeping_pet_decays_slower(make_pet) -> None:
    awake = advance_one_tick(make_pet(), ScriptedRandom([0.5]))
    asleep = advance_one_tick(
        make_pet(activity=SleepActivity(started_at_ms=0)), ScriptedRandom([0.5])
    )
    assert awake.care.satiety == 49_950
    assert asleep.care.satiety == 49_975
    assert asleep.sleep_ticks_today == 1
    assert awake.sleep_ticks_today == 0


def test_items_restore_care_and_cure(make_pet, registry: ContentRegistry) -> None:
    pet = make_pet(
        care=CareStats(10_000, 10_000, 49_000),
        health=HealthState.SICK,
        sick_countdown=0,
    )
    fed = apply_item(pet, registry.item("apple"))
    assert fed.care == CareStats(25_000, 10_000, 50_000)

    cured = apply_item(pet, registry.item("basic_medicine"))
    assert cured.health is HealthState.HEALTHY
    assert cured.sick_countdown == SICKNESS_COUNTDOWN_TICKS

    played = apply_item(replace(pet, energy=3_000), registry.item("ball"))
    assert played.energy == 0
