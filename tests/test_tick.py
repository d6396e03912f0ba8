"""Tests for the game tick: save points, persisted randomness and resets."""

from __future__ import annotations

import math
from dataclasses import replace

from petsim.clock import TICK_DURATION_MS
from petsim.models import GameState, GrowthStage, SleepActivity, Waste
from petsim.registry import ContentRegistry
from petsim.rng import ScriptedRandom, SeededRandom
from petsim.sleep import sleep_quota_met
from petsim.tick import StageTransition, process_game_tick

from conftest import START_MS


def test_tick_moves_save_point(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet())
    result = process_game_tick(state, registry, ScriptedRandom([0.5]))
    assert result.state.total_ticks == 1
    assert result.state.last_save_time_ms == START_MS + TICK_DURATION_MS
    assert result.state.pet.growth.age_ticks == 1


def test_tick_without_pet_only_advances_time(registry: ContentRegistry) -> None:
    result = process_game_tick(GameState(last_save_time_ms=START_MS), registry)
    assert result.state.pet is None
    assert result.state.total_ticks == 1
    assert result.events == ()


def test_persisted_generator_drives_waste(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet(waste=Waste(count=0, ticks_until_next=1)), rng_seed=77)
    expected = SeededRandom(77)
    interval = 240 + math.floor(expected.next() * 240)

    result = process_game_tick(state, registry)
    assert result.state.pet.waste == Waste(count=1, ticks_until_next=interval)
    assert result.state.rng_seed == 77
    assert result.state.rng_state == expected.getstate()


def test_daily_sleep_counter_resets_at_midnight(
    make_pet, make_state, registry: ContentRegistry
) -> None:
    # Midnight falls on the tenth tick.
    state = make_state(
        make_pet(activity=SleepActivity(started_at_ms=START_MS), sleep_ticks_today=100),
        last_save_time_ms=START_MS + 2_750 * TICK_DURATION_MS,
    )
    rng = ScriptedRandom([0.5])
    for _ in range(9):
        state = process_game_tick(state, registry, rng).state
    assert state.pet.sleep_ticks_today == 109

    for _ in range(11):
        state = process_game_tick(state, registry, rng).state
    assert state.pet.sleep_ticks_today == 11


def test_stage_transition_is_reported(make_pet, make_state, registry: ContentRegistry) -> None:
    pet = make_pet()
    pet = replace(pet, growth=replace(pet.growth, age_ticks=172_799))
    result = process_game_tick(make_state(pet), registry, ScriptedRandom([0.5]))
    assert result.events == (
        StageTransition(GrowthStage.BABY, GrowthStage.CHILD, 172_800),
    )
    assert result.state.pet.battle_stats.endurance == 5


def test_sleep_quota_tracks_stage_minimum(make_pet) -> None:
    assert not sleep_quota_met(make_pet(sleep_ticks_today=1_919))
    assert sleep_quota_met(make_pet(sleep_ticks_today=1_920))
    assert sleep_quota_met(make_pet(GrowthStage.ADULT, sleep_ticks_today=960))
