"""Tests for player actions: adoption, exclusivity, sleep, care and quests."""

from __future__ import annotations

from dataclasses import replace

from petsim import actions
from petsim.activities.gating import can_start_activity
from petsim.models import (
    ActivityState,
    CareStats,
    GameState,
    GrowthStage,
    HealthState,
    PlayerState,
    QuestState,
    Waste,
)
from petsim.registry import ContentRegistry

NOW_MS = 1_700_000_000_000


def test_adopt_creates_full_baby(registry: ContentRegistry) -> None:
    result = actions.adopt_pet(GameState(), registry, " Mochi ", "sproutling", NOW_MS)
    assert result.success
    state = result.state
    pet = state.pet
    assert pet.name == "Mochi"
    assert pet.id == f"sproutling-{NOW_MS}"
    assert pet.stage is GrowthStage.BABY
    assert pet.care == CareStats(50_000, 50_000, 50_000)
    assert pet.energy == 50_000
    assert pet.activity_state is ActivityState.IDLE
    assert state.last_save_time_ms == NOW_MS
    assert state.rng_seed is not None
    assert len(state.player.skills) == 7

    again = actions.adopt_pet(state, registry, "Other", "sproutling", NOW_MS)
    assert not again.success
    assert again.state is state


def test_adopt_rejects_bad_input(registry: ContentRegistry) -> None:
    empty = GameState()
    assert not actions.adopt_pet(empty, registry, "  ", "sproutling", NOW_MS).success
    assert not actions.adopt_pet(empty, registry, "Mochi", "dragon", NOW_MS).success


def test_actions_without_pet_fail(registry: ContentRegistry) -> None:
    state = GameState()
    assert not actions.start_training(state, registry, "facility_strength", "basic").success
    assert not actions.start_exploration(state, registry, "foraging").success
    assert not actions.travel_to_location(state, registry, "meadow").success
    assert not actions.sleep_pet(state, NOW_MS).success
    assert not actions.cancel_training(state).success
    assert not actions.clean_pet(state).success


def test_only_one_activity_at_a_time(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet())
    training = actions.start_training(state, registry, "facility_strength", "basic").state

    for attempt in (
        actions.start_training(training, registry, "facility_endurance", "basic"),
        actions.travel_to_location(training, registry, "meadow"),
        actions.sleep_pet(training, NOW_MS),
        actions.cancel_exploration(training),
        actions.cancel_travel(training),
    ):
        assert not attempt.success
        assert attempt.state is training
    assert training.pet.activity_state is ActivityState.TRAINING


def test_gate_reasons(make_pet) -> None:
    assert can_start_activity(make_pet(), ActivityState.TRAINING).allowed
    assert not can_start_activity(make_pet(), ActivityState.IDLE).allowed
    assert not can_start_activity(None, ActivityState.TRAINING).allowed


def test_sleep_and_wake(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet())
    asleep = actions.sleep_pet(state, NOW_MS)
    assert asleep.success
    assert asleep.state.pet.sleep_start_ms == NOW_MS

    blocked = actions.start_training(asleep.state, registry, "facility_strength", "basic")
    assert not blocked.success
    assert "asleep" in blocked.message
    assert not actions.sleep_pet(asleep.state, NOW_MS).success
    assert not actions.feed_pet(asleep.state, registry, "apple").success

    awake = actions.wake_pet(asleep.state)
    assert awake.success
    assert awake.state.pet.activity_state is ActivityState.IDLE
    assert not actions.wake_pet(awake.state).success


def test_feeding_uses_inventory(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(
        make_pet(care=CareStats(10_000, 10_000, 10_000)),
        player=PlayerState(inventory={"apple": 2, "fresh_water": 1}),
    )
    fed = actions.feed_pet(state, registry, "apple")
    assert fed.success
    assert fed.state.pet.care.satiety == 25_000
    assert fed.state.player.inventory == {"apple": 1, "fresh_water": 1}

    watered = actions.water_pet(fed.state, registry, "fresh_water")
    assert watered.success
    assert watered.state.pet.care.hydration == 30_000
    assert "fresh_water" not in watered.state.player.inventory

    assert not actions.feed_pet(state, registry, "fresh_water").success
    assert not actions.play_with_pet(state, registry, "ball").success
    assert not actions.feed_pet(state, registry, "cake").success


def test_medicine_and_cleaning(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(
        make_pet(health=HealthState.SICK, waste=Waste(count=4, ticks_until_next=100)),
        player=PlayerState(inventory={"basic_medicine": 1}),
    )
    treated = actions.give_medicine(state, registry, "basic_medicine")
    assert treated.success
    assert treated.state.pet.health is HealthState.HEALTHY

    cleaned = actions.clean_pet(treated.state)
    assert cleaned.success
    assert cleaned.state.pet.waste == Waste(count=0, ticks_until_next=100)
    assert not actions.clean_pet(cleaned.state).success


def test_quest_lifecycle(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet())
    locked = actions.accept_quest(state, registry, "into_the_woods")
    assert not locked.success

    state = actions.accept_quest(state, registry, "first_steps").state
    assert not actions.accept_quest(state, registry, "first_steps").success
    assert not actions.turn_in_quest(state, registry, "first_steps").success

    finished = replace(
        state.quest("first_steps"),
        objective_progress={"visit_meadow": 1, "forage_once": 1},
    )
    state = replace(state, quests=(finished,))
    done = actions.turn_in_quest(state, registry, "first_steps")
    assert done.success
    assert done.state.player.currency == 50
    assert done.state.player.item_count("apple") == 2
    assert done.state.quest("first_steps").state is QuestState.COMPLETED
    assert "first_steps" in done.state.completed_quest_ids()
    assert not actions.turn_in_quest(done.state, registry, "first_steps").success
