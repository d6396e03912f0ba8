"""Tests for training sessions: start, countdown, completion and refunds."""

from __future__ import annotations

from petsim import actions
from petsim.activities.training import (
    cancel_training,
    start_training,
    tick_training,
)
from petsim.clock import to_micro
from petsim.models import ActivityState, BattleStats, GrowthStage, TrainingActivity
from petsim.registry import ContentRegistry
from petsim.rng import ScriptedRandom
from petsim.tick import process_game_tick


def _half_done_training(**overrides) -> TrainingActivity:
    values = dict(
        facility_id="facility_strength",
        session_type="basic",
        primary_stat="strength",
        secondary_stat="endurance",
        primary_gain=1,
        secondary_gain=0,
        start_tick=0,
        duration_ticks=60,
        ticks_remaining=30,
        energy_cost=10,
    )
    values.update(overrides)
    return TrainingActivity(**values)


def test_start_spends_energy(make_pet, registry: ContentRegistry) -> None:
    facility = registry.facility("facility_strength")
    outcome = start_training(make_pet(), facility, "basic", now_tick=7)

    assert outcome.success
    assert outcome.pet.energy == 40_000
    assert outcome.pet.activity_state is ActivityState.TRAINING
    assert outcome.pet.active_training.ticks_remaining == 120
    assert outcome.pet.active_training.start_tick == 7


def test_start_checks_stage_and_energy(make_pet, registry: ContentRegistry) -> None:
    facility = registry.facility("facility_strength")

    baby = make_pet()
    outcome = start_training(baby, facility, "intensive", now_tick=0)
    assert not outcome.success
    assert "Child" in outcome.message
    assert outcome.pet is baby

    tired = make_pet(energy=5_000)
    outcome = start_training(tired, facility, "basic", now_tick=0)
    assert not outcome.success
    assert "energy" in outcome.message
    assert outcome.pet is tired


def test_unoffered_session_is_rejected(make_pet, registry: ContentRegistry) -> None:
    pet = make_pet(GrowthStage.TEEN)
    outcome = start_training(pet, registry.facility("facility_cunning"), "advanced", 0)
    assert not outcome.success


def test_training_completes_inside_its_last_tick(make_pet, registry: ContentRegistry) -> None:
    pet = start_training(
        make_pet(), registry.facility("facility_strength"), "basic", 0
    ).pet
    for _ in range(119):
        pet, result = tick_training(pet)
        assert result is None
    assert pet.active_training.ticks_remaining == 1

    pet, result = tick_training(pet)
    assert result is not None
    assert result.stat_gains == {"strength": 1}
    assert pet.activity_state is ActivityState.IDLE
    assert pet.battle_stats == BattleStats(strength=1)


def test_cancel_refunds_unspent_share(make_pet) -> None:
    pet = make_pet(energy=20_000, activity=_half_done_training())
    outcome = cancel_training(pet)

    assert outcome.success
    assert outcome.energy_refunded == to_micro(5)
    assert outcome.pet.energy == 25_000
    assert outcome.pet.activity_state is ActivityState.IDLE


def test_cancel_without_training_fails(make_pet) -> None:
    outcome = cancel_training(make_pet())
    assert not outcome.success
    assert outcome.energy_refunded == 0


def test_game_tick_completes_training_and_counts_quest(
    make_pet, make_state, registry: ContentRegistry
) -> None:
    state = make_state(make_pet(GrowthStage.CHILD))
    state = actions.accept_quest(state, registry, "warm_up").state
    result = actions.start_training(state, registry, "facility_strength", "basic")
    assert result.success
    state = result.state

    rng = ScriptedRandom([0.5])
    events = []
    for _ in range(120):
        tick = process_game_tick(state, registry, rng)
        state = tick.state
        events.extend(tick.events)

    assert len(events) == 1
    assert events[0].facility_id == "facility_strength"
    assert state.pet.activity_state is ActivityState.IDLE
    assert state.pet.battle_stats.strength == 1
    assert state.quest("warm_up").progress_for("train_strength") == 1


def test_training_facility_must_be_nearby(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet())
    result = actions.start_training(state, registry, "facility_agility", "basic")
    assert not result.success
    assert "Willowbrook" in result.message
    assert result.state is state
