"""Tests for travel between connected locations."""

from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType

from petsim import actions
from petsim.activities.travel import cancel_travel
from petsim.models import ActivityState, GrowthStage, SkillProgress, TravelActivity
from petsim.models.content import Requirements
from petsim.registry import ContentRegistry
from petsim.rng import ScriptedRandom
from petsim.tick import process_game_tick


def test_travel_arrives_after_route_ticks(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet())
    state = actions.accept_quest(state, registry, "first_steps").state
    result = actions.travel_to_location(state, registry, "meadow")
    assert result.success
    state = result.state
    assert state.pet.energy == 45_000
    assert state.pet.activity_state is ActivityState.TRAVELLING

    rng = ScriptedRandom([0.5])
    for _ in range(3):
        state = process_game_tick(state, registry, rng).state
    assert state.player.current_location_id == "home"

    tick = process_game_tick(state, registry, rng)
    state = tick.state
    (arrival,) = tick.events
    assert arrival.destination_id == "meadow"
    assert arrival.first_visit
    assert state.player.current_location_id == "meadow"
    assert state.player.visited_locations == ("home", "meadow")
    assert state.pet.activity_state is ActivityState.IDLE
    assert state.quest("first_steps").progress_for("visit_meadow") == 1


def test_terrain_modifier_raises_cost(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet(GrowthStage.CHILD), location="meadow")
    result = actions.travel_to_location(state, registry, "misty_woods")
    assert result.success
    assert result.state.pet.travel_state.energy_cost == 12
    assert result.state.pet.energy == 75_000 - 12_000


def test_locked_destination(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet(), location="meadow")
    result = actions.travel_to_location(state, registry, "misty_woods")
    assert not result.success
    assert "Child" in result.message
    assert result.state is state


def test_quest_gated_destination(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet(GrowthStage.TEEN), location="misty_woods")
    result = actions.travel_to_location(state, registry, "crystal_caves")
    assert not result.success
    assert "into_the_woods" in result.message


def test_unconnected_destination(make_pet, make_state, registry: ContentRegistry) -> None:
    state = make_state(make_pet())
    result = actions.travel_to_location(state, registry, "whispering_coast")
    assert not result.success
    assert "no path" in result.message

    assert not actions.travel_to_location(state, registry, "home").success
    assert not actions.travel_to_location(state, registry, "atlantis").success


def test_cancel_refunds_distance_not_covered(make_pet) -> None:
    pet = make_pet(
        GrowthStage.CHILD,
        energy=30_000,
        activity=TravelActivity(
            origin_id="meadow",
            destination_id="misty_woods",
            start_tick=0,
            duration_ticks=8,
            ticks_remaining=2,
            energy_cost=12,
        ),
    )
    outcome = cancel_travel(pet)
    assert outcome.success
    assert outcome.energy_refunded == 3_000
    assert outcome.pet.energy == 33_000
    assert outcome.pet.travel_state is None


def _with_scouting_gate(registry: ContentRegistry, level: int) -> ContentRegistry:
    town = replace(
        registry.require_location("willowbrook"),
        requirements=Requirements(min_skill_levels={"scouting": level}),
    )
    return replace(
        registry, locations=MappingProxyType({**registry.locations, town.id: town})
    )


def _with_scouting_level(state, level: int):
    skills = {**state.player.skills, "scouting": SkillProgress(level=level)}
    return replace(state, player=replace(state.player, skills=skills))


def test_skill_gated_destination_uses_player_skills(
    make_pet, make_state, registry: ContentRegistry
) -> None:
    gated = _with_scouting_gate(registry, 2)
    state = make_state(make_pet(), location="meadow")

    novice = actions.travel_to_location(state, gated, "willowbrook")
    assert not novice.success
    assert "scouting level 2" in novice.message

    scout = actions.travel_to_location(_with_scouting_level(state, 9), gated, "willowbrook")
    assert scout.success
    assert scout.state.pet.travel_state.destination_id == "willowbrook"

    exact = actions.travel_to_location(_with_scouting_level(state, 2), gated, "willowbrook")
    assert exact.success


def test_unconnected_destination_suggests_first_stop(
    make_pet, make_state, registry: ContentRegistry
) -> None:
    state = make_state(make_pet())
    result = actions.travel_to_location(state, registry, "whispering_coast")
    assert not result.success
    assert result.message.endswith("Try going via Sunny Meadow.")
    assert result.state is state

    busy = actions.travel_to_location(state, registry, "meadow").state
    result = actions.travel_to_location(busy, registry, "whispering_coast")
    assert not result.success
    assert "Try going via" not in result.message
