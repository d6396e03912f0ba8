"""One-tick advancement of the pet and of the whole game state.

:func:`advance_one_tick` is the decay and growth engine. It is pure and
total, and the offline replayer calls it once per elapsed tick.
:func:`process_game_tick` wraps it with daily resets, activity countdowns
and activity completion, which is the unit both live play and the replayer
are built from.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Union

from .activities.exploration import (
    ExplorationResult,
    complete_exploration,
    exploration_finished,
    tick_exploration,
)
from .activities.training import TrainingResult, tick_training
from .activities.travel import TravelResult, complete_travel, tick_travel, travel_finished
from .care import adjust_care_life, advance_sickness, advance_waste, decay_care
from .clock import TICK_DURATION_MS, crosses_day_boundary
from .energy import apply_energy_regen
from .growth import advance_growth
from .models.content import ObjectiveType, Species
from .models.pet import Pet
from .models.progression import GrowthStage
from .models.state import GameState
from .quests import update_quest_progress
from .registry import ContentRegistry
from .rng import RandomSource, SeededRandom, derive_seed
from .sleep import count_sleep_tick, reset_daily_sleep


@dataclass(frozen=True, slots=True)
class StageTransition:
    previous: GrowthStage
    stage: GrowthStage
    age_ticks: int

    def to_mapping(self) -> Dict[str, object]:
        return {
            "previous": self.previous.value,
            "stage": self.stage.value,
            "age_ticks": self.age_ticks,
        }


TickEvent = Union[StageTransition, TrainingResult, ExplorationResult, TravelResult]


@dataclass(frozen=True, slots=True)
class GameTickResult:
    state: GameState
    events: tuple[TickEvent, ...] = ()


def advance_one_tick(
    pet: Pet, rng: RandomSource, species: Species | None = None
) -> Pet:
    """Apply one tick of care decay, waste, sickness, energy and growth."""

    sleeping = pet.is_sleeping
    stage = pet.stage
    care = decay_care(pet.care, sleeping=sleeping, waste_count=pet.waste.count)
    waste = advance_waste(pet.waste, rng)
    health, sick_countdown = advance_sickness(pet.health, pet.sick_countdown, waste.count)
    care_life = adjust_care_life(pet.care_life, care, stage, waste.count, health)
    energy = apply_energy_regen(pet.energy, stage, sleeping)
    pet = replace(
        pet,
        care=care,
        waste=waste,
        health=health,
        sick_countdown=sick_countdown,
        care_life=care_life,
        energy=energy,
    )
    pet = count_sleep_tick(pet)
    return advance_growth(pet, species)


def game_rng(state: GameState) -> SeededRandom:
    """Rebuild the game's persisted random source."""

    seed = state.rng_seed
    if seed is None:
        seed = derive_seed(state.pet.id if state.pet is not None else "petsim")
    return SeededRandom(seed, state.rng_state)


def store_rng(state: GameState, rng: RandomSource) -> GameState:
    if not isinstance(rng, SeededRandom):
        return state
    return replace(state, rng_seed=rng.seed, rng_state=rng.getstate())


def advance_game(
    state: GameState,
    registry: ContentRegistry,
    rng: RandomSource,
    tick_time_ms: int,
) -> GameTickResult:
    """Advance ``state`` by one tick ending at ``tick_time_ms``.

    Does not touch ``last_save_time_ms``; callers decide when a save point
    has been reached.
    """

    tick_number = state.total_ticks + 1
    pet = state.pet
    if pet is None:
        return GameTickResult(replace(state, total_ticks=tick_number))

    events: list[TickEvent] = []
    if crosses_day_boundary(tick_time_ms - TICK_DURATION_MS, tick_time_ms):
        pet = reset_daily_sleep(pet)

    previous_stage = pet.stage
    pet = advance_one_tick(pet, rng, registry.species(pet.species_id))
    if pet.stage is not previous_stage:
        events.append(StageTransition(previous_stage, pet.stage, pet.growth.age_ticks))

    pet, training_result = tick_training(pet)
    pet = tick_exploration(pet)
    pet = tick_travel(pet)
    state = replace(state, pet=pet, total_ticks=tick_number)

    if training_result is not None:
        events.append(training_result)
        state = update_quest_progress(
            state, registry, ObjectiveType.TRAIN, training_result.facility_id
        )
    if exploration_finished(state.pet):
        state, exploration_result = complete_exploration(
            state, registry, rng.next(), tick_number
        )
        events.append(exploration_result)
    if travel_finished(state.pet):
        state, travel_result = complete_travel(state, registry)
        events.append(travel_result)

    return GameTickResult(state, tuple(events))


def process_game_tick(
    state: GameState, registry: ContentRegistry, rng: RandomSource | None = None
) -> GameTickResult:
    """Advance one live tick and move the save point forward by one tick.

    Without an explicit ``rng`` the game's persisted generator is used and
    its new position is written back into the returned state.
    """

    own_rng = rng is None
    source = game_rng(state) if own_rng else rng
    tick_time = state.last_save_time_ms + TICK_DURATION_MS
    result = advance_game(state, registry, source, tick_time)
    new_state = replace(result.state, last_save_time_ms=tick_time)
    if own_rng:
        new_state = store_rng(new_state, source)
    return GameTickResult(new_state, result.events)


__all__ = [
    "GameTickResult",
    "StageTransition",
    "TickEvent",
    "advance_game",
    "advance_one_tick",
    "game_rng",
    "process_game_tick",
    "store_rng",
]
