"""Player-triggered actions.

Every action takes a :class:`GameState` and returns an :class:`ActionResult`.
Rejections are ordinary results with ``success=False`` and the input state
returned untouched; they are expected and only logged at debug level.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from .activities import exploration, training, travel
from .care import apply_item, care_life_max, care_stat_max, clean_waste
from .config import SimConfig
from .energy import energy_cap_for_stage
from .models.content import ItemCategory
from .models.pet import ActivityState, CareStats, Growth, Pet
from .models.progression import GrowthStage
from .models.state import GameState, QuestProgress, QuestState
from .quests import complete_quest, objectives_complete
from .registry import ContentRegistry
from .results import ActionResult, CancelOutcome, PetOutcome
from .rng import derive_seed
from .skills import initial_skills
from .sleep import put_to_sleep, wake_up
from .world import plan_route

log = logging.getLogger(__name__)


def _reject(state: GameState, message: str) -> ActionResult:
    log.debug("Action rejected: %s", message)
    return ActionResult.fail(state, message)


def _from_outcome(state: GameState, outcome: PetOutcome | CancelOutcome) -> ActionResult:
    if not outcome.success:
        return _reject(state, outcome.message)
    return ActionResult.ok(replace(state, pet=outcome.pet), outcome.message)


def adopt_pet(
    state: GameState,
    registry: ContentRegistry,
    name: str,
    species_id: str,
    now_ms: int,
    *,
    pet_id: str | None = None,
    seed: int | None = None,
    config: SimConfig | None = None,
) -> ActionResult:
    """Create a baby pet with full stats and start the game clock.

    The game's random seed comes from ``seed``, then ``config.rng_seed``,
    then any seed already on ``state``, and finally from the pet id.
    """

    if state.pet is not None:
        return _reject(state, f"You already have {state.pet.name}.")
    name = (name or "").strip()
    if not name:
        return _reject(state, "Your pet needs a name.")
    if registry.species(species_id) is None:
        return _reject(state, f"Unknown species {species_id!r}.")

    stage = GrowthStage.BABY
    pet_id = pet_id or f"{species_id}-{int(now_ms)}"
    pet = Pet(
        id=pet_id,
        name=name,
        species_id=species_id,
        growth=Growth(stage=stage, substage=1, birth_time_ms=int(now_ms), age_ticks=0),
        care=CareStats.full(care_stat_max(stage)),
        energy=energy_cap_for_stage(stage),
        care_life=care_life_max(stage),
    )
    player = state.player
    if not player.skills:
        player = replace(player, skills=initial_skills())
    if seed is None and config is not None:
        seed = config.rng_seed
    if seed is None:
        seed = state.rng_seed if state.rng_seed is not None else derive_seed(pet_id)
    new_state = replace(
        state,
        pet=pet,
        player=player,
        last_save_time_ms=max(state.last_save_time_ms, int(now_ms)),
        rng_seed=seed,
        rng_state=None,
    )
    log.info("Adopted %s the %s", name, species_id)
    return ActionResult.ok(new_state, f"Welcome home, {name}!")


# --- training ---------------------------------------------------------------


def start_training(
    state: GameState, registry: ContentRegistry, facility_id: str, session_type: str
) -> ActionResult:
    if state.pet is None:
        return _reject(state, "You don't have a pet yet.")
    facility = registry.facility(facility_id)
    if facility is None:
        return _reject(state, f"Unknown facility {facility_id!r}.")
    housed_at = registry.location_for_facility(facility.id)
    if housed_at is not None and housed_at.id != state.player.current_location_id:
        return _reject(state, f"{facility.name} is in {housed_at.name}.")
    outcome = training.start_training(state.pet, facility, session_type, state.total_ticks)
    return _from_outcome(state, outcome)


def cancel_training(state: GameState) -> ActionResult:
    return _from_outcome(state, training.cancel_training(state.pet))


# --- exploration --------------------------------------------------------------


def start_exploration(
    state: GameState,
    registry: ContentRegistry,
    activity_id: str,
    location_id: str | None = None,
) -> ActionResult:
    if state.pet is None:
        return _reject(state, "You don't have a pet yet.")
    location_id = location_id or state.player.current_location_id
    location = registry.location(location_id)
    if location is None:
        return _reject(state, f"Unknown location {location_id!r}.")
    if location.id != state.player.current_location_id:
        return _reject(state, f"Travel to {location.name} first.")
    activity = registry.activity(activity_id)
    if activity is None:
        return _reject(state, f"Unknown activity {activity_id!r}.")
    outcome = exploration.start_exploration(
        state.pet,
        location,
        activity,
        state.total_ticks,
        skill_levels=state.player.skill_levels(),
        completed_quests=state.completed_quest_ids(),
    )
    return _from_outcome(state, outcome)


def cancel_exploration(state: GameState) -> ActionResult:
    return _from_outcome(state, exploration.cancel_exploration(state.pet))


# --- travel -----------------------------------------------------------------


def travel_to_location(
    state: GameState, registry: ContentRegistry, destination_id: str
) -> ActionResult:
    """Set off for a connected location; zero-length routes arrive at once.

    Only direct connections can be travelled. When the destination is further
    away, the rejection names the first stop of the cheapest route.
    """

    if state.pet is None:
        return _reject(state, "You don't have a pet yet.")
    origin = registry.location(state.player.current_location_id)
    if origin is None:
        return _reject(state, f"Unknown location {state.player.current_location_id!r}.")
    destination = registry.location(destination_id)
    if destination is None:
        return _reject(state, f"Unknown location {destination_id!r}.")
    outcome = travel.start_travel(
        state.pet,
        origin,
        destination,
        state.total_ticks,
        skill_levels=state.player.skill_levels(),
        completed_quests=state.completed_quest_ids(),
    )
    if (
        not outcome.success
        and state.pet.activity_state is ActivityState.IDLE
        and origin.connection_to(destination.id) is None
    ):
        route = plan_route(registry, origin.id, destination.id)
        if route is not None and route.legs > 1:
            via = registry.require_location(route.stops[1])
            return _reject(state, f"{outcome.message} Try going via {via.name}.")
    result = _from_outcome(state, outcome)
    if result.success and travel.travel_finished(result.state.pet):
        arrived, _ = travel.complete_travel(result.state, registry)
        return ActionResult.ok(arrived, f"Arrived at {destination.name}.")
    return result


def cancel_travel(state: GameState) -> ActionResult:
    return _from_outcome(state, travel.cancel_travel(state.pet))


# --- sleep ------------------------------------------------------------------


def sleep_pet(state: GameState, now_ms: int) -> ActionResult:
    if state.pet is None:
        return _reject(state, "You don't have a pet yet.")
    return _from_outcome(state, put_to_sleep(state.pet, now_ms))


def wake_pet(state: GameState) -> ActionResult:
    if state.pet is None:
        return _reject(state, "You don't have a pet yet.")
    return _from_outcome(state, wake_up(state.pet))


# --- care -------------------------------------------------------------------


def _use_item(
    state: GameState,
    registry: ContentRegistry,
    item_id: str,
    categories: tuple[ItemCategory, ...],
    verb: str,
) -> ActionResult:
    pet = state.pet
    if pet is None:
        return _reject(state, "You don't have a pet yet.")
    if pet.is_sleeping:
        return _reject(state, f"{pet.name} is asleep.")
    item = registry.item(item_id)
    if item is None:
        return _reject(state, f"Unknown item {item_id!r}.")
    if item.category not in categories:
        return _reject(state, f"You can't {verb} {pet.name} with {item.name}.")
    owned = state.player.item_count(item.id)
    if owned <= 0:
        return _reject(state, f"You don't have any {item.name}.")

    inventory = dict(state.player.inventory)
    if owned == 1:
        del inventory[item.id]
    else:
        inventory[item.id] = owned - 1
    return ActionResult.ok(
        replace(
            state,
            pet=apply_item(pet, item),
            player=replace(state.player, inventory=inventory),
        ),
        f"{pet.name} enjoyed the {item.name}.",
    )


def feed_pet(state: GameState, registry: ContentRegistry, item_id: str) -> ActionResult:
    return _use_item(state, registry, item_id, (ItemCategory.FOOD,), "feed")


def water_pet(state: GameState, registry: ContentRegistry, item_id: str) -> ActionResult:
    return _use_item(state, registry, item_id, (ItemCategory.DRINK,), "water")


def play_with_pet(state: GameState, registry: ContentRegistry, item_id: str) -> ActionResult:
    return _use_item(state, registry, item_id, (ItemCategory.TOY,), "play with")


def give_medicine(state: GameState, registry: ContentRegistry, item_id: str) -> ActionResult:
    return _use_item(state, registry, item_id, (ItemCategory.MEDICINE,), "treat")


def clean_pet(state: GameState) -> ActionResult:
    pet = state.pet
    if pet is None:
        return _reject(state, "You don't have a pet yet.")
    if pet.waste.count == 0:
        return _reject(state, "There's nothing to clean up.")
    return ActionResult.ok(replace(state, pet=clean_waste(pet)), "All clean!")


# --- quests -----------------------------------------------------------------


def accept_quest(state: GameState, registry: ContentRegistry, quest_id: str) -> ActionResult:
    quest = registry.quest(quest_id)
    if quest is None:
        return _reject(state, f"Unknown quest {quest_id!r}.")
    if state.quest(quest.id) is not None:
        return _reject(state, f"You already took on {quest.name}.")
    reason = quest.requirements.unmet_reason(
        stage=state.pet.stage if state.pet is not None else None,
        skill_levels=state.player.skill_levels(),
        completed_quests=state.completed_quest_ids(),
    )
    if reason is not None:
        return _reject(state, f"{quest.name}: {reason}.")
    progress = QuestProgress(quest_id=quest.id)
    return ActionResult.ok(
        replace(state, quests=state.quests + (progress,)), f"Accepted {quest.name}."
    )


def turn_in_quest(state: GameState, registry: ContentRegistry, quest_id: str) -> ActionResult:
    progress = state.quest(quest_id)
    quest = registry.quest(quest_id)
    if progress is None or quest is None:
        return _reject(state, "You haven't taken on that quest.")
    if progress.state is QuestState.COMPLETED:
        return _reject(state, f"{quest.name} is already complete.")
    if not objectives_complete(progress, quest):
        return _reject(state, f"{quest.name} isn't finished yet.")
    return ActionResult.ok(complete_quest(state, quest), f"Completed {quest.name}!")


__all__ = [
    "accept_quest",
    "adopt_pet",
    "cancel_exploration",
    "cancel_training",
    "cancel_travel",
    "clean_pet",
    "feed_pet",
    "give_medicine",
    "play_with_pet",
    "sleep_pet",
    "start_exploration",
    "start_training",
    "travel_to_location",
    "turn_in_quest",
    "wake_pet",
    "water_pet",
]
