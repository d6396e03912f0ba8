"""Timed travel along a location connection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Collection, Dict, Mapping

from ..energy import has_energy, prorated_refund, restore_energy, spend_energy
from ..models.content import Location, ObjectiveType
from ..models.pet import ActivityState, Pet, TravelActivity
from ..models.state import GameState
from ..quests import update_quest_progress
from ..registry import ContentRegistry
from ..results import CancelOutcome, PetOutcome
from .gating import can_start_activity

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TravelResult:
    origin_id: str
    destination_id: str
    first_visit: bool = False

    def to_mapping(self) -> Dict[str, object]:
        return {
            "origin_id": self.origin_id,
            "destination_id": self.destination_id,
            "first_visit": self.first_visit,
        }


def start_travel(
    pet: Pet | None,
    origin: Location,
    destination: Location,
    now_tick: int,
    *,
    skill_levels: Mapping[str, int],
    completed_quests: Collection[str] = (),
) -> PetOutcome:
    gate = can_start_activity(pet, ActivityState.TRAVELLING)
    if not gate.allowed:
        return PetOutcome(False, pet, gate.reason)
    if origin.id == destination.id:
        return PetOutcome.fail(pet, f"You are already at {destination.name}.")

    connection = origin.connection_to(destination.id)
    if connection is None:
        return PetOutcome.fail(
            pet, f"There is no path from {origin.name} to {destination.name}."
        )
    reason = destination.requirements.unmet_reason(
        stage=pet.stage,
        skill_levels=skill_levels,
        completed_quests=completed_quests,
    )
    if reason is not None:
        return PetOutcome.fail(pet, f"{destination.name}: {reason}.")

    cost = connection.effective_energy_cost
    if not has_energy(pet.energy, cost):
        return PetOutcome.fail(
            pet, f"Not enough energy. Travelling to {destination.name} needs {cost}."
        )

    payload = TravelActivity(
        origin_id=origin.id,
        destination_id=destination.id,
        start_tick=now_tick,
        duration_ticks=connection.travel_ticks,
        ticks_remaining=connection.travel_ticks,
        energy_cost=cost,
    )
    log.debug("%s travelling %s -> %s", pet.id, origin.id, destination.id)
    return PetOutcome.ok(
        replace(pet, energy=spend_energy(pet.energy, cost), activity=payload),
        f"{pet.name} set off for {destination.name}.",
    )


def tick_travel(pet: Pet) -> Pet:
    """Count down one tick, holding at zero until the game tick completes it."""

    travel = pet.travel_state
    if travel is None or travel.ticks_remaining <= 0:
        return pet
    return replace(pet, activity=replace(travel, ticks_remaining=travel.ticks_remaining - 1))


def travel_finished(pet: Pet | None) -> bool:
    travel = pet.travel_state if pet is not None else None
    return travel is not None and travel.ticks_remaining <= 0


def complete_travel(
    state: GameState, registry: ContentRegistry
) -> tuple[GameState, TravelResult | None]:
    """Arrive: move the player, mark the destination visited, progress quests."""

    pet = state.pet
    travel = pet.travel_state if pet is not None else None
    if travel is None:
        return state, None
    destination = registry.require_location(travel.destination_id)

    visited = state.player.visited_locations
    first_visit = destination.id not in visited
    if first_visit:
        visited = visited + (destination.id,)
    player = replace(
        state.player, current_location_id=destination.id, visited_locations=visited
    )
    state = replace(state, pet=replace(pet, activity=None), player=player)
    state = update_quest_progress(state, registry, ObjectiveType.VISIT, destination.id)
    return state, TravelResult(travel.origin_id, destination.id, first_visit)


def cancel_travel(pet: Pet | None) -> CancelOutcome:
    """Turn back. Energy is refunded in proportion to the distance not covered."""

    if pet is None or pet.travel_state is None:
        return CancelOutcome(False, pet, "Not travelling.")
    travel = pet.travel_state
    refund = prorated_refund(travel.energy_cost, travel.ticks_remaining, travel.duration_ticks)
    return CancelOutcome(
        True,
        replace(pet, activity=None, energy=restore_energy(pet.energy, refund, pet.stage)),
        "Travel cancelled.",
        energy_refunded=refund,
    )


__all__ = [
    "TravelResult",
    "cancel_travel",
    "complete_travel",
    "start_travel",
    "tick_travel",
    "travel_finished",
]
