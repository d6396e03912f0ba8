"""Timed exploration of a location and its drop-table rewards."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Collection, Dict, Mapping

from ..clock import to_micro
from ..drops import Drop, DropContext, resolve_many, total_quantity
from ..energy import has_energy, restore_energy, spend_energy
from ..models.content import ExplorationActivityDef, Location, ObjectiveType
from ..models.pet import ActivityState, ExplorationActivity, Pet
from ..models.state import GameState
from ..quests import add_items, update_quest_progress
from ..registry import ContentRegistry
from ..results import CancelOutcome, PetOutcome
from ..skills import apply_skill_xp
from .gating import can_start_activity

log = logging.getLogger(__name__)


def cooldown_key(location_id: str, activity_id: str) -> str:
    return f"{location_id}:{activity_id}"


def cooldown_remaining(pet: Pet, location_id: str, activity_id: str, now_tick: int) -> int:
    ends_at = pet.activity_cooldowns.get(cooldown_key(location_id, activity_id), 0)
    return max(0, ends_at - now_tick)


@dataclass(frozen=True, slots=True)
class ExplorationResult:
    location_id: str
    activity_id: str
    items_found: tuple[Drop, ...] = ()
    skill_xp_gains: Mapping[str, int] = field(default_factory=dict)
    level_ups: Mapping[str, bool] = field(default_factory=dict)
    roll: float = 0.0

    @property
    def total_items(self) -> int:
        return total_quantity(self.items_found)

    def to_mapping(self) -> Dict[str, object]:
        return {
            "location_id": self.location_id,
            "activity_id": self.activity_id,
            "items_found": [drop.to_mapping() for drop in self.items_found],
            "skill_xp_gains": dict(self.skill_xp_gains),
            "level_ups": dict(self.level_ups),
            "roll": self.roll,
        }


def skill_xp_for(activity: ExplorationActivityDef, items_found: int) -> Dict[str, int]:
    """XP per skill: ``(base_xp + per_item_xp * items_found) * factor``."""

    raw = activity.base_xp + activity.per_item_xp * items_found
    gains: Dict[str, int] = {}
    for skill_id, factor in activity.skill_factors.items():
        amount = math.floor(raw * factor)
        if amount > 0:
            gains[skill_id] = amount
    return gains


def start_exploration(
    pet: Pet | None,
    location: Location,
    activity: ExplorationActivityDef,
    now_tick: int,
    *,
    skill_levels: Mapping[str, int],
    completed_quests: Collection[str] = (),
) -> PetOutcome:
    gate = can_start_activity(pet, ActivityState.EXPLORING)
    if not gate.allowed:
        return PetOutcome(False, pet, gate.reason)
    if activity.id not in location.activities:
        return PetOutcome.fail(pet, f"{activity.name} isn't possible at {location.name}.")

    reason = activity.requirements.unmet_reason(
        stage=pet.stage, skill_levels=skill_levels, completed_quests=completed_quests
    )
    if reason is not None:
        return PetOutcome.fail(pet, f"{activity.name}: {reason}.")

    waiting = cooldown_remaining(pet, location.id, activity.id, now_tick)
    if waiting:
        return PetOutcome.fail(
            pet, f"{activity.name} is on cooldown ({waiting} ticks remaining)."
        )
    if not has_energy(pet.energy, activity.energy_cost):
        return PetOutcome.fail(
            pet, f"Not enough energy. {activity.name} needs {activity.energy_cost}."
        )

    payload = ExplorationActivity(
        location_id=location.id,
        activity_id=activity.id,
        start_tick=now_tick,
        duration_ticks=activity.duration_ticks,
        ticks_remaining=activity.duration_ticks,
        energy_cost=activity.energy_cost,
    )
    log.debug("%s started %s at %s", pet.id, activity.id, location.id)
    return PetOutcome.ok(
        replace(pet, energy=spend_energy(pet.energy, activity.energy_cost), activity=payload),
        f"{pet.name} set off {activity.name.lower()} at {location.name}.",
    )


def tick_exploration(pet: Pet) -> Pet:
    """Count down one tick, holding at zero until the game tick completes it."""

    exploration = pet.active_exploration
    if exploration is None or exploration.ticks_remaining <= 0:
        return pet
    return replace(
        pet,
        activity=replace(exploration, ticks_remaining=exploration.ticks_remaining - 1),
    )


def exploration_finished(pet: Pet | None) -> bool:
    exploration = pet.active_exploration if pet is not None else None
    return exploration is not None and exploration.ticks_remaining <= 0


def complete_exploration(
    state: GameState, registry: ContentRegistry, roll: float, now_tick: int
) -> tuple[GameState, ExplorationResult | None]:
    """Resolve rewards for the active exploration and fold them into ``state``.

    The pet returns to Idle, the location/activity cooldown starts, items are
    added to the inventory, skill XP is granted and Explore/Collect quest
    objectives advance. Unknown content ids raise :class:`ContentError`.
    """

    pet = state.pet
    exploration = pet.active_exploration if pet is not None else None
    if exploration is None:
        return state, None

    activity = registry.require_activity(exploration.activity_id)
    location = registry.require_location(exploration.location_id)
    tables = [
        registry.require_drop_table(table_id)
        for table_id in location.drop_table_ids(activity.id)
    ]
    items = tuple(resolve_many(tables, roll, DropContext.from_state(state)))
    gains = skill_xp_for(activity, total_quantity(items))
    skills, level_ups = apply_skill_xp(state.player.skills, gains)

    cooldowns = dict(pet.activity_cooldowns)
    if activity.cooldown_ticks:
        cooldowns[cooldown_key(location.id, activity.id)] = now_tick + activity.cooldown_ticks
    pet = replace(pet, activity=None, activity_cooldowns=cooldowns)

    player = replace(
        state.player,
        skills=skills,
        inventory=add_items(
            state.player.inventory, {drop.item_id: drop.quantity for drop in items}
        ),
    )
    state = replace(state, pet=pet, player=player)
    state = update_quest_progress(state, registry, ObjectiveType.EXPLORE, activity.id)
    for drop in items:
        state = update_quest_progress(
            state, registry, ObjectiveType.COLLECT, drop.item_id, drop.quantity
        )

    result = ExplorationResult(
        location_id=location.id,
        activity_id=activity.id,
        items_found=items,
        skill_xp_gains=gains,
        level_ups={key: value for key, value in level_ups.items() if value},
        roll=roll,
    )
    log.debug(
        "%s finished %s at %s: %d item(s)",
        pet.id,
        activity.id,
        location.id,
        result.total_items,
    )
    return state, result


def cancel_exploration(pet: Pet | None) -> CancelOutcome:
    """Abandon the exploration. The full energy cost is always returned."""

    if pet is None or pet.active_exploration is None:
        return CancelOutcome(False, pet, "No exploration in progress.")
    exploration = pet.active_exploration
    refund = to_micro(exploration.energy_cost)
    return CancelOutcome(
        True,
        replace(pet, activity=None, energy=restore_energy(pet.energy, refund, pet.stage)),
        "Exploration cancelled.",
        energy_refunded=refund,
    )


__all__ = [
    "ExplorationResult",
    "cancel_exploration",
    "complete_exploration",
    "cooldown_key",
    "cooldown_remaining",
    "exploration_finished",
    "skill_xp_for",
    "start_exploration",
    "tick_exploration",
]
