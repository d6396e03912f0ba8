"""Which activities may start given what currently owns the pet."""

from __future__ import annotations

from dataclasses import dataclass

from ..models.pet import ActivityState, Pet

_BUSY_WORDS = {
    ActivityState.SLEEPING: "asleep",
    ActivityState.TRAINING: "busy training",
    ActivityState.EXPLORING: "out exploring",
    ActivityState.TRAVELLING: "on the road",
}


@dataclass(frozen=True, slots=True)
class Gate:
    allowed: bool
    reason: str = ""


def can_start_activity(pet: Pet | None, requested: ActivityState) -> Gate:
    """Every activity starts from Idle; nothing may skip it."""

    if pet is None:
        return Gate(False, "You don't have a pet yet.")
    if requested is ActivityState.IDLE:
        return Gate(False, "Idle is not an activity.")
    current = pet.activity_state
    if current is ActivityState.IDLE:
        return Gate(True)
    return Gate(False, f"{pet.name} is {_BUSY_WORDS[current]}.")


__all__ = ["Gate", "can_start_activity"]
