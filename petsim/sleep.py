"""Putting the pet to sleep and waking it up."""

from __future__ import annotations

from dataclasses import replace

from .models.pet import ActivityState, Pet, SleepActivity
from .models.progression import stage_definition
from .results import PetOutcome


def put_to_sleep(pet: Pet, now_ms: int) -> PetOutcome:
    if pet.is_sleeping:
        return PetOutcome.fail(pet, f"{pet.name} is already asleep.")
    if pet.activity_state is not ActivityState.IDLE:
        return PetOutcome.fail(
            pet, f"{pet.name} can't sleep while {pet.activity_state.value}."
        )
    return PetOutcome.ok(
        replace(pet, activity=SleepActivity(started_at_ms=int(now_ms))),
        f"{pet.name} fell asleep.",
    )


def wake_up(pet: Pet) -> PetOutcome:
    if not pet.is_sleeping:
        return PetOutcome.fail(pet, f"{pet.name} is not asleep.")
    return PetOutcome.ok(replace(pet, activity=None), f"{pet.name} woke up.")


def count_sleep_tick(pet: Pet) -> Pet:
    if not pet.is_sleeping:
        return pet
    return replace(pet, sleep_ticks_today=pet.sleep_ticks_today + 1)


def reset_daily_sleep(pet: Pet) -> Pet:
    if pet.sleep_ticks_today == 0:
        return pet
    return replace(pet, sleep_ticks_today=0)


def sleep_quota_met(pet: Pet) -> bool:
    """Whether the pet has slept its stage's minimum for the current day."""

    return pet.sleep_ticks_today >= stage_definition(pet.stage).min_sleep_ticks


__all__ = [
    "count_sleep_tick",
    "put_to_sleep",
    "reset_daily_sleep",
    "sleep_quota_met",
    "wake_up",
]
