"""Timed training sessions at a facility."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping

from ..energy import has_energy, prorated_refund, restore_energy, spend_energy
from ..models.content import SessionType, TrainingFacility
from ..models.pet import ActivityState, Pet, TrainingActivity
from ..results import CancelOutcome, PetOutcome
from .gating import can_start_activity

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrainingResult:
    facility_id: str
    session_type: str
    stat_gains: Mapping[str, int] = field(default_factory=dict)

    def to_mapping(self) -> Dict[str, object]:
        return {
            "facility_id": self.facility_id,
            "session_type": self.session_type,
            "stat_gains": dict(self.stat_gains),
        }


def start_training(
    pet: Pet | None,
    facility: TrainingFacility,
    session_type: SessionType | str,
    now_tick: int,
) -> PetOutcome:
    gate = can_start_activity(pet, ActivityState.TRAINING)
    if not gate.allowed:
        return PetOutcome(False, pet, gate.reason)

    session = facility.session(session_type)
    if session is None:
        return PetOutcome.fail(
            pet, f"{facility.name} does not offer {session_type} training."
        )
    if session.min_stage is not None and pet.stage < session.min_stage:
        return PetOutcome.fail(
            pet, f"{session.name} requires {session.min_stage.label} stage."
        )
    if not has_energy(pet.energy, session.energy_cost):
        return PetOutcome.fail(
            pet, f"Not enough energy. {session.name} needs {session.energy_cost}."
        )

    activity = TrainingActivity(
        facility_id=facility.id,
        session_type=session.session_type.value,
        primary_stat=facility.primary_stat,
        secondary_stat=facility.secondary_stat,
        primary_gain=session.primary_gain,
        secondary_gain=session.secondary_gain,
        start_tick=now_tick,
        duration_ticks=session.duration_ticks,
        ticks_remaining=session.duration_ticks,
        energy_cost=session.energy_cost,
    )
    log.debug("%s started %s at %s", pet.id, session.session_type.value, facility.id)
    return PetOutcome.ok(
        replace(
            pet,
            energy=spend_energy(pet.energy, session.energy_cost),
            activity=activity,
        ),
        f"{pet.name} started {session.name} at {facility.name}.",
    )


def complete_training(pet: Pet) -> tuple[Pet, TrainingResult | None]:
    """Apply the session's stat gains and return the pet to Idle."""

    training = pet.active_training
    if training is None:
        return pet, None
    gains: Dict[str, int] = {}
    if training.primary_gain:
        gains[training.primary_stat] = training.primary_gain
    if training.secondary_gain:
        gains[training.secondary_stat] = (
            gains.get(training.secondary_stat, 0) + training.secondary_gain
        )
    result = TrainingResult(
        facility_id=training.facility_id,
        session_type=training.session_type,
        stat_gains=gains,
    )
    return (
        replace(pet, activity=None, battle_stats=pet.battle_stats.with_gains(gains)),
        result,
    )


def tick_training(pet: Pet) -> tuple[Pet, TrainingResult | None]:
    """Count down one tick; training completes inside its own final tick."""

    training = pet.active_training
    if training is None:
        return pet, None
    remaining = training.ticks_remaining - 1
    if remaining > 0:
        return replace(pet, activity=replace(training, ticks_remaining=remaining)), None
    return complete_training(pet)


def cancel_training(pet: Pet | None) -> CancelOutcome:
    """Stop training early, refunding energy for the ticks not yet spent."""

    if pet is None or pet.active_training is None:
        return CancelOutcome(False, pet, "No training in progress.")
    training = pet.active_training
    refund = prorated_refund(
        training.energy_cost, training.ticks_remaining, training.duration_ticks
    )
    return CancelOutcome(
        True,
        replace(
            pet,
            activity=None,
            energy=restore_energy(pet.energy, refund, pet.stage),
        ),
        "Training cancelled.",
        energy_refunded=refund,
    )


__all__ = [
    "TrainingResult",
    "cancel_training",
    "complete_training",
    "start_training",
    "tick_training",
]
