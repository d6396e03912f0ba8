"""Explicit success/failure results returned by actions and subsystems."""

from __future__ import annotations

from dataclasses import dataclass

from .models.pet import Pet
from .models.state import GameState


@dataclass(frozen=True, slots=True)
class PetOutcome:
    """Result of a pet-level operation. ``pet`` is unchanged on failure."""

    success: bool
    pet: Pet
    message: str = ""

    @classmethod
    def ok(cls, pet: Pet, message: str = "") -> "PetOutcome":
        return cls(True, pet, message)

    @classmethod
    def fail(cls, pet: Pet, message: str) -> "PetOutcome":
        return cls(False, pet, message)


@dataclass(frozen=True, slots=True)
class CancelOutcome:
    success: bool
    pet: Pet
    message: str = ""
    energy_refunded: int = 0


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of a player action. ``state`` is the input state on failure."""

    success: bool
    state: GameState
    message: str = ""

    @classmethod
    def ok(cls, state: GameState, message: str = "") -> "ActionResult":
        return cls(True, state, message)

    @classmethod
    def fail(cls, state: GameState, message: str) -> "ActionResult":
        return cls(False, state, message)


__all__ = ["ActionResult", "CancelOutcome", "PetOutcome"]
