"""Whole-game state: the pet, the player and quest progress."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping

from ._validation import (
    FieldSpec,
    MappingSpec,
    ModelValidator,
    SequenceSpec,
    is_non_empty_str,
    is_non_negative_int,
    validate_payload,
)
from .pet import Pet

DEFAULT_LOCATION_ID = "home"


class QuestState(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def from_value(cls, value: "QuestState | str") -> "QuestState":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True, slots=True)
class SkillProgress:
    level: int = 1
    xp: int = 0

    def to_mapping(self) -> Dict[str, int]:
        return {"level": self.level, "xp": self.xp}


@dataclass(frozen=True, slots=True)
class QuestProgress:
    quest_id: str
    state: QuestState = QuestState.ACTIVE
    objective_progress: Mapping[str, int] = field(default_factory=dict)

    def progress_for(self, objective_id: str) -> int:
        return int(self.objective_progress.get(objective_id, 0))

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "quest_id": self.quest_id,
            "state": self.state.value,
            "objective_progress": dict(self.objective_progress),
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "QuestProgress":
        payload = validate_payload(cls, data)
        return cls(
            quest_id=payload["quest_id"],
            state=QuestState.from_value(payload.get("state", QuestState.ACTIVE)),
            objective_progress=dict(payload.get("objective_progress", {})),
        )


class QuestProgressValidator(ModelValidator):
    model = QuestProgress
    fields = {
        "quest_id": FieldSpec(is_non_empty_str, "a quest id"),
        "state": FieldSpec(str, "a quest state", required=False),
        "objective_progress": FieldSpec(
            MappingSpec(str, int), "a mapping of objective ids to counts", required=False
        ),
    }


QuestProgress.validator = QuestProgressValidator


@dataclass(frozen=True, slots=True)
class PlayerState:
    inventory: Mapping[str, int] = field(default_factory=dict)
    currency: int = 0
    current_location_id: str = DEFAULT_LOCATION_ID
    visited_locations: tuple[str, ...] = (DEFAULT_LOCATION_ID,)
    skills: Mapping[str, SkillProgress] = field(default_factory=dict)

    def skill(self, skill_id: str) -> SkillProgress:
        return self.skills.get(skill_id, SkillProgress())

    def skill_levels(self) -> Dict[str, int]:
        return {key: progress.level for key, progress in self.skills.items()}

    def item_count(self, item_id: str) -> int:
        return int(self.inventory.get(item_id, 0))

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "inventory": dict(self.inventory),
            "currency": self.currency,
            "current_location_id": self.current_location_id,
            "visited_locations": list(self.visited_locations),
            "skills": {key: value.to_mapping() for key, value in self.skills.items()},
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PlayerState":
        payload = validate_payload(cls, data)
        skills = {
            str(key): SkillProgress(
                level=int(value.get("level", 1)), xp=int(value.get("xp", 0))
            )
            for key, value in payload.get("skills", {}).items()
        }
        return cls(
            inventory={str(k): int(v) for k, v in payload.get("inventory", {}).items()},
            currency=payload.get("currency", 0),
            current_location_id=payload.get("current_location_id", DEFAULT_LOCATION_ID),
            visited_locations=tuple(
                payload.get("visited_locations", (DEFAULT_LOCATION_ID,))
            ),
            skills=skills,
        )


class PlayerStateValidator(ModelValidator):
    model = PlayerState
    fields = {
        "inventory": FieldSpec(
            MappingSpec(str, is_non_negative_int), "a mapping of item ids to counts",
            required=False,
        ),
        "currency": FieldSpec(is_non_negative_int, "a non-negative amount", required=False),
        "current_location_id": FieldSpec(is_non_empty_str, "a location id", required=False),
        "visited_locations": FieldSpec(
            SequenceSpec(str), "a list of location ids", required=False
        ),
        "skills": FieldSpec(
            MappingSpec(str, Mapping), "a mapping of skill progress", required=False
        ),
    }


PlayerState.validator = PlayerStateValidator


@dataclass(frozen=True, slots=True)
class GameState:
    """Plain serialisable game data. Behaviour lives in the engine modules."""

    pet: Pet | None = None
    player: PlayerState = field(default_factory=PlayerState)
    quests: tuple[QuestProgress, ...] = ()
    total_ticks: int = 0
    last_save_time_ms: int = 0
    rng_seed: int | None = None
    rng_state: Any = None

    def quest(self, quest_id: str) -> QuestProgress | None:
        for progress in self.quests:
            if progress.quest_id == quest_id:
                return progress
        return None

    def completed_quest_ids(self) -> frozenset[str]:
        return frozenset(
            progress.quest_id
            for progress in self.quests
            if progress.state is QuestState.COMPLETED
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "pet": self.pet.to_mapping() if self.pet is not None else None,
            "player": self.player.to_mapping(),
            "quests": [progress.to_mapping() for progress in self.quests],
            "total_ticks": self.total_ticks,
            "last_save_time_ms": self.last_save_time_ms,
            "rng_seed": self.rng_seed,
            "rng_state": self.rng_state,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GameState":
        payload = validate_payload(cls, data)
        pet_data = payload.get("pet")
        return cls(
            pet=Pet.from_mapping(pet_data) if pet_data else None,
            player=PlayerState.from_mapping(payload.get("player", {})),
            quests=tuple(
                QuestProgress.from_mapping(item) for item in payload.get("quests", ())
            ),
            total_ticks=payload.get("total_ticks", 0),
            last_save_time_ms=payload.get("last_save_time_ms", 0),
            rng_seed=payload.get("rng_seed"),
            rng_state=payload.get("rng_state"),
        )


class GameStateValidator(ModelValidator):
    model = GameState
    strict = False
    fields = {
        "pet": FieldSpec(Mapping, "a pet mapping", required=False, allow_none=True),
        "player": FieldSpec(Mapping, "a player mapping", required=False),
        "quests": FieldSpec(SequenceSpec(Mapping), "a list of quest progress", required=False),
        "total_ticks": FieldSpec(is_non_negative_int, "a tick count", required=False),
        "last_save_time_ms": FieldSpec(
            is_non_negative_int, "an epoch timestamp in ms", required=False
        ),
        "rng_seed": FieldSpec(int, "an integer seed", required=False, allow_none=True),
        "rng_state": FieldSpec(Any, "a generator state", required=False, allow_none=True),
    }

GameState.validator = GameStateValidator


__all__ = [
    "DEFAULT_LOCATION_ID",
    "GameState",
    "PlayerState",
    "QuestProgress",
    "QuestState",
    "SkillProgress",
]
