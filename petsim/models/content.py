"""Static content definitions loaded once by the registry."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Collection, Dict, Mapping, Optional

from ._validation import (
    FieldSpec,
    MappingSpec,
    ModelValidationError,
    ModelValidator,
    SequenceSpec,
    is_non_empty_str,
    is_non_negative_int,
    is_positive_int,
    is_unit_interval,
    validate_payload,
)
from .progression import BATTLE_STAT_NAMES, GrowthRate, GrowthStage


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, slots=True)
class Requirements:
    """Gates shared by drop entries, activities, sessions and locations."""

    min_stage: Optional[GrowthStage] = None
    min_skill_levels: Mapping[str, int] = field(default_factory=dict)
    completed_quests: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return (
            self.min_stage is None
            and not self.min_skill_levels
            and not self.completed_quests
        )

    def unmet_reason(
        self,
        *,
        stage: GrowthStage | None,
        skill_levels: Mapping[str, int],
        completed_quests: Collection[str] = (),
    ) -> str | None:
        """Return why the requirements fail, or ``None`` when they are met."""

        if self.min_stage is not None:
            if stage is None or stage < self.min_stage:
                return f"Requires {self.min_stage.label} stage"
        for skill_id, level in self.min_skill_levels.items():
            if skill_levels.get(skill_id, 1) < level:
                return f"Requires {skill_id} level {level}"
        for quest_id in self.completed_quests:
            if quest_id not in completed_quests:
                return f"Requires quest {quest_id!r} to be completed"
        return None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Requirements":
        if not data:
            return cls()
        payload = validate_payload(cls, data)
        stage = payload.get("min_stage")
        return cls(
            min_stage=GrowthStage.from_value(stage) if stage else None,
            min_skill_levels=_frozen(payload.get("min_skill_levels", {})),
            completed_quests=tuple(payload.get("completed_quests", ())),
        )


class RequirementsValidator(ModelValidator):
    model = Requirements
    fields = {
        "min_stage": FieldSpec(is_non_empty_str, "a growth stage", required=False),
        "min_skill_levels": FieldSpec(
            MappingSpec(str, is_positive_int), "a mapping of skill ids to levels",
            required=False,
        ),
        "completed_quests": FieldSpec(
            SequenceSpec(str), "a list of quest ids", required=False
        ),
    }


Requirements.validator = RequirementsValidator


@dataclass(frozen=True, slots=True)
class DropEntry:
    item_id: str
    quantity: int
    min_roll: float
    requirements: Requirements = field(default_factory=Requirements)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DropEntry":
        payload = validate_payload(cls, data)
        return cls(
            item_id=payload["item_id"],
            quantity=payload.get("quantity", 1),
            min_roll=float(payload["min_roll"]),
            requirements=Requirements.from_mapping(payload.get("requirements")),
        )


class DropEntryValidator(ModelValidator):
    model = DropEntry
    fields = {
        "item_id": FieldSpec(is_non_empty_str, "an item id"),
        "quantity": FieldSpec(is_positive_int, "a positive quantity", required=False),
        "min_roll": FieldSpec(is_unit_interval, "a roll threshold in [0, 1]"),
        "requirements": FieldSpec(Mapping, "a requirements mapping", required=False),
    }


DropEntry.validator = DropEntryValidator


@dataclass(frozen=True, slots=True)
class DropTable:
    id: str
    entries: tuple[DropEntry, ...]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DropTable":
        payload = validate_payload(cls, data)
        return cls(
            id=payload["id"],
            entries=tuple(DropEntry.from_mapping(entry) for entry in payload["entries"]),
        )


class DropTableValidator(ModelValidator):
    model = DropTable
    fields = {
        "id": FieldSpec(is_non_empty_str, "a table id"),
        "entries": FieldSpec(SequenceSpec(Mapping), "a list of drop entries"),
    }


DropTable.validator = DropTableValidator


@dataclass(frozen=True, slots=True)
class ExplorationActivityDef:
    id: str
    name: str
    duration_ticks: int
    energy_cost: int
    cooldown_ticks: int = 0
    base_xp: int = 15
    per_item_xp: int = 0
    skill_factors: Mapping[str, float] = field(default_factory=dict)
    requirements: Requirements = field(default_factory=Requirements)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExplorationActivityDef":
        payload = validate_payload(cls, data)
        payload["skill_factors"] = _frozen(
            {key: float(value) for key, value in payload.get("skill_factors", {}).items()}
        )
        payload["requirements"] = Requirements.from_mapping(payload.get("requirements"))
        return cls(**payload)


class ExplorationActivityValidator(ModelValidator):
    model = ExplorationActivityDef
    fields = {
        "id": FieldSpec(is_non_empty_str, "an activity id"),
        "name": FieldSpec(is_non_empty_str, "a display name"),
        "duration_ticks": FieldSpec(is_positive_int, "a positive tick duration"),
        "energy_cost": FieldSpec(is_non_negative_int, "an energy cost"),
        "cooldown_ticks": FieldSpec(is_non_negative_int, "a cooldown", required=False),
        "base_xp": FieldSpec(is_non_negative_int, "base XP", required=False),
        "per_item_xp": FieldSpec(is_non_negative_int, "XP per item", required=False),
        "skill_factors": FieldSpec(
            MappingSpec(str, float), "a mapping of skill ids to factors", required=False
        ),
        "requirements": FieldSpec(Mapping, "a requirements mapping", required=False),
    }


ExplorationActivityDef.validator = ExplorationActivityValidator


class SessionType(str, Enum):
    BASIC = "basic"
    INTENSIVE = "intensive"
    ADVANCED = "advanced"

    @classmethod
    def from_value(cls, value: "SessionType | str") -> "SessionType":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True, slots=True)
class TrainingSession:
    session_type: SessionType
    name: str
    duration_ticks: int
    energy_cost: int
    primary_gain: int
    secondary_gain: int
    min_stage: Optional[GrowthStage] = None

    @classmethod
    def from_mapping(cls, session_type: str, data: Mapping[str, Any]) -> "TrainingSession":
        payload = validate_payload(cls, data)
        stage = payload.pop("min_stage", None)
        return cls(
            session_type=SessionType.from_value(session_type),
            min_stage=GrowthStage.from_value(stage) if stage else None,
            **payload,
        )


class TrainingSessionValidator(ModelValidator):
    model = TrainingSession
    fields = {
        "name": FieldSpec(is_non_empty_str, "a display name"),
        "duration_ticks": FieldSpec(is_positive_int, "a positive tick duration"),
        "energy_cost": FieldSpec(is_non_negative_int, "an energy cost"),
        "primary_gain": FieldSpec(is_non_negative_int, "a stat gain"),
        "secondary_gain": FieldSpec(is_non_negative_int, "a stat gain"),
        "min_stage": FieldSpec(is_non_empty_str, "a growth stage", required=False),
    }


TrainingSession.validator = TrainingSessionValidator


def _is_battle_stat(value: Any) -> bool:
    return value in BATTLE_STAT_NAMES


@dataclass(frozen=True, slots=True)
class TrainingFacility:
    id: str
    name: str
    primary_stat: str
    secondary_stat: str
    sessions: Mapping[SessionType, TrainingSession] = field(default_factory=dict)

    def session(self, session_type: SessionType | str) -> TrainingSession | None:
        try:
            key = SessionType.from_value(session_type)
        except ValueError:
            return None
        return self.sessions.get(key)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], sessions: Mapping[SessionType, TrainingSession]
    ) -> "TrainingFacility":
        payload = validate_payload(cls, data)
        return cls(sessions=_frozen(sessions), **payload)


class TrainingFacilityValidator(ModelValidator):
    model = TrainingFacility
    fields = {
        "id": FieldSpec(is_non_empty_str, "a facility id"),
        "name": FieldSpec(is_non_empty_str, "a display name"),
        "primary_stat": FieldSpec(_is_battle_stat, "a battle stat name"),
        "secondary_stat": FieldSpec(_is_battle_stat, "a battle stat name"),
    }


TrainingFacility.validator = TrainingFacilityValidator


@dataclass(frozen=True, slots=True)
class Connection:
    target_id: str
    energy_cost: int
    travel_ticks: int = 0
    terrain_modifier: float = 1.0

    @property
    def effective_energy_cost(self) -> int:
        # Rounded first so float noise (10 * 1.2 -> 12.000000000000002) can't add a point.
        return math.ceil(round(self.energy_cost * self.terrain_modifier, 6))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Connection":
        payload = validate_payload(cls, data)
        if "terrain_modifier" in payload:
            payload["terrain_modifier"] = float(payload["terrain_modifier"])
        return cls(**payload)


class ConnectionValidator(ModelValidator):
    model = Connection
    fields = {
        "target_id": FieldSpec(is_non_empty_str, "a location id"),
        "energy_cost": FieldSpec(is_non_negative_int, "an energy cost"),
        "travel_ticks": FieldSpec(is_non_negative_int, "a tick duration", required=False),
        "terrain_modifier": FieldSpec(float, "a cost multiplier", required=False),
    }


Connection.validator = ConnectionValidator


@dataclass(frozen=True, slots=True)
class Location:
    id: str
    name: str
    kind: str = "wild"
    connections: tuple[Connection, ...] = ()
    activities: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    facility_ids: tuple[str, ...] = ()
    requirements: Requirements = field(default_factory=Requirements)

    def connection_to(self, target_id: str) -> Connection | None:
        for connection in self.connections:
            if connection.target_id == target_id:
                return connection
        return None

    def drop_table_ids(self, activity_id: str) -> tuple[str, ...]:
        return self.activities.get(activity_id, ())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Location":
        payload = validate_payload(cls, data)
        return cls(
            id=payload["id"],
            name=payload["name"],
            kind=payload.get("kind", "wild"),
            connections=tuple(
                Connection.from_mapping(item) for item in payload.get("connections", ())
            ),
            activities=_frozen(
                {key: tuple(value) for key, value in payload.get("activities", {}).items()}
            ),
            facility_ids=tuple(payload.get("facility_ids", ())),
            requirements=Requirements.from_mapping(payload.get("requirements")),
        )


class LocationValidator(ModelValidator):
    model = Location
    fields = {
        "id": FieldSpec(is_non_empty_str, "a location id"),
        "name": FieldSpec(is_non_empty_str, "a display name"),
        "kind": FieldSpec(is_non_empty_str, "a location kind", required=False),
        "connections": FieldSpec(
            SequenceSpec(Mapping), "a list of connections", required=False
        ),
        "activities": FieldSpec(
            MappingSpec(str, SequenceSpec(str)),
            "a mapping of activity ids to drop table ids",
            required=False,
        ),
        "facility_ids": FieldSpec(SequenceSpec(str), "a list of facility ids", required=False),
        "requirements": FieldSpec(Mapping, "a requirements mapping", required=False),
    }


Location.validator = LocationValidator


class ObjectiveType(str, Enum):
    COLLECT = "collect"
    VISIT = "visit"
    EXPLORE = "explore"
    TRAIN = "train"

    @classmethod
    def from_value(cls, value: "ObjectiveType | str") -> "ObjectiveType":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True, slots=True)
class QuestObjective:
    id: str
    type: ObjectiveType
    target: str
    count: int = 1

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "QuestObjective":
        payload = validate_payload(cls, data)
        try:
            objective_type = ObjectiveType.from_value(payload["type"])
        except ValueError as exc:
            raise ModelValidationError(cls, [str(exc)]) from exc
        return cls(
            id=payload["id"],
            type=objective_type,
            target=payload["target"],
            count=payload.get("count", 1),
        )


class QuestObjectiveValidator(ModelValidator):
    model = QuestObjective
    fields = {
        "id": FieldSpec(is_non_empty_str, "an objective id"),
        "type": FieldSpec(is_non_empty_str, "an objective type"),
        "target": FieldSpec(is_non_empty_str, "an objective target id"),
        "count": FieldSpec(is_positive_int, "a positive count", required=False),
    }


QuestObjective.validator = QuestObjectiveValidator


@dataclass(frozen=True, slots=True)
class Quest:
    id: str
    name: str
    objectives: tuple[QuestObjective, ...]
    reward_currency: int = 0
    reward_items: Mapping[str, int] = field(default_factory=dict)
    requirements: Requirements = field(default_factory=Requirements)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Quest":
        payload = validate_payload(cls, data)
        return cls(
            id=payload["id"],
            name=payload["name"],
            objectives=tuple(
                QuestObjective.from_mapping(item) for item in payload["objectives"]
            ),
            reward_currency=payload.get("reward_currency", 0),
            reward_items=_frozen(payload.get("reward_items", {})),
            requirements=Requirements.from_mapping(payload.get("requirements")),
        )


class QuestValidator(ModelValidator):
    model = Quest
    fields = {
        "id": FieldSpec(is_non_empty_str, "a quest id"),
        "name": FieldSpec(is_non_empty_str, "a display name"),
        "objectives": FieldSpec(
            SequenceSpec(Mapping, allow_empty=False), "a non-empty list of objectives"
        ),
        "reward_currency": FieldSpec(is_non_negative_int, "a currency amount", required=False),
        "reward_items": FieldSpec(
            MappingSpec(str, is_positive_int), "a mapping of item ids to counts",
            required=False,
        ),
        "requirements": FieldSpec(Mapping, "a requirements mapping", required=False),
    }


Quest.validator = QuestValidator


class ItemCategory(str, Enum):
    FOOD = "food"
    DRINK = "drink"
    TOY = "toy"
    MEDICINE = "medicine"
    MATERIAL = "material"

    @classmethod
    def from_value(cls, value: "ItemCategory | str") -> "ItemCategory":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True, slots=True)
class ItemDef:
    """An item. Care effects are in display units."""

    id: str
    name: str
    category: ItemCategory
    satiety: int = 0
    hydration: int = 0
    happiness: int = 0
    energy: int = 0
    cures: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ItemDef":
        payload = validate_payload(cls, data)
        try:
            payload["category"] = ItemCategory.from_value(payload["category"])
        except ValueError as exc:
            raise ModelValidationError(cls, [str(exc)]) from exc
        return cls(**payload)


class ItemValidator(ModelValidator):
    model = ItemDef
    fields = {
        "id": FieldSpec(is_non_empty_str, "an item id"),
        "name": FieldSpec(is_non_empty_str, "a display name"),
        "category": FieldSpec(is_non_empty_str, "an item category"),
        "satiety": FieldSpec(int, "a care effect", required=False),
        "hydration": FieldSpec(int, "a care effect", required=False),
        "happiness": FieldSpec(int, "a care effect", required=False),
        "energy": FieldSpec(int, "an energy effect", required=False),
        "cures": FieldSpec(bool, "a flag", required=False),
    }


ItemDef.validator = ItemValidator


@dataclass(frozen=True, slots=True)
class Species:
    id: str
    name: str
    growth_rates: Mapping[str, GrowthRate] = field(default_factory=dict)

    def stage_gains(self) -> Dict[str, int]:
        """Battle stat gains applied on each stage transition."""

        return {
            stat: self.growth_rates.get(stat, GrowthRate.MEDIUM).stage_gain
            for stat in BATTLE_STAT_NAMES
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Species":
        payload = validate_payload(cls, data)
        rates = {
            stat: GrowthRate.from_value(rate)
            for stat, rate in payload.get("growth_rates", {}).items()
        }
        unknown = sorted(set(rates) - set(BATTLE_STAT_NAMES))
        if unknown:
            raise ModelValidationError(cls, [f"Unknown battle stat(s): {', '.join(unknown)}"])
        return cls(id=payload["id"], name=payload["name"], growth_rates=_frozen(rates))


class SpeciesValidator(ModelValidator):
    model = Species
    fields = {
        "id": FieldSpec(is_non_empty_str, "a species id"),
        "name": FieldSpec(is_non_empty_str, "a display name"),
        "growth_rates": FieldSpec(
            MappingSpec(str, str), "a mapping of stats to growth rates", required=False
        ),
    }


Species.validator = SpeciesValidator


DEFAULT_SPECIES = Species(id="default", name="Unknown")


__all__ = [
    "Connection",
    "DEFAULT_SPECIES",
    "DropEntry",
    "DropTable",
    "ExplorationActivityDef",
    "ItemCategory",
    "ItemDef",
    "Location",
    "ObjectiveType",
    "Quest",
    "QuestObjective",
    "Requirements",
    "SessionType",
    "Species",
    "TrainingFacility",
    "TrainingSession",
]
