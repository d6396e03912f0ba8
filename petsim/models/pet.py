"""Pet state models and the activity payload union."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Union

from ._validation import (
    FieldSpec,
    MappingSpec,
    ModelValidationError,
    ModelValidator,
    is_non_empty_str,
    is_non_negative_int,
    validate_payload,
)
from .progression import BATTLE_STAT_NAMES, GrowthStage

# Ticks between waste events are drawn from [MIN, MIN + SPREAD).
WASTE_INTERVAL_MIN_TICKS = 240
WASTE_INTERVAL_SPREAD_TICKS = 240
MAX_WASTE_COUNT = 50

# Sickness countdown; each tick removes two ticks per waste pile present.
SICKNESS_COUNTDOWN_TICKS = 17_280


class HealthState(str, Enum):
    HEALTHY = "healthy"
    INJURED = "injured"
    SICK = "sick"

    @classmethod
    def from_value(cls, value: "HealthState | str") -> "HealthState":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.HEALTHY


class ActivityState(str, Enum):
    """What currently owns the pet. Derived from :attr:`Pet.activity`."""

    IDLE = "idle"
    SLEEPING = "sleeping"
    TRAINING = "training"
    EXPLORING = "exploring"
    TRAVELLING = "travelling"

    @classmethod
    def from_value(cls, value: "ActivityState | str") -> "ActivityState":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "traveling":
            normalized = "travelling"
        return cls(normalized)


@dataclass(frozen=True, slots=True)
class CareStats:
    satiety: int
    hydration: int
    happiness: int

    @classmethod
    def full(cls, maximum: int) -> "CareStats":
        return cls(satiety=maximum, hydration=maximum, happiness=maximum)

    def values(self) -> tuple[int, int, int]:
        return (self.satiety, self.hydration, self.happiness)

    def to_mapping(self) -> Dict[str, int]:
        return {"satiety": self.satiety, "hydration": self.hydration, "happiness": self.happiness}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CareStats":
        return cls(**validate_payload(cls, data))


class CareStatsValidator(ModelValidator):
    model = CareStats
    fields = {
        "satiety": FieldSpec(is_non_negative_int, "a non-negative micro value"),
        "hydration": FieldSpec(is_non_negative_int, "a non-negative micro value"),
        "happiness": FieldSpec(is_non_negative_int, "a non-negative micro value"),
    }


CareStats.validator = CareStatsValidator


@dataclass(frozen=True, slots=True)
class BattleStats:
    strength: int = 0
    endurance: int = 0
    agility: int = 0
    precision: int = 0
    fortitude: int = 0
    cunning: int = 0

    def get(self, name: str) -> int:
        if name not in BATTLE_STAT_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    def with_gains(self, gains: Mapping[str, int]) -> "BattleStats":
        values = {name: getattr(self, name) for name in BATTLE_STAT_NAMES}
        for name, amount in gains.items():
            if name not in values:
                raise KeyError(name)
            values[name] += int(amount)
        return BattleStats(**values)

    def to_mapping(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in BATTLE_STAT_NAMES}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BattleStats":
        return cls(**{name: int(data.get(name, 0)) for name in BATTLE_STAT_NAMES})


@dataclass(frozen=True, slots=True)
class Growth:
    stage: GrowthStage = GrowthStage.BABY
    substage: int = 1
    birth_time_ms: int = 0
    age_ticks: int = 0

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "substage": self.substage,
            "birth_time_ms": self.birth_time_ms,
            "age_ticks": self.age_ticks,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Growth":
        return cls(
            stage=GrowthStage.from_value(data.get("stage", GrowthStage.BABY)),
            substage=int(data.get("substage", 1)),
            birth_time_ms=int(data.get("birth_time_ms", 0)),
            age_ticks=int(data.get("age_ticks", 0)),
        )


@dataclass(frozen=True, slots=True)
class Waste:
    count: int = 0
    ticks_until_next: int = WASTE_INTERVAL_MIN_TICKS + WASTE_INTERVAL_SPREAD_TICKS

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Waste":
        return cls(**validate_payload(cls, data))


class WasteValidator(ModelValidator):
    model = Waste
    fields = {
        "count": FieldSpec(is_non_negative_int, "a non-negative waste count", required=False),
        "ticks_until_next": FieldSpec(
            is_non_negative_int, "a non-negative tick count", required=False
        ),
    }


Waste.validator = WasteValidator


# --- activity payloads ------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SleepActivity:
    kind: ClassVar[ActivityState] = ActivityState.SLEEPING

    started_at_ms: int = 0


@dataclass(frozen=True, slots=True)
class TrainingActivity:
    kind: ClassVar[ActivityState] = ActivityState.TRAINING

    facility_id: str
    session_type: str
    primary_stat: str
    secondary_stat: str
    primary_gain: int
    secondary_gain: int
    start_tick: int
    duration_ticks: int
    ticks_remaining: int
    energy_cost: int


@dataclass(frozen=True, slots=True)
class ExplorationActivity:
    kind: ClassVar[ActivityState] = ActivityState.EXPLORING

    location_id: str
    activity_id: str
    start_tick: int
    duration_ticks: int
    ticks_remaining: int
    energy_cost: int


@dataclass(frozen=True, slots=True)
class TravelActivity:
    kind: ClassVar[ActivityState] = ActivityState.TRAVELLING

    origin_id: str
    destination_id: str
    start_tick: int
    duration_ticks: int
    ticks_remaining: int
    energy_cost: int


Activity = Union[SleepActivity, TrainingActivity, ExplorationActivity, TravelActivity]

_ACTIVITY_TYPES: Dict[ActivityState, type] = {
    ActivityState.SLEEPING: SleepActivity,
    ActivityState.TRAINING: TrainingActivity,
    ActivityState.EXPLORING: ExplorationActivity,
    ActivityState.TRAVELLING: TravelActivity,
}


def activity_to_mapping(activity: Activity) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"kind": activity.kind.value}
    for item in fields(activity):
        payload[item.name] = getattr(activity, item.name)
    return payload


def activity_from_mapping(data: Mapping[str, Any]) -> Activity:
    payload = dict(data)
    try:
        kind = ActivityState.from_value(payload.pop("kind"))
        activity_type = _ACTIVITY_TYPES[kind]
    except (KeyError, ValueError) as exc:
        raise ModelValidationError(
            Pet, [f"Unknown activity payload kind: {data.get('kind')!r}"]
        ) from exc
    try:
        return activity_type(**payload)
    except TypeError as exc:
        raise ModelValidationError(activity_type, [str(exc)]) from exc


@dataclass(frozen=True, slots=True)
class Pet:
    """A single pet. All stat values are micro-scaled integers."""

    id: str
    name: str
    species_id: str
    growth: Growth
    care: CareStats
    energy: int
    care_life: int
    battle_stats: BattleStats = field(default_factory=BattleStats)
    waste: Waste = field(default_factory=Waste)
    sleep_ticks_today: int = 0
    health: HealthState = HealthState.HEALTHY
    sick_countdown: int = SICKNESS_COUNTDOWN_TICKS
    activity: Activity | None = None
    activity_cooldowns: Mapping[str, int] = field(default_factory=dict)

    @property
    def activity_state(self) -> ActivityState:
        if self.activity is None:
            return ActivityState.IDLE
        return self.activity.kind

    @property
    def is_sleeping(self) -> bool:
        return isinstance(self.activity, SleepActivity)

    @property
    def sleep_start_ms(self) -> int | None:
        if isinstance(self.activity, SleepActivity):
            return self.activity.started_at_ms
        return None

    @property
    def stage(self) -> GrowthStage:
        return self.growth.stage

    @property
    def active_training(self) -> TrainingActivity | None:
        return self.activity if isinstance(self.activity, TrainingActivity) else None

    @property
    def active_exploration(self) -> ExplorationActivity | None:
        return self.activity if isinstance(self.activity, ExplorationActivity) else None

    @property
    def travel_state(self) -> TravelActivity | None:
        return self.activity if isinstance(self.activity, TravelActivity) else None

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "species_id": self.species_id,
            "growth": self.growth.to_mapping(),
            "care": self.care.to_mapping(),
            "energy": self.energy,
            "care_life": self.care_life,
            "battle_stats": self.battle_stats.to_mapping(),
            "waste": {
                "count": self.waste.count,
                "ticks_until_next": self.waste.ticks_until_next,
            },
            "sleep_ticks_today": self.sleep_ticks_today,
            "health": self.health.value,
            "sick_countdown": self.sick_countdown,
            "activity_state": self.activity_state.value,
            "activity": (
                activity_to_mapping(self.activity) if self.activity is not None else None
            ),
            "activity_cooldowns": dict(self.activity_cooldowns),
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Pet":
        payload = validate_payload(cls, data)
        activity_data = payload.get("activity")
        activity = activity_from_mapping(activity_data) if activity_data else None
        declared = payload.get("activity_state")
        pet = cls(
            id=payload["id"],
            name=payload["name"],
            species_id=payload["species_id"],
            growth=Growth.from_mapping(payload["growth"]),
            care=CareStats.from_mapping(payload["care"]),
            energy=payload["energy"],
            care_life=payload["care_life"],
            battle_stats=BattleStats.from_mapping(payload.get("battle_stats", {})),
            waste=Waste.from_mapping(payload.get("waste", {})),
            sleep_ticks_today=payload.get("sleep_ticks_today", 0),
            health=HealthState.from_value(payload.get("health", HealthState.HEALTHY)),
            sick_countdown=payload.get("sick_countdown", SICKNESS_COUNTDOWN_TICKS),
            activity=activity,
            activity_cooldowns={
                str(key): int(value)
                for key, value in payload.get("activity_cooldowns", {}).items()
            },
        )
        if declared is not None and ActivityState.from_value(declared) != pet.activity_state:
            raise ModelValidationError(
                cls,
                [
                    f"activity_state {declared!r} does not match "
                    f"payload {pet.activity_state.value!r}"
                ],
            )
        return pet


class PetValidator(ModelValidator):
    model = Pet
    strict = False
    fields = {
        "id": FieldSpec(is_non_empty_str, "a pet id"),
        "name": FieldSpec(is_non_empty_str, "a pet name"),
        "species_id": FieldSpec(is_non_empty_str, "a species id"),
        "growth": FieldSpec(Mapping, "a growth mapping"),
        "care": FieldSpec(Mapping, "a care stat mapping"),
        "energy": FieldSpec(is_non_negative_int, "a non-negative micro value"),
        "care_life": FieldSpec(is_non_negative_int, "a non-negative micro value"),
        "battle_stats": FieldSpec(
            MappingSpec(str, int), "a mapping of battle stats", required=False
        ),
        "waste": FieldSpec(MappingSpec(str, int), "a waste mapping", required=False),
        "sleep_ticks_today": FieldSpec(int, "an integer", required=False),
        "health": FieldSpec(str, "a health state", required=False),
        "sick_countdown": FieldSpec(int, "an integer", required=False),
        "activity_state": FieldSpec(str, "an activity state", required=False),
        "activity": FieldSpec(Mapping, "an activity payload", required=False, allow_none=True),
        "activity_cooldowns": FieldSpec(
            MappingSpec(str, int), "a mapping of cooldown keys to ticks", required=False
        ),
    }


Pet.validator = PetValidator


__all__ = [
    "Activity",
    "ActivityState",
    "BattleStats",
    "CareStats",
    "ExplorationActivity",
    "Growth",
    "HealthState",
    "MAX_WASTE_COUNT",
    "Pet",
    "SICKNESS_COUNTDOWN_TICKS",
    "SleepActivity",
    "TrainingActivity",
    "TravelActivity",
    "WASTE_INTERVAL_MIN_TICKS",
    "WASTE_INTERVAL_SPREAD_TICKS",
    "Waste",
    "activity_from_mapping",
    "activity_to_mapping",
]
