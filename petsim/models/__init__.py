"""Data models for pets, game state and static content."""

from __future__ import annotations

from ._validation import ContentError, ModelValidationError, validate_payload
from .content import (
    Connection,
    DropEntry,
    DropTable,
    ExplorationActivityDef,
    ItemCategory,
    ItemDef,
    Location,
    ObjectiveType,
    Quest,
    QuestObjective,
    Requirements,
    SessionType,
    Species,
    TrainingFacility,
    TrainingSession,
)
from .pet import (
    ActivityState,
    BattleStats,
    CareStats,
    ExplorationActivity,
    Growth,
    HealthState,
    Pet,
    SleepActivity,
    TrainingActivity,
    TravelActivity,
    Waste,
)
from .progression import GrowthRate, GrowthStage
from .state import GameState, PlayerState, QuestProgress, QuestState, SkillProgress

__all__ = [
    "ActivityState",
    "BattleStats",
    "CareStats",
    "Connection",
    "ContentError",
    "DropEntry",
    "DropTable",
    "ExplorationActivity",
    "ExplorationActivityDef",
    "GameState",
    "Growth",
    "GrowthRate",
    "GrowthStage",
    "HealthState",
    "ItemCategory",
    "ItemDef",
    "Location",
    "ModelValidationError",
    "ObjectiveType",
    "Pet",
    "PlayerState",
    "Quest",
    "QuestObjective",
    "QuestProgress",
    "QuestState",
    "Requirements",
    "SessionType",
    "SkillProgress",
    "SleepActivity",
    "Species",
    "TrainingActivity",
    "TrainingFacility",
    "TrainingSession",
    "TravelActivity",
    "Waste",
    "validate_payload",
]
