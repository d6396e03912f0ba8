"""Timed activities that occupy the pet: training, exploration and travel."""

from __future__ import annotations

from .exploration import (
    ExplorationResult,
    cancel_exploration,
    complete_exploration,
    exploration_finished,
    start_exploration,
    tick_exploration,
)
from .gating import Gate, can_start_activity
from .training import (
    TrainingResult,
    cancel_training,
    complete_training,
    start_training,
    tick_training,
)
from .travel import (
    TravelResult,
    cancel_travel,
    complete_travel,
    start_travel,
    tick_travel,
    travel_finished,
)

__all__ = [
    "ExplorationResult",
    "Gate",
    "TrainingResult",
    "TravelResult",
    "can_start_activity",
    "cancel_exploration",
    "cancel_training",
    "cancel_travel",
    "complete_exploration",
    "complete_training",
    "complete_travel",
    "exploration_finished",
    "start_exploration",
    "start_training",
    "start_travel",
    "tick_exploration",
    "tick_training",
    "tick_travel",
    "travel_finished",
]
