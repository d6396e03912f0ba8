"""Offline catch-up: replay the ticks that elapsed while nobody was playing.

The replayer loops over the game tick rather than using a closed form,
because waste scheduling, sickness and activity completion are all path
dependent. Applying :func:`replay` once for ``E`` ticks yields exactly the
state produced by calling :func:`petsim.tick.process_game_tick` ``E`` times
with the same random draws.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict

from .activities.exploration import ExplorationResult
from .activities.training import TrainingResult
from .activities.travel import TravelResult
from .care import care_life_max, care_stat_max
from .clock import TICK_DURATION_MS, format_ticks, ms_to_ticks
from .config import SimConfig
from .energy import energy_cap_for_stage
from .models.pet import Pet
from .models.state import GameState
from .registry import ContentRegistry
from .rng import RandomSource
from .tick import StageTransition, TickEvent, advance_game, game_rng, store_rng

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StatSnapshot:
    """Micro-scaled stat values with the maxima in force at that moment."""

    satiety: int
    hydration: int
    happiness: int
    energy: int
    care_life: int
    waste_count: int
    stage: str
    care_max: int
    energy_max: int
    care_life_max: int

    @classmethod
    def of(cls, pet: Pet) -> "StatSnapshot":
        return cls(
            satiety=pet.care.satiety,
            hydration=pet.care.hydration,
            happiness=pet.care.happiness,
            energy=pet.energy,
            care_life=pet.care_life,
            waste_count=pet.waste.count,
            stage=pet.stage.value,
            care_max=care_stat_max(pet.stage),
            energy_max=energy_cap_for_stage(pet.stage),
            care_life_max=care_life_max(pet.stage),
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "satiety": self.satiety,
            "hydration": self.hydration,
            "happiness": self.happiness,
            "energy": self.energy,
            "care_life": self.care_life,
            "waste_count": self.waste_count,
            "stage": self.stage,
            "max": {
                "care": self.care_max,
                "energy": self.energy_max,
                "care_life": self.care_life_max,
            },
        }


@dataclass(frozen=True, slots=True)
class ReportEntry:
    """A completed activity, tagged with the tick offset it finished on."""

    tick_offset: int
    title: str
    message: str
    result: TickEvent

    def to_mapping(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "tick_offset": self.tick_offset,
            "title": self.title,
            "message": self.message,
        }
        payload.update(self.result.to_mapping())
        return payload


@dataclass(frozen=True, slots=True)
class OfflineReport:
    elapsed_ms: int
    ticks_processed: int
    was_capped: bool
    pet_name: str | None = None
    before: StatSnapshot | None = None
    after: StatSnapshot | None = None
    exploration_results: tuple[ReportEntry, ...] = ()
    training_results: tuple[ReportEntry, ...] = ()
    travel_results: tuple[ReportEntry, ...] = ()
    stage_transitions: tuple[ReportEntry, ...] = ()

    @property
    def has_activity(self) -> bool:
        return bool(
            self.exploration_results
            or self.training_results
            or self.travel_results
            or self.stage_transitions
        )

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "elapsed_ms": self.elapsed_ms,
            "ticks_processed": self.ticks_processed,
            "was_capped": self.was_capped,
            "pet_name": self.pet_name,
            "before": self.before.to_mapping() if self.before else None,
            "after": self.after.to_mapping() if self.after else None,
            "exploration_results": [entry.to_mapping() for entry in self.exploration_results],
            "training_results": [entry.to_mapping() for entry in self.training_results],
            "travel_results": [entry.to_mapping() for entry in self.travel_results],
            "stage_transitions": [entry.to_mapping() for entry in self.stage_transitions],
        }


@dataclass(frozen=True, slots=True)
class ReplayResult:
    state: GameState
    report: OfflineReport


def _describe(event: TickEvent, registry: ContentRegistry) -> tuple[str, str]:
    if isinstance(event, ExplorationResult):
        location = registry.location(event.location_id)
        activity = registry.activity(event.activity_id)
        place = location.name if location else event.location_id
        verb = activity.name.lower() if activity else event.activity_id
        count = event.total_items
        if count:
            message = f"Found {count} item(s) while {verb} at {place}."
        else:
            message = f"Came back empty-handed from {verb} at {place}."
        return place, message
    if isinstance(event, TrainingResult):
        facility = registry.facility(event.facility_id)
        name = facility.name if facility else event.facility_id
        gains = ", ".join(f"+{amount} {stat}" for stat, amount in event.stat_gains.items())
        return name, f"Finished {event.session_type} training ({gains or 'no gains'})."
    if isinstance(event, TravelResult):
        location = registry.location(event.destination_id)
        name = location.name if location else event.destination_id
        return name, f"Arrived at {name}."
    return event.stage.label, f"Grew from {event.previous.label} to {event.stage.label}."


def replay(
    state: GameState,
    elapsed_ms: int,
    registry: ContentRegistry,
    rng: RandomSource | None = None,
    *,
    now_ms: int | None = None,
    config: SimConfig | None = None,
) -> ReplayResult:
    """Simulate ``elapsed_ms`` of absence and summarise what happened.

    The tick count is capped at ``config.max_offline_ticks`` (seven days by
    default); a longer absence is clamped and flagged, never rejected. The
    save point moves to ``now_ms`` (``last_save_time_ms + elapsed_ms`` when
    omitted) only once every tick has been applied.
    """

    config = config or SimConfig()
    elapsed_ms = max(0, int(elapsed_ms))
    requested = ms_to_ticks(elapsed_ms)
    cap = config.max_offline_ticks
    ticks = min(requested, cap)
    was_capped = requested > cap
    if was_capped:
        log.warning(
            "Offline time of %s exceeds the cap; replaying %s",
            format_ticks(requested),
            format_ticks(ticks),
        )

    own_rng = rng is None
    source = game_rng(state) if own_rng else rng
    pet = state.pet
    before = StatSnapshot.of(pet) if pet is not None else None
    start_ms = state.last_save_time_ms

    folded: Dict[type, list[ReportEntry]] = {
        ExplorationResult: [],
        TrainingResult: [],
        TravelResult: [],
        StageTransition: [],
    }
    for offset in range(1, ticks + 1):
        result = advance_game(state, registry, source, start_ms + offset * TICK_DURATION_MS)
        state = result.state
        for event in result.events:
            title, message = _describe(event, registry)
            folded[type(event)].append(ReportEntry(offset, title, message, event))

    end_ms = now_ms if now_ms is not None else start_ms + elapsed_ms
    state = replace(state, last_save_time_ms=max(state.last_save_time_ms, int(end_ms)))
    if own_rng:
        state = store_rng(state, source)

    report = OfflineReport(
        elapsed_ms=elapsed_ms,
        ticks_processed=ticks,
        was_capped=was_capped,
        pet_name=pet.name if pet is not None else None,
        before=before,
        after=StatSnapshot.of(state.pet) if state.pet is not None else None,
        exploration_results=tuple(folded[ExplorationResult]),
        training_results=tuple(folded[TrainingResult]),
        travel_results=tuple(folded[TravelResult]),
        stage_transitions=tuple(folded[StageTransition]),
    )
    log.info(
        "Replayed %d tick(s) (%s)%s",
        ticks,
        format_ticks(ticks),
        " [capped]" if was_capped else "",
    )
    return ReplayResult(state, report)


def replay_until(
    state: GameState,
    now_ms: int,
    registry: ContentRegistry,
    rng: RandomSource | None = None,
    *,
    config: SimConfig | None = None,
) -> ReplayResult:
    """Replay everything since the last save point up to ``now_ms``.

    Calling this twice with the same ``now_ms`` replays nothing the second
    time, because the first call already moved the save point.
    """

    now_ms = max(int(now_ms), state.last_save_time_ms)
    elapsed = now_ms - state.last_save_time_ms
    return replay(state, elapsed, registry, rng, now_ms=now_ms, config=config)


__all__ = [
    "OfflineReport",
    "ReplayResult",
    "ReportEntry",
    "StatSnapshot",
    "replay",
    "replay_until",
]
