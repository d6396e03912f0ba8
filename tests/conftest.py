from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import pytest

PROJECT_BASE = Path(__file__).resolve().parents[1]
if str(PROJECT_BASE) not in sys.path:
    sys.path.insert(0, str(PROJECT_BASE))

from petsim.care import care_life_max, care_stat_max
from petsim.energy import energy_cap_for_stage
from petsim.models import CareStats, GameState, Growth, GrowthStage, Pet, PlayerState
from petsim.models.progression import STAGE_DEFINITIONS
from petsim.registry import ContentRegistry
from petsim.skills import initial_skills

# 01:00 UTC, so a day boundary is 23 hours (2760 ticks) away.
START_MS = 19_675 * 86_400_000 + 3_600_000


def _make_pet(stage: GrowthStage = GrowthStage.BABY, **overrides: Any) -> Pet:
    pet = Pet(
        id="pet-1",
        name="Mochi",
        species_id="sproutling",
        growth=Growth(
            stage=stage,
            substage=1,
            birth_time_ms=0,
            age_ticks=STAGE_DEFINITIONS[stage].min_age_ticks,
        ),
        care=CareStats.full(care_stat_max(stage)),
        energy=energy_cap_for_stage(stage),
        care_life=care_life_max(stage),
    )
    return replace(pet, **overrides) if overrides else pet


def _make_state(
    pet: Pet | None = None, *, location: str = "home", **overrides: Any
) -> GameState:
    state = GameState(
        pet=pet,
        player=PlayerState(
            current_location_id=location,
            visited_locations=("home",) if location == "home" else ("home", location),
            skills=initial_skills(),
        ),
        last_save_time_ms=START_MS,
        rng_seed=1234,
    )
    return replace(state, **overrides) if overrides else state


@pytest.fixture(scope="session")
def registry() -> ContentRegistry:
    return ContentRegistry.load()


@pytest.fixture
def make_pet() -> Callable[..., Pet]:
    return _make_pet


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    return _make_state
