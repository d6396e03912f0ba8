"""Energy caps, regeneration and spending helpers."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .clock import to_micro
from .models.progression import GrowthStage

# Regeneration per tick while awake, in micro points.
ENERGY_REGEN_AWAKE = 40

# Sleeping regeneration is stage dependent; older pets recover faster.
DEFAULT_SLEEPING_REGEN = 120


_BASE_STAGE_CAPS: Mapping[GrowthStage, int] = {
    GrowthStage.BABY: to_micro(50),
    GrowthStage.CHILD: to_micro(75),
    GrowthStage.TEEN: to_micro(100),
    GrowthStage.YOUNG_ADULT: to_micro(150),
    GrowthStage.ADULT: to_micro(200),
}

STAGE_ENERGY_CAPS: Mapping[GrowthStage, int] = MappingProxyType(dict(_BASE_STAGE_CAPS))

SLEEPING_ENERGY_REGEN: Mapping[GrowthStage, int] = MappingProxyType(
    {
        GrowthStage.BABY: DEFAULT_SLEEPING_REGEN,
        GrowthStage.CHILD: 150,
        GrowthStage.TEEN: 180,
        GrowthStage.YOUNG_ADULT: 210,
        GrowthStage.ADULT: 240,
    }
)


def energy_cap_for_stage(stage: GrowthStage | str) -> int:
    """Return the maximum energy (micro) for a growth stage."""

    return STAGE_ENERGY_CAPS[GrowthStage.from_value(stage)]


def regen_rate(stage: GrowthStage, sleeping: bool) -> int:
    if not sleeping:
        return ENERGY_REGEN_AWAKE
    return SLEEPING_ENERGY_REGEN.get(stage, DEFAULT_SLEEPING_REGEN)


def apply_energy_regen(energy: int, stage: GrowthStage, sleeping: bool) -> int:
    """Regenerate one tick of energy, clamped to ``[0, cap]``."""

    cap = energy_cap_for_stage(stage)
    return max(0, min(cap, energy + regen_rate(stage, sleeping)))


def has_energy(energy: int, cost_display: int) -> bool:
    return energy >= to_micro(cost_display)


def spend_energy(energy: int, cost_display: int) -> int:
    return max(0, energy - to_micro(cost_display))


def restore_energy(energy: int, amount_micro: int, stage: GrowthStage) -> int:
    return max(0, min(energy_cap_for_stage(stage), energy + amount_micro))


def prorated_refund(cost_display: int, ticks_remaining: int, duration_ticks: int) -> int:
    """Micro energy returned when an activity is abandoned partway through."""

    if duration_ticks <= 0:
        return 0
    remaining = max(0, min(ticks_remaining, duration_ticks))
    return to_micro(cost_display) * remaining // duration_ticks


__all__ = [
    "ENERGY_REGEN_AWAKE",
    "SLEEPING_ENERGY_REGEN",
    "STAGE_ENERGY_CAPS",
    "apply_energy_regen",
    "energy_cap_for_stage",
    "has_energy",
    "prorated_refund",
    "regen_rate",
    "restore_energy",
    "spend_energy",
]
