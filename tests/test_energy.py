"""Tests for energy caps, regeneration and refunds."""

from __future__ import annotations

import pytest

from petsim.energy import (
    apply_energy_regen,
    energy_cap_for_stage,
    has_energy,
    prorated_refund,
    regen_rate,
    spend_energy,
)
from petsim.models import GrowthStage


@pytest.mark.parametrize(
    ("stage", "cap"),
    [
        (GrowthStage.BABY, 50_000),
        (GrowthStage.CHILD, 75_000),
        (GrowthStage.TEEN, 100_000),
        (GrowthStage.YOUNG_ADULT, 150_000),
        ("adult", 200_000),
    ],
)
def test_stage_caps(stage, cap: int) -> None:
    assert energy_cap_for_stage(stage) == cap


def test_sleep_regenerates_faster_with_age() -> None:
    assert regen_rate(GrowthStage.BABY, sleeping=False) == 40
    assert regen_rate(GrowthStage.ADULT, sleeping=False) == 40
    assert regen_rate(GrowthStage.BABY, sleeping=True) == 120
    assert regen_rate(GrowthStage.ADULT, sleeping=True) == 240


def test_regen_is_capped() -> None:
    assert apply_energy_regen(10_000, GrowthStage.BABY, sleeping=False) == 10_040
    assert apply_energy_regen(49_990, GrowthStage.BABY, sleeping=True) == 50_000


def test_spending_checks_display_cost() -> None:
    assert has_energy(15_000, 15)
    assert not has_energy(14_999, 15)
    assert spend_energy(15_000, 15) == 0


def test_prorated_refund() -> None:
    assert prorated_refund(10, 30, 60) == 5_000
    assert prorated_refund(12, 2, 8) == 3_000
    assert prorated_refund(10, 0, 60) == 0
    assert prorated_refund(10, 90, 60) == 10_000
    assert prorated_refund(10, 5, 0) == 0
