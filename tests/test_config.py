"""Tests for environment-driven configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from petsim import actions
from petsim.clock import TICKS_PER_DAY
from petsim.config import SimConfig, configure_logging, env
from petsim.models import GameState
from petsim.registry import ContentRegistry


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PETSIM_MAX_OFFLINE_DAYS",
        "PETSIM_CONTENT_PATH",
        "PETSIM_LOG_LEVEL",
        "PETSIM_RNG_SEED",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    config = SimConfig.from_env()
    assert config.max_offline_days == 7
    assert config.max_offline_ticks == 7 * TICKS_PER_DAY
    assert config.content_path is None
    assert config.log_level == "INFO"
    assert config.rng_seed is None


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("PETSIM_MAX_OFFLINE_DAYS", "2")
    monkeypatch.setenv("PETSIM_CONTENT_PATH", str(tmp_path / "content.toml"))
    monkeypatch.setenv("PETSIM_LOG_LEVEL", " debug ")
    monkeypatch.setenv("PETSIM_RNG_SEED", "42")

    config = SimConfig.from_env()
    assert config.max_offline_ticks == 2 * TICKS_PER_DAY
    assert config.content_path == tmp_path / "content.toml"
    assert config.log_level == "DEBUG"
    assert config.rng_seed == 42


def test_negative_offline_days_clamp_to_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("PETSIM_MAX_OFFLINE_DAYS", "-3")
    assert SimConfig.from_env().max_offline_ticks == 0


def test_env_requires_value_without_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PETSIM_DOES_NOT_EXIST", raising=False)
    with pytest.raises(RuntimeError):
        env("PETSIM_DOES_NOT_EXIST")


def test_configure_logging_sets_package_level() -> None:
    logger = logging.getLogger("petsim")
    previous = logger.level
    try:
        configure_logging(SimConfig(log_level="WARNING"))
        assert logger.level == logging.WARNING
        with pytest.raises(RuntimeError):
            configure_logging(SimConfig(log_level="CHATTY"))
    finally:
        logger.setLevel(previous)


def test_registry_and_adoption_follow_config(tmp_path: Path) -> None:
    content = tmp_path / "content.toml"
    content.write_text(
        '[[species]]\nid = "moth"\nname = "Moth"\n\n[[locations]]\nid = "home"\nname = "Home"\n',
        encoding="utf8",
    )
    config = SimConfig(content_path=content, rng_seed=5)
    registry = ContentRegistry.from_config(config)
    assert registry.species("moth") is not None
    assert registry.species("sproutling") is None

    result = actions.adopt_pet(GameState(), registry, "Dusty", "moth", 1_000, config=config)
    assert result.success
    assert result.state.rng_seed == 5
