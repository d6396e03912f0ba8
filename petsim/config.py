"""Simulation configuration utilities."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .clock import MAX_OFFLINE_DAYS, TICKS_PER_DAY


def env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


@dataclass(slots=True)
class SimConfig:
    max_offline_days: int = MAX_OFFLINE_DAYS
    content_path: Path | None = None
    log_level: str = "INFO"
    rng_seed: int | None = None

    @property
    def max_offline_ticks(self) -> int:
        return self.max_offline_days * TICKS_PER_DAY

    @classmethod
    def from_env(cls) -> "SimConfig":
        max_offline_days = int(
            env("PETSIM_MAX_OFFLINE_DAYS", str(MAX_OFFLINE_DAYS))
        )
        max_offline_days = max(0, max_offline_days)
        raw_path = os.getenv("PETSIM_CONTENT_PATH")
        content_path = Path(raw_path).expanduser() if raw_path else None
        log_level = env("PETSIM_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        raw_seed = os.getenv("PETSIM_RNG_SEED")
        rng_seed = int(raw_seed) if raw_seed not in (None, "") else None

        return cls(
            max_offline_days=max_offline_days,
            content_path=content_path,
            log_level=log_level,
            rng_seed=rng_seed,
        )


def configure_logging(config: SimConfig) -> None:
    """Apply ``config.log_level`` to the package logger."""

    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        raise RuntimeError(f"Unknown log level: {config.log_level}")
    logging.getLogger("petsim").setLevel(level)


__all__ = ["SimConfig", "configure_logging", "env"]
