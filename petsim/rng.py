"""Injectable random sources for waste scheduling and drop rolls."""

from __future__ import annotations

import random
import zlib
from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Anything that yields floats in ``[0, 1)`` one at a time."""

    def next(self) -> float:
        ...


def _coerce_sequence_to_tuple(value: Any) -> Any:
    """Recursively convert nested lists into tuples for RNG state restoration."""

    if isinstance(value, (list, tuple)):
        return tuple(_coerce_sequence_to_tuple(item) for item in value)
    return value


def _jsonable_state(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_jsonable_state(item) for item in value]
    return value


def derive_seed(key: str) -> int:
    """Derive a stable 64-bit seed from an identifier such as a pet id."""

    base = zlib.crc32(str(key).encode("utf8"))
    return (base * 6364136223846793005 + 1442695040888963407) & ((1 << 64) - 1)


class SeededRandom:
    """A :class:`random.Random` whose position can be saved with the game."""

    __slots__ = ("seed", "_rng")

    def __init__(self, seed: int, state: Any = None) -> None:
        self.seed = int(seed)
        self._rng = random.Random(self.seed)
        if state is not None:
            try:
                self._rng.setstate(_coerce_sequence_to_tuple(state))
            except (TypeError, ValueError):
                self._rng.seed(self.seed)

    def next(self) -> float:
        return self._rng.random()

    def getstate(self) -> list[Any]:
        """Return the generator position as JSON-friendly nested lists."""

        return _jsonable_state(self._rng.getstate())


class ScriptedRandom:
    """Replays a fixed list of draws, cycling once exhausted."""

    __slots__ = ("values", "position")

    def __init__(self, values: Iterable[float]) -> None:
        self.values: Sequence[float] = tuple(float(value) for value in values)
        if not self.values:
            raise ValueError("ScriptedRandom needs at least one value")
        for value in self.values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Scripted draw {value!r} is outside [0, 1)")
        self.position = 0

    def next(self) -> float:
        value = self.values[self.position % len(self.values)]
        self.position += 1
        return value


__all__ = [
    "RandomSource",
    "ScriptedRandom",
    "SeededRandom",
    "derive_seed",
]
