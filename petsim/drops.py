"""Threshold drop-table resolution.

One roll is compared against every entry: an entry pays out when
``roll >= entry.min_roll`` and its requirements are met. A single high roll
therefore satisfies several entries at once, so good luck shows up as a
cluster of rewards rather than as independent coin flips.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping

from .models.content import DropEntry, DropTable
from .models.progression import GrowthStage
from .models.state import GameState


@dataclass(frozen=True, slots=True)
class Drop:
    item_id: str
    quantity: int

    def to_mapping(self) -> Dict[str, object]:
        return {"item_id": self.item_id, "quantity": self.quantity}


@dataclass(frozen=True, slots=True)
class DropContext:
    """What entry requirements are checked against."""

    stage: GrowthStage | None = None
    skill_levels: Mapping[str, int] = field(default_factory=dict)
    completed_quests: frozenset[str] = frozenset()

    @classmethod
    def from_state(cls, state: GameState) -> "DropContext":
        return cls(
            stage=state.pet.stage if state.pet is not None else None,
            skill_levels=state.player.skill_levels(),
            completed_quests=state.completed_quest_ids(),
        )

    def allows(self, entry: DropEntry) -> bool:
        if entry.requirements.is_empty:
            return True
        reason = entry.requirements.unmet_reason(
            stage=self.stage,
            skill_levels=self.skill_levels,
            completed_quests=self.completed_quests,
        )
        return reason is None


def _check_roll(roll: float) -> None:
    if not 0.0 <= roll < 1.0:
        raise ValueError(f"Drop roll must be in [0, 1), got {roll!r}")


def _accumulate(
    totals: Dict[str, int], table: DropTable, roll: float, context: DropContext
) -> None:
    for entry in table.entries:
        if roll >= entry.min_roll and context.allows(entry):
            # Duplicate item ids stack instead of replacing each other.
            totals[entry.item_id] = totals.get(entry.item_id, 0) + entry.quantity


def resolve(
    table: DropTable, roll: float, context: DropContext | None = None
) -> List[Drop]:
    """Return the items ``roll`` earns from ``table``, in first-seen order."""

    return resolve_many((table,), roll, context)


def resolve_many(
    tables: Iterable[DropTable], roll: float, context: DropContext | None = None
) -> List[Drop]:
    _check_roll(roll)
    context = context or DropContext()
    totals: Dict[str, int] = {}
    for table in tables:
        _accumulate(totals, table, roll, context)
    return [Drop(item_id, quantity) for item_id, quantity in totals.items()]


def total_quantity(drops: Iterable[Drop]) -> int:
    return sum(drop.quantity for drop in drops)


__all__ = ["Drop", "DropContext", "resolve", "resolve_many", "total_quantity"]
