"""Quest objective bookkeeping."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Mapping

from .models.content import ObjectiveType, Quest
from .models.state import GameState, QuestProgress, QuestState
from .registry import ContentRegistry


def objectives_complete(progress: QuestProgress, quest: Quest) -> bool:
    return all(
        progress.progress_for(objective.id) >= objective.count
        for objective in quest.objectives
    )


def update_quest_progress(
    state: GameState,
    registry: ContentRegistry,
    objective_type: ObjectiveType,
    target: str,
    amount: int = 1,
) -> GameState:
    """Advance every active quest objective of ``objective_type`` on ``target``."""

    if amount <= 0 or not state.quests:
        return state
    changed = False
    updated: list[QuestProgress] = []
    for progress in state.quests:
        quest = registry.quest(progress.quest_id)
        if quest is None or progress.state is not QuestState.ACTIVE:
            updated.append(progress)
            continue
        counts: Dict[str, int] = dict(progress.objective_progress)
        for objective in quest.objectives:
            if objective.type is not objective_type or objective.target != target:
                continue
            current = counts.get(objective.id, 0)
            new_value = min(objective.count, current + amount)
            if new_value != current:
                counts[objective.id] = new_value
                changed = True
        updated.append(replace(progress, objective_progress=counts))
    if not changed:
        return state
    return replace(state, quests=tuple(updated))


def add_items(inventory: Mapping[str, int], items: Mapping[str, int]) -> Dict[str, int]:
    merged = dict(inventory)
    for item_id, quantity in items.items():
        merged[item_id] = merged.get(item_id, 0) + int(quantity)
    return merged


def complete_quest(state: GameState, quest: Quest) -> GameState:
    """Mark ``quest`` completed and pay out its rewards."""

    quests = tuple(
        replace(progress, state=QuestState.COMPLETED)
        if progress.quest_id == quest.id
        else progress
        for progress in state.quests
    )
    player = replace(
        state.player,
        currency=state.player.currency + quest.reward_currency,
        inventory=add_items(state.player.inventory, quest.reward_items),
    )
    return replace(state, quests=quests, player=player)


__all__ = [
    "add_items",
    "complete_quest",
    "objectives_complete",
    "update_quest_progress",
]
