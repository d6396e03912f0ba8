"""Skill XP curve and level-ups."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping

from .models.state import SkillProgress


class SkillType(str, Enum):
    FORAGING = "foraging"
    MINING = "mining"
    FISHING = "fishing"
    SCOUTING = "scouting"
    CRAFTING = "crafting"
    TRADING = "trading"
    SOCIAL = "social"


MAX_SKILL_LEVEL = 99

# Cumulative XP to reach level n is BASE_SKILL_XP * n * (n + 1) / 2.
BASE_SKILL_XP = 50


def initial_skills() -> Dict[str, SkillProgress]:
    return {skill.value: SkillProgress() for skill in SkillType}


def xp_to_level(level: int) -> int:
    """Total XP needed to reach ``level`` from level 1."""

    if level <= 1:
        return 0
    return BASE_SKILL_XP * level * (level + 1) // 2


def xp_for_next_level(level: int) -> int:
    if level >= MAX_SKILL_LEVEL:
        return 0
    return xp_to_level(level + 1) - xp_to_level(level)


def add_skill_xp(progress: SkillProgress, amount: int) -> tuple[SkillProgress, bool]:
    """Add ``amount`` XP, processing any number of level-ups."""

    if progress.level >= MAX_SKILL_LEVEL:
        return SkillProgress(level=MAX_SKILL_LEVEL, xp=0), False

    level = progress.level
    xp = progress.xp + max(0, int(amount))
    leveled_up = False
    while level < MAX_SKILL_LEVEL:
        needed = xp_for_next_level(level)
        if xp < needed:
            break
        xp -= needed
        level += 1
        leveled_up = True
    if level >= MAX_SKILL_LEVEL:
        level, xp = MAX_SKILL_LEVEL, 0
    return SkillProgress(level=level, xp=xp), leveled_up


def apply_skill_xp(
    skills: Mapping[str, SkillProgress], gains: Mapping[str, int]
) -> tuple[Dict[str, SkillProgress], Dict[str, bool]]:
    updated = dict(skills)
    level_ups: Dict[str, bool] = {}
    for skill_id, amount in gains.items():
        progress, leveled_up = add_skill_xp(
            updated.get(skill_id, SkillProgress()), amount
        )
        updated[skill_id] = progress
        level_ups[skill_id] = leveled_up
    return updated, level_ups


__all__ = [
    "BASE_SKILL_XP",
    "MAX_SKILL_LEVEL",
    "SkillType",
    "add_skill_xp",
    "apply_skill_xp",
    "initial_skills",
    "xp_for_next_level",
    "xp_to_level",
]
