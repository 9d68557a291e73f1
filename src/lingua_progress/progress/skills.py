"""Skill XP, accuracy and level tracking."""

from datetime import datetime

import structlog

from lingua_progress.models.practice import Skill, SkillUpdate
from lingua_progress.models.progress import ProgressLedger
from lingua_progress.progress.statistics import refresh_statistics

logger = structlog.get_logger()

XP_PER_LEVEL = 500
MAX_LEVEL = 10


def level_for_xp(xp: int) -> int:
    """Skill level for a cumulative XP total, capped at MAX_LEVEL."""
    return min(max(xp, 0) // XP_PER_LEVEL, MAX_LEVEL)


def update_skill_progress(
    ledger: ProgressLedger,
    skill: Skill,
    xp_delta: int,
    accuracy_sample: float,
    now: datetime | None = None,
) -> SkillUpdate:
    """Add XP and an accuracy sample to a skill.

    Accuracy is a two-point running average, ``(old + sample) / 2``, so
    recent samples outweigh older ones. It is not a mean over all samples.

    Args:
        ledger: Ledger to mutate.
        skill: Skill to credit.
        xp_delta: XP to add.
        accuracy_sample: Accuracy of the latest activity (0-100).
        now: Practice time (defaults to the current time).

    Returns:
        SkillUpdate reporting whether the level went up.
    """
    record = ledger.skill(skill)
    old_level = record.level

    record.xp += xp_delta
    record.accuracy = (record.accuracy + accuracy_sample) / 2
    record.last_practiced = now or datetime.now()
    record.level = level_for_xp(record.xp)

    leveled_up = record.level > old_level
    if leveled_up:
        logger.info(
            "skill_level_up",
            user_id=ledger.user_id,
            language=ledger.language,
            skill=skill.value,
            level=record.level,
        )

    refresh_statistics(ledger)
    return SkillUpdate(skill=skill, leveled_up=leveled_up, level=record.level, xp=record.xp)
