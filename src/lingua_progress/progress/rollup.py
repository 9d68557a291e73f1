"""Daily and weekly XP/time rollups."""

from datetime import datetime

import structlog

from lingua_progress.clock import days_between, most_recent_sunday, start_of_day
from lingua_progress.models.practice import ActivityType
from lingua_progress.models.progress import ActivityCount, DailyRecord, ProgressLedger
from lingua_progress.progress.statistics import refresh_statistics

logger = structlog.get_logger()

WEEK_LENGTH_DAYS = 7


def update_daily_progress(
    ledger: ProgressLedger,
    xp: int,
    activity_type: ActivityType,
    time_spent: int = 0,
    now: datetime | None = None,
) -> DailyRecord:
    """Fold an activity into today's record, then into the current week.

    Args:
        ledger: Ledger to mutate.
        xp: XP earned by the activity.
        activity_type: Activity tag.
        time_spent: Minutes spent.
        now: Activity time (defaults to the current time).

    Returns:
        Today's daily record.
    """
    now = now or datetime.now()
    today = ledger.day(start_of_day(now).date())

    today.xp_earned += xp
    today.time_spent += time_spent
    if activity_type == ActivityType.LESSON:
        today.lessons_completed += 1

    activity = today.activities.get(activity_type)
    if activity is None:
        activity = today.activities[activity_type] = ActivityCount(type=activity_type)
    activity.count += 1
    activity.xp += xp

    update_weekly_progress(ledger, xp, activity_type, time_spent, now=now)
    refresh_statistics(ledger)
    return today


def update_weekly_progress(
    ledger: ProgressLedger,
    xp: int,
    activity_type: ActivityType,
    time_spent: int = 0,
    now: datetime | None = None,
) -> None:
    """Accumulate into the current week, starting a new week once the anchor is 7+ days old."""
    now = now or datetime.now()
    goals = ledger.weekly_goals

    if days_between(goals.week_start, now) >= WEEK_LENGTH_DAYS:
        goals.current_week_xp = 0
        goals.current_week_lessons = 0
        goals.current_week_time = 0
        goals.week_start = most_recent_sunday(now)
        logger.info(
            "weekly_goals_reset",
            user_id=ledger.user_id,
            language=ledger.language,
            week_start=goals.week_start.isoformat(),
        )

    goals.current_week_xp += xp
    goals.current_week_time += time_spent
    if activity_type == ActivityType.LESSON:
        goals.current_week_lessons += 1
