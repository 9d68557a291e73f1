"""Full recomputation of a ledger's summary statistics.

The rollup is never patched incrementally: every call scans the ledger's
collections from scratch, so it cannot drift from them.
"""

from datetime import date

from lingua_progress.clock import previous_day
from lingua_progress.models.practice import LessonStatus
from lingua_progress.models.progress import DailyRecord, ProgressLedger, Statistics
from lingua_progress.progress.scoring import rounded_mean

FINISHED_STATUSES = {LessonStatus.COMPLETED, LessonStatus.MASTERED}
PERFECT_SCORE = 100


def longest_streak(daily: dict[date, DailyRecord]) -> int:
    """Longest run of consecutive calendar days with any recorded activity.

    Args:
        daily: Mapping of date to DailyRecord.

    Returns:
        Length of the longest run in days.
    """
    active_days = sorted(day for day, record in daily.items() if _has_activity(record))
    best = current = 0
    last = None
    for day in active_days:
        current = current + 1 if last is not None and previous_day(day) == last else 1
        best = max(best, current)
        last = day
    return best


def _has_activity(record: DailyRecord) -> bool:
    return bool(record.activities) or record.xp_earned > 0 or record.time_spent > 0


def compute_statistics(ledger: ProgressLedger) -> Statistics:
    """Derive the statistics rollup from the ledger's current collections.

    Args:
        ledger: Ledger to summarise (not modified).

    Returns:
        Freshly computed Statistics.
    """
    lessons = list(ledger.lessons.values())
    finished = [lesson for lesson in lessons if lesson.status in FINISHED_STATUSES]
    speaking = list(ledger.speaking_exercises.values())
    listening = list(ledger.listening_exercises.values())

    average_score = 0.0
    if finished:
        average_score = sum(lesson.best_score for lesson in finished) / len(finished)

    return Statistics(
        total_lessons_completed=len(finished),
        total_time_spent=sum(lesson.time_spent for lesson in lessons),
        average_score=average_score,
        best_streak=longest_streak(ledger.daily),
        words_learned=sum(1 for item in ledger.vocabulary.values() if item.is_learned),
        perfect_scores=sum(1 for lesson in lessons if lesson.best_score == PERFECT_SCORE),
        speaking_exercises_completed=sum(1 for record in speaking if record.is_completed),
        listening_exercises_completed=sum(1 for record in listening if record.is_completed),
        average_speaking_score=rounded_mean([record.average_score for record in speaking]),
        average_listening_score=rounded_mean([record.average_score for record in listening]),
    )


def refresh_statistics(ledger: ProgressLedger) -> Statistics:
    """Recompute and store the ledger's statistics."""
    ledger.statistics = compute_statistics(ledger)
    return ledger.statistics
