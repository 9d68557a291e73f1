"""Folding lesson, speaking and listening attempts into a progress ledger."""

from datetime import datetime

import structlog

from lingua_progress.models.practice import (
    AttemptOutcome,
    LessonStatus,
    ListeningAttemptInput,
    ListeningExercise,
    SpeakingAttemptInput,
    SpeakingExercise,
)
from lingua_progress.models.progress import (
    ListeningAttempt,
    ListeningRecord,
    ProgressLedger,
    SpeakingAttempt,
    SpeakingRecord,
)
from lingua_progress.progress.scoring import rounded_mean, speaking_overall
from lingua_progress.progress.statistics import refresh_statistics

logger = structlog.get_logger()

LESSON_PASS_SCORE = 70
LESSON_MASTERY_SCORE = 90
LESSON_MASTERY_MIN_ATTEMPTS = 2
PRACTICE_COMPLETION_SCORE = 80


def record_lesson_attempt(
    ledger: ProgressLedger,
    lesson_id: str,
    score: int,
    time_spent: int = 0,
    now: datetime | None = None,
) -> AttemptOutcome:
    """Record one lesson attempt.

    Mastery needs a high score on a second or later attempt. Unlike the
    practice completion flag, lesson status follows the latest attempt and
    can fall back to ``in_progress``.

    Args:
        ledger: Ledger to mutate.
        lesson_id: Lesson identifier.
        score: Attempt score 0-100.
        time_spent: Minutes spent on this attempt.
        now: Attempt time (defaults to the current time).

    Returns:
        Outcome carrying the new lesson status.
    """
    now = now or datetime.now()
    record = ledger.lesson(lesson_id)
    previous_best = record.best_score

    record.attempts += 1
    record.time_spent += time_spent
    record.last_attempt = now
    record.best_score = max(previous_best, score)

    if score >= LESSON_MASTERY_SCORE and record.attempts >= LESSON_MASTERY_MIN_ATTEMPTS:
        record.status = LessonStatus.MASTERED
        record.mastered_at = now
    elif score >= LESSON_PASS_SCORE:
        record.status = LessonStatus.COMPLETED
        record.completed_at = now
    else:
        record.status = LessonStatus.IN_PROGRESS

    refresh_statistics(ledger)
    logger.info(
        "lesson_attempt_recorded",
        user_id=ledger.user_id,
        language=ledger.language,
        lesson_id=lesson_id,
        score=score,
        status=record.status.value,
    )
    return AttemptOutcome(
        score=score,
        best_score=record.best_score,
        is_new_best=score > previous_best,
        status=record.status,
    )


def record_speaking_attempt(
    ledger: ProgressLedger,
    exercise: SpeakingExercise,
    attempt: SpeakingAttemptInput,
    now: datetime | None = None,
) -> AttemptOutcome:
    """Record one speaking attempt; the overall score is derived from the sub-scores."""
    now = now or datetime.now()
    record = ledger.speaking(exercise)
    overall = speaking_overall(
        attempt.pronunciation_score, attempt.fluency_score, attempt.accuracy_score
    )

    record.attempts.append(SpeakingAttempt(
        attempted_at=now,
        pronunciation_score=attempt.pronunciation_score,
        fluency_score=attempt.fluency_score,
        accuracy_score=attempt.accuracy_score,
        overall_score=overall,
        recording_duration=attempt.recording_duration,
        feedback=attempt.feedback,
        improvements=list(attempt.improvements),
    ))
    outcome = _fold_attempt(record, record.scores, overall, now)

    refresh_statistics(ledger)
    logger.info(
        "speaking_attempt_recorded",
        user_id=ledger.user_id,
        language=ledger.language,
        exercise_id=exercise.id,
        overall_score=overall,
        is_new_best=outcome.is_new_best,
    )
    return outcome


def record_listening_attempt(
    ledger: ProgressLedger,
    exercise: ListeningExercise,
    attempt: ListeningAttemptInput,
    now: datetime | None = None,
) -> AttemptOutcome:
    """Record one listening attempt; the comprehension score is taken as given."""
    now = now or datetime.now()
    record = ledger.listening(exercise)
    score = attempt.comprehension_score

    record.attempts.append(ListeningAttempt(
        attempted_at=now,
        comprehension_score=score,
        questions_answered=attempt.questions_answered,
        correct_answers=attempt.correct_answers,
        time_spent=attempt.time_spent,
        completion_rate=attempt.completion_rate,
        answers=[answer.model_copy() for answer in attempt.answers],
        feedback=attempt.feedback,
    ))
    outcome = _fold_attempt(record, record.scores, score, now)

    refresh_statistics(ledger)
    logger.info(
        "listening_attempt_recorded",
        user_id=ledger.user_id,
        language=ledger.language,
        exercise_id=exercise.id,
        comprehension_score=score,
        is_new_best=outcome.is_new_best,
    )
    return outcome


def _fold_attempt(
    record: SpeakingRecord | ListeningRecord,
    scores: list[int],
    score: int,
    now: datetime,
) -> AttemptOutcome:
    """Update derived fields after an attempt was appended to ``record``."""
    previous_best = record.best_score
    record.total_attempts += 1
    record.last_practiced = now
    record.best_score = max(previous_best, score)
    record.average_score = rounded_mean(scores)
    # Completion is a one-way ratchet
    if score >= PRACTICE_COMPLETION_SCORE:
        record.is_completed = True
    return AttemptOutcome(
        score=score,
        best_score=record.best_score,
        is_new_best=score > previous_best,
        is_completed=record.is_completed,
    )
