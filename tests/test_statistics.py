"""Tests for statistics recomputation."""

from datetime import date

from lingua_progress.models.practice import (
    ActivityType,
    LessonStatus,
    ListeningAttemptInput,
    ListeningExercise,
    SpeakingAttemptInput,
    SpeakingExercise,
)
from lingua_progress.models.progress import ActivityCount, Statistics
from lingua_progress.progress.recording import (
    record_lesson_attempt,
    record_listening_attempt,
    record_speaking_attempt,
)
from lingua_progress.progress.statistics import (
    compute_statistics,
    longest_streak,
    refresh_statistics,
)


def _activity(ledger, day):
    ledger.day(day).activities[ActivityType.CHAT] = ActivityCount(type=ActivityType.CHAT, count=1)


class TestComputeStatistics:
    def test_empty_ledger_is_all_zero(self, ledger):
        assert compute_statistics(ledger) == Statistics()

    def test_lesson_figures(self, ledger, now):
        record_lesson_attempt(ledger, "a", 100, time_spent=5, now=now)
        record_lesson_attempt(ledger, "b", 80, time_spent=3, now=now)
        record_lesson_attempt(ledger, "c", 40, time_spent=2, now=now)
        stats = compute_statistics(ledger)
        assert stats.total_lessons_completed == 2
        assert stats.total_time_spent == 10
        assert stats.average_score == 90.0
        assert stats.perfect_scores == 1

    def test_mastered_counts_as_completed(self, ledger, now):
        record_lesson_attempt(ledger, "a", 95, now=now)
        record_lesson_attempt(ledger, "a", 95, now=now)
        assert ledger.lessons["a"].status == LessonStatus.MASTERED
        assert compute_statistics(ledger).total_lessons_completed == 1

    def test_practice_averages_are_mean_of_exercise_averages(self, ledger, now):
        for exercise_id, score in [("sp_1", 90), ("sp_2", 61)]:
            record_speaking_attempt(
                ledger,
                SpeakingExercise(id=exercise_id, text="x"),
                SpeakingAttemptInput(pronunciation_score=score, fluency_score=score, accuracy_score=score),
                now=now,
            )
        record_listening_attempt(
            ledger, ListeningExercise(id="ls_1", title="t"),
            ListeningAttemptInput(comprehension_score=70), now=now,
        )
        stats = compute_statistics(ledger)
        assert stats.speaking_exercises_completed == 1
        assert stats.average_speaking_score == 76  # 75.5 rounds up
        assert stats.listening_exercises_completed == 0
        assert stats.average_listening_score == 70

    def test_words_learned(self, ledger):
        ledger.vocabulary_item("w1").is_learned = True
        ledger.vocabulary_item("w2")
        assert compute_statistics(ledger).words_learned == 1

    def test_does_not_modify_ledger(self, ledger, now):
        record_lesson_attempt(ledger, "a", 100, now=now)
        ledger.statistics = Statistics()
        compute_statistics(ledger)
        assert ledger.statistics == Statistics()


class TestRefreshStatistics:
    def test_idempotent(self, ledger, now):
        record_lesson_attempt(ledger, "a", 77, time_spent=4, now=now)
        first = refresh_statistics(ledger).model_copy()
        second = refresh_statistics(ledger)
        assert first == second

    def test_repairs_tampered_statistics(self, ledger, now):
        record_lesson_attempt(ledger, "a", 77, now=now)
        ledger.statistics.total_lessons_completed = 42
        assert refresh_statistics(ledger).total_lessons_completed == 1


class TestLongestStreak:
    def test_empty(self, ledger):
        assert longest_streak(ledger.daily) == 0

    def test_counts_consecutive_days(self, ledger):
        for day in [date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 3), date(2026, 3, 5)]:
            _activity(ledger, day)
        assert longest_streak(ledger.daily) == 3

    def test_crosses_month_boundary(self, ledger):
        for day in [date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1)]:
            _activity(ledger, day)
        assert longest_streak(ledger.daily) == 3

    def test_ignores_empty_days(self, ledger):
        _activity(ledger, date(2026, 3, 1))
        ledger.day(date(2026, 3, 2))
        _activity(ledger, date(2026, 3, 3))
        assert longest_streak(ledger.daily) == 1
