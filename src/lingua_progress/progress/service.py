"""Submission orchestration around the progress ledger.

Each submission is one read-modify-write cycle: load (or lazily create) the
ledger, record the attempt, derive the XP reward from the attempt outcome,
credit the skill and the daily/weekly rollups, award the learner profile,
then persist the ledger once.
"""

from datetime import datetime
from typing import Literal

import structlog

from lingua_progress.models.practice import (
    ActivityType,
    ListeningAttemptInput,
    ListeningExercise,
    Skill,
    SkillUpdate,
    SpeakingAttemptInput,
    SpeakingExercise,
)
from lingua_progress.models.progress import (
    DailyRecord,
    PracticeProgress,
    ProgressLedger,
    ProgressSummary,
    RecentAttempt,
    SubmissionResult,
    VocabularyRecord,
)
from lingua_progress.progress import rewards
from lingua_progress.progress.recording import (
    record_lesson_attempt,
    record_listening_attempt,
    record_speaking_attempt,
)
from lingua_progress.progress.rollup import update_daily_progress
from lingua_progress.progress.scoring import round_half_up
from lingua_progress.progress.skills import update_skill_progress
from lingua_progress.progress.vocabulary import due_for_review, record_vocabulary_review
from lingua_progress.storage.learner_profile import LearnerProfileStore
from lingua_progress.storage.ledger_store import LedgerStore

logger = structlog.get_logger()

RECENT_ATTEMPTS_LIMIT = 10

PracticeKind = Literal["speaking", "listening"]


class ProgressService:
    """Entry point used by the HTTP layer.

    Args:
        ledgers: Ledger store.
        profiles: Learner profile store credited with XP and streaks.
    """

    def __init__(self, ledgers: LedgerStore, profiles: LearnerProfileStore):
        self.ledgers = ledgers
        self.profiles = profiles

    def record_lesson_attempt(
        self,
        user_id: str,
        language: str,
        lesson_id: str,
        score: int,
        time_spent: int = 0,
        skill: Skill = Skill.GRAMMAR,
        now: datetime | None = None,
    ) -> SubmissionResult:
        now = now or datetime.now()
        with self.ledgers.transaction(user_id, language) as ledger:
            outcome = record_lesson_attempt(ledger, lesson_id, score, time_spent, now=now)
            xp = rewards.lesson_xp(score)
            skill_update = update_skill_progress(ledger, skill, xp, score, now=now)
            update_daily_progress(ledger, xp, ActivityType.LESSON, time_spent, now=now)
            self.profiles.award_activity(user_id, xp, now=now)

        return SubmissionResult(
            outcome=outcome,
            xp_earned=xp,
            skill_update=skill_update,
            statistics=ledger.statistics,
        )

    def record_speaking_attempt(
        self,
        user_id: str,
        language: str,
        exercise: SpeakingExercise,
        attempt: SpeakingAttemptInput,
        now: datetime | None = None,
    ) -> SubmissionResult:
        now = now or datetime.now()
        with self.ledgers.transaction(user_id, language) as ledger:
            outcome = record_speaking_attempt(ledger, exercise, attempt, now=now)
            xp = rewards.speaking_xp(outcome.score)
            skill_update = update_skill_progress(
                ledger, Skill.SPEAKING, xp, outcome.score, now=now
            )
            minutes = round_half_up(attempt.recording_duration / 60)
            update_daily_progress(ledger, xp, ActivityType.SPEAKING, minutes, now=now)
            self.profiles.award_activity(user_id, xp, now=now)

        return SubmissionResult(
            outcome=outcome,
            xp_earned=xp,
            skill_update=skill_update,
            feedback=attempt.feedback or rewards.speaking_feedback(outcome.score),
            statistics=ledger.statistics,
        )

    def record_listening_attempt(
        self,
        user_id: str,
        language: str,
        exercise: ListeningExercise,
        attempt: ListeningAttemptInput,
        now: datetime | None = None,
    ) -> SubmissionResult:
        now = now or datetime.now()
        with self.ledgers.transaction(user_id, language) as ledger:
            outcome = record_listening_attempt(ledger, exercise, attempt, now=now)
            xp = rewards.listening_xp(outcome.score, attempt.completion_rate)
            skill_update = update_skill_progress(
                ledger, Skill.LISTENING, xp, outcome.score, now=now
            )
            minutes = round_half_up(attempt.time_spent / 60)
            update_daily_progress(ledger, xp, ActivityType.LISTENING, minutes, now=now)
            self.profiles.award_activity(user_id, xp, now=now)

        return SubmissionResult(
            outcome=outcome,
            xp_earned=xp,
            skill_update=skill_update,
            feedback=attempt.feedback or rewards.listening_feedback(outcome.score),
            accuracy=rewards.answer_accuracy(attempt.questions_answered, attempt.correct_answers),
            statistics=ledger.statistics,
        )

    def record_vocabulary_review(
        self,
        user_id: str,
        language: str,
        word_id: str,
        correct: bool,
        word: str = "",
        translation: str = "",
        now: datetime | None = None,
    ) -> VocabularyRecord:
        now = now or datetime.now()
        with self.ledgers.transaction(user_id, language) as ledger:
            record = record_vocabulary_review(
                ledger, word_id, correct, word=word, translation=translation, now=now
            )
            xp = rewards.vocabulary_xp(correct)
            update_skill_progress(ledger, Skill.VOCABULARY, xp, 100 if correct else 0, now=now)
            update_daily_progress(ledger, xp, ActivityType.VOCABULARY, now=now)
            self.profiles.award_activity(user_id, xp, now=now)
        return record

    def update_skill_progress(
        self,
        user_id: str,
        language: str,
        skill: Skill,
        xp_delta: int,
        accuracy_sample: float,
        now: datetime | None = None,
    ) -> SkillUpdate:
        with self.ledgers.transaction(user_id, language) as ledger:
            return update_skill_progress(ledger, skill, xp_delta, accuracy_sample, now=now)

    def update_daily_progress(
        self,
        user_id: str,
        language: str,
        xp: int,
        activity_type: ActivityType,
        time_spent: int = 0,
        now: datetime | None = None,
    ) -> DailyRecord:
        with self.ledgers.transaction(user_id, language) as ledger:
            return update_daily_progress(ledger, xp, activity_type, time_spent, now=now)

    def get_ledger(self, user_id: str, language: str) -> ProgressLedger | None:
        return self.ledgers.load(user_id, language)

    def get_summary(
        self, user_id: str, language: str, now: datetime | None = None
    ) -> ProgressSummary:
        """Ledger overview, or zeroed defaults if the learner never practised."""
        ledger = self.ledgers.load(user_id, language)
        if ledger is None:
            return ProgressSummary(language=language)
        today = (now or datetime.now()).date()
        return ProgressSummary(
            language=language,
            statistics=ledger.statistics,
            skills=list(ledger.skills.values()),
            weekly_goals=ledger.weekly_goals,
            today=ledger.daily.get(today),
        )

    def get_practice_progress(
        self, user_id: str, language: str, kind: PracticeKind
    ) -> PracticeProgress:
        """Speaking or listening history with the ten most recent attempts."""
        ledger = self.ledgers.load(user_id, language)
        if ledger is None:
            return PracticeProgress()

        if kind == "speaking":
            records = list(ledger.speaking_exercises.values())
            recent = [
                RecentAttempt(
                    exercise_id=record.exercise_id,
                    title=record.exercise_text,
                    category=record.category,
                    difficulty=record.difficulty,
                    score=attempt.overall_score,
                    attempted_at=attempt.attempted_at,
                    feedback=attempt.feedback,
                )
                for record in records
                for attempt in record.attempts
            ]
            completed = ledger.statistics.speaking_exercises_completed
            average = ledger.statistics.average_speaking_score
        else:
            records = list(ledger.listening_exercises.values())
            recent = [
                RecentAttempt(
                    exercise_id=record.exercise_id,
                    title=record.audio_title,
                    category=record.category,
                    difficulty=record.difficulty,
                    score=attempt.comprehension_score,
                    attempted_at=attempt.attempted_at,
                    feedback=attempt.feedback,
                    accuracy=rewards.answer_accuracy(
                        attempt.questions_answered, attempt.correct_answers
                    ),
                )
                for record in records
                for attempt in record.attempts
            ]
            completed = ledger.statistics.listening_exercises_completed
            average = ledger.statistics.average_listening_score

        recent.sort(key=lambda a: a.attempted_at, reverse=True)
        skill = ledger.skills.get(Skill(kind))
        return PracticeProgress(
            total_exercises=len(records),
            completed_exercises=completed,
            average_score=average,
            total_attempts=sum(record.total_attempts for record in records),
            recent_attempts=recent[:RECENT_ATTEMPTS_LIMIT],
            skill_level=skill.level if skill else 0,
            skill_xp=skill.xp if skill else 0,
            skill_accuracy=skill.accuracy if skill else 0.0,
        )

    def due_vocabulary(
        self, user_id: str, language: str, now: datetime | None = None
    ) -> list[VocabularyRecord]:
        ledger = self.ledgers.load(user_id, language)
        if ledger is None:
            return []
        return due_for_review(ledger, now=now)
