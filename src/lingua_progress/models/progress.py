"""Progress ledger data models.

One ``ProgressLedger`` exists per (user, language). Exercise-keyed
collections are dicts from identifier to record; attempt logs are lists in
chronological order. The ``get-or-insert`` accessors return the live record
so callers mutate it in place within a single load/save cycle.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from lingua_progress.clock import most_recent_sunday
from lingua_progress.models.practice import (
    ActivityType,
    AttemptOutcome,
    LessonStatus,
    ListeningAnswer,
    ListeningExercise,
    Skill,
    SkillUpdate,
    SpeakingExercise,
)


class LessonRecord(BaseModel):
    lesson_id: str
    status: LessonStatus = LessonStatus.NOT_STARTED
    best_score: int = 0
    attempts: int = 0
    time_spent: int = 0  # minutes
    last_attempt: datetime | None = None
    completed_at: datetime | None = None
    mastered_at: datetime | None = None


class SpeakingAttempt(BaseModel):
    attempted_at: datetime = Field(default_factory=datetime.now)
    pronunciation_score: int
    fluency_score: int
    accuracy_score: int
    overall_score: int
    recording_duration: int = 0  # seconds
    feedback: str = ""
    improvements: list[str] = Field(default_factory=list)


class ListeningAttempt(BaseModel):
    attempted_at: datetime = Field(default_factory=datetime.now)
    comprehension_score: int
    questions_answered: int = 0
    correct_answers: int = 0
    time_spent: int = 0  # seconds
    completion_rate: int = 0
    answers: list[ListeningAnswer] = Field(default_factory=list)
    feedback: str = ""


class PracticeRecord(BaseModel):
    """Derived fields shared by speaking and listening exercise records."""

    exercise_id: str
    category: str = ""
    difficulty: str = ""
    best_score: int = 0
    total_attempts: int = 0
    average_score: int = 0
    last_practiced: datetime | None = None
    is_completed: bool = False


class SpeakingRecord(PracticeRecord):
    exercise_text: str = ""
    attempts: list[SpeakingAttempt] = Field(default_factory=list)

    @property
    def scores(self) -> list[int]:
        return [a.overall_score for a in self.attempts]


class ListeningRecord(PracticeRecord):
    audio_title: str = ""
    audio_url: str = ""
    transcript: str = ""
    duration: int = 0  # seconds
    attempts: list[ListeningAttempt] = Field(default_factory=list)

    @property
    def scores(self) -> list[int]:
        return [a.comprehension_score for a in self.attempts]


class SkillRecord(BaseModel):
    skill: Skill
    level: int = 0
    xp: int = 0
    accuracy: float = 0.0
    last_practiced: datetime | None = None


class VocabularyRecord(BaseModel):
    word_id: str
    word: str = ""
    translation: str = ""
    strength: int = 0  # 0-5
    correct_answers: int = 0
    total_answers: int = 0
    last_reviewed: datetime | None = None
    next_review: datetime | None = None
    is_learned: bool = False


class ActivityCount(BaseModel):
    type: ActivityType
    count: int = 0
    xp: int = 0


class DailyRecord(BaseModel):
    day: date
    xp_earned: int = 0
    lessons_completed: int = 0
    time_spent: int = 0  # minutes
    activities: dict[ActivityType, ActivityCount] = Field(default_factory=dict)


class WeeklyGoals(BaseModel):
    xp_target: int = 1000
    lessons_target: int = 7
    time_target: int = 210  # minutes
    current_week_xp: int = 0
    current_week_lessons: int = 0
    current_week_time: int = 0
    week_start: datetime = Field(default_factory=most_recent_sunday)


class Statistics(BaseModel):
    """Rollup derived wholesale from the ledger's collections."""

    total_lessons_completed: int = 0
    total_time_spent: int = 0
    average_score: float = 0.0
    best_streak: int = 0
    words_learned: int = 0
    perfect_scores: int = 0
    speaking_exercises_completed: int = 0
    listening_exercises_completed: int = 0
    average_speaking_score: int = 0
    average_listening_score: int = 0


class ProgressLedger(BaseModel):
    """Aggregate progress for one user in one target language."""

    user_id: str
    language: str
    lessons: dict[str, LessonRecord] = Field(default_factory=dict)
    speaking_exercises: dict[str, SpeakingRecord] = Field(default_factory=dict)
    listening_exercises: dict[str, ListeningRecord] = Field(default_factory=dict)
    skills: dict[Skill, SkillRecord] = Field(default_factory=dict)
    vocabulary: dict[str, VocabularyRecord] = Field(default_factory=dict)
    daily: dict[date, DailyRecord] = Field(default_factory=dict)
    weekly_goals: WeeklyGoals = Field(default_factory=WeeklyGoals)
    statistics: Statistics = Field(default_factory=Statistics)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def lesson(self, lesson_id: str) -> LessonRecord:
        record = self.lessons.get(lesson_id)
        if record is None:
            record = self.lessons[lesson_id] = LessonRecord(lesson_id=lesson_id)
        return record

    def speaking(self, exercise: SpeakingExercise) -> SpeakingRecord:
        """Get the exercise's record, snapshotting its metadata on first sight."""
        record = self.speaking_exercises.get(exercise.id)
        if record is None:
            record = SpeakingRecord(
                exercise_id=exercise.id,
                exercise_text=exercise.text,
                category=exercise.category,
                difficulty=exercise.difficulty,
            )
            self.speaking_exercises[exercise.id] = record
        return record

    def listening(self, exercise: ListeningExercise) -> ListeningRecord:
        """Get the exercise's record, snapshotting its metadata on first sight."""
        record = self.listening_exercises.get(exercise.id)
        if record is None:
            record = ListeningRecord(
                exercise_id=exercise.id,
                audio_title=exercise.title,
                audio_url=exercise.audio_url,
                transcript=exercise.transcript,
                category=exercise.category,
                difficulty=exercise.difficulty,
                duration=exercise.duration,
            )
            self.listening_exercises[exercise.id] = record
        return record

    def skill(self, skill: Skill) -> SkillRecord:
        record = self.skills.get(skill)
        if record is None:
            record = self.skills[skill] = SkillRecord(skill=skill)
        return record

    def vocabulary_item(self, word_id: str, word: str = "", translation: str = "") -> VocabularyRecord:
        record = self.vocabulary.get(word_id)
        if record is None:
            record = VocabularyRecord(word_id=word_id, word=word, translation=translation)
            self.vocabulary[word_id] = record
        return record

    def day(self, day: date) -> DailyRecord:
        record = self.daily.get(day)
        if record is None:
            record = self.daily[day] = DailyRecord(day=day)
        return record


class SubmissionResult(BaseModel):
    """Everything a practice submission produced, ready for the response."""

    outcome: AttemptOutcome
    xp_earned: int
    skill_update: SkillUpdate
    feedback: str = ""
    accuracy: int | None = None
    statistics: Statistics


class ProgressSummary(BaseModel):
    """Ledger overview; zeroed defaults when no ledger exists yet."""

    language: str
    statistics: Statistics = Field(default_factory=Statistics)
    skills: list[SkillRecord] = Field(default_factory=list)
    weekly_goals: WeeklyGoals = Field(default_factory=WeeklyGoals)
    today: DailyRecord | None = None


class RecentAttempt(BaseModel):
    exercise_id: str
    title: str
    category: str = ""
    difficulty: str = ""
    score: int
    attempted_at: datetime
    feedback: str = ""
    accuracy: int | None = None


class PracticeProgress(BaseModel):
    """Speaking or listening history for one language."""

    total_exercises: int = 0
    completed_exercises: int = 0
    average_score: int = 0
    total_attempts: int = 0
    recent_attempts: list[RecentAttempt] = Field(default_factory=list)
    skill_level: int = 0
    skill_xp: int = 0
    skill_accuracy: float = 0.0
