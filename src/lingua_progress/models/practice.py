"""Exercise references, attempt payloads and outcomes passed into the ledger."""

from enum import StrEnum

from pydantic import BaseModel, Field


class LessonStatus(StrEnum):
    """Lesson lifecycle states."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    MASTERED = "mastered"


class Skill(StrEnum):
    """Competency axes tracked per ledger."""

    LISTENING = "listening"
    SPEAKING = "speaking"
    READING = "reading"
    WRITING = "writing"
    GRAMMAR = "grammar"
    VOCABULARY = "vocabulary"


class ActivityType(StrEnum):
    """Activity tags counted in the daily rollup."""

    LESSON = "lesson"
    QUIZ = "quiz"
    CHAT = "chat"
    SPEAKING = "speaking"
    LISTENING = "listening"
    VOCABULARY = "vocabulary"


class Difficulty(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SpeakingExercise(BaseModel):
    """Static metadata of a speaking exercise, snapshotted on first practice."""

    id: str
    text: str
    category: str = ""
    difficulty: str = "beginner"


class ListeningExercise(BaseModel):
    """Static metadata of a listening exercise, snapshotted on first practice."""

    id: str
    title: str
    audio_url: str = ""
    transcript: str = ""
    category: str = ""
    difficulty: str = "beginner"
    duration: int = 0  # seconds


class SpeakingAttemptInput(BaseModel):
    pronunciation_score: int
    fluency_score: int
    accuracy_score: int
    recording_duration: int = 0  # seconds
    feedback: str = ""
    improvements: list[str] = Field(default_factory=list)


class ListeningAnswer(BaseModel):
    """One answered comprehension question."""

    question_id: str
    user_answer: str = ""
    correct_answer: str = ""
    is_correct: bool = False


class ListeningAttemptInput(BaseModel):
    comprehension_score: int
    questions_answered: int = 0
    correct_answers: int = 0
    time_spent: int = 0  # seconds
    completion_rate: int = 0
    answers: list[ListeningAnswer] = Field(default_factory=list)
    feedback: str = ""


class AttemptOutcome(BaseModel):
    """Result of recording one attempt.

    ``is_new_best`` compares against the best score held before the attempt.
    ``status`` is set for lessons, ``is_completed`` for speaking/listening.
    """

    score: int
    best_score: int
    is_new_best: bool
    status: LessonStatus | None = None
    is_completed: bool | None = None


class SkillUpdate(BaseModel):
    """Result of a skill XP update."""

    skill: Skill
    leveled_up: bool
    level: int
    xp: int
