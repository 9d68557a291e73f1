"""Validated request bodies for the practice endpoints."""

from typing import Annotated

from pydantic import BaseModel, Field

from lingua_progress.models.practice import Difficulty, ListeningAnswer, Skill

Score = Annotated[int, Field(ge=0, le=100)]


class LessonAttemptRequest(BaseModel):
    language: str = Field(min_length=1)
    score: Score
    time_spent: int = Field(default=0, ge=0)  # minutes
    skill: Skill = Skill.GRAMMAR


class SpeakingPracticeRequest(BaseModel):
    exercise_id: str = Field(min_length=1)
    exercise_text: str
    category: str
    difficulty: Difficulty
    language: str = Field(min_length=1)
    pronunciation_score: Score
    fluency_score: Score
    accuracy_score: Score
    recording_duration: int = Field(default=0, ge=0)  # seconds
    feedback: str = ""
    improvements: list[str] = Field(default_factory=list)


class ListeningPracticeRequest(BaseModel):
    exercise_id: str = Field(min_length=1)
    audio_title: str
    audio_url: str
    transcript: str
    category: str
    difficulty: Difficulty
    language: str = Field(min_length=1)
    duration: int = Field(ge=0)  # seconds
    comprehension_score: Score
    questions_answered: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    time_spent: int = Field(ge=0)  # seconds
    completion_rate: Score
    answers: list[ListeningAnswer]
    feedback: str = ""


class VocabularyReviewRequest(BaseModel):
    language: str = Field(min_length=1)
    word_id: str = Field(min_length=1)
    word: str = ""
    translation: str = ""
    correct: bool
