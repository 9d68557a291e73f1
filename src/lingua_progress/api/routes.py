"""REST API routes for practice submissions and progress queries."""

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException

from lingua_progress.api.schemas import (
    LessonAttemptRequest,
    ListeningPracticeRequest,
    SpeakingPracticeRequest,
    VocabularyReviewRequest,
)
from lingua_progress.config import get_settings
from lingua_progress.models.practice import (
    ListeningAttemptInput,
    ListeningExercise,
    SpeakingAttemptInput,
    SpeakingExercise,
)
from lingua_progress.models.progress import WeeklyGoals
from lingua_progress.progress.service import ProgressService
from lingua_progress.storage.documents import StorageError, validate_identifier
from lingua_progress.storage.learner_profile import LearnerProfileStore
from lingua_progress.storage.ledger_store import LedgerStore

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


def get_service() -> ProgressService:
    settings = get_settings()
    weekly_goals = WeeklyGoals(
        xp_target=settings.weekly_xp_target,
        lessons_target=settings.weekly_lessons_target,
        time_target=settings.weekly_time_target,
    )
    return ProgressService(
        LedgerStore(settings.ledgers_dir, weekly_goals),
        LearnerProfileStore(settings.profiles_dir),
    )


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity, supplied by the authentication layer in front of us."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    try:
        return validate_identifier(x_user_id, "user id")
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid user id format") from None


def _failure(event: str, message: str, error: Exception, **context) -> HTTPException:
    if isinstance(error, ValueError):
        return HTTPException(status_code=400, detail=str(error))
    logger.error(event, error=str(error), **context)
    return HTTPException(status_code=500, detail=message)


@router.post("/lessons/{lesson_id}/attempts")
def submit_lesson_attempt(
    lesson_id: str,
    body: LessonAttemptRequest,
    user_id: str = Depends(current_user_id),
    service: ProgressService = Depends(get_service),
) -> dict:
    """Record a lesson attempt."""
    try:
        result = service.record_lesson_attempt(
            user_id, body.language, lesson_id, body.score, body.time_spent, skill=body.skill
        )
    except (ValueError, StorageError) as e:
        raise _failure(
            "lesson_attempt_failed", "Failed to record lesson attempt", e, user_id=user_id
        )
    return {
        "message": "Lesson attempt recorded successfully",
        "result": result.model_dump(mode="json"),
    }


@router.post("/speaking/practice")
def submit_speaking_practice(
    body: SpeakingPracticeRequest,
    user_id: str = Depends(current_user_id),
    service: ProgressService = Depends(get_service),
) -> dict:
    """Record a speaking practice attempt."""
    exercise = SpeakingExercise(
        id=body.exercise_id,
        text=body.exercise_text,
        category=body.category,
        difficulty=body.difficulty.value,
    )
    attempt = SpeakingAttemptInput(
        pronunciation_score=body.pronunciation_score,
        fluency_score=body.fluency_score,
        accuracy_score=body.accuracy_score,
        recording_duration=body.recording_duration,
        feedback=body.feedback,
        improvements=body.improvements,
    )
    try:
        result = service.record_speaking_attempt(user_id, body.language, exercise, attempt)
    except (ValueError, StorageError) as e:
        raise _failure(
            "speaking_practice_failed", "Failed to record speaking practice", e, user_id=user_id
        )
    return {
        "message": "Speaking practice recorded successfully",
        "result": result.model_dump(mode="json"),
    }


@router.get("/speaking/progress/{language}")
def get_speaking_progress(
    language: str,
    user_id: str = Depends(current_user_id),
    service: ProgressService = Depends(get_service),
) -> dict:
    try:
        progress = service.get_practice_progress(user_id, language, "speaking")
    except (ValueError, StorageError) as e:
        raise _failure(
            "speaking_progress_failed", "Failed to retrieve speaking progress", e, user_id=user_id
        )
    return {"progress": progress.model_dump(mode="json")}


@router.post("/listening/practice")
def submit_listening_practice(
    body: ListeningPracticeRequest,
    user_id: str = Depends(current_user_id),
    service: ProgressService = Depends(get_service),
) -> dict:
    """Record a listening practice attempt."""
    exercise = ListeningExercise(
        id=body.exercise_id,
        title=body.audio_title,
        audio_url=body.audio_url,
        transcript=body.transcript,
        category=body.category,
        difficulty=body.difficulty.value,
        duration=body.duration,
    )
    attempt = ListeningAttemptInput(
        comprehension_score=body.comprehension_score,
        questions_answered=body.questions_answered,
        correct_answers=body.correct_answers,
        time_spent=body.time_spent,
        completion_rate=body.completion_rate,
        answers=body.answers,
        feedback=body.feedback,
    )
    try:
        result = service.record_listening_attempt(user_id, body.language, exercise, attempt)
    except (ValueError, StorageError) as e:
        raise _failure(
            "listening_practice_failed", "Failed to record listening practice", e, user_id=user_id
        )
    return {
        "message": "Listening practice recorded successfully",
        "result": result.model_dump(mode="json"),
    }


@router.get("/listening/progress/{language}")
def get_listening_progress(
    language: str,
    user_id: str = Depends(current_user_id),
    service: ProgressService = Depends(get_service),
) -> dict:
    try:
        progress = service.get_practice_progress(user_id, language, "listening")
    except (ValueError, StorageError) as e:
        raise _failure(
            "listening_progress_failed", "Failed to retrieve listening progress", e, user_id=user_id
        )
    return {"progress": progress.model_dump(mode="json")}


@router.post("/vocabulary/review")
def submit_vocabulary_review(
    body: VocabularyReviewRequest,
    user_id: str = Depends(current_user_id),
    service: ProgressService = Depends(get_service),
) -> dict:
    try:
        record = service.record_vocabulary_review(
            user_id,
            body.language,
            body.word_id,
            body.correct,
            word=body.word,
            translation=body.translation,
        )
    except (ValueError, StorageError) as e:
        raise _failure(
            "vocabulary_review_failed", "Failed to record vocabulary review", e, user_id=user_id
        )
    return {"word": record.model_dump(mode="json")}


@router.get("/vocabulary/due/{language}")
def get_due_vocabulary(
    language: str,
    user_id: str = Depends(current_user_id),
    service: ProgressService = Depends(get_service),
) -> dict:
    try:
        due = service.due_vocabulary(user_id, language)
    except (ValueError, StorageError) as e:
        raise _failure(
            "vocabulary_due_failed", "Failed to retrieve vocabulary", e, user_id=user_id
        )
    return {"words": [item.model_dump(mode="json") for item in due]}


@router.get("/progress/{language}")
def get_progress(
    language: str,
    user_id: str = Depends(current_user_id),
    service: ProgressService = Depends(get_service),
) -> dict:
    """Ledger summary; zeroed defaults when the learner has not practised yet."""
    try:
        summary = service.get_summary(user_id, language)
    except (ValueError, StorageError) as e:
        raise _failure("progress_fetch_failed", "Failed to retrieve progress", e, user_id=user_id)
    return summary.model_dump(mode="json")


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
