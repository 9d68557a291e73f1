"""Tests for lesson/speaking/listening attempt recording."""

from datetime import timedelta

from lingua_progress.models.practice import (
    LessonStatus,
    ListeningAnswer,
    ListeningAttemptInput,
    ListeningExercise,
    SpeakingAttemptInput,
    SpeakingExercise,
)
from lingua_progress.progress.recording import (
    record_lesson_attempt,
    record_listening_attempt,
    record_speaking_attempt,
)

SPEAKING = SpeakingExercise(
    id="sp_beg_daily_1", text="Hola, ¿cómo estás?", category="daily", difficulty="beginner"
)
LISTENING = ListeningExercise(
    id="ls_sp_beg_conv_1",
    title="En el Restaurante",
    audio_url="/audio/spanish/beginner/restaurant.mp3",
    transcript="Camarero: ¡Buenas tardes!",
    category="conversation",
    difficulty="beginner",
    duration=45,
)


def speak(pronunciation, fluency, accuracy, **kwargs):
    return SpeakingAttemptInput(
        pronunciation_score=pronunciation, fluency_score=fluency, accuracy_score=accuracy, **kwargs
    )


def listen(score, **kwargs):
    return ListeningAttemptInput(comprehension_score=score, **kwargs)


class TestLessonAttempts:
    def test_first_high_score_is_completed_not_mastered(self, ledger, now):
        outcome = record_lesson_attempt(ledger, "lesson_1", 95, time_spent=10, now=now)
        record = ledger.lessons["lesson_1"]
        assert outcome.status == LessonStatus.COMPLETED
        assert record.attempts == 1
        assert record.completed_at == now
        assert record.mastered_at is None

    def test_second_high_score_is_mastered(self, ledger, now):
        record_lesson_attempt(ledger, "lesson_1", 95, now=now)
        later = now + timedelta(hours=1)
        outcome = record_lesson_attempt(ledger, "lesson_1", 92, now=later)
        record = ledger.lessons["lesson_1"]
        assert outcome.status == LessonStatus.MASTERED
        assert record.mastered_at == later
        assert record.best_score == 95
        assert outcome.is_new_best is False

    def test_first_low_score_is_in_progress(self, ledger, now):
        outcome = record_lesson_attempt(ledger, "lesson_1", 40, now=now)
        assert outcome.status == LessonStatus.IN_PROGRESS

    def test_status_can_fall_back_after_low_attempt(self, ledger, now):
        record_lesson_attempt(ledger, "lesson_1", 80, now=now)
        outcome = record_lesson_attempt(ledger, "lesson_1", 30, now=now)
        assert outcome.status == LessonStatus.IN_PROGRESS
        assert ledger.lessons["lesson_1"].best_score == 80

    def test_time_accumulates(self, ledger, now):
        record_lesson_attempt(ledger, "lesson_1", 50, time_spent=7, now=now)
        record_lesson_attempt(ledger, "lesson_1", 60, time_spent=5, now=now)
        assert ledger.lessons["lesson_1"].time_spent == 12
        assert ledger.statistics.total_time_spent == 12

    def test_statistics_refreshed(self, ledger, now):
        record_lesson_attempt(ledger, "lesson_1", 100, now=now)
        assert ledger.statistics.total_lessons_completed == 1
        assert ledger.statistics.perfect_scores == 1


class TestSpeakingAttempts:
    def test_overall_is_mean_of_subscores(self, ledger, now):
        outcome = record_speaking_attempt(ledger, SPEAKING, speak(90, 80, 70), now=now)
        assert outcome.score == 80
        assert outcome.is_completed is True
        assert ledger.speaking_exercises[SPEAKING.id].is_completed is True

    def test_overall_rounds_to_nearest(self, ledger, now):
        # 241 / 3 = 80.33
        outcome = record_speaking_attempt(ledger, SPEAKING, speak(81, 80, 80), now=now)
        assert outcome.score == 80
        # 245 / 3 = 81.67
        outcome = record_speaking_attempt(ledger, SPEAKING, speak(82, 82, 81), now=now)
        assert outcome.score == 82

    def test_attempt_log_is_chronological(self, ledger, now):
        for offset, score in enumerate([50, 60, 70]):
            record_speaking_attempt(
                ledger, SPEAKING, speak(score, score, score), now=now + timedelta(minutes=offset)
            )
        record = ledger.speaking_exercises[SPEAKING.id]
        assert [a.overall_score for a in record.attempts] == [50, 60, 70]
        assert record.total_attempts == 3
        assert record.last_practiced == now + timedelta(minutes=2)

    def test_best_and_average_track_all_attempts(self, ledger, now):
        scores = [70, 95, 60, 88]
        for score in scores:
            record_speaking_attempt(ledger, SPEAKING, speak(score, score, score), now=now)
        record = ledger.speaking_exercises[SPEAKING.id]
        assert record.best_score == max(scores)
        assert record.average_score == 78  # 313 / 4 = 78.25

    def test_completion_is_sticky(self, ledger, now):
        record_speaking_attempt(ledger, SPEAKING, speak(85, 85, 85), now=now)
        outcome = record_speaking_attempt(ledger, SPEAKING, speak(20, 20, 20), now=now)
        assert outcome.is_completed is True

    def test_is_new_best_compares_with_previous_best(self, ledger, now):
        first = record_speaking_attempt(ledger, SPEAKING, speak(60, 60, 60), now=now)
        same = record_speaking_attempt(ledger, SPEAKING, speak(60, 60, 60), now=now)
        better = record_speaking_attempt(ledger, SPEAKING, speak(70, 70, 70), now=now)
        assert first.is_new_best is True
        assert same.is_new_best is False
        assert better.is_new_best is True

    def test_one_record_per_exercise(self, ledger, now):
        record_speaking_attempt(ledger, SPEAKING, speak(50, 50, 50), now=now)
        record_speaking_attempt(ledger, SPEAKING, speak(50, 50, 50), now=now)
        assert list(ledger.speaking_exercises) == [SPEAKING.id]

    def test_feedback_and_improvements_are_logged(self, ledger, now):
        record_speaking_attempt(
            ledger, SPEAKING,
            speak(70, 70, 70, recording_duration=12, feedback="ok", improvements=["rolled r"]),
            now=now,
        )
        attempt = ledger.speaking_exercises[SPEAKING.id].attempts[0]
        assert attempt.recording_duration == 12
        assert attempt.feedback == "ok"
        assert attempt.improvements == ["rolled r"]
        assert attempt.attempted_at == now


class TestListeningAttempts:
    def test_low_first_attempt_not_completed(self, ledger, now):
        outcome = record_listening_attempt(ledger, LISTENING, listen(55), now=now)
        record = ledger.listening_exercises[LISTENING.id]
        assert outcome.score == 55
        assert record.is_completed is False
        assert record.best_score == 55

    def test_score_taken_as_given(self, ledger, now):
        outcome = record_listening_attempt(
            ledger, LISTENING, listen(83, questions_answered=2, correct_answers=1), now=now
        )
        assert outcome.score == 83
        assert outcome.is_completed is True

    def test_answers_logged(self, ledger, now):
        answers = [
            ListeningAnswer(question_id="q1", user_answer="Dos personas",
                            correct_answer="Dos personas", is_correct=True),
            ListeningAnswer(question_id="q2", user_answer="La carne",
                            correct_answer="El pescado del día", is_correct=False),
        ]
        record_listening_attempt(
            ledger, LISTENING,
            listen(50, questions_answered=2, correct_answers=1, answers=answers, completion_rate=100),
            now=now,
        )
        attempt = ledger.listening_exercises[LISTENING.id].attempts[0]
        assert [a.question_id for a in attempt.answers] == ["q1", "q2"]
        assert attempt.answers[1].is_correct is False
        assert attempt.completion_rate == 100

    def test_average_recomputed_from_log(self, ledger, now):
        for score in [55, 80, 91]:
            record_listening_attempt(ledger, LISTENING, listen(score), now=now)
        record = ledger.listening_exercises[LISTENING.id]
        assert record.average_score == 75  # 226 / 3 = 75.33
        assert record.total_attempts == 3
        assert ledger.statistics.listening_exercises_completed == 1
        assert ledger.statistics.average_listening_score == 75
