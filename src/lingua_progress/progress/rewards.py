"""XP rewards and feedback derived from an attempt's outcome."""

from lingua_progress.progress.scoring import round_half_up

BASE_XP = 5
VOCABULARY_CORRECT_XP = 2


def speaking_xp(overall_score: int) -> int:
    """5-15 XP depending on the overall score."""
    return round_half_up(overall_score / 10) + BASE_XP


def listening_xp(comprehension_score: int, completion_rate: int) -> int:
    """5-15 XP for comprehension plus a 0-5 XP bonus for listening to the end."""
    base = round_half_up(comprehension_score / 10) + BASE_XP
    completion_bonus = round_half_up(completion_rate / 20)
    return base + completion_bonus


def lesson_xp(score: int) -> int:
    return round_half_up(score / 10) + BASE_XP


def vocabulary_xp(correct: bool) -> int:
    return VOCABULARY_CORRECT_XP if correct else 0


def answer_accuracy(questions_answered: int, correct_answers: int) -> int:
    """Percentage of answered questions that were correct."""
    if questions_answered <= 0:
        return 0
    return round_half_up(correct_answers / questions_answered * 100)


def speaking_feedback(overall_score: int) -> str:
    verdict = (
        "Excellent pronunciation!"
        if overall_score >= 80
        else "Keep practicing to improve your pronunciation."
    )
    return f"Great job! Your overall score was {overall_score}%. {verdict}"


def listening_feedback(comprehension_score: int) -> str:
    if comprehension_score >= 90:
        return "Excellent listening comprehension! You understood almost everything perfectly."
    elif comprehension_score >= 70:
        return "Good job! Your listening skills are improving. Keep practicing with similar content."
    elif comprehension_score >= 50:
        return "Not bad! Try listening to the audio multiple times and focus on key words."
    else:
        return "Keep practicing! Try starting with slower audio or reading the transcript first."
