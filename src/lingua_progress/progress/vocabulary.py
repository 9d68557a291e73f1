"""Leitner-style vocabulary review tracking."""

from datetime import datetime, timedelta

from lingua_progress.models.progress import ProgressLedger, VocabularyRecord
from lingua_progress.progress.statistics import refresh_statistics

MAX_STRENGTH = 5
# Days until the next review, indexed by strength
REVIEW_INTERVAL_DAYS = [0, 1, 3, 7, 14, 30]


def record_vocabulary_review(
    ledger: ProgressLedger,
    word_id: str,
    correct: bool,
    word: str = "",
    translation: str = "",
    now: datetime | None = None,
) -> VocabularyRecord:
    """Record one review answer for a word.

    A correct answer raises strength by one, a wrong one lowers it by one.
    The word counts as learned once it reaches full strength and stays
    learned afterwards.
    """
    now = now or datetime.now()
    record = ledger.vocabulary_item(word_id, word=word, translation=translation)

    record.total_answers += 1
    if correct:
        record.correct_answers += 1
        record.strength = min(record.strength + 1, MAX_STRENGTH)
    else:
        record.strength = max(record.strength - 1, 0)

    record.last_reviewed = now
    record.next_review = now + timedelta(days=REVIEW_INTERVAL_DAYS[record.strength])
    if record.strength >= MAX_STRENGTH:
        record.is_learned = True

    refresh_statistics(ledger)
    return record


def due_for_review(ledger: ProgressLedger, now: datetime | None = None) -> list[VocabularyRecord]:
    """Words whose next review time has passed, oldest due first."""
    now = now or datetime.now()
    due = [
        item for item in ledger.vocabulary.values()
        if item.next_review is None or item.next_review <= now
    ]
    return sorted(due, key=lambda item: item.next_review or datetime.min)
