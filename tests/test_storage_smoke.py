"""Smoke tests for ledger and document storage."""

import json

import pytest

from lingua_progress.models.practice import Skill
from lingua_progress.models.progress import WeeklyGoals
from lingua_progress.progress.recording import record_lesson_attempt
from lingua_progress.storage.documents import StorageError, validate_identifier
from lingua_progress.storage.ledger_store import LedgerStore


@pytest.fixture
def store(tmp_path):
    return LedgerStore(tmp_path, WeeklyGoals(xp_target=500, lessons_target=3, time_target=90))


class TestValidateIdentifier:
    def test_accepts_plain_ids(self):
        assert validate_identifier("user_01-A") == "user_01-A"

    @pytest.mark.parametrize("value", ["", "../etc", "a/b", "x" * 65, "spa nish"])
    def test_rejects_unsafe_ids(self, value):
        with pytest.raises(ValueError):
            validate_identifier(value)


class TestLedgerStore:
    def test_load_missing_returns_none(self, store):
        assert store.load("user_1", "spanish") is None

    def test_create_uses_configured_goals(self, store):
        ledger = store.create("user_1", "spanish")
        assert ledger.weekly_goals.xp_target == 500
        assert ledger.weekly_goals.lessons_target == 3
        assert ledger.weekly_goals.time_target == 90

    def test_save_and_load(self, store, now):
        ledger = store.create("user_1", "spanish")
        record_lesson_attempt(ledger, "lesson_1", 88, time_spent=6, now=now)
        ledger.skill(Skill.GRAMMAR).xp = 40
        store.save(ledger)

        loaded = store.load("user_1", "spanish")
        assert loaded.lessons["lesson_1"].best_score == 88
        assert loaded.skills[Skill.GRAMMAR].xp == 40
        assert loaded.statistics.total_lessons_completed == 1

    def test_document_layout(self, store, tmp_path):
        store.save(store.create("user_1", "french"))
        path = tmp_path / "user_1" / "french.json"
        assert path.exists()
        assert json.loads(path.read_text())["language"] == "french"

    def test_invalid_language_rejected(self, store):
        with pytest.raises(ValueError):
            store.load("user_1", "../spanish")

    def test_corrupt_document_raises_storage_error(self, store, tmp_path):
        path = tmp_path / "user_1" / "spanish.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json")
        with pytest.raises(StorageError):
            store.load("user_1", "spanish")

    def test_invalid_document_raises_storage_error(self, store, tmp_path):
        path = tmp_path / "user_1" / "spanish.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"language": "spanish"}))
        with pytest.raises(StorageError):
            store.load("user_1", "spanish")


class TestTransaction:
    def test_creates_lazily_and_persists(self, store, now):
        with store.transaction("user_1", "spanish") as ledger:
            record_lesson_attempt(ledger, "lesson_1", 75, now=now)
        assert store.load("user_1", "spanish").lessons["lesson_1"].best_score == 75

    def test_reuses_existing_ledger(self, store, now):
        with store.transaction("user_1", "spanish") as ledger:
            record_lesson_attempt(ledger, "lesson_1", 75, now=now)
        with store.transaction("user_1", "spanish") as ledger:
            record_lesson_attempt(ledger, "lesson_1", 95, now=now)
        loaded = store.load("user_1", "spanish")
        assert loaded.lessons["lesson_1"].attempts == 2

    def test_nothing_saved_when_block_raises(self, store, now):
        with pytest.raises(RuntimeError):
            with store.transaction("user_1", "spanish") as ledger:
                record_lesson_attempt(ledger, "lesson_1", 75, now=now)
                raise RuntimeError("boom")
        assert store.load("user_1", "spanish") is None
