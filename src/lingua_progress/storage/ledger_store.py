"""Progress ledger persistence, one JSON document per (user, language)."""

import fcntl
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import structlog
from pydantic import ValidationError

from lingua_progress.models.progress import ProgressLedger, WeeklyGoals
from lingua_progress.storage.documents import (
    StorageError,
    read_document,
    validate_identifier,
    write_document,
)

logger = structlog.get_logger()


class LedgerStore:
    """File-backed ledger store.

    ``transaction`` holds an exclusive lock on the ledger for the whole
    load/mutate/save cycle, so two submissions for the same (user, language)
    on one host are serialised instead of overwriting each other. The ledger
    is written only if the block finishes without raising.

    Args:
        ledgers_dir: Root directory for ledger documents.
        weekly_goals: Targets given to newly created ledgers.
    """

    def __init__(self, ledgers_dir: Path, weekly_goals: WeeklyGoals | None = None):
        self.ledgers_dir = ledgers_dir
        self.weekly_goals = weekly_goals or WeeklyGoals()

    def path_for(self, user_id: str, language: str) -> Path:
        validate_identifier(user_id, "user id")
        validate_identifier(language, "language")
        return self.ledgers_dir / user_id / f"{language}.json"

    def create(self, user_id: str, language: str) -> ProgressLedger:
        goals = WeeklyGoals(
            xp_target=self.weekly_goals.xp_target,
            lessons_target=self.weekly_goals.lessons_target,
            time_target=self.weekly_goals.time_target,
        )
        return ProgressLedger(user_id=user_id, language=language, weekly_goals=goals)

    def load(self, user_id: str, language: str) -> ProgressLedger | None:
        data = read_document(self.path_for(user_id, language))
        if data is None:
            return None
        try:
            return ProgressLedger.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Corrupt ledger for {user_id}/{language}") from e

    def save(self, ledger: ProgressLedger) -> None:
        path = self.path_for(ledger.user_id, ledger.language)
        ledger.updated_at = datetime.now()
        write_document(path, ledger.model_dump(mode="json"))

    @contextmanager
    def transaction(self, user_id: str, language: str) -> Iterator[ProgressLedger]:
        """Load (or lazily create) a ledger, yield it for mutation, then save it."""
        path = self.path_for(user_id, language)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(path.with_suffix(".lock"), "w")
        except OSError as e:
            raise StorageError(f"Failed to lock ledger for {user_id}/{language}") from e

        with lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            ledger = self.load(user_id, language)
            if ledger is None:
                ledger = self.create(user_id, language)
                logger.info("ledger_created", user_id=user_id, language=language)
            yield ledger
            self.save(ledger)
