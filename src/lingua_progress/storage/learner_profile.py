"""Learner profile persistence (JSON + fcntl.flock + atomic write)."""

import fcntl
from datetime import datetime
from pathlib import Path

from lingua_progress.models.learner import LearnerProfile
from lingua_progress.storage.documents import (
    StorageError,
    read_document,
    validate_identifier,
    write_document,
)


class LearnerProfileStore:
    def __init__(self, profiles_dir: Path):
        self.profiles_dir = profiles_dir

    def get_profile_path(self, user_id: str) -> Path:
        return self.profiles_dir / f"{validate_identifier(user_id, 'user id')}.json"

    def load_profile(self, user_id: str) -> LearnerProfile:
        data = read_document(self.get_profile_path(user_id))
        if data is None:
            return LearnerProfile(user_id=user_id)
        return LearnerProfile(**data)

    def save_profile(self, profile: LearnerProfile) -> None:
        profile.updated_at = datetime.now()
        write_document(self.get_profile_path(profile.user_id), profile.model_dump(mode="json"))

    def award_activity(self, user_id: str, xp: int, now: datetime | None = None) -> LearnerProfile:
        """Add XP and count the day towards the learner's streak.

        The profile is shared by every language ledger of the user, so the
        read-modify-write runs under an exclusive lock on ``<user>.lock``.
        """
        path = self.get_profile_path(user_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(path.with_suffix(".lock"), "w")
        except OSError as e:
            raise StorageError(f"Failed to lock profile for {user_id}") from e

        with lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            profile = self.load_profile(user_id)
            profile.add_xp(xp)
            profile.touch_streak(now)
            self.save_profile(profile)
        return profile
