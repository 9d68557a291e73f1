"""Learner profile tracking XP and daily streaks across all languages."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from lingua_progress.clock import previous_day


class LearnerProfile(BaseModel):
    user_id: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    total_xp: int = 0
    current_streak: int = 0
    best_streak: int = 0
    last_active: date | None = None

    def add_xp(self, xp: int) -> int:
        self.total_xp += xp
        return self.total_xp

    def touch_streak(self, now: datetime | None = None) -> int:
        """Count today towards the streak; a missed day restarts it at 1."""
        today = (now or datetime.now()).date()
        if self.last_active == today:
            return self.current_streak
        if self.last_active is not None and previous_day(today) == self.last_active:
            self.current_streak += 1
        else:
            self.current_streak = 1
        self.last_active = today
        self.best_streak = max(self.best_streak, self.current_streak)
        return self.current_streak
