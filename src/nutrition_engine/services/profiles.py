"""User profile access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from nutrition_engine.domain.biometrics import NutritionPlan
from nutrition_engine.domain.profiles import UserProfile


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user, if present."""

    def update_plan(
        self,
        user_id: UUID,
        *,
        goal: str,
        is_pregnant: bool,
        trimester: str | None,
        plan: NutritionPlan,
    ) -> None:
        """Store a confirmed plan's targets on the user's profile."""

    def update_calorie_target(
        self,
        user_id: UUID,
        *,
        daily_calorie_target: int,
        next_check_in_at: datetime | None,
    ) -> None:
        """Store an adjusted calorie target and the next check-in time."""


@dataclass
class ProfileService:
    """Service for reading profiles with engine defaults applied."""

    repository: ProfileRepository
    default_timezone: str = "UTC"

    def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the user's profile, or a default maintenance profile."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            return UserProfile(timezone=self.default_timezone)
        return profile
