"""Supabase repository for user profiles."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrition_engine.domain.biometrics import NutritionPlan
from nutrition_engine.domain.errors import InvalidArgumentError
from nutrition_engine.domain.macros import round_half_up
from nutrition_engine.domain.profiles import UserProfile, resolve_timezone
from nutrition_engine.services.profiles import ProfileRepository

_logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select(
                "goal, daily_calorie_target, protein_target, is_pregnant, "
                "trimester, timezone"
            )
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProfile(
            goal=str(row.get("goal") or "MAINTAIN"),
            daily_calorie_target=_optional_float(row.get("daily_calorie_target")),
            protein_target=_optional_float(row.get("protein_target")),
            is_pregnant=bool(row.get("is_pregnant") or False),
            trimester=row.get("trimester"),
            timezone=_stored_timezone(user_id, row.get("timezone")),
        )

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
        self.client.table("profiles").update(
            {
                "goal": goal,
                "is_pregnant": is_pregnant,
                "trimester": trimester if is_pregnant else None,
                "daily_calorie_target": plan.target_calories,
                "protein_target": plan.protein_g,
                "carbs_target": plan.carbs_g,
                "fat_target": plan.fat_g,
                "bmr": round_half_up(plan.bmr),
                "tdee": round_half_up(plan.tdee),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("user_id", str(user_id)).execute()

    def update_calorie_target(
        self,
        user_id: UUID,
        *,
        daily_calorie_target: int,
        next_check_in_at: datetime | None,
    ) -> None:
        """Store an adjusted calorie target and the next check-in time."""
        self.client.table("profiles").update(
            {
                "daily_calorie_target": daily_calorie_target,
                "next_check_in_date": (
                    next_check_in_at.isoformat() if next_check_in_at else None
                ),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("user_id", str(user_id)).execute()


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)


def _stored_timezone(user_id: UUID, value: object) -> str:
    name = str(value or DEFAULT_TIMEZONE)
    try:
        resolve_timezone(name)
    except InvalidArgumentError:
        _logger.warning(
            "Stored timezone is invalid: user_id=%s timezone=%s", user_id, name
        )
        return DEFAULT_TIMEZONE
    return name
