"""Calorie target adjustments from user check-in feedback.

Users are asked how the plan feels one day, one week and one month after
onboarding. Each answer maps to a fixed calorie change that may depend on
the user's goal.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from nutrition_engine.domain.checkins import (
    CHECK_IN_FEEDBACK,
    CheckInResult,
    TargetAdjustment,
)
from nutrition_engine.domain.errors import InvalidArgumentError
from nutrition_engine.domain.macros import round_half_up
from nutrition_engine.services.profiles import ProfileRepository

_logger = logging.getLogger(__name__)

# (check-in type, feedback, goal) -> (calorie change, reason). A goal of None
# matches every goal.
ADJUSTMENT_RULES: dict[tuple[str, str, str | None], tuple[int, str]] = {
    ("day1", "TOO_HUNGRY", None): (
        200,
        "Added 200 calories to help with hunger and sustainability",
    ),
    ("day1", "TOO_FULL", None): (
        -150,
        "Reduced 150 calories since you're struggling to eat this much",
    ),
    ("day1", "JUST_RIGHT", None): (
        0,
        "Great! Keeping your current target since it's working well",
    ),
    ("week1", "STRUGGLING", None): (
        250,
        "Added 250 calories to boost energy and make this more sustainable",
    ),
    ("week1", "TOO_SLOW", "LOSE_WEIGHT"): (
        -200,
        "Reduced 200 calories to speed up weight loss",
    ),
    ("week1", "TOO_SLOW", "BUILD_MUSCLE"): (
        200,
        "Added 200 calories to accelerate muscle gain",
    ),
    ("week1", "TOO_FAST", "LOSE_WEIGHT"): (
        200,
        "Added 200 calories to slow down weight loss to a healthier pace",
    ),
    ("week1", "TOO_FAST", "BUILD_MUSCLE"): (
        -150,
        "Reduced 150 calories to minimize fat gain while building muscle",
    ),
    ("week1", "GOOD", None): (
        0,
        "Perfect! Your target is working great, no changes needed",
    ),
    ("month1", "BEHIND", "LOSE_WEIGHT"): (
        -150,
        "Reduced 150 calories to accelerate progress",
    ),
    ("month1", "BEHIND", "BUILD_MUSCLE"): (
        150,
        "Added 150 calories to boost muscle gains",
    ),
    ("month1", "AHEAD", "LOSE_WEIGHT"): (
        150,
        "Added 150 calories to maintain steady, healthy progress",
    ),
    ("month1", "AHEAD", "BUILD_MUSCLE"): (
        -100,
        "Reduced 100 calories to keep gains lean",
    ),
    ("month1", "ON_TRACK", None): (
        0,
        "Excellent! You're right on track, maintaining your current plan",
    ),
}
UNCHANGED_REASON = "Keeping your current target for your goal"

# Days after one check-in until the next one; month1 is the last.
NEXT_CHECK_IN_DAYS = {"day1": 6, "week1": 23}


def validate_check_in(check_in_type: str, feedback: str) -> None:
    """Reject unknown check-in types and feedback values."""
    options = CHECK_IN_FEEDBACK.get(check_in_type)
    if options is None:
        raise InvalidArgumentError(
            f"Unknown check-in type: {check_in_type}", fields=["check_in_type"]
        )
    if feedback not in options:
        raise InvalidArgumentError(
            f"Feedback {feedback} is not valid for {check_in_type}",
            fields=["feedback"],
        )


def calculate_target_adjustment(
    current_target: float, feedback: str, check_in_type: str, goal: str
) -> TargetAdjustment:
    """Return the adjusted calorie target for a check-in answer."""
    validate_check_in(check_in_type, feedback)
    rule = ADJUSTMENT_RULES.get((check_in_type, feedback, goal))
    if rule is None:
        rule = ADJUSTMENT_RULES.get(
            (check_in_type, feedback, None), (0, UNCHANGED_REASON)
        )
    adjustment, reason = rule
    return TargetAdjustment(
        new_target=round_half_up(current_target + adjustment),
        adjustment=adjustment,
        reason=reason,
    )


def next_check_in_date(check_in_type: str, now: datetime) -> datetime | None:
    """Return when the following check-in is due, or None after the last."""
    days = NEXT_CHECK_IN_DAYS.get(check_in_type)
    if days is None:
        return None
    return now + timedelta(days=days)


@dataclass
class CheckInService:
    """Applies check-in feedback to the stored calorie target."""

    repository: ProfileRepository

    def submit_check_in(
        self,
        user_id: UUID,
        check_in_type: str,
        feedback: str,
        now: datetime | None = None,
    ) -> CheckInResult:
        """Adjust and store the user's target, and schedule the next check-in."""
        validate_check_in(check_in_type, feedback)
        profile = self.repository.get_profile(user_id)
        if profile is None or not profile.daily_calorie_target:
            raise InvalidArgumentError(
                "A calorie target is required before checking in",
                fields=["daily_calorie_target"],
            )
        adjustment = calculate_target_adjustment(
            profile.daily_calorie_target, feedback, check_in_type, profile.goal
        )
        next_check_in_at = next_check_in_date(
            check_in_type, now or datetime.now(tz=UTC)
        )
        self.repository.update_calorie_target(
            user_id,
            daily_calorie_target=adjustment.new_target,
            next_check_in_at=next_check_in_at,
        )
        _logger.info(
            "Check-in applied: user_id=%s type=%s feedback=%s adjustment=%s",
            user_id,
            check_in_type,
            feedback,
            adjustment.adjustment,
        )
        return CheckInResult(
            check_in_type=check_in_type,
            feedback=feedback,
            adjustment=adjustment,
            next_check_in_at=next_check_in_at,
        )
