"""Domain models for feedback check-ins."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

CheckInType = Literal["day1", "week1", "month1"]

CHECK_IN_FEEDBACK = {
    "day1": ("TOO_HUNGRY", "JUST_RIGHT", "TOO_FULL"),
    "week1": ("STRUGGLING", "GOOD", "TOO_SLOW", "TOO_FAST"),
    "month1": ("BEHIND", "ON_TRACK", "AHEAD"),
}


@dataclass(frozen=True)
class TargetAdjustment:
    """Calorie target change derived from check-in feedback."""

    new_target: int
    adjustment: int
    reason: str


@dataclass(frozen=True)
class CheckInResult:
    """Outcome of a submitted check-in."""

    check_in_type: str
    feedback: str
    adjustment: TargetAdjustment
    next_check_in_at: datetime | None
