"""Domain models for user profiles."""

from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nutrition_engine.domain.errors import InvalidArgumentError


@dataclass(frozen=True)
class UserProfile:
    """Profile fields the engine reads when scoring and aggregating."""

    goal: str = "MAINTAIN"
    daily_calorie_target: float | None = None
    protein_target: float | None = None
    is_pregnant: bool = False
    trimester: str | None = None
    timezone: str = "UTC"


def resolve_timezone(name: str) -> ZoneInfo:
    """Return the IANA zone for ``name`` or raise ``InvalidArgumentError``."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidArgumentError(
            f"Unknown timezone: {name}", fields=["timezone"]
        ) from exc
