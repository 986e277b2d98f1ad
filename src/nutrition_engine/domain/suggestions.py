"""Domain models for personalized suggestions."""

from dataclasses import dataclass, field
from typing import Literal

from nutrition_engine.domain.meals import MacroBreakdown

Priority = Literal["high", "medium", "positive"]

INSUFFICIENT_DATA = "insufficient_data"
INDEX_NEEDED = "index_needed"


@dataclass(frozen=True)
class Suggestion:
    """Actionable suggestion returned for the current request."""

    type: str
    icon: str
    title: str
    description: str
    actionable: str
    priority: Priority


@dataclass(frozen=True)
class SuggestionStats:
    """Averages the suggestions were derived from."""

    days_with_data: int
    total_meals: int
    avg_calories: int
    avg_protein: int
    avg_carbs: int
    avg_fat: int
    avg_score: int
    macro_breakdown: MacroBreakdown


@dataclass(frozen=True)
class SuggestionsResult:
    """Ranked suggestions, or a reason code when none could be produced."""

    suggestions: list[Suggestion] = field(default_factory=list)
    days_with_data: int = 0
    reason: str | None = None
    stats: SuggestionStats | None = None
