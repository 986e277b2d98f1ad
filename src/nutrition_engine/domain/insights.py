"""Domain models for weekly insights."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class DailyTotal:
    """Summed macros for one local calendar day."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float
    meal_count: int


@dataclass(frozen=True)
class Insight:
    """A single insight card."""

    icon: str
    title: str
    description: str
    color: str


@dataclass(frozen=True)
class ChartPoint:
    """Calories for one day of the weekly chart."""

    label: str
    calories: float


@dataclass(frozen=True)
class MacroSlice:
    """Calories contributed by one macro over the week."""

    name: str
    calories: float
    color: str


@dataclass(frozen=True)
class InsightsResult:
    """Insights and chart series for the trailing week."""

    has_enough_data: bool
    days_with_data: int
    insights: list[Insight] = field(default_factory=list)
    weekly_chart: list[ChartPoint] = field(default_factory=list)
    macro_chart: list[MacroSlice] = field(default_factory=list)
    reason: str | None = None
