"""Domain models for logged meals and their grades."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

SNACK = "Snack"
MEAL_TYPES = ("Breakfast", "Lunch", "Dinner", SNACK)


@dataclass(frozen=True)
class MealItem:
    """Single parsed food item with macros."""

    food: str
    quantity: str
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class MealTotals:
    """Summed macros for a meal."""

    calories: float
    protein: float
    carbs: float
    fat: float

    @classmethod
    def from_items(cls, items: list[MealItem]) -> "MealTotals":
        """Sum item macros into meal totals."""
        return cls(
            calories=sum(item.calories for item in items),
            protein=sum(item.protein for item in items),
            carbs=sum(item.carbs for item in items),
            fat=sum(item.fat for item in items),
        )


@dataclass(frozen=True)
class MacroBreakdown:
    """Rounded calorie share of each macro, in percent."""

    protein: int
    carbs: int
    fat: int


@dataclass(frozen=True)
class GradeData:
    """Grade attached to a meal."""

    grade: str
    score: int
    feedback: list[str]
    positives: list[str]
    color: str
    macro_breakdown: MacroBreakdown
    summary: str
    graded_at: datetime
    warnings: list[str] = field(default_factory=list)
    is_pregnancy_grade: bool = False
    trimester: str | None = None


@dataclass(frozen=True)
class Meal:
    """A logged meal with its parsed items."""

    id: UUID
    user_id: UUID
    logged_at: datetime
    meal_type: str
    description: str
    items: list[MealItem]
    totals: MealTotals
    grade: GradeData | None = None

    @property
    def is_snack(self) -> bool:
        """Return True for snack entries."""
        return self.meal_type == SNACK
