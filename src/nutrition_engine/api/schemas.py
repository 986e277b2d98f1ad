"""Pydantic models for engine request and response payloads."""

from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from nutrition_engine.domain.biometrics import BiometricInput, NutritionPlan
from nutrition_engine.domain.checkins import CheckInType
from nutrition_engine.domain.macros import round_half_up
from nutrition_engine.domain.meals import Meal, MealItem, MealTotals
from nutrition_engine.domain.profiles import UserProfile
from nutrition_engine.services.biometrics import inches_to_cm, pounds_to_kg


class BiometricRequest(BaseModel):
    """Biometric form data.

    Imperial requests carry weights in pounds and height in inches; they are
    converted to metric before the calculator runs.
    """

    birth_month: int | None = Field(default=None, ge=1, le=12)
    birth_year: int | None = None
    sex: str | None = None
    units: Literal["metric", "imperial"] = "metric"
    current_weight: float | None = None
    target_weight: float | None = None
    height: float | None = None
    workouts_per_week: int | None = None
    goal: Literal["LOSE_WEIGHT", "MAINTAIN", "BUILD_MUSCLE"] = "MAINTAIN"
    target_date: date | None = None
    is_pregnant: bool = False
    trimester: Literal["FIRST", "SECOND", "THIRD"] | None = None

    def to_domain(self) -> BiometricInput:
        """Return metric biometric input."""
        current_weight = self.current_weight
        target_weight = self.target_weight
        height = self.height
        if self.units == "imperial":
            current_weight = _convert(current_weight, pounds_to_kg)
            target_weight = _convert(target_weight, pounds_to_kg)
            height = _convert(height, inches_to_cm)
        return BiometricInput(
            birth_month=self.birth_month,
            birth_year=self.birth_year,
            sex=self.sex,
            current_weight_kg=current_weight,
            height_cm=height,
            workouts_per_week=self.workouts_per_week,
            goal=self.goal,
            target_weight_kg=target_weight,
            target_date=self.target_date,
            is_pregnant=self.is_pregnant,
            trimester=self.trimester,
        )


def _convert(
    value: float | None, converter: Callable[[float], float]
) -> float | None:
    if value is None:
        return None
    return converter(value)


class ProfileModel(BaseModel):
    """User profile fields used by the engine."""

    goal: str = "MAINTAIN"
    daily_calorie_target: float | None = Field(default=None, ge=0)
    protein_target: float | None = Field(default=None, ge=0)
    is_pregnant: bool = False
    trimester: Literal["FIRST", "SECOND", "THIRD"] | None = None
    timezone: str = "UTC"

    def to_domain(self) -> UserProfile:
        """Return the domain profile."""
        return UserProfile(
            goal=self.goal,
            daily_calorie_target=self.daily_calorie_target,
            protein_target=self.protein_target,
            is_pregnant=self.is_pregnant,
            trimester=self.trimester,
            timezone=self.timezone,
        )


class MealItemModel(BaseModel):
    """Parsed food item."""

    food: str
    quantity: str = ""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0


class MealTotalsModel(BaseModel):
    """Meal macro totals."""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0


class MealModel(BaseModel):
    """Parsed meal as produced by the meal parser."""

    user_id: UUID
    logged_at: datetime | None = None
    meal_type: Literal["Breakfast", "Lunch", "Dinner", "Snack"] = "Lunch"
    description: str = ""
    items: list[MealItemModel] = Field(default_factory=list)
    totals: MealTotalsModel | None = None

    def to_domain(self, meal_id: UUID) -> Meal:
        """Return the domain meal; totals are summed from items when absent."""
        items = [
            MealItem(
                food=item.food,
                quantity=item.quantity,
                calories=item.calories,
                protein=item.protein,
                carbs=item.carbs,
                fat=item.fat,
            )
            for item in self.items
        ]
        if self.totals is None:
            totals = MealTotals.from_items(items)
        else:
            totals = MealTotals(
                calories=self.totals.calories,
                protein=self.totals.protein,
                carbs=self.totals.carbs,
                fat=self.totals.fat,
            )
        return Meal(
            id=meal_id,
            user_id=self.user_id,
            logged_at=self.logged_at or datetime.now(tz=UTC),
            meal_type=self.meal_type,
            description=self.description,
            items=items,
            totals=totals,
        )


class GradeRequest(BaseModel):
    """Request body for grading a meal."""

    meal: MealModel | None = None
    profile: ProfileModel | None = None


class CheckInRequest(BaseModel):
    """Answer to a scheduled check-in."""

    check_in_type: CheckInType
    feedback: str


class HistoryRequest(BaseModel):
    """Request body for insights and suggestions.

    When no profile is supplied the stored profile is used.
    """

    profile: ProfileModel | None = None


def plan_payload(plan: NutritionPlan) -> dict[str, object]:
    """Serialize a plan with whole-calorie BMR and TDEE."""
    return {
        "age": plan.age,
        "bmr": round_half_up(plan.bmr),
        "tdee": round_half_up(plan.tdee),
        "target_calories": plan.target_calories,
        "protein": plan.protein_g,
        "carbs": plan.carbs_g,
        "fat": plan.fat_g,
        "weeks_to_goal": plan.weeks_to_goal,
        "weekly_weight_change": plan.weekly_weight_change,
        "formula": plan.formula,
        "reasoning": plan.reasoning,
    }
