"""Domain models for biometric inputs and nutrition plans."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

Sex = Literal["MALE", "FEMALE"]
Goal = Literal["LOSE_WEIGHT", "MAINTAIN", "BUILD_MUSCLE"]
Trimester = Literal["FIRST", "SECOND", "THIRD"]


@dataclass(frozen=True)
class BiometricInput:
    """Biometric form data in metric units.

    Fields are optional so that validation can name every missing value at
    once instead of failing on the first.
    """

    birth_month: int | None
    birth_year: int | None
    sex: str | None
    current_weight_kg: float | None
    height_cm: float | None
    workouts_per_week: int | None
    goal: str = "MAINTAIN"
    target_weight_kg: float | None = None
    target_date: date | None = None
    is_pregnant: bool = False
    trimester: str | None = None


@dataclass(frozen=True)
class NutritionPlan:
    """Energy and macro targets derived from biometric input."""

    age: int
    bmr: float
    tdee: float
    target_calories: int
    protein_g: int
    carbs_g: int
    fat_g: int
    weeks_to_goal: int
    weekly_weight_change: float
    reasoning: str
    formula: str = "Mifflin-St Jeor"
