"""Biometric calculations for energy and macro targets.

All formulas live here so that every caller computes BMR, TDEE and macro
splits the same way. Inputs are metric; convert imperial values with
``pounds_to_kg`` and ``feet_inches_to_cm`` before calling.
"""

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from nutrition_engine.domain.biometrics import BiometricInput, NutritionPlan
from nutrition_engine.domain.errors import InvalidArgumentError
from nutrition_engine.domain.macros import (
    CARBS_KCAL_PER_G,
    FAT_KCAL_PER_G,
    PROTEIN_KCAL_PER_G,
    round_half_up,
)
from nutrition_engine.services.profiles import ProfileRepository

_logger = logging.getLogger(__name__)

KG_PER_POUND = 0.453592
CM_PER_INCH = 2.54
INCHES_PER_FOOT = 12

MAX_WORKOUTS = 7
DEFAULT_ACTIVITY_MULTIPLIER = 1.55
ACTIVITY_MULTIPLIERS = {
    0: 1.2,
    1: 1.375,
    2: 1.375,
    3: 1.55,
    4: 1.55,
    5: 1.725,
    6: 1.725,
    7: 1.9,
}

PREGNANCY_CALORIE_ADDITIONS = {"FIRST": 0, "SECOND": 340, "THIRD": 452}
TRIMESTER_LABELS = {"FIRST": "1st", "SECOND": "2nd", "THIRD": "3rd"}

DEFICIT = "deficit"
SURPLUS = "surplus"
MAINTENANCE = "maintenance"
DIRECTION_FACTORS = {DEFICIT: 0.85, SURPLUS: 1.10, MAINTENANCE: 1.0}

# (protein, carbs, fat) shares of target calories.
STANDARD_SPLIT = (0.30, 0.40, 0.30)
PREGNANCY_SPLIT = (0.25, 0.50, 0.25)

_SEXES = {"MALE", "FEMALE"}
_DAYS_PER_WEEK = 7
MONTHS_PER_YEAR = 12


def pounds_to_kg(pounds: float) -> float:
    """Convert pounds to kilograms."""
    return pounds * KG_PER_POUND


def inches_to_cm(inches: float) -> float:
    """Convert inches to centimeters."""
    return inches * CM_PER_INCH


def feet_inches_to_cm(feet: float, inches: float = 0) -> float:
    """Convert a feet-and-inches height to centimeters."""
    return inches_to_cm(feet * INCHES_PER_FOOT + inches)


def calculate_age(birth_month: int, birth_year: int, today: date) -> int:
    """Return age in whole years from a birth month and year."""
    age = today.year - birth_year
    if today.month < birth_month:
        age -= 1
    return age


def calculate_bmr(weight_kg: float, height_cm: float, age: int, sex: str) -> float:
    """Return basal metabolic rate using the Mifflin-St Jeor equation."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex == "MALE":
        return base + 5
    return base - 161


def calculate_tdee(bmr: float, workouts_per_week: int) -> float:
    """Scale BMR by the activity multiplier for the weekly workout count."""
    workouts = min(workouts_per_week, MAX_WORKOUTS)
    multiplier = ACTIVITY_MULTIPLIERS.get(workouts, DEFAULT_ACTIVITY_MULTIPLIER)
    return bmr * multiplier


def calorie_direction(
    goal: str, current_weight_kg: float, target_weight_kg: float
) -> str:
    """Return DEFICIT, SURPLUS or MAINTENANCE for a goal and weight change.

    The direction of the desired weight change wins over the goal label, so a
    user tagged MAINTAIN with a lower target weight still gets a deficit.
    """
    weight_delta = target_weight_kg - current_weight_kg
    if goal == "LOSE_WEIGHT" or weight_delta < 0:
        return DEFICIT
    if goal == "BUILD_MUSCLE" or weight_delta > 0:
        return SURPLUS
    return MAINTENANCE


def _uses_pregnancy_plan(is_pregnant: bool, trimester: str | None) -> bool:
    return is_pregnant and trimester in PREGNANCY_CALORIE_ADDITIONS


def calculate_target_calories(  # noqa: PLR0913
    tdee: float,
    goal: str,
    current_weight_kg: float,
    target_weight_kg: float,
    is_pregnant: bool = False,
    trimester: str | None = None,
) -> int:
    """Return the goal-adjusted daily calorie target.

    Pregnancy calories apply only when a trimester is known; otherwise the
    goal adjustment is used.
    """
    if _uses_pregnancy_plan(is_pregnant, trimester):
        return round_half_up(tdee + PREGNANCY_CALORIE_ADDITIONS[trimester])
    direction = calorie_direction(goal, current_weight_kg, target_weight_kg)
    return round_half_up(tdee * DIRECTION_FACTORS[direction])


def calculate_macros(calories: float, is_pregnant: bool = False) -> tuple[int, int, int]:
    """Return (protein, carbs, fat) grams for a calorie target.

    Each macro is rounded on its own, so the grams may not add back up to the
    exact target.
    """
    protein_share, carbs_share, fat_share = (
        PREGNANCY_SPLIT if is_pregnant else STANDARD_SPLIT
    )
    return (
        round_half_up(calories * protein_share / PROTEIN_KCAL_PER_G),
        round_half_up(calories * carbs_share / CARBS_KCAL_PER_G),
        round_half_up(calories * fat_share / FAT_KCAL_PER_G),
    )


def calculate_timeline(
    current_weight_kg: float,
    target_weight_kg: float,
    target_date: date,
    today: date,
) -> tuple[int, float]:
    """Return (weeks to goal, weekly weight change in kg)."""
    weeks_until = max(1.0, (target_date - today).days / _DAYS_PER_WEEK)
    weekly_change = abs(target_weight_kg - current_weight_kg) / weeks_until
    return round_half_up(weeks_until), weekly_change


def build_reasoning(
    direction: str,
    tdee: float,
    target_calories: int,
    is_pregnant: bool = False,
    trimester: str | None = None,
) -> str:
    """Explain the calorie target in one sentence.

    ``direction`` is the value ``calorie_direction`` chose for the target, so
    the text always agrees with the factor that was applied.
    """
    if _uses_pregnancy_plan(is_pregnant, trimester):
        label = TRIMESTER_LABELS[trimester]
        extra = PREGNANCY_CALORIE_ADDITIONS[trimester]
        return (
            f"Your plan is optimized for a healthy pregnancy in your {label} "
            f"trimester, with {extra} extra calories for fetal development."
        )

    if direction == DEFICIT:
        deficit = tdee - target_calories
        percent = round_half_up(deficit / tdee * 100)
        return (
            f"This creates a sustainable {percent}% calorie deficit "
            f"(~{round_half_up(deficit)} cal/day) for safe weight loss of "
            "approximately 0.3-0.5kg per week."
        )
    if direction == SURPLUS:
        surplus = target_calories - tdee
        percent = round_half_up(surplus / tdee * 100)
        return (
            f"This provides a {percent}% calorie surplus "
            f"(~{round_half_up(surplus)} cal/day) to support muscle growth while "
            "minimizing fat gain."
        )
    return (
        "This maintains your current weight while supporting your activity "
        "level and overall health."
    )


def validate_biometrics(data: BiometricInput, today: date) -> None:
    """Reject incomplete or inconsistent biometric input."""
    required = {
        "birth_month": data.birth_month,
        "birth_year": data.birth_year,
        "current_weight_kg": data.current_weight_kg,
        "height_cm": data.height_cm,
        "workouts_per_week": data.workouts_per_week,
    }
    missing = [name for name, value in required.items() if value is None]
    # Zero is as unusable as a missing value for everything but workouts.
    missing += [
        name
        for name, value in required.items()
        if name != "workouts_per_week" and value is not None and value <= 0
    ]
    if missing:
        raise InvalidArgumentError(
            f"Missing required fields: {', '.join(missing)}", fields=missing
        )
    if data.workouts_per_week < 0:
        raise InvalidArgumentError(
            "workouts_per_week must not be negative", fields=["workouts_per_week"]
        )
    if data.birth_month > MONTHS_PER_YEAR:
        raise InvalidArgumentError(
            "birth_month must be between 1 and 12", fields=["birth_month"]
        )
    if calculate_age(data.birth_month, data.birth_year, today) < 0:
        raise InvalidArgumentError(
            "Birth date must not be in the future", fields=["birth_year"]
        )
    if data.sex not in _SEXES:
        raise InvalidArgumentError("Sex must be MALE or FEMALE", fields=["sex"])
    if data.is_pregnant and data.sex == "MALE":
        raise InvalidArgumentError(
            "Pregnancy option is only available for female users",
            fields=["is_pregnant"],
        )


def compute_nutrition_plan(data: BiometricInput, today: date) -> NutritionPlan:
    """Validate biometric input and compute a nutrition plan."""
    validate_biometrics(data, today)

    age = calculate_age(data.birth_month, data.birth_year, today)
    bmr = calculate_bmr(data.current_weight_kg, data.height_cm, age, data.sex)
    tdee = calculate_tdee(bmr, data.workouts_per_week)
    target_weight = data.target_weight_kg or data.current_weight_kg
    direction = calorie_direction(data.goal, data.current_weight_kg, target_weight)
    target_calories = calculate_target_calories(
        tdee,
        data.goal,
        data.current_weight_kg,
        target_weight,
        data.is_pregnant,
        data.trimester,
    )
    protein_g, carbs_g, fat_g = calculate_macros(target_calories, data.is_pregnant)

    weeks_to_goal = 0
    weekly_weight_change = 0.0
    if (
        not data.is_pregnant
        and data.target_date is not None
        and target_weight != data.current_weight_kg
    ):
        weeks_to_goal, weekly_weight_change = calculate_timeline(
            data.current_weight_kg, target_weight, data.target_date, today
        )

    plan = NutritionPlan(
        age=age,
        bmr=bmr,
        tdee=tdee,
        target_calories=target_calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        weeks_to_goal=weeks_to_goal,
        weekly_weight_change=weekly_weight_change,
        reasoning=build_reasoning(
            direction, tdee, target_calories, data.is_pregnant, data.trimester
        ),
    )
    _logger.info(
        "Nutrition plan calculated: age=%s bmr=%.0f tdee=%.0f target=%s",
        age,
        bmr,
        tdee,
        target_calories,
    )
    return plan


@dataclass
class NutritionPlanService:
    """Computes nutrition plans and stores the ones a user confirms."""

    repository: ProfileRepository

    def preview_plan(self, data: BiometricInput, today: date) -> NutritionPlan:
        """Compute a plan without persisting it."""
        return compute_nutrition_plan(data, today)

    def confirm_plan(
        self, user_id: UUID, data: BiometricInput, today: date
    ) -> NutritionPlan:
        """Compute a plan and write its targets back to the profile."""
        plan = compute_nutrition_plan(data, today)
        self.repository.update_plan(
            user_id,
            goal=data.goal,
            is_pregnant=data.is_pregnant,
            trimester=data.trimester,
            plan=plan,
        )
        _logger.info("Nutrition plan confirmed: user_id=%s", user_id)
        return plan
