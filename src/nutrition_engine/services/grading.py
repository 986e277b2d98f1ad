"""Meal grading against a user's goal.

A meal starts at 100 points. Rule groups are evaluated independently and
all of them can change the score; inside a group the first matching rule
wins. The clamped score maps to a letter grade.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutrition_engine.domain.errors import InvalidArgumentError
from nutrition_engine.domain.foods import (
    CALCIUM_RICH,
    DHA_OMEGA3,
    FOLATE_RICH,
    IRON_RICH,
    PREGNANCY_AVOID,
    is_fruit,
    is_vegetable,
    matches_any,
)
from nutrition_engine.domain.macros import macro_shares, round_half_up
from nutrition_engine.domain.meals import GradeData, MacroBreakdown, Meal
from nutrition_engine.domain.profiles import UserProfile

_logger = logging.getLogger(__name__)

START_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100
DEFAULT_MEAL_CALORIES = 600
MEALS_PER_DAY = 3

GRADE_BREAKPOINTS = (
    (95, "A+"),
    (90, "A"),
    (85, "A-"),
    (80, "B+"),
    (75, "B"),
    (70, "B-"),
    (65, "C+"),
    (60, "C"),
    (55, "C-"),
    (50, "D+"),
    (45, "D"),
    (40, "D-"),
)
FAILING_GRADE = "F"
GRADES = tuple(letter for _, letter in GRADE_BREAKPOINTS) + (FAILING_GRADE,)

GRADE_COLORS = {
    "A": "#10B981",
    "B": "#3B82F6",
    "C": "#F59E0B",
    "D": "#F97316",
    "F": "#EF4444",
}

LOSE_WEIGHT = "LOSE_WEIGHT"
BUILD_MUSCLE = "BUILD_MUSCLE"


@dataclass(frozen=True)
class MealFacts:
    """Numbers the grading rules look at."""

    calories: float
    protein_pct: float
    carbs_pct: float
    fat_pct: float
    calorie_ratio: float
    goal: str
    item_count: int
    veggie_count: int
    fruit_count: int
    has_folate: bool = False
    has_iron: bool = False
    has_calcium: bool = False
    has_dha: bool = False
    avoid_foods: tuple[str, ...] = ()
    trimester: str | None = None

    @property
    def calories_display(self) -> int:
        return round_half_up(self.calories)

    @property
    def ratio_display(self) -> int:
        return round_half_up(self.calorie_ratio * 100)

    @property
    def protein_display(self) -> int:
        return round_half_up(self.protein_pct)

    @property
    def fat_display(self) -> int:
        return round_half_up(self.fat_pct)


@dataclass(frozen=True)
class ScoringRule:
    """A condition, the score change it applies and the message it adds.

    Messages are ``str.format`` templates receiving the facts as ``f``. A rule
    without a message changes the score silently.
    """

    condition: Callable[[MealFacts], bool]
    delta: int = 0
    message: str | None = None
    positive: bool = False


@dataclass(frozen=True)
class RuleGroup:
    """Mutually exclusive rules; the first matching rule fires."""

    name: str
    rules: tuple[ScoringRule, ...]

    def evaluate(self, facts: MealFacts) -> ScoringRule | None:
        """Return the first rule whose condition holds."""
        for rule in self.rules:
            if rule.condition(facts):
                return rule
        return None


def _always(_facts: MealFacts) -> bool:
    return True


CALORIES = RuleGroup(
    "calories",
    (
        ScoringRule(
            lambda f: f.calorie_ratio > 1.5,
            -25,
            "⚠️ High calories for one meal ({f.ratio_display}% of target)",
        ),
        ScoringRule(
            lambda f: f.calorie_ratio < 0.5 and f.goal != LOSE_WEIGHT,
            -15,
            "💡 Quite low in calories - consider adding more food",
        ),
        ScoringRule(
            lambda f: 0.8 <= f.calorie_ratio <= 1.2,
            message="✓ Perfect calorie amount",
            positive=True,
        ),
    ),
)

PROTEIN_BY_GOAL = {
    BUILD_MUSCLE: RuleGroup(
        "protein",
        (
            ScoringRule(
                lambda f: f.protein_pct < 20,
                -30,
                "💪 Low protein ({f.protein_display}%) - aim for 25%+ for muscle "
                "building",
            ),
            ScoringRule(
                lambda f: f.protein_pct >= 30,
                message="💪 Excellent protein ({f.protein_display}%)!",
                positive=True,
            ),
            ScoringRule(
                lambda f: f.protein_pct >= 25,
                message="✓ Good protein content",
                positive=True,
            ),
            ScoringRule(
                _always,
                -10,
                "💪 Could use a bit more protein for muscle building",
            ),
        ),
    ),
    LOSE_WEIGHT: RuleGroup(
        "protein",
        (
            ScoringRule(
                lambda f: f.protein_pct < 15,
                -25,
                "🎯 Add more protein for satiety and muscle preservation",
            ),
            ScoringRule(
                lambda f: f.protein_pct >= 25,
                message="🎯 Great protein ({f.protein_display}%) for weight loss!",
                positive=True,
            ),
            ScoringRule(_always, message="✓ Good protein content", positive=True),
        ),
    ),
}

DEFAULT_PROTEIN = RuleGroup(
    "protein",
    (
        ScoringRule(
            lambda f: f.protein_pct < 12,
            -15,
            "Add more protein for balanced nutrition",
        ),
        ScoringRule(
            lambda f: f.protein_pct >= 20,
            message="✓ Excellent protein balance",
            positive=True,
        ),
    ),
)

FAT = RuleGroup(
    "fat",
    (
        ScoringRule(
            lambda f: f.fat_pct > 45,
            -20,
            "⚠️ Very high fat ({f.fat_display}%) - may feel sluggish",
        ),
        ScoringRule(
            lambda f: f.fat_pct < 15 and f.goal != LOSE_WEIGHT,
            -10,
            "💡 Low fat - add healthy fats (avocado, nuts, olive oil)",
        ),
        ScoringRule(
            lambda f: 25 <= f.fat_pct <= 35,
            message="✓ Balanced fat content",
            positive=True,
        ),
    ),
)

CARBS = RuleGroup(
    "carbs",
    (
        ScoringRule(
            lambda f: f.goal == LOSE_WEIGHT and f.carbs_pct > 50,
            -15,
            "🎯 High carbs - consider reducing for better weight loss",
        ),
        ScoringRule(
            lambda f: f.goal == BUILD_MUSCLE and f.carbs_pct < 30,
            -10,
            "💪 Add more carbs for energy and recovery",
        ),
    ),
)

PRODUCE = RuleGroup(
    "produce",
    (
        ScoringRule(
            lambda f: f.veggie_count == 0 and f.fruit_count == 0,
            -12,
            "🥦 Add vegetables for fiber and micronutrients",
        ),
        ScoringRule(
            lambda f: f.veggie_count >= 2,
            message="🥦 Great veggie variety!",
            positive=True,
        ),
        ScoringRule(
            lambda f: f.veggie_count >= 1,
            message="✓ Includes vegetables",
            positive=True,
        ),
        ScoringRule(
            lambda f: f.fruit_count > 0,
            message="🍎 Includes fruit",
            positive=True,
        ),
    ),
)

PORTION = RuleGroup(
    "portion",
    (
        ScoringRule(
            lambda f: f.item_count == 1 and f.calories > 800,
            -10,
            "💡 Large single item - consider adding variety",
        ),
        ScoringRule(
            lambda f: f.item_count >= 3,
            message="✓ Good meal variety",
            positive=True,
        ),
    ),
)

SNACK_GROUPS = (
    RuleGroup(
        "calories",
        (
            ScoringRule(
                lambda f: f.calories > 400,
                -20,
                "⚠️ High calories for a snack ({f.calories_display} cal) - "
                "consider a smaller portion",
            ),
            ScoringRule(
                lambda f: f.calories > 300,
                -10,
                "💡 On the higher side for a snack - watch portion size",
            ),
            ScoringRule(
                lambda f: 100 <= f.calories <= 250,
                message="✓ Perfect snack portion!",
                positive=True,
            ),
            ScoringRule(
                lambda f: f.calories < 100,
                message="✓ Light snack",
                positive=True,
            ),
        ),
    ),
    RuleGroup(
        "protein",
        (
            ScoringRule(
                lambda f: f.protein_pct >= 15,
                message="✓ Great protein for a snack!",
                positive=True,
            ),
        ),
    ),
    RuleGroup(
        "fat",
        (
            ScoringRule(
                lambda f: f.fat_pct > 60,
                -10,
                "💡 Very high fat content - watch portion size",
            ),
            ScoringRule(
                lambda f: 20 <= f.fat_pct <= 40,
                message="✓ Contains healthy fats",
                positive=True,
            ),
        ),
    ),
    RuleGroup(
        "fruit",
        (
            ScoringRule(
                lambda f: f.fruit_count > 0,
                message="🍎 Healthy fruit snack!",
                positive=True,
            ),
        ),
    ),
    RuleGroup(
        "vegetables",
        (
            ScoringRule(
                lambda f: f.veggie_count > 0,
                message="🥦 Nutritious veggie snack!",
                positive=True,
            ),
        ),
    ),
)

PREGNANCY_PROTEIN = RuleGroup(
    "protein",
    (
        ScoringRule(
            lambda f: f.protein_pct < 15,
            -25,
            "🤰 Add more protein for your baby's development (aim for 20-25%)",
        ),
        ScoringRule(
            lambda f: 20 <= f.protein_pct <= 30,
            message="🤰 Perfect protein ({f.protein_display}%) for pregnancy!",
            positive=True,
        ),
        ScoringRule(
            lambda f: f.protein_pct >= 18,
            message="✓ Good protein for pregnancy",
            positive=True,
        ),
        ScoringRule(_always, -10, "🤰 A bit more protein would be great for baby"),
    ),
)

PREGNANCY_CARBS = RuleGroup(
    "carbs",
    (
        ScoringRule(
            lambda f: 45 <= f.carbs_pct <= 55,
            message="🤰 Great carbs for energy during pregnancy!",
            positive=True,
        ),
        ScoringRule(
            lambda f: f.carbs_pct < 35,
            -10,
            "🤰 Add more healthy carbs for energy (whole grains, fruits)",
        ),
    ),
)

PREGNANCY_NUTRIENTS = (
    RuleGroup(
        "folate",
        (
            ScoringRule(
                lambda f: f.has_folate,
                5,
                "🤰 Great source of folate for baby's development!",
                positive=True,
            ),
            ScoringRule(
                lambda f: f.trimester == "FIRST",
                message=(
                    "💡 Consider adding folate-rich foods (leafy greens, beans, "
                    "oranges)"
                ),
            ),
        ),
    ),
    RuleGroup(
        "iron",
        (
            ScoringRule(
                lambda f: f.has_iron,
                3,
                "🤰 Good iron content for preventing anemia!",
                positive=True,
            ),
            ScoringRule(
                lambda f: f.trimester in {"SECOND", "THIRD"},
                message="💡 Add iron-rich foods (lean meat, spinach, lentils)",
            ),
        ),
    ),
    RuleGroup(
        "calcium",
        (
            ScoringRule(
                lambda f: f.has_calcium,
                3,
                "🤰 Excellent calcium for baby's bones!",
                positive=True,
            ),
        ),
    ),
    RuleGroup(
        "dha",
        (
            ScoringRule(
                lambda f: f.has_dha,
                4,
                "🤰 Great DHA/Omega-3 for baby's brain development!",
                positive=True,
            ),
            ScoringRule(
                lambda f: f.trimester == "THIRD",
                message=(
                    "💡 Add DHA sources (salmon, chia seeds, walnuts) for baby's "
                    "brain"
                ),
            ),
        ),
    ),
    RuleGroup(
        "avoid",
        (ScoringRule(lambda f: bool(f.avoid_foods), -30),),
    ),
)

_A_SUMMARIES = {
    BUILD_MUSCLE: "High protein, balanced macros - perfect for muscle building!",
    LOSE_WEIGHT: "High protein, good satiety - excellent for weight loss!",
}
_DEFAULT_A_SUMMARY = "Well-balanced and nutritious meal!"
_MEAL_SUMMARIES = {
    "B": "Good meal! A few tweaks could make it perfect.",
    "C": "Decent meal, but room for improvement.",
    "D": "Consider adjusting portions or ingredients.",
    "F": "Let's work on improving this meal together!",
}
_SNACK_SUMMARIES = {
    "B": "Good snack! Well portioned.",
    "C": "Decent snack - watch the portion size.",
}
_DEFAULT_SNACK_SUMMARY = "Consider a healthier or smaller snack option."
_PREGNANCY_A_SUMMARIES = {
    "FIRST": "Excellent nutrition for early pregnancy! 🤰",
    "SECOND": "Perfect balance for your growing baby! 🤰",
    "THIRD": "Great nutrients for baby's final development! 🤰",
}
_PREGNANCY_SUMMARIES = {
    "B": "Good meal for pregnancy! Consider adding key nutrients.",
    "C": "Decent meal, but let's boost those pregnancy nutrients!",
}
_DEFAULT_PREGNANCY_SUMMARY = "Let's adjust this meal to better support your pregnancy."


def score_to_grade(score: float) -> str:
    """Map a 0-100 score to a letter grade."""
    for threshold, letter in GRADE_BREAKPOINTS:
        if score >= threshold:
            return letter
    return FAILING_GRADE


def grade_to_color(grade: str) -> str:
    """Return the display color for a letter grade."""
    return GRADE_COLORS.get(grade[:1], GRADE_COLORS[FAILING_GRADE])


def collect_facts(meal: Meal, profile: UserProfile) -> MealFacts:
    """Derive the values the grading rules need from a meal."""
    totals = meal.totals
    shares = macro_shares(totals.protein, totals.carbs, totals.fat)
    ideal_meal_calories = (
        profile.daily_calorie_target / MEALS_PER_DAY
        if profile.daily_calorie_target
        else DEFAULT_MEAL_CALORIES
    )
    foods = [item.food for item in meal.items]
    return MealFacts(
        calories=totals.calories,
        protein_pct=shares.protein,
        carbs_pct=shares.carbs,
        fat_pct=shares.fat,
        calorie_ratio=totals.calories / ideal_meal_calories,
        goal=profile.goal,
        item_count=len(meal.items),
        veggie_count=sum(1 for food in foods if is_vegetable(food)),
        fruit_count=sum(1 for food in foods if is_fruit(food)),
        has_folate=any(matches_any(food, FOLATE_RICH) for food in foods),
        has_iron=any(matches_any(food, IRON_RICH) for food in foods),
        has_calcium=any(matches_any(food, CALCIUM_RICH) for food in foods),
        has_dha=any(matches_any(food, DHA_OMEGA3) for food in foods),
        avoid_foods=tuple(food for food in foods if matches_any(food, PREGNANCY_AVOID)),
        trimester=profile.trimester,
    )


def select_rule_groups(meal: Meal, profile: UserProfile) -> tuple[RuleGroup, ...]:
    """Return the rule groups that apply to this meal, in evaluation order."""
    nutrients = PREGNANCY_NUTRIENTS if profile.is_pregnant else ()
    if meal.is_snack:
        return SNACK_GROUPS + nutrients
    if profile.is_pregnant:
        return (
            CALORIES,
            PREGNANCY_PROTEIN,
            FAT,
            PREGNANCY_CARBS,
            PRODUCE,
            *nutrients,
            PORTION,
        )
    protein = PROTEIN_BY_GOAL.get(profile.goal, DEFAULT_PROTEIN)
    return (CALORIES, protein, FAT, CARBS, PRODUCE, PORTION)


def summarize(grade: str, meal: Meal, profile: UserProfile, facts: MealFacts) -> str:
    """Pick the summary sentence for a grade."""
    family = grade[:1]
    if meal.is_snack:
        if family == "A":
            if facts.fruit_count or facts.veggie_count:
                return "Perfect healthy snack! 🍎"
            return "Great snack choice! 👍"
        return _SNACK_SUMMARIES.get(family, _DEFAULT_SNACK_SUMMARY)
    if profile.is_pregnant:
        if family == "A":
            return _PREGNANCY_A_SUMMARIES.get(
                profile.trimester or "", _PREGNANCY_A_SUMMARIES["THIRD"]
            )
        return _PREGNANCY_SUMMARIES.get(family, _DEFAULT_PREGNANCY_SUMMARY)
    if family == "A":
        return _A_SUMMARIES.get(profile.goal, _DEFAULT_A_SUMMARY)
    return _MEAL_SUMMARIES[family]


def score_meal(meal: Meal, profile: UserProfile, graded_at: datetime) -> GradeData:
    """Grade a parsed meal against the user's goal and calorie target."""
    facts = collect_facts(meal, profile)
    score = START_SCORE
    feedback: list[str] = []
    positives: list[str] = []

    for group in select_rule_groups(meal, profile):
        rule = group.evaluate(facts)
        if rule is None:
            continue
        score += rule.delta
        if rule.message is None:
            continue
        text = rule.message.format(f=facts)
        if rule.positive:
            positives.append(text)
        else:
            feedback.append(text)

    warnings: list[str] = []
    if profile.is_pregnant:
        warnings = [
            f"⚠️ {food} may not be safe during pregnancy - consult your doctor"
            for food in facts.avoid_foods
        ]

    score = max(MIN_SCORE, min(MAX_SCORE, score))
    grade = score_to_grade(score)
    return GradeData(
        grade=grade,
        score=score,
        feedback=feedback,
        positives=positives,
        color=grade_to_color(grade),
        macro_breakdown=MacroBreakdown(
            protein=round_half_up(facts.protein_pct),
            carbs=round_half_up(facts.carbs_pct),
            fat=round_half_up(facts.fat_pct),
        ),
        summary=summarize(grade, meal, profile, facts),
        graded_at=graded_at,
        warnings=warnings,
        is_pregnancy_grade=profile.is_pregnant,
        trimester=profile.trimester if profile.is_pregnant else None,
    )


class MealGradeRepository(Protocol):
    """Persistence interface for meal grades."""

    def save_grade(self, meal_id: UUID, grade: GradeData) -> None:
        """Overwrite the grade stored on a meal."""


@dataclass
class MealGradingService:
    """Grades meals and stores the result on the meal record."""

    repository: MealGradeRepository

    def grade_meal(
        self,
        meal_id: UUID | None,
        meal: Meal | None,
        profile: UserProfile | None,
        now: datetime | None = None,
    ) -> GradeData:
        """Validate the request and grade the meal without persisting it."""
        missing = [
            name
            for name, value in (
                ("meal_id", meal_id),
                ("meal", meal),
                ("profile", profile),
            )
            if value is None
        ]
        if missing:
            raise InvalidArgumentError(
                f"{', '.join(missing)} required", fields=missing
            )
        grade = score_meal(meal, profile, now or datetime.now(tz=UTC))
        _logger.info(
            "Meal graded: meal_id=%s grade=%s score=%s",
            meal_id,
            grade.grade,
            grade.score,
        )
        return grade

    def grade_and_save(
        self,
        meal_id: UUID | None,
        meal: Meal | None,
        profile: UserProfile | None,
        now: datetime | None = None,
    ) -> GradeData:
        """Grade a meal and overwrite any grade previously stored on it."""
        grade = self.grade_meal(meal_id, meal, profile, now)
        self.repository.save_grade(meal_id, grade)
        return grade
