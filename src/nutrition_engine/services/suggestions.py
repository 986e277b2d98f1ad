"""Personalized suggestions from recent meal history."""

import logging
from dataclasses import dataclass
from datetime import tzinfo
from uuid import UUID

from nutrition_engine.domain.errors import MealHistoryUnavailableError
from nutrition_engine.domain.macros import MacroShares, macro_shares, round_half_up
from nutrition_engine.domain.meals import MacroBreakdown, Meal
from nutrition_engine.domain.profiles import UserProfile, resolve_timezone
from nutrition_engine.domain.suggestions import (
    INDEX_NEEDED,
    INSUFFICIENT_DATA,
    Suggestion,
    SuggestionsResult,
    SuggestionStats,
)
from nutrition_engine.services.insights import MealHistoryRepository

_logger = logging.getLogger(__name__)

PRIORITY_ORDER = {"high": 0, "medium": 1, "positive": 2}
MEALS_PER_DAY = 3
CALORIE_TOLERANCE_PCT = 20

PREGNANCY_FOLATE = Suggestion(
    type="pregnancy_folate",
    icon="🤰",
    title="Boost Folate for Baby's Development",
    description=(
        "Folate is crucial in the 1st trimester for preventing neural tube defects."
    ),
    actionable="Add spinach, kale, lentils, beans, or fortified cereals to your meals",
    priority="high",
)
PREGNANCY_IRON = Suggestion(
    type="pregnancy_iron",
    icon="🤰",
    title="Maintain Iron Levels",
    description="Iron needs increase significantly during pregnancy to prevent anemia.",
    actionable="Include lean red meat, spinach, lentils, or iron-fortified foods daily",
    priority="high",
)
PREGNANCY_CALCIUM = Suggestion(
    type="pregnancy_calcium",
    icon="🤰",
    title="Strong Bones for Baby",
    description="Your baby needs calcium for bone development.",
    actionable=(
        "Aim for 3-4 servings of dairy, fortified plant milk, or calcium-rich foods "
        "daily"
    ),
    priority="medium",
)
PREGNANCY_DHA = Suggestion(
    type="pregnancy_dha",
    icon="🤰",
    title="DHA for Baby's Brain",
    description="Omega-3 fatty acids support your baby's brain and eye development.",
    actionable="Eat salmon 2x/week, or add chia seeds, walnuts, or DHA-fortified eggs",
    priority="high",
)
PREGNANCY_SMALL_MEALS = Suggestion(
    type="pregnancy_meals",
    icon="🤰",
    title="Small, Frequent Meals",
    description=(
        "Eating smaller meals more often can help reduce nausea and maintain energy."
    ),
    actionable="Try 5-6 smaller meals throughout the day instead of 3 large ones",
    priority="medium",
)
PREGNANCY_HYDRATION = Suggestion(
    type="pregnancy_hydration",
    icon="💧",
    title="Stay Well Hydrated",
    description=(
        "Pregnancy increases your fluid needs for amniotic fluid and increased "
        "blood volume."
    ),
    actionable="Aim for 8-10 glasses of water daily, more if exercising",
    priority="medium",
)
PREGNANCY_AVOID = Suggestion(
    type="pregnancy_avoid",
    icon="⚠️",
    title="Foods to Avoid During Pregnancy",
    description="Some foods pose risks during pregnancy.",
    actionable=(
        "Avoid raw fish, deli meats, unpasteurized cheese, high-mercury fish, and "
        "alcohol"
    ),
    priority="high",
)


@dataclass(frozen=True)
class MealAverages:
    """Per-meal averages across the sampled history."""

    total_meals: int
    calories: int
    protein: int
    carbs: int
    fat: int
    score: int
    graded_meals: int
    shares: MacroShares


@dataclass
class SuggestionsService:
    """Ranks suggestions from a bounded sample of recent meals."""

    repository: MealHistoryRepository
    sample_size: int = 100
    min_days_with_data: int = 10
    max_suggestions: int = 3

    def generate_suggestions(
        self, user_id: UUID, profile: UserProfile
    ) -> SuggestionsResult:
        """Return up to ``max_suggestions`` ranked suggestions."""
        tz = resolve_timezone(profile.timezone)
        try:
            meals = self.repository.list_recent_meals(user_id, self.sample_size)
        except MealHistoryUnavailableError:
            _logger.warning(
                "Meal history unavailable for suggestions: user_id=%s",
                user_id,
                exc_info=True,
            )
            return SuggestionsResult(reason=INDEX_NEEDED)

        days_with_data = count_distinct_days(meals, tz)
        if days_with_data < self.min_days_with_data:
            _logger.info(
                "Not enough data for suggestions: user_id=%s days=%s",
                user_id,
                days_with_data,
            )
            return SuggestionsResult(
                days_with_data=days_with_data, reason=INSUFFICIENT_DATA
            )

        averages = average_meals(meals)
        candidates = build_candidates(averages, profile)
        ranked = rank_suggestions(candidates, self.max_suggestions)
        _logger.info(
            "Suggestions generated: user_id=%s candidates=%s returned=%s",
            user_id,
            len(candidates),
            len(ranked),
        )
        return SuggestionsResult(
            suggestions=ranked,
            days_with_data=days_with_data,
            stats=SuggestionStats(
                days_with_data=days_with_data,
                total_meals=averages.total_meals,
                avg_calories=averages.calories,
                avg_protein=averages.protein,
                avg_carbs=averages.carbs,
                avg_fat=averages.fat,
                avg_score=averages.score,
                macro_breakdown=MacroBreakdown(
                    protein=round_half_up(averages.shares.protein),
                    carbs=round_half_up(averages.shares.carbs),
                    fat=round_half_up(averages.shares.fat),
                ),
            ),
        )


def count_distinct_days(meals: list[Meal], tz: tzinfo) -> int:
    """Count the distinct local dates meals were logged on."""
    return len({meal.logged_at.astimezone(tz).date().isoformat() for meal in meals})


def average_meals(meals: list[Meal]) -> MealAverages:
    """Average macros per meal (not per day) and score per graded meal."""
    total = max(len(meals), 1)
    calories = round_half_up(sum(meal.totals.calories for meal in meals) / total)
    protein = round_half_up(sum(meal.totals.protein for meal in meals) / total)
    carbs = round_half_up(sum(meal.totals.carbs for meal in meals) / total)
    fat = round_half_up(sum(meal.totals.fat for meal in meals) / total)
    scores = [meal.grade.score for meal in meals if meal.grade is not None]
    score = round_half_up(sum(scores) / len(scores)) if scores else 0
    return MealAverages(
        total_meals=len(meals),
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        score=score,
        graded_meals=len(scores),
        shares=macro_shares(protein, carbs, fat),
    )


def pregnancy_suggestions(trimester: str | None) -> list[Suggestion]:
    """Return the fixed pregnancy suggestions for a trimester."""
    suggestions = []
    if trimester == "FIRST":
        suggestions.append(PREGNANCY_FOLATE)
    if trimester in {"SECOND", "THIRD"}:
        suggestions.append(PREGNANCY_IRON)
    suggestions.append(PREGNANCY_CALCIUM)
    if trimester == "THIRD":
        suggestions.append(PREGNANCY_DHA)
    if trimester == "FIRST":
        suggestions.append(PREGNANCY_SMALL_MEALS)
    suggestions.append(PREGNANCY_HYDRATION)
    suggestions.append(PREGNANCY_AVOID)
    return suggestions


def build_candidates(averages: MealAverages, profile: UserProfile) -> list[Suggestion]:
    """Apply the suggestion rules in generation order."""
    shares = averages.shares
    protein_pct = round_half_up(shares.protein)
    carbs_pct = round_half_up(shares.carbs)
    fat_pct = round_half_up(shares.fat)
    candidates: list[Suggestion] = []

    if profile.is_pregnant:
        candidates.extend(pregnancy_suggestions(profile.trimester))
    elif profile.goal == "BUILD_MUSCLE":
        if shares.protein < 25:
            candidates.append(
                Suggestion(
                    type="protein",
                    icon="💪",
                    title="Boost Your Protein",
                    description=(
                        f"Your meals average {protein_pct}% protein. For muscle "
                        "building, aim for 25-30%."
                    ),
                    actionable="Add eggs, chicken, Greek yogurt, or protein powder to meals",
                    priority="high",
                )
            )
        elif shares.protein >= 30:
            candidates.append(
                Suggestion(
                    type="protein",
                    icon="🎯",
                    title="Perfect Protein!",
                    description=(
                        f"You're crushing it with {protein_pct}% protein - ideal for "
                        "muscle building!"
                    ),
                    actionable="Keep up your current high-protein choices",
                    priority="positive",
                )
            )
    elif profile.goal == "LOSE_WEIGHT" and shares.protein < 20:
        candidates.append(
            Suggestion(
                type="protein",
                icon="🎯",
                title="Increase Protein for Satiety",
                description=(
                    f"Your meals average {protein_pct}% protein. Higher protein "
                    "helps with fullness."
                ),
                actionable=(
                    "Add lean protein like chicken, fish, or tofu to stay satisfied "
                    "longer"
                ),
                priority="high",
            )
        )

    calorie_suggestion = _calorie_suggestion(averages, profile)
    if calorie_suggestion is not None:
        candidates.append(calorie_suggestion)

    if not profile.is_pregnant and profile.goal == "BUILD_MUSCLE" and shares.carbs < 35:
        candidates.append(
            Suggestion(
                type="carbs",
                icon="🍚",
                title="Need More Carbs for Energy",
                description=(
                    f"Your meals average {carbs_pct}% carbs. More carbs = better "
                    "workouts and recovery."
                ),
                actionable="Add rice, oats, sweet potatoes, or pasta to fuel your training",
                priority="medium",
            )
        )

    if shares.fat > 40:
        candidates.append(
            Suggestion(
                type="fat",
                icon="⚠️",
                title="High Fat Intake",
                description=(
                    f"Your meals average {fat_pct}% fat - this might make you feel "
                    "sluggish."
                ),
                actionable=(
                    "Reduce fried foods, heavy sauces, and oils. Choose lean proteins"
                ),
                priority="high",
            )
        )

    if averages.graded_meals and averages.score < 70:
        candidates.append(
            Suggestion(
                type="overall",
                icon="📊",
                title="Room for Improvement",
                description=(
                    f"Your average meal score is {averages.score}/100. Let's get that "
                    "higher!"
                ),
                actionable=(
                    "Focus on balanced meals with protein, veggies, and proper portions"
                ),
                priority="medium",
            )
        )
    elif averages.graded_meals and averages.score >= 85:
        candidates.append(
            Suggestion(
                type="overall",
                icon="🎉",
                title="Excellent Eating Habits!",
                description=(
                    f"Your average meal score is {averages.score}/100 - you're doing "
                    "amazing!"
                ),
                actionable="Keep maintaining these great nutrition choices",
                priority="positive",
            )
        )
    return candidates


def _calorie_suggestion(
    averages: MealAverages, profile: UserProfile
) -> Suggestion | None:
    target = profile.daily_calorie_target
    if not target:
        return None
    estimate = averages.calories * MEALS_PER_DAY
    diff_pct = abs(estimate - target) / target * 100
    if diff_pct <= CALORIE_TOLERANCE_PCT:
        return None
    shown_target = round_half_up(target)
    if estimate > target:
        return Suggestion(
            type="calories",
            icon="⚠️",
            title="Calorie Intake Above Target",
            description=(
                f"Your meals are tracking {round_half_up(diff_pct)}% above your "
                f"{shown_target} cal target."
            ),
            actionable="Try smaller portions or swap high-cal items for lighter options",
            priority="medium",
        )
    return Suggestion(
        type="calories",
        icon="💡",
        title="Eating Below Target",
        description=(
            f"You're eating {round_half_up(diff_pct)}% below your {shown_target} cal "
            "target."
        ),
        actionable=(
            "This is okay for weight loss, but ensure you have energy"
            if profile.goal == "LOSE_WEIGHT"
            else "Add healthy snacks or slightly larger portions"
        ),
        priority="medium",
    )


def rank_suggestions(candidates: list[Suggestion], limit: int) -> list[Suggestion]:
    """Order by priority, keeping generation order for ties, and truncate."""
    ordered = sorted(candidates, key=lambda suggestion: PRIORITY_ORDER[suggestion.priority])
    return ordered[:limit]
