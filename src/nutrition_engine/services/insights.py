"""Weekly insights computed from meal history."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import Protocol
from uuid import UUID

from nutrition_engine.domain.errors import MealHistoryUnavailableError
from nutrition_engine.domain.foods import (
    CALCIUM_RICH,
    DHA_OMEGA3,
    FOLATE_RICH,
    IRON_RICH,
    matches_any,
)
from nutrition_engine.domain.insights import (
    ChartPoint,
    DailyTotal,
    Insight,
    InsightsResult,
    MacroSlice,
)
from nutrition_engine.domain.macros import (
    CARBS_KCAL_PER_G,
    FAT_KCAL_PER_G,
    PROTEIN_KCAL_PER_G,
    round_half_up,
)
from nutrition_engine.domain.meals import Meal
from nutrition_engine.domain.profiles import UserProfile, resolve_timezone
from nutrition_engine.domain.suggestions import INDEX_NEEDED

_logger = logging.getLogger(__name__)

DEFAULT_CALORIE_TARGET = 2000
DEFAULT_PROTEIN_TARGET = 150

GREEN = "#10B981"
AMBER = "#F59E0B"
RED = "#EF4444"
SLATE = "#94A3B8"


class MealHistoryRepository(Protocol):
    """Read interface over a user's logged meals."""

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        """Return meals logged in ``[start, end)``."""

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        """Return the most recent meals, newest first."""


@dataclass
class InsightsService:
    """Builds trend insights and chart series for the trailing week."""

    repository: MealHistoryRepository
    window_days: int = 7
    min_days_with_data: int = 5

    def generate_insights(
        self, user_id: UUID, profile: UserProfile, now: datetime | None = None
    ) -> InsightsResult:
        """Return insights for the last ``window_days`` local calendar days."""
        tz = resolve_timezone(profile.timezone)
        local_now = (now or datetime.now(tz=UTC)).astimezone(tz)
        today = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
        start = today - timedelta(days=self.window_days - 1)
        end = today + timedelta(days=1)
        try:
            meals = self.repository.list_meals(
                user_id, start.astimezone(UTC), end.astimezone(UTC)
            )
        except MealHistoryUnavailableError:
            _logger.warning(
                "Meal history unavailable for insights: user_id=%s",
                user_id,
                exc_info=True,
            )
            return InsightsResult(
                has_enough_data=False, days_with_data=0, reason=INDEX_NEEDED
            )

        daily = []
        for offset in range(self.window_days):
            day = (start + timedelta(days=offset)).date()
            daily.append(aggregate_day(day, meals, tz))
        days_with_data = sum(1 for total in daily if total.calories > 0)
        if days_with_data < self.min_days_with_data:
            _logger.info(
                "Not enough data for insights: user_id=%s days=%s",
                user_id,
                days_with_data,
            )
            return InsightsResult(has_enough_data=False, days_with_data=days_with_data)

        insights = build_insights(daily, meals, profile)
        return InsightsResult(
            has_enough_data=True,
            days_with_data=days_with_data,
            insights=insights,
            weekly_chart=[
                ChartPoint(label=total.day.strftime("%a"), calories=total.calories)
                for total in daily
            ],
            macro_chart=macro_chart(daily),
        )


def aggregate_day(day: date, meals: list[Meal], tz: tzinfo) -> DailyTotal:
    """Sum the meals whose local date equals ``day``."""
    day_meals = [meal for meal in meals if meal.logged_at.astimezone(tz).date() == day]
    return DailyTotal(
        day=day,
        calories=sum(meal.totals.calories for meal in day_meals),
        protein=sum(meal.totals.protein for meal in day_meals),
        carbs=sum(meal.totals.carbs for meal in day_meals),
        fat=sum(meal.totals.fat for meal in day_meals),
        meal_count=len(day_meals),
    )


def build_insights(
    daily: list[DailyTotal], meals: list[Meal], profile: UserProfile
) -> list[Insight]:
    """Derive insight cards from daily totals."""
    logged = [total for total in daily if total.calories > 0]
    insights: list[Insight] = []
    if logged:
        insights.extend(_calorie_insights(logged, profile))
        insights.extend(_protein_insights(logged, profile))
    insights.append(_consistency_insight(len(logged)))
    if profile.is_pregnant:
        insights.extend(_pregnancy_insights(meals, profile.trimester))
    return insights


def _calorie_insights(logged: list[DailyTotal], profile: UserProfile) -> list[Insight]:
    # The lowest-calorie day is the "best" one; min/max keep the earliest on ties.
    best = min(logged, key=lambda total: total.calories)
    worst = max(logged, key=lambda total: total.calories)
    target = profile.daily_calorie_target or DEFAULT_CALORIE_TARGET

    under = " (under target!)" if best.calories <= target else ""
    insights = [
        Insight(
            icon="🏆",
            title="Best Day",
            description=(
                f"{best.day.strftime('%A')} - {round_half_up(best.calories)} cal{under}"
            ),
            color=GREEN,
        )
    ]
    if worst.calories > target:
        insights.append(
            Insight(
                icon="⚠️",
                title="Watch Out",
                description=(
                    f"You tend to overeat on {worst.day.strftime('%A')}s - "
                    f"{round_half_up(worst.calories)} cal"
                ),
                color=AMBER,
            )
        )
    return insights


def _protein_insights(logged: list[DailyTotal], profile: UserProfile) -> list[Insight]:
    avg_protein = sum(total.protein for total in logged) / len(logged)
    target = profile.protein_target or DEFAULT_PROTEIN_TARGET
    shown = round_half_up(avg_protein)
    shown_target = round_half_up(target)

    if profile.is_pregnant:
        if avg_protein < target * 0.75:
            return [
                Insight(
                    icon="🤰",
                    title="Protein for Baby",
                    description=(
                        f"Average: {shown}g. Aim for {shown_target}g for healthy "
                        "fetal development"
                    ),
                    color=RED,
                )
            ]
        if avg_protein >= target:
            return [
                Insight(
                    icon="🤰",
                    title="Excellent Protein",
                    description=(
                        f"Great job! Average: {shown}g - perfect for pregnancy"
                    ),
                    color=GREEN,
                )
            ]
        return []

    if avg_protein < target * 0.8:
        return [
            Insight(
                icon="💪",
                title="Protein Opportunity",
                description=(
                    f"Your average protein intake is {shown}g. Target: {shown_target}g"
                ),
                color=RED,
            )
        ]
    if avg_protein >= target:
        return [
            Insight(
                icon="💪",
                title="Protein Champion",
                description=f"Crushing your protein goals! Average: {shown}g",
                color=GREEN,
            )
        ]
    return []


def _consistency_insight(days_logged: int) -> Insight:
    if days_logged >= 7:
        return Insight(
            icon="🔥",
            title="Perfect Week",
            description="You logged meals every day this week!",
            color=RED,
        )
    if days_logged >= 5:
        return Insight(
            icon="✅",
            title="Great Consistency",
            description=f"{days_logged}/7 days logged this week",
            color=GREEN,
        )
    return Insight(
        icon="📝",
        title="Log More Often",
        description="Try to log meals at least 5 days a week for better insights",
        color=SLATE,
    )


def _count_items(meals: list[Meal], keywords: tuple[str, ...]) -> int:
    return sum(
        1 for meal in meals for item in meal.items if matches_any(item.food, keywords)
    )


def _pregnancy_insights(meals: list[Meal], trimester: str | None) -> list[Insight]:
    insights: list[Insight] = []
    folate = _count_items(meals, FOLATE_RICH)
    iron = _count_items(meals, IRON_RICH)
    calcium = _count_items(meals, CALCIUM_RICH)
    dha = _count_items(meals, DHA_OMEGA3)

    if trimester == "FIRST":
        if folate >= 5:
            insights.append(
                Insight(
                    icon="🤰",
                    title="Excellent Folate Intake",
                    description=(
                        f"Great job! {folate} folate-rich foods this week - "
                        "crucial for baby's development"
                    ),
                    color=GREEN,
                )
            )
        elif folate > 0:
            insights.append(
                Insight(
                    icon="🤰",
                    title="Add More Folate",
                    description=(
                        f"Only {folate} folate-rich foods this week. Aim for daily "
                        "intake (leafy greens, beans)"
                    ),
                    color=AMBER,
                )
            )
        else:
            insights.append(
                Insight(
                    icon="⚠️",
                    title="Missing Folate",
                    description=(
                        "Folate is critical in 1st trimester. Add spinach, kale, "
                        "beans, or fortified cereals"
                    ),
                    color=RED,
                )
            )

    if trimester in {"SECOND", "THIRD"}:
        if iron >= 5:
            insights.append(
                Insight(
                    icon="🤰",
                    title="Great Iron Sources",
                    description=(
                        f"{iron} iron-rich foods this week - keeping anemia at bay!"
                    ),
                    color=GREEN,
                )
            )
        elif iron > 0:
            insights.append(
                Insight(
                    icon="🤰",
                    title="Boost Iron Intake",
                    description=(
                        f"Only {iron} iron-rich foods this week. Add lean meats, "
                        "spinach, or lentils"
                    ),
                    color=AMBER,
                )
            )
        else:
            insights.append(
                Insight(
                    icon="⚠️",
                    title="Need More Iron",
                    description=(
                        "Iron prevents anemia during pregnancy. Include lean red "
                        "meat, spinach, or fortified cereals"
                    ),
                    color=RED,
                )
            )

    if calcium >= 7:
        insights.append(
            Insight(
                icon="🤰",
                title="Perfect Calcium",
                description=(
                    f"{calcium} calcium-rich foods - baby's bones are developing great!"
                ),
                color=GREEN,
            )
        )
    elif calcium < 3:
        insights.append(
            Insight(
                icon="🤰",
                title="More Calcium Needed",
                description=(
                    "Aim for 3-4 calcium sources daily (dairy, fortified milk, "
                    "leafy greens)"
                ),
                color=AMBER,
            )
        )

    if trimester == "THIRD":
        if dha >= 2:
            insights.append(
                Insight(
                    icon="🤰",
                    title="Great DHA/Omega-3",
                    description=(
                        f"{dha} DHA sources this week - excellent for baby's brain "
                        "development!"
                    ),
                    color=GREEN,
                )
            )
        elif dha == 1:
            insights.append(
                Insight(
                    icon="🤰",
                    title="Add More DHA",
                    description=(
                        "Aim for 2x salmon per week, or add chia seeds/walnuts for "
                        "baby's brain"
                    ),
                    color=AMBER,
                )
            )
        else:
            insights.append(
                Insight(
                    icon="⚠️",
                    title="Missing DHA",
                    description=(
                        "DHA supports baby's brain development. Add salmon, chia "
                        "seeds, or fortified eggs"
                    ),
                    color=RED,
                )
            )

    graded = [
        meal.grade.score
        for meal in meals
        if meal.grade is not None and meal.grade.is_pregnancy_grade
    ]
    if len(graded) >= 3:
        avg_score = sum(graded) / len(graded)
        if avg_score >= 85:
            insights.append(
                Insight(
                    icon="🎉",
                    title="Amazing Pregnancy Nutrition",
                    description=(
                        f"Your meals average {round_half_up(avg_score)}/100 - you're "
                        "nourishing baby perfectly!"
                    ),
                    color=GREEN,
                )
            )
        elif avg_score < 70:
            insights.append(
                Insight(
                    icon="💡",
                    title="Nutrition Opportunity",
                    description=(
                        f"Average score: {round_half_up(avg_score)}/100. Focus on "
                        "pregnancy-critical nutrients"
                    ),
                    color=AMBER,
                )
            )
    return insights


def macro_chart(daily: list[DailyTotal]) -> list[MacroSlice]:
    """Split the week's macro calories into chart slices; empty when none."""
    protein = sum(total.protein for total in daily) * PROTEIN_KCAL_PER_G
    carbs = sum(total.carbs for total in daily) * CARBS_KCAL_PER_G
    fat = sum(total.fat for total in daily) * FAT_KCAL_PER_G
    if protein + carbs + fat <= 0:
        return []
    return [
        MacroSlice(name="Protein", calories=protein, color=RED),
        MacroSlice(name="Carbs", calories=carbs, color=GREEN),
        MacroSlice(name="Fat", calories=fat, color=AMBER),
    ]
