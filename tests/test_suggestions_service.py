"""Tests for personalized suggestions."""

from datetime import UTC, datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from nutrition_engine.domain.errors import InvalidArgumentError
from nutrition_engine.domain.meals import GradeData, MacroBreakdown
from nutrition_engine.domain.profiles import UserProfile
from nutrition_engine.services.suggestions import (
    SuggestionsService,
    average_meals,
    count_distinct_days,
)
from tests.conftest import InMemoryMealRepository, make_meal


def _grade(score: int) -> GradeData:
    return GradeData(
        grade="A",
        score=score,
        feedback=[],
        positives=[],
        color="#10B981",
        macro_breakdown=MacroBreakdown(protein=30, carbs=40, fat=30),
        summary="",
        graded_at=datetime(2024, 3, 1, tzinfo=UTC),
    )


def _seed(  # noqa: PLR0913
    repository: InMemoryMealRepository,
    user_id,  # type: ignore[no-untyped-def]
    days: int,
    *,
    calories: float,
    protein: float,
    carbs: float,
    fat: float,
    score: int | None = None,
) -> None:
    for day in range(1, days + 1):
        repository.meals.append(
            make_meal(
                user_id=user_id,
                logged_at=datetime(2024, 3, day, 12, 0, tzinfo=UTC),
                calories=calories,
                protein=protein,
                carbs=carbs,
                fat=fat,
                grade=_grade(score) if score is not None else None,
            )
        )


def test_suggestions_require_ten_days() -> None:
    repository = InMemoryMealRepository()
    user_id = uuid4()
    _seed(repository, user_id, 9, calories=500, protein=30, carbs=60, fat=15)

    result = SuggestionsService(repository).generate_suggestions(
        user_id, UserProfile()
    )

    assert result.suggestions == []
    assert result.days_with_data == 9
    assert result.reason == "insufficient_data"
    assert result.stats is None


def test_suggestions_report_unavailable_history() -> None:
    repository = InMemoryMealRepository(unavailable=True)

    result = SuggestionsService(repository).generate_suggestions(
        uuid4(), UserProfile()
    )

    assert result.suggestions == []
    assert result.reason == "index_needed"


def test_suggestions_rank_high_priority_first() -> None:
    repository = InMemoryMealRepository()
    user_id = uuid4()
    _seed(repository, user_id, 10, calories=500, protein=20, carbs=40, fat=30)
    profile = UserProfile(goal="BUILD_MUSCLE", daily_calorie_target=2800)

    result = SuggestionsService(repository).generate_suggestions(user_id, profile)

    assert [suggestion.type for suggestion in result.suggestions] == [
        "protein",
        "fat",
        "calories",
    ]
    assert result.suggestions[0].description == (
        "Your meals average 16% protein. For muscle building, aim for 25-30%."
    )
    assert result.suggestions[2].description == (
        "You're eating 46% below your 2800 cal target."
    )
    assert result.reason is None
    assert result.stats is not None
    assert result.stats.total_meals == 10
    assert result.stats.avg_calories == 500
    assert result.stats.macro_breakdown == MacroBreakdown(protein=16, carbs=31, fat=53)


def test_positive_suggestions_keep_generation_order() -> None:
    repository = InMemoryMealRepository()
    user_id = uuid4()
    _seed(
        repository,
        user_id,
        12,
        calories=600,
        protein=50,
        carbs=60,
        fat=15,
        score=90,
    )
    profile = UserProfile(goal="BUILD_MUSCLE", daily_calorie_target=1800)

    result = SuggestionsService(repository).generate_suggestions(user_id, profile)

    assert [suggestion.title for suggestion in result.suggestions] == [
        "Perfect Protein!",
        "Excellent Eating Habits!",
    ]
    assert all(s.priority == "positive" for s in result.suggestions)


def test_pregnancy_suggestions_for_third_trimester() -> None:
    repository = InMemoryMealRepository()
    user_id = uuid4()
    _seed(repository, user_id, 10, calories=500, protein=30, carbs=60, fat=15)
    profile = UserProfile(is_pregnant=True, trimester="THIRD")

    result = SuggestionsService(repository).generate_suggestions(user_id, profile)

    assert [suggestion.type for suggestion in result.suggestions] == [
        "pregnancy_iron",
        "pregnancy_dha",
        "pregnancy_avoid",
    ]


def test_average_meals_scores_only_graded_meals() -> None:
    meals = [
        make_meal(calories=400, protein=30, carbs=40, fat=10, grade=_grade(80)),
        make_meal(calories=500, protein=30, carbs=40, fat=10, grade=_grade(91)),
        make_meal(calories=600, protein=30, carbs=40, fat=10),
    ]

    averages = average_meals(meals)

    assert averages.total_meals == 3
    assert averages.calories == 500
    assert averages.score == 86
    assert averages.graded_meals == 2


def test_count_distinct_days_uses_profile_timezone() -> None:
    meals = [
        make_meal(logged_at=datetime(2024, 3, 1, 20, 0, tzinfo=UTC)),
        make_meal(logged_at=datetime(2024, 3, 2, 2, 0, tzinfo=UTC)),
    ]

    assert count_distinct_days(meals, ZoneInfo("UTC")) == 2
    assert count_distinct_days(meals, ZoneInfo("America/New_York")) == 1


def test_suggestions_reject_unknown_timezone() -> None:
    service = SuggestionsService(InMemoryMealRepository())

    with pytest.raises(InvalidArgumentError) as exc_info:
        service.generate_suggestions(uuid4(), UserProfile(timezone="Mars/Base"))

    assert exc_info.value.fields == ["timezone"]
