"""Tests for weekly insights."""

from datetime import UTC, date, datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from nutrition_engine.domain.errors import InvalidArgumentError
from nutrition_engine.domain.insights import DailyTotal, MacroSlice
from nutrition_engine.domain.profiles import UserProfile
from nutrition_engine.services.insights import (
    InsightsService,
    aggregate_day,
    build_insights,
    macro_chart,
)
from tests.conftest import InMemoryMealRepository, make_item, make_meal

NOW = datetime(2024, 3, 7, 18, 0, tzinfo=UTC)
PROFILE = UserProfile(daily_calorie_target=2000, protein_target=150)


def _seed(repository: InMemoryMealRepository, user_id, calories_by_day):  # type: ignore[no-untyped-def]
    for day, calories in calories_by_day.items():
        repository.meals.append(
            make_meal(
                user_id=user_id,
                logged_at=datetime(2024, 3, day, 12, 0, tzinfo=UTC),
                calories=calories,
                protein=100,
                carbs=200,
                fat=50,
            )
        )


def test_generate_insights_requires_enough_days() -> None:
    repository = InMemoryMealRepository()
    user_id = uuid4()
    _seed(repository, user_id, {1: 1800, 2: 2200, 3: 1500, 4: 2600})

    result = InsightsService(repository).generate_insights(user_id, PROFILE, NOW)

    assert result.has_enough_data is False
    assert result.days_with_data == 4
    assert result.insights == []
    assert result.reason is None


def test_generate_insights_for_a_logged_week() -> None:
    repository = InMemoryMealRepository()
    user_id = uuid4()
    _seed(repository, user_id, {1: 1800, 2: 2200, 3: 1500, 4: 2600, 5: 2000})
    repository.meals.append(
        make_meal(logged_at=datetime(2024, 3, 6, 12, 0, tzinfo=UTC), calories=900)
    )

    result = InsightsService(repository).generate_insights(user_id, PROFILE, NOW)

    assert result.has_enough_data is True
    assert result.days_with_data == 5
    titles = [insight.title for insight in result.insights]
    assert titles == [
        "Best Day",
        "Watch Out",
        "Protein Opportunity",
        "Great Consistency",
    ]
    assert result.insights[0].description == "Sunday - 1500 cal (under target!)"
    assert result.insights[1].description == (
        "You tend to overeat on Mondays - 2600 cal"
    )
    assert result.insights[2].description == (
        "Your average protein intake is 100g. Target: 150g"
    )
    assert result.insights[3].description == "5/7 days logged this week"
    assert [point.label for point in result.weekly_chart] == [
        "Fri",
        "Sat",
        "Sun",
        "Mon",
        "Tue",
        "Wed",
        "Thu",
    ]
    assert [point.calories for point in result.weekly_chart][-2:] == [0, 0]
    assert result.macro_chart == [
        MacroSlice(name="Protein", calories=2000, color="#EF4444"),
        MacroSlice(name="Carbs", calories=4000, color="#10B981"),
        MacroSlice(name="Fat", calories=2250, color="#F59E0B"),
    ]


def test_generate_insights_reports_unavailable_history() -> None:
    repository = InMemoryMealRepository(unavailable=True)

    result = InsightsService(repository).generate_insights(uuid4(), PROFILE, NOW)

    assert result.has_enough_data is False
    assert result.reason == "index_needed"


def test_aggregate_day_uses_local_date() -> None:
    late_evening = make_meal(
        logged_at=datetime(2024, 3, 7, 3, 0, tzinfo=UTC), calories=500
    )
    tz = ZoneInfo("America/New_York")

    total = aggregate_day(date(2024, 3, 6), [late_evening], tz)

    assert total.calories == 500
    assert total.meal_count == 1
    assert aggregate_day(date(2024, 3, 7), [late_evening], tz).calories == 0


def _daily(calories: list[float], protein: float = 100) -> list[DailyTotal]:
    return [
        DailyTotal(
            day=date(2024, 3, 1 + index),
            calories=value,
            protein=protein if value else 0,
            carbs=0,
            fat=0,
            meal_count=1 if value else 0,
        )
        for index, value in enumerate(calories)
    ]


def test_build_insights_perfect_week_without_overeating() -> None:
    daily = _daily([1800, 1900, 1700, 1950, 1850, 1600, 2000], protein=160)

    insights = build_insights(daily, [], PROFILE)

    titles = [insight.title for insight in insights]
    assert titles == ["Best Day", "Protein Champion", "Perfect Week"]
    assert insights[1].description == "Crushing your protein goals! Average: 160g"


def test_build_insights_for_first_trimester() -> None:
    daily = _daily([1800, 1900, 1700, 1950, 1850, 0, 0])
    meals = [make_meal(items=[make_item("white bread")])]
    profile = UserProfile(
        daily_calorie_target=2000,
        protein_target=150,
        is_pregnant=True,
        trimester="FIRST",
    )

    insights = build_insights(daily, meals, profile)

    titles = [insight.title for insight in insights]
    assert "Protein for Baby" in titles
    assert "Missing Folate" in titles
    assert "More Calcium Needed" in titles
    assert "Need More Iron" not in titles


def test_macro_chart_is_empty_without_macros() -> None:
    assert macro_chart(_daily([0, 0, 0])) == []


def test_generate_insights_rejects_unknown_timezone() -> None:
    service = InsightsService(InMemoryMealRepository())

    with pytest.raises(InvalidArgumentError) as exc_info:
        service.generate_insights(uuid4(), UserProfile(timezone="Mars/Base"), NOW)

    assert exc_info.value.fields == ["timezone"]
