"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import pytest
from postgrest.exceptions import APIError

from nutrition_engine.adapters.supabase_meal_repository import SupabaseMealRepository
from nutrition_engine.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutrition_engine.domain.biometrics import NutritionPlan
from nutrition_engine.domain.errors import MealHistoryUnavailableError
from nutrition_engine.domain.meals import GradeData, MacroBreakdown


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "update": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    error: APIError | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lt", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _meal_row(**overrides) -> dict[str, object]:  # type: ignore[no-untyped-def]
    row: dict[str, object] = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "logged_at": "2024-03-01T12:00:00",
        "meal_type": "Lunch",
        "description": "salmon bowl",
        "items": [
            {"food": "salmon", "quantity": "150g", "calories": 300, "protein": 30},
        ],
        "total_calories": 300,
        "total_protein_g": 30,
        "total_carbs_g": None,
        "total_fat_g": 18,
        "grade_data": None,
    }
    row.update(overrides)
    return row


def test_meal_repository_parses_rows() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meals_table.queue(
        "select",
        [
            _meal_row(
                grade_data={
                    "grade": "B+",
                    "score": 82,
                    "macro_breakdown": {"protein": 40, "carbs": 0, "fat": 60},
                    "graded_at": "2024-03-01T12:05:00+00:00",
                }
            )
        ],
    )
    user_id = uuid4()

    meals = SupabaseMealRepository(client).list_meals(
        user_id,
        datetime(2024, 3, 1, tzinfo=UTC),
        datetime(2024, 3, 8, tzinfo=UTC),
    )

    assert len(meals) == 1
    meal = meals[0]
    assert meal.logged_at.tzinfo is not None
    assert meal.totals.carbs == 0
    assert meal.items[0].food == "salmon"
    assert meal.items[0].fat == 0
    assert meal.grade is not None
    assert meal.grade.score == 82
    assert ("eq", "user_id", str(user_id)) in meals_table.last_filters
    assert ("gte", "logged_at", "2024-03-01T00:00:00+00:00") in meals_table.last_filters


def test_meal_repository_wraps_query_errors() -> None:
    client = FakeSupabaseClient()
    client.table("meals").error = APIError(
        {"message": "index required", "code": "42P01", "hint": None, "details": None}
    )
    repository = SupabaseMealRepository(client)

    with pytest.raises(MealHistoryUnavailableError):
        repository.list_recent_meals(uuid4(), 100)


def test_meal_repository_saves_grade() -> None:
    client = FakeSupabaseClient()
    meals_table = client.table("meals")
    meal_id = uuid4()
    meals_table.queue("update", [{"id": str(meal_id)}])
    grade = GradeData(
        grade="A",
        score=92,
        feedback=[],
        positives=["✓ Good meal variety"],
        color="#10B981",
        macro_breakdown=MacroBreakdown(protein=30, carbs=40, fat=30),
        summary="Well-balanced and nutritious meal!",
        graded_at=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
    )

    SupabaseMealRepository(client).save_grade(meal_id, grade)

    assert isinstance(meals_table.last_payload, dict)
    stored = meals_table.last_payload["grade_data"]
    assert stored["grade"] == "A"
    assert stored["graded_at"] == "2024-03-01T12:00:00+00:00"
    assert ("eq", "id", str(meal_id)) in meals_table.last_filters


def test_meal_repository_save_grade_requires_match() -> None:
    client = FakeSupabaseClient()
    grade = GradeData(
        grade="F",
        score=10,
        feedback=[],
        positives=[],
        color="#EF4444",
        macro_breakdown=MacroBreakdown(protein=0, carbs=0, fat=0),
        summary="",
        graded_at=datetime(2024, 3, 1, tzinfo=UTC),
    )

    with pytest.raises(RuntimeError):
        SupabaseMealRepository(client).save_grade(uuid4(), grade)


def test_profile_repository_reads_profile() -> None:
    client = FakeSupabaseClient()
    client.table("profiles").queue(
        "select",
        [
            {
                "goal": "BUILD_MUSCLE",
                "daily_calorie_target": 2800,
                "protein_target": None,
                "is_pregnant": False,
                "trimester": None,
                "timezone": None,
            }
        ],
    )

    profile = SupabaseProfileRepository(client).get_profile(uuid4())

    assert profile is not None
    assert profile.goal == "BUILD_MUSCLE"
    assert profile.daily_calorie_target == 2800
    assert profile.protein_target is None
    assert profile.timezone == "UTC"


def test_profile_repository_missing_profile() -> None:
    assert SupabaseProfileRepository(FakeSupabaseClient()).get_profile(uuid4()) is None


def test_profile_repository_updates_plan() -> None:
    client = FakeSupabaseClient()
    profiles_table = client.table("profiles")
    plan = NutritionPlan(
        age=30,
        bmr=1648.75,
        tdee=2555.5625,
        target_calories=2172,
        protein_g=163,
        carbs_g=217,
        fat_g=72,
        weeks_to_goal=0,
        weekly_weight_change=0.0,
        reasoning="",
    )

    SupabaseProfileRepository(client).update_plan(
        uuid4(), goal="LOSE_WEIGHT", is_pregnant=False, trimester="SECOND", plan=plan
    )

    payload = profiles_table.last_payload
    assert isinstance(payload, dict)
    assert payload["daily_calorie_target"] == 2172
    assert payload["bmr"] == 1649
    assert payload["tdee"] == 2556
    assert payload["trimester"] is None


def test_meal_repository_treats_null_score_as_zero() -> None:
    client = FakeSupabaseClient()
    client.table("meals").queue(
        "select", [_meal_row(grade_data={"grade": "F", "score": None})]
    )

    meals = SupabaseMealRepository(client).list_recent_meals(uuid4(), 100)

    assert meals[0].grade is not None
    assert meals[0].grade.score == 0


def test_profile_repository_replaces_unknown_timezone() -> None:
    client = FakeSupabaseClient()
    client.table("profiles").queue(
        "select", [{"goal": "MAINTAIN", "timezone": "Mars/Base"}]
    )

    profile = SupabaseProfileRepository(client).get_profile(uuid4())

    assert profile is not None
    assert profile.timezone == "UTC"


def test_profile_repository_updates_calorie_target() -> None:
    client = FakeSupabaseClient()
    profiles_table = client.table("profiles")
    user_id = uuid4()

    SupabaseProfileRepository(client).update_calorie_target(
        user_id,
        daily_calorie_target=1950,
        next_check_in_at=datetime(2024, 3, 7, 9, 0, tzinfo=UTC),
    )

    payload = profiles_table.last_payload
    assert isinstance(payload, dict)
    assert payload["daily_calorie_target"] == 1950
    assert payload["next_check_in_date"] == "2024-03-07T09:00:00+00:00"
    assert ("eq", "user_id", str(user_id)) in profiles_table.last_filters
