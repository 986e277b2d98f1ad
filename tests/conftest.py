"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from nutrition_engine.config import Settings
from nutrition_engine.containers import AppContainer
from nutrition_engine.domain.biometrics import NutritionPlan
from nutrition_engine.domain.errors import MealHistoryUnavailableError
from nutrition_engine.domain.meals import GradeData, Meal, MealItem, MealTotals
from nutrition_engine.domain.profiles import UserProfile
from nutrition_engine.services.biometrics import NutritionPlanService
from nutrition_engine.services.checkins import CheckInService
from nutrition_engine.services.grading import MealGradeRepository, MealGradingService
from nutrition_engine.services.insights import InsightsService, MealHistoryRepository
from nutrition_engine.services.profiles import ProfileRepository, ProfileService
from nutrition_engine.services.suggestions import SuggestionsService

TEST_SUPABASE_KEY = "eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0.signature"


@dataclass
class InMemoryMealRepository(MealHistoryRepository, MealGradeRepository):
    """In-memory meal repository for tests."""

    meals: list[Meal] = field(default_factory=list)
    grades: dict[UUID, GradeData] = field(default_factory=dict)
    unavailable: bool = False

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        if self.unavailable:
            raise MealHistoryUnavailableError("missing index")
        return sorted(
            (
                meal
                for meal in self.meals
                if meal.user_id == user_id and start <= meal.logged_at < end
            ),
            key=lambda meal: meal.logged_at,
        )

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        if self.unavailable:
            raise MealHistoryUnavailableError("missing index")
        meals = sorted(
            (meal for meal in self.meals if meal.user_id == user_id),
            key=lambda meal: meal.logged_at,
            reverse=True,
        )
        return meals[:limit]

    def save_grade(self, meal_id: UUID, grade: GradeData) -> None:
        self.grades[meal_id] = grade


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    plans: dict[UUID, NutritionPlan] = field(default_factory=dict)
    next_check_ins: dict[UUID, datetime | None] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def update_plan(
        self,
        user_id: UUID,
        *,
        goal: str,
        is_pregnant: bool,
        trimester: str | None,
        plan: NutritionPlan,
    ) -> None:
        self.plans[user_id] = plan
        self.profiles[user_id] = UserProfile(
            goal=goal,
            daily_calorie_target=plan.target_calories,
            protein_target=plan.protein_g,
            is_pregnant=is_pregnant,
            trimester=trimester if is_pregnant else None,
        )

    def update_calorie_target(
        self,
        user_id: UUID,
        *,
        daily_calorie_target: int,
        next_check_in_at: datetime | None,
    ) -> None:
        profile = self.profiles.get(user_id, UserProfile())
        self.profiles[user_id] = replace(
            profile, daily_calorie_target=daily_calorie_target
        )
        self.next_check_ins[user_id] = next_check_in_at


def make_item(
    food: str,
    calories: float = 100,
    protein: float = 0,
    carbs: float = 0,
    fat: float = 0,
) -> MealItem:
    return MealItem(
        food=food,
        quantity="1 serving",
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
    )


def make_meal(  # noqa: PLR0913
    *,
    user_id: UUID | None = None,
    logged_at: datetime | None = None,
    meal_type: str = "Lunch",
    items: list[MealItem] | None = None,
    calories: float = 600,
    protein: float = 45,
    carbs: float = 60,
    fat: float = 20,
    grade: GradeData | None = None,
) -> Meal:
    return Meal(
        id=uuid4(),
        user_id=user_id or uuid4(),
        logged_at=logged_at or datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
        meal_type=meal_type,
        description="test meal",
        items=items if items is not None else [make_item("chicken breast")],
        totals=MealTotals(calories=calories, protein=protein, carbs=carbs, fat=fat),
        grade=grade,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_SUPABASE_KEY,
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def container(
    settings: Settings,
    meal_repository: InMemoryMealRepository,
    profile_repository: InMemoryProfileRepository,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        profile_service=ProfileService(profile_repository),
        plan_service=NutritionPlanService(profile_repository),
        check_in_service=CheckInService(profile_repository),
        grading_service=MealGradingService(meal_repository),
        insights_service=InsightsService(meal_repository),
        suggestions_service=SuggestionsService(meal_repository),
    )
