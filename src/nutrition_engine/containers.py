"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from nutrition_engine.adapters.supabase_meal_repository import SupabaseMealRepository
from nutrition_engine.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutrition_engine.config import Settings
from nutrition_engine.services.checkins import CheckInService
from nutrition_engine.services.biometrics import NutritionPlanService
from nutrition_engine.services.grading import MealGradingService
from nutrition_engine.services.insights import InsightsService
from nutrition_engine.services.profiles import ProfileService
from nutrition_engine.services.suggestions import SuggestionsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    plan_service: NutritionPlanService
    check_in_service: CheckInService
    grading_service: MealGradingService
    insights_service: InsightsService
    suggestions_service: SuggestionsService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)

    return AppContainer(
        settings=resolved_settings,
        profile_service=ProfileService(
            profile_repository, default_timezone=resolved_settings.default_timezone
        ),
        plan_service=NutritionPlanService(profile_repository),
        check_in_service=CheckInService(profile_repository),
        grading_service=MealGradingService(meal_repository),
        insights_service=InsightsService(
            meal_repository,
            window_days=resolved_settings.insights_window_days,
            min_days_with_data=resolved_settings.insights_min_days,
        ),
        suggestions_service=SuggestionsService(
            meal_repository,
            sample_size=resolved_settings.suggestions_sample_size,
            min_days_with_data=resolved_settings.suggestions_min_days,
            max_suggestions=resolved_settings.max_suggestions,
        ),
    )
