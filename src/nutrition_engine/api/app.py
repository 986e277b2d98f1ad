"""FastAPI application factory."""

from dataclasses import asdict
from datetime import UTC, datetime
from uuid import UUID

from fastapi import FastAPI, Request

from nutrition_engine.api.errors import register_exception_handlers
from nutrition_engine.api.schemas import (
    BiometricRequest,
    CheckInRequest,
    GradeRequest,
    HistoryRequest,
    plan_payload,
)
from nutrition_engine.app_logging import configure_logging
from nutrition_engine.containers import AppContainer
from nutrition_engine.domain.profiles import UserProfile


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    app = FastAPI()
    app.state.container = container
    register_exception_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition-plan")
    def compute_nutrition_plan(
        payload: BiometricRequest, request: Request
    ) -> dict[str, object]:
        """Compute a nutrition plan without storing it."""
        state_container: AppContainer = request.app.state.container
        plan = state_container.plan_service.preview_plan(
            payload.to_domain(), datetime.now(tz=UTC).date()
        )
        return {"success": True, "plan": plan_payload(plan)}

    @app.post("/users/{user_id}/nutrition-plan")
    def confirm_nutrition_plan(
        user_id: UUID, payload: BiometricRequest, request: Request
    ) -> dict[str, object]:
        """Compute a nutrition plan and store its targets on the profile."""
        state_container: AppContainer = request.app.state.container
        plan = state_container.plan_service.confirm_plan(
            user_id, payload.to_domain(), datetime.now(tz=UTC).date()
        )
        return {"success": True, "plan": plan_payload(plan)}

    @app.post("/users/{user_id}/check-ins")
    def submit_check_in(
        user_id: UUID, payload: CheckInRequest, request: Request
    ) -> dict[str, object]:
        """Adjust the calorie target from check-in feedback."""
        state_container: AppContainer = request.app.state.container
        result = state_container.check_in_service.submit_check_in(
            user_id, payload.check_in_type, payload.feedback
        )
        return {"success": True, **asdict(result)}

    @app.post("/meals/{meal_id}/grade")
    def grade_meal(
        meal_id: UUID, payload: GradeRequest, request: Request
    ) -> dict[str, object]:
        """Grade a meal and store the grade on the meal record."""
        state_container: AppContainer = request.app.state.container
        grade = state_container.grading_service.grade_and_save(
            meal_id,
            payload.meal.to_domain(meal_id) if payload.meal else None,
            payload.profile.to_domain() if payload.profile else None,
        )
        return {"success": True, "grade_data": grade}

    @app.post("/users/{user_id}/insights")
    def generate_insights(
        user_id: UUID, payload: HistoryRequest, request: Request
    ) -> dict[str, object]:
        """Return weekly insights for a user."""
        state_container: AppContainer = request.app.state.container
        profile = _resolve_profile(state_container, user_id, payload)
        result = state_container.insights_service.generate_insights(user_id, profile)
        return {"success": True, **asdict(result)}

    @app.post("/users/{user_id}/suggestions")
    def generate_suggestions(
        user_id: UUID, payload: HistoryRequest, request: Request
    ) -> dict[str, object]:
        """Return ranked suggestions for a user."""
        state_container: AppContainer = request.app.state.container
        profile = _resolve_profile(state_container, user_id, payload)
        result = state_container.suggestions_service.generate_suggestions(
            user_id, profile
        )
        return {"success": True, **asdict(result)}

    return app


def _resolve_profile(
    container: AppContainer, user_id: UUID, payload: HistoryRequest
) -> UserProfile:
    if payload.profile is not None:
        return payload.profile.to_domain()
    return container.profile_service.get_profile(user_id)
