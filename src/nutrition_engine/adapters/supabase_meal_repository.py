"""Supabase repository for meals and their grades."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from nutrition_engine.domain.errors import MealHistoryUnavailableError
from nutrition_engine.domain.meals import (
    GradeData,
    MacroBreakdown,
    Meal,
    MealItem,
    MealTotals,
)
from nutrition_engine.services.grading import MealGradeRepository
from nutrition_engine.services.insights import MealHistoryRepository

_MEAL_COLUMNS = (
    "id, user_id, logged_at, meal_type, description, items, total_calories, "
    "total_protein_g, total_carbs_g, total_fat_g, grade_data"
)


@dataclass
class SupabaseMealRepository(MealHistoryRepository, MealGradeRepository):
    """Supabase implementation for meal history and grades."""

    client: Client

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        """Return meals logged in the time range."""
        try:
            response = (
                self.client.table("meals")
                .select(_MEAL_COLUMNS)
                .eq("user_id", str(user_id))
                .gte("logged_at", start.isoformat())
                .lt("logged_at", end.isoformat())
                .order("logged_at", desc=False)
                .execute()
            )
        except APIError as exc:
            raise MealHistoryUnavailableError(str(exc)) from exc
        return [_parse_meal(row) for row in response.data or []]

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[Meal]:
        """Return the most recent meals for a user."""
        try:
            response = (
                self.client.table("meals")
                .select(_MEAL_COLUMNS)
                .eq("user_id", str(user_id))
                .order("logged_at", desc=True)
                .limit(limit)
                .execute()
            )
        except APIError as exc:
            raise MealHistoryUnavailableError(str(exc)) from exc
        return [_parse_meal(row) for row in response.data or []]

    def save_grade(self, meal_id: UUID, grade: GradeData) -> None:
        """Overwrite the grade stored on a meal."""
        response = (
            self.client.table("meals")
            .update({"grade_data": grade_to_row(grade)})
            .eq("id", str(meal_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store meal grade")


def grade_to_row(grade: GradeData) -> dict[str, object]:
    """Serialize a grade for the ``grade_data`` JSON column."""
    return {
        "grade": grade.grade,
        "score": grade.score,
        "feedback": list(grade.feedback),
        "positives": list(grade.positives),
        "color": grade.color,
        "macro_breakdown": {
            "protein": grade.macro_breakdown.protein,
            "carbs": grade.macro_breakdown.carbs,
            "fat": grade.macro_breakdown.fat,
        },
        "summary": grade.summary,
        "graded_at": grade.graded_at.isoformat(),
        "warnings": list(grade.warnings),
        "is_pregnancy_grade": grade.is_pregnancy_grade,
        "trimester": grade.trimester,
    }


def _parse_grade(raw: object) -> GradeData | None:
    if not isinstance(raw, dict) or "grade" not in raw:
        return None
    breakdown = raw.get("macro_breakdown") or {}
    graded_at_raw = raw.get("graded_at")
    graded_at = (
        datetime.fromisoformat(graded_at_raw)
        if isinstance(graded_at_raw, str) and graded_at_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    return GradeData(
        grade=str(raw["grade"]),
        score=int(raw.get("score") or 0),
        feedback=list(raw.get("feedback") or []),
        positives=list(raw.get("positives") or []),
        color=str(raw.get("color", "")),
        macro_breakdown=MacroBreakdown(
            protein=int(breakdown.get("protein", 0)),
            carbs=int(breakdown.get("carbs", 0)),
            fat=int(breakdown.get("fat", 0)),
        ),
        summary=str(raw.get("summary", "")),
        graded_at=graded_at,
        warnings=list(raw.get("warnings") or []),
        is_pregnancy_grade=bool(raw.get("is_pregnancy_grade", False)),
        trimester=raw.get("trimester"),
    )


def _parse_item(raw: dict[str, object]) -> MealItem:
    return MealItem(
        food=str(raw.get("food", "")),
        quantity=str(raw.get("quantity", "")),
        calories=float(raw.get("calories") or 0.0),
        protein=float(raw.get("protein") or 0.0),
        carbs=float(raw.get("carbs") or 0.0),
        fat=float(raw.get("fat") or 0.0),
    )


def _parse_meal(row: dict[str, object]) -> Meal:
    logged_at = datetime.fromisoformat(str(row["logged_at"]))
    if logged_at.tzinfo is None:
        logged_at = logged_at.replace(tzinfo=UTC)
    return Meal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        logged_at=logged_at,
        meal_type=str(row.get("meal_type") or ""),
        description=str(row.get("description") or ""),
        items=[_parse_item(item) for item in row.get("items") or []],
        totals=MealTotals(
            calories=float(row.get("total_calories") or 0.0),
            protein=float(row.get("total_protein_g") or 0.0),
            carbs=float(row.get("total_carbs_g") or 0.0),
            fat=float(row.get("total_fat_g") or 0.0),
        ),
        grade=_parse_grade(row.get("grade_data")),
    )
