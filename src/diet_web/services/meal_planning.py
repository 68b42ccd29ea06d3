"""Meal-planning calls."""

from dataclasses import dataclass

import httpx

from diet_web.adapters.api_client import ApiClient
from diet_web.domain.meal_plans import (
    DailyMealPlan,
    GeneratedMealPlan,
    MealCompletion,
    MealCompletionRequest,
    MealPlanApproach,
    MealPlanRequest,
    MealPreferences,
    MealType,
    TodayMealStatus,
    WeeklyMealPlan,
)


@dataclass
class MealPlanningService:
    """Typed access to the /meal-planning endpoints."""

    api_client: ApiClient

    async def generate_daily_plan(self, request: MealPlanRequest) -> GeneratedMealPlan:
        """Ask the planner for a daily plan."""
        payload = await self.api_client.post(
            "/meal-planning/generate-plan", json=request.to_payload()
        )
        return GeneratedMealPlan.model_validate(payload)

    async def generate_weekly_plan(
        self,
        start_date: str | None = None,
        approach: MealPlanApproach | None = None,
    ) -> WeeklyMealPlan:
        """Ask the planner for seven daily plans."""
        body: dict[str, object] = {}
        if start_date is not None:
            body["start_date"] = start_date
        if approach is not None:
            body["approach"] = approach.value
        payload = await self.api_client.post(
            "/meal-planning/generate-weekly-plan", json=body
        )
        return WeeklyMealPlan.model_validate(payload)

    async def get_daily_plan(self, date: str) -> DailyMealPlan | None:
        """Return the plan for ``date``, or None if none was generated."""
        try:
            payload = await self.api_client.get(f"/meal-planning/plan/{date}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == httpx.codes.NOT_FOUND:
                return None
            raise
        plan = payload.get("meal_plan")
        if not isinstance(plan, dict):
            return None
        return DailyMealPlan.model_validate(plan)

    async def get_weekly_plans(self, start_date: str) -> WeeklyMealPlan:
        """Return stored plans for the week starting at ``start_date``."""
        payload = await self.api_client.get(f"/meal-planning/plans/week/{start_date}")
        return WeeklyMealPlan.model_validate(payload)

    async def mark_meal_completed(
        self, request: MealCompletionRequest
    ) -> MealCompletion:
        """Mark a meal as eaten or not eaten."""
        payload = await self.api_client.post(
            "/meal-planning/mark-completed", json=request.to_payload()
        )
        return MealCompletion.model_validate(payload)

    async def today_status(self) -> TodayMealStatus:
        """Return today's plan progress."""
        payload = await self.api_client.get("/meal-planning/today-status")
        return TodayMealStatus.model_validate(payload)

    async def update_meal(
        self, date: str, meal_type: MealType, meal_data: dict[str, object]
    ) -> DailyMealPlan:
        """Replace one meal of a stored plan."""
        payload = await self.api_client.put(
            f"/meal-planning/plan/{date}/meal/{meal_type.value}",
            json={"meal_data": meal_data},
        )
        return DailyMealPlan.model_validate(payload.get("updated_plan"))

    async def weekly_progress(self, start_date: str) -> dict[str, object]:
        """Return completion statistics for a week."""
        return await self.api_client.get(
            f"/meal-planning/progress/weekly/{start_date}"
        )

    async def meal_times(self) -> dict[str, object]:
        """Return recommended meal times and tips."""
        return await self.api_client.get("/meal-planning/meal-times")

    async def quick_suggestions(self) -> dict[str, object]:
        """Return quick meal ideas for the current time of day."""
        return await self.api_client.get("/meal-planning/quick-suggestions")

    async def get_preferences(self) -> MealPreferences:
        """Return the user's meal preferences."""
        payload = await self.api_client.get("/meal-planning/preferences")
        return MealPreferences.model_validate(payload.get("preferences") or {})

    async def update_preferences(self, preferences: MealPreferences) -> MealPreferences:
        """Store new meal preferences."""
        payload = await self.api_client.put(
            "/meal-planning/preferences",
            json={"preferences": preferences.to_payload()},
        )
        return MealPreferences.model_validate(payload.get("preferences") or {})
