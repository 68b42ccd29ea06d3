"""Meal-planning models."""

from enum import StrEnum

from pydantic import Field

from diet_web.domain.base import ApiModel


class MealType(StrEnum):
    """Meals tracked in a daily plan."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class MealPlanApproach(StrEnum):
    """How daily calories are spread across meals."""

    BALANCED = "balanced"
    BREAKFAST_HEAVY = "breakfast_heavy"
    LUNCH_HEAVY = "lunch_heavy"


class MealTiming(ApiModel):
    """Preferred clock times for each meal."""

    breakfast: str | None = None
    lunch: str | None = None
    dinner: str | None = None


class MealPreferences(ApiModel):
    """User preferences consulted by the meal planner."""

    dietary_restrictions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    preferred_cuisine: list[str] = Field(default_factory=list)
    favorite_foods: list[str] = Field(default_factory=list)
    avoid_foods: list[str] = Field(default_factory=list)
    meal_timing: MealTiming | None = None
    portion_preference: str | None = None


class MealFood(ApiModel):
    """A food line within a planned meal."""

    name: str
    calories: float = 0.0
    portion: str = ""


class MealPlan(ApiModel):
    """A single planned meal."""

    name: str = ""
    foods: list[MealFood] = Field(default_factory=list)
    total_calories: float = 0.0
    description: str = ""


class CompletionStatus(ApiModel):
    """Which meals of a day were eaten."""

    breakfast: bool = False
    lunch: bool = False
    dinner: bool = False

    def get(self, meal_type: MealType) -> bool:
        """Return the completion flag for one meal."""
        return bool(getattr(self, meal_type.value))


class DailyMealPlan(ApiModel):
    """Three planned meals for a date."""

    breakfast_plan: MealPlan | None = None
    lunch_plan: MealPlan | None = None
    dinner_plan: MealPlan | None = None
    total_target_calories: float = 0.0
    approach: MealPlanApproach = MealPlanApproach.BALANCED
    completion_status: CompletionStatus = Field(default_factory=CompletionStatus)
    completion_rate: float | None = None

    def meal(self, meal_type: MealType) -> MealPlan | None:
        """Return the plan for one meal."""
        return getattr(self, f"{meal_type.value}_plan")


class MealPlanRequest(ApiModel):
    """Body of a daily plan generation request."""

    date: str | None = None
    approach: MealPlanApproach = MealPlanApproach.BALANCED
    force_regenerate: bool = False
    use_ml: bool | None = None


class GeneratedMealPlan(ApiModel):
    """Result of generating a daily plan."""

    message: str = ""
    meal_plan: DailyMealPlan
    tips: list[str] = Field(default_factory=list)


class DatedMealPlan(ApiModel):
    """One day inside a weekly plan listing."""

    date: str
    day_name: str = ""
    meal_plan: DailyMealPlan | None = None
    has_plan: bool = False


class WeeklyMealPlan(ApiModel):
    """Plans for a seven-day window."""

    start_date: str
    end_date: str
    weekly_plans: list[DatedMealPlan] = Field(default_factory=list)
    approach: MealPlanApproach | None = None
    message: str | None = None


class MealCompletionRequest(ApiModel):
    """Body of a mark-completed request."""

    date: str | None = None
    meal_type: MealType
    completed: bool = True


class MealCompletion(ApiModel):
    """Progress after marking a meal."""

    message: str = ""
    completion_rate: float = 0.0
    completed_meals: int = 0
    total_meals: int = 3
    completion_status: CompletionStatus | None = None


class TodayMealStatus(ApiModel):
    """Today's plan and what is left to eat."""

    date: str
    has_plan: bool = False
    completion_status: CompletionStatus | None = None
    completion_rate: float | None = None
    completed_meals: int | None = None
    next_meal: MealType | None = None
    meal_plan: DailyMealPlan | None = None
    message: str | None = None
