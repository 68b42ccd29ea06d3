"""Recommendation result models."""

from enum import StrEnum

from pydantic import Field

from diet_web.domain.base import ApiModel
from diet_web.domain.foods import Food


class RecommendationMethod(StrEnum):
    """Algorithms the remote recommender can use."""

    CONTENT_BASED = "content_based"
    COLLABORATIVE = "collaborative"
    HYBRID = "hybrid"


class RecommendationSet(ApiModel):
    """Foods recommended to the current user."""

    recommendations: list[Food] = Field(default_factory=list)
    total: int = 0
    method: RecommendationMethod | None = None
    total_users: int | None = None
    collaborative_available: bool | None = None
    condition: str | None = None


class MethodInfo(ApiModel):
    """Which method the recommender currently uses and why."""

    current_method: RecommendationMethod
    total_users: int = 0
    users_needed_for_collaborative: int = 0
    collaborative_available: bool = False
    user_ratings_count: int = 0
    total_ratings_in_system: int = 0
    method_description: dict[str, str] = Field(default_factory=dict)


class HistoryFood(ApiModel):
    """Food summary attached to a history entry."""

    name: str = Field(alias="nama_makanan")
    category_id: int | None = None
    energy_kcal: float | None = Field(default=None, alias="energi")
    health_score: float | None = None


class RecommendationHistoryItem(ApiModel):
    """A past recommendation shown to the user."""

    history_id: int
    food_id: int
    recommendation_type: RecommendationMethod | None = None
    similarity_score: float | None = None
    final_score: float | None = None
    is_clicked: bool = False
    recommended_at: str | None = None
    food_info: HistoryFood | None = None


class Pagination(ApiModel):
    """Server pagination metadata."""

    page: int = 1
    per_page: int = 10
    total: int = 0
    pages: int = 0
    has_next: bool = False
    has_prev: bool = False


class RecommendationHistory(ApiModel):
    """A page of recommendation history."""

    history: list[RecommendationHistoryItem] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class SimilarFoods(ApiModel):
    """Foods similar to a target food."""

    target_food_id: int | None = None
    similar_foods: list[Food] = Field(default_factory=list)
    total_found: int = 0
