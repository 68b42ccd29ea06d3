"""Recommendation calls."""

from dataclasses import dataclass

from diet_web.adapters.api_client import ApiClient
from diet_web.domain.recommendations import (
    MethodInfo,
    RecommendationHistory,
    RecommendationMethod,
    RecommendationSet,
    SimilarFoods,
)


class RecommendationError(Exception):
    """The recommender answered but reported a failure."""


@dataclass
class RecommendationService:
    """Typed access to the /recommendations endpoints."""

    api_client: ApiClient

    async def smart(
        self, limit: int | None = None, method: RecommendationMethod | None = None
    ) -> RecommendationSet:
        """Return recommendations using the method the server picks."""
        payload = await self.api_client.get(
            "/recommendations/", params={"limit": limit, "method": method}
        )
        data = _unwrap(payload)
        return RecommendationSet(
            recommendations=data.get("recommendations") or [],
            total=data.get("total_recommendations") or 0,
            method=data.get("method_used"),
            total_users=data.get("total_users"),
        )

    async def content_based(self, limit: int | None = None) -> RecommendationSet:
        """Return content-based recommendations."""
        return await self._flat("/recommendations/content-based", limit)

    async def collaborative(self, limit: int | None = None) -> RecommendationSet:
        """Return collaborative-filtering recommendations."""
        return await self._flat("/recommendations/collaborative", limit)

    async def hybrid(self, limit: int | None = None) -> RecommendationSet:
        """Return hybrid recommendations."""
        return await self._flat("/recommendations/hybrid", limit)

    async def for_condition(
        self, condition_code: str, limit: int = 10
    ) -> RecommendationSet:
        """Return foods suited to a medical condition."""
        payload = await self.api_client.get(
            f"/recommendations/for-condition/{condition_code}", params={"limit": limit}
        )
        return RecommendationSet(
            recommendations=payload.get("recommendations") or [],
            total=payload.get("total") or 0,
            condition=payload.get("condition"),
        )

    async def method_info(self) -> MethodInfo:
        """Describe the recommender's current method."""
        payload = await self.api_client.get("/recommendations/method-info")
        return MethodInfo.model_validate(_unwrap(payload))

    async def user_stats(self) -> dict[str, object]:
        """Return rating and recommendation statistics for the user."""
        payload = await self.api_client.get(
            "/recommendations/user-recommendation-stats"
        )
        return _unwrap(payload)

    async def history(
        self,
        page: int = 1,
        per_page: int = 10,
        recommendation_type: RecommendationMethod | None = None,
    ) -> RecommendationHistory:
        """Return a page of past recommendations."""
        payload = await self.api_client.get(
            "/recommendations/recommendation-history",
            params={"page": page, "per_page": per_page, "type": recommendation_type},
        )
        return RecommendationHistory.model_validate(_unwrap(payload))

    async def track_click(self, history_id: int) -> bool:
        """Record that a recommendation was opened."""
        payload = await self.api_client.post(
            "/recommendations/click-recommendation", json={"history_id": history_id}
        )
        return bool(payload.get("success"))

    async def similar_foods(self, food_id: int, limit: int = 5) -> SimilarFoods:
        """Return foods similar to ``food_id``."""
        payload = await self.api_client.get(
            f"/recommendations/similar-foods/{food_id}", params={"limit": limit}
        )
        data = _unwrap(payload)
        target = data.get("target_food")
        return SimilarFoods(
            target_food_id=target.get("food_id") if isinstance(target, dict) else None,
            similar_foods=data.get("similar_foods") or [],
            total_found=data.get("total_found") or 0,
        )

    async def validate_collaborative(self) -> dict[str, object]:
        """Report whether collaborative filtering can run for the user."""
        payload = await self.api_client.get("/recommendations/validate-collaborative")
        return _unwrap(payload)

    async def system_stats(self) -> dict[str, object]:
        """Return system-wide recommendation statistics."""
        payload = await self.api_client.get("/recommendations/system-stats")
        return _unwrap(payload)

    async def health(self) -> dict[str, object]:
        """Return the recommender's health report."""
        return await self.api_client.get("/recommendations/health")

    async def _flat(self, path: str, limit: int | None) -> RecommendationSet:
        payload = await self.api_client.get(path, params={"limit": limit})
        return RecommendationSet(
            recommendations=payload.get("recommendations") or [],
            total=payload.get("total") or 0,
            method=payload.get("recommendation_type"),
            total_users=payload.get("total_users_in_system"),
            collaborative_available=payload.get("collaborative_available"),
        )


def _unwrap(payload: dict[str, object]) -> dict[str, object]:
    """Return the ``data`` envelope, raising if the server flagged a failure."""
    if payload.get("success") is False:
        message = payload.get("message") or payload.get("error")
        raise RecommendationError(
            message if isinstance(message, str) else "Recommendation request failed"
        )
    data = payload.get("data")
    if isinstance(data, dict):
        return data
    return payload
