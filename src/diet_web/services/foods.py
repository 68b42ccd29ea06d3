"""Food catalogue and rating calls."""

from dataclasses import dataclass

from diet_web.adapters.api_client import ApiClient
from diet_web.domain.foods import (
    Food,
    FoodCategory,
    FoodPage,
    FoodQuery,
    RatingRequest,
    UserRating,
)


@dataclass
class FoodService:
    """Typed access to the /foods endpoints."""

    api_client: ApiClient

    async def list_foods(self, query: FoodQuery | None = None) -> FoodPage:
        """Return one page of the catalogue."""
        resolved = query or FoodQuery()
        payload = await self.api_client.get("/foods/", params=resolved.to_payload())
        return _parse_food_page(payload, resolved)

    async def get_food(self, food_id: int) -> Food:
        """Return a single food."""
        payload = await self.api_client.get(f"/foods/{food_id}")
        return Food.model_validate(payload.get("food"))

    async def list_categories(self) -> list[FoodCategory]:
        """Return all food categories."""
        payload = await self.api_client.get("/foods/categories")
        return [
            FoodCategory.model_validate(item)
            for item in _as_list(payload.get("categories"))
        ]

    async def rate_food(self, food_id: int, rating: RatingRequest) -> str:
        """Submit a rating and return the server's confirmation message."""
        payload = await self.api_client.post(
            f"/foods/{food_id}/rate", json=rating.to_payload()
        )
        message = payload.get("message")
        return message if isinstance(message, str) else ""

    async def my_ratings(self) -> list[UserRating]:
        """Return the current user's ratings."""
        payload = await self.api_client.get("/foods/my-ratings")
        return [
            UserRating.model_validate(item) for item in _as_list(payload.get("ratings"))
        ]


def _parse_food_page(payload: dict[str, object], query: FoodQuery) -> FoodPage:
    """Build a page from the listing payload.

    Items come under ``foods`` or, on older deployments, ``data``. Totals are
    left unset when the server omits them.
    """
    items = payload.get("foods")
    if not isinstance(items, list):
        items = payload.get("data")
    total_pages = payload.get("total_pages")
    if total_pages is None:
        total_pages = payload.get("pages")
    return FoodPage(
        foods=[Food.model_validate(item) for item in _as_list(items)],
        total=_as_int(payload.get("total")),
        total_pages=_as_int(total_pages),
        current_page=_as_int(payload.get("current_page")) or query.page,
        per_page=_as_int(payload.get("per_page")) or query.per_page,
    )


def _as_list(value: object) -> list[object]:
    return value if isinstance(value, list) else []


def _as_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
