"""Tests for page presentation helpers."""

from diet_web.domain.foods import Food, UserRating
from diet_web.domain.meal_plans import CompletionStatus, DailyMealPlan
from diet_web.services.views import (
    FavoriteFilter,
    FavoriteSort,
    approach_label,
    bmi_category,
    body_mass_index,
    favorite_ratings,
    filter_favorites,
    food_card,
    health_band,
    liked_from_rating,
    meal_completion,
)
from tests.conftest import food_payload


def _rating(food_id: int, rating: float | None, **extra: object) -> UserRating:
    return UserRating.model_validate(
        {"rating_id": food_id, "user_id": 1, "food_id": food_id, "rating": rating}
        | extra
    )


def test_food_card_partitions_raw_tags_and_cleans_labels() -> None:
    food = Food.model_validate(
        food_payload(
            diet_suitability=["hypertension masakan", "diabetes", "vegan", "keto"],
            similarity_score=0.456,
        )
    )

    card = food_card(food)

    assert card.name == "Nasi goreng masakan"
    assert card.tags == ["hypertension", "diabetes", "vegan"]
    assert card.warning_tags == ["hypertension"]
    assert card.safe_tags == ["diabetes", "vegan", "keto"]
    assert card.category == "Rice"
    assert card.health_band == "fair"
    assert card.similarity_percent == 46
    assert card.highlights["protein"] is True
    assert card.highlights["sodium"] is False


def test_health_band() -> None:
    assert health_band(None) == "unknown"
    assert health_band(0) == "unknown"
    assert health_band(80) == "good"
    assert health_band(60) == "fair"
    assert health_band(59.9) == "poor"


def test_favorites_keep_good_ratings_and_likes() -> None:
    ratings = [
        _rating(1, 2.0),
        _rating(2, 3.0),
        _rating(3, 1.0, is_liked=True),
        _rating(4, None),
    ]

    assert [item.food_id for item in favorite_ratings(ratings)] == [2, 3]


def test_filter_favorites_search_filter_and_sort() -> None:
    ratings = [
        _rating(1, 4.0, food_name="Tempe goreng", updated_at="2026-01-02"),
        _rating(2, 5.0, food_name="Tahu", is_liked=True, updated_at="2026-01-01"),
        _rating(3, 4.8, food_name="tempe bacem", updated_at="2026-01-03"),
    ]

    by_rating = filter_favorites(ratings)
    searched = filter_favorites(ratings, search="TEMPE", sort_by=FavoriteSort.NAME)
    liked = filter_favorites(ratings, filter_by=FavoriteFilter.LIKED)
    high = filter_favorites(
        ratings, filter_by=FavoriteFilter.HIGH_RATED, sort_by=FavoriteSort.RECENT
    )

    assert [item.food_id for item in by_rating] == [2, 3, 1]
    assert [item.food_id for item in searched] == [3, 1]
    assert [item.food_id for item in liked] == [2]
    assert [item.food_id for item in high] == [3, 2]


def test_body_mass_index() -> None:
    bmi = body_mass_index(60, 165)

    assert bmi == 22.0
    assert bmi_category(bmi) == "Normal"
    assert bmi_category(18.4) == "Underweight"
    assert bmi_category(27) == "Overweight"
    assert bmi_category(30) == "Obese"
    assert body_mass_index(None, 165) is None


def test_meal_completion() -> None:
    plan = DailyMealPlan(
        completion_status=CompletionStatus(breakfast=True, dinner=True)
    )

    assert meal_completion(plan) == (2, 3)
    assert meal_completion(None) == (0, 3)


def test_labels_and_likes() -> None:
    assert approach_label("breakfast_heavy") == "Big breakfast"
    assert approach_label("unknown") == "Balanced"
    assert liked_from_rating(4.0) is True
    assert liked_from_rating(3.5) is False
