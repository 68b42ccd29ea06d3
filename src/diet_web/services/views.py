"""Page-level presentation helpers."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from diet_web.domain.diet import display_tags, evaluate_diet_suitability
from diet_web.domain.foods import Food, UserRating
from diet_web.domain.meal_plans import DailyMealPlan, MealPlanApproach, MealType

CARD_TAG_LIMIT = 3
FAVORITE_MIN_RATING = 3.0
HIGH_RATING = 4.5
LIKED_RATING = 4.0
HIGH_PROTEIN_G = 10.0
HIGH_FIBER_G = 3.0
LOW_FAT_G = 5.0
LOW_SODIUM_MG = 100.0

# (threshold, band) pairs, highest first.
_HEALTH_BANDS = ((80.0, "good"), (60.0, "fair"))
# (upper bound, label) pairs, lowest first.
_BMI_CLASSES = ((18.5, "Underweight"), (25.0, "Normal"), (30.0, "Overweight"))

_APPROACH_LABELS = {
    MealPlanApproach.BALANCED: "Balanced",
    MealPlanApproach.BREAKFAST_HEAVY: "Big breakfast",
    MealPlanApproach.LUNCH_HEAVY: "Big lunch",
}


class FavoriteFilter(StrEnum):
    """Subsets of the favourites list."""

    ALL = "all"
    LIKED = "liked"
    HIGH_RATED = "high_rated"


class FavoriteSort(StrEnum):
    """Orderings of the favourites list."""

    RATING = "rating"
    NAME = "name"
    RECENT = "recent"


@dataclass(frozen=True)
class FoodCard:
    """Everything a food card shows."""

    food_id: int
    name: str
    category: str
    energy_kcal: float
    health_score: float | None
    health_band: str
    tags: list[str]
    safe_tags: list[str]
    warning_tags: list[str]
    highlights: dict[str, bool]
    similarity_percent: int | None


def food_card(food: Food) -> FoodCard:
    """Build the card for ``food``.

    The suitability partition uses the raw tags; only the labels shown are
    cleaned.
    """
    partition = evaluate_diet_suitability(food.diet_suitability, food.nutrient_levels)
    similarity = (
        round(food.similarity_score * 100) if food.similarity_score else None
    )
    return FoodCard(
        food_id=food.food_id,
        name=food.name,
        category=food.display_category,
        energy_kcal=food.energy_kcal,
        health_score=food.health_score,
        health_band=health_band(food.health_score),
        tags=display_tags(food.diet_suitability, limit=CARD_TAG_LIMIT),
        safe_tags=display_tags(partition.safe),
        warning_tags=display_tags(partition.warning),
        highlights=nutrient_highlights(food),
        similarity_percent=similarity,
    )


def health_band(score: float | None) -> str:
    """Bucket a health score for colouring."""
    if not score:
        return "unknown"
    for threshold, band in _HEALTH_BANDS:
        if score >= threshold:
            return band
    return "poor"


def nutrient_highlights(food: Food) -> dict[str, bool]:
    """Flag nutrients that are notably good for a diet."""
    return {
        "protein": (food.protein_g or 0.0) >= HIGH_PROTEIN_G,
        "fiber": (food.fiber_g or 0.0) >= HIGH_FIBER_G,
        "fat": 0.0 < (food.fat_g or 0.0) <= LOW_FAT_G,
        "sodium": 0.0 < (food.sodium_mg or 0.0) <= LOW_SODIUM_MG,
    }


def favorite_ratings(ratings: Iterable[UserRating]) -> list[UserRating]:
    """Keep ratings that count as favourites."""
    return [
        rating
        for rating in ratings
        if (rating.rating is not None and rating.rating >= FAVORITE_MIN_RATING)
        or rating.is_liked is True
    ]


def filter_favorites(
    ratings: Iterable[UserRating],
    search: str | None = None,
    filter_by: FavoriteFilter = FavoriteFilter.ALL,
    sort_by: FavoriteSort = FavoriteSort.RATING,
) -> list[UserRating]:
    """Search, filter and order the favourites list."""
    selected = list(ratings)
    if search:
        needle = search.lower()
        selected = [
            rating
            for rating in selected
            if rating.food_name and needle in rating.food_name.lower()
        ]
    if filter_by is FavoriteFilter.LIKED:
        selected = [rating for rating in selected if rating.is_liked is True]
    elif filter_by is FavoriteFilter.HIGH_RATED:
        selected = [
            rating
            for rating in selected
            if rating.rating is not None and rating.rating >= HIGH_RATING
        ]
    if sort_by is FavoriteSort.RATING:
        selected.sort(key=lambda rating: rating.rating or 0.0, reverse=True)
    elif sort_by is FavoriteSort.NAME:
        selected.sort(key=lambda rating: (rating.food_name or "").lower())
    else:
        selected.sort(key=lambda rating: rating.updated_at or "", reverse=True)
    return selected


def body_mass_index(weight_kg: float | None, height_cm: float | None) -> float | None:
    """Return BMI rounded to one decimal, or None without both values."""
    if not weight_kg or not height_cm:
        return None
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 1)


def bmi_category(bmi: float) -> str:
    """Name the weight class for a BMI."""
    for upper_bound, label in _BMI_CLASSES:
        if bmi < upper_bound:
            return label
    return "Obese"


def meal_completion(plan: DailyMealPlan | None) -> tuple[int, int]:
    """Return (completed meals, total meals) for a plan."""
    total = len(MealType)
    if plan is None:
        return 0, total
    completed = sum(1 for meal in MealType if plan.completion_status.get(meal))
    return completed, total


def approach_label(approach: MealPlanApproach | str) -> str:
    """Human label for a meal-plan approach."""
    try:
        return _APPROACH_LABELS[MealPlanApproach(approach)]
    except ValueError:
        return _APPROACH_LABELS[MealPlanApproach.BALANCED]


def liked_from_rating(rating: float) -> bool:
    """Ratings of four stars and up count as a like."""
    return rating >= LIKED_RATING
