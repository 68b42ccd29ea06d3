"""Food catalogue models."""

from pydantic import Field, field_validator

from diet_web.domain.base import ApiModel
from diet_web.domain.diet import NutrientLevels, normalize_diet_tags


class FoodCategory(ApiModel):
    """A food category."""

    category_id: int
    name: str = Field(alias="category_name")
    code: str = Field(default="", alias="category_code")
    description: str | None = None


class NutritionProfile(ApiModel):
    """Server-computed nutrient flags."""

    high_protein: bool = False
    high_fiber: bool = False
    low_calorie: bool = False
    low_sodium: bool = False
    high_potassium: bool = False


class Food(ApiModel):
    """A food with per-100g nutrient values."""

    food_id: int
    name: str = Field(alias="nama_makanan")
    water_g: float | None = Field(default=None, alias="air")
    energy_kcal: float = Field(default=0.0, alias="energi")
    protein_g: float | None = Field(default=None, alias="protein")
    fat_g: float | None = Field(default=None, alias="lemak")
    carbohydrate_g: float | None = Field(default=None, alias="karbohidrat")
    fiber_g: float | None = Field(default=None, alias="serat")
    sodium_mg: float | None = Field(default=None, alias="natrium")
    potassium_mg: float | None = Field(default=None, alias="kalium")
    category_id: int | None = None
    category_name: str | None = None
    category: FoodCategory | None = None
    estimated_gi: float | None = None
    health_score: float | None = None
    nutrition_profile: NutritionProfile | None = None
    diet_suitability: list[str] = Field(default_factory=list)
    is_active: bool = True
    similarity_score: float | None = None
    user_rating: float | None = None
    user_liked: bool | None = None

    @field_validator("diet_suitability", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> list[str]:
        return normalize_diet_tags(value)

    @field_validator("energy_kcal", mode="before")
    @classmethod
    def _missing_energy_is_zero(cls, value: object) -> object:
        return 0.0 if value is None else value

    @property
    def nutrient_levels(self) -> NutrientLevels:
        """Values consulted by the diet-suitability thresholds."""
        return NutrientLevels(
            sodium_mg=self.sodium_mg,
            energy_kcal=self.energy_kcal,
            glycemic_index=self.estimated_gi,
        )

    @property
    def display_category(self) -> str:
        """Category label for cards."""
        if self.category is not None:
            return self.category.name
        return self.category_name or "Food"


class FoodQuery(ApiModel):
    """Catalogue listing parameters."""

    page: int = 1
    per_page: int = 12
    category_id: int | None = None
    search: str | None = None

    @field_validator("search", mode="before")
    @classmethod
    def _blank_search(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class FoodPage(ApiModel):
    """One page of the catalogue.

    ``total`` and ``total_pages`` are only what the server reported.
    """

    foods: list[Food] = Field(default_factory=list)
    total: int | None = None
    total_pages: int | None = None
    current_page: int = 1
    per_page: int | None = None

    @property
    def has_next(self) -> bool | None:
        """Whether a later page exists, or None if the server did not say."""
        if self.total_pages is None:
            return None
        return self.current_page < self.total_pages


class RatingRequest(ApiModel):
    """Body of a rating submission."""

    rating: float = Field(ge=0, le=5)
    is_liked: bool | None = None


class UserRating(ApiModel):
    """A rating the current user gave a food."""

    rating_id: int
    user_id: int
    food_id: int
    rating: float | None = None
    is_liked: bool | None = None
    interaction_type: str | None = None
    confidence: float | None = None
    created_at: str | None = None
    updated_at: str | None = None
    food_name: str | None = None
