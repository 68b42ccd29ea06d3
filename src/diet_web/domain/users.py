"""User models and authentication payloads."""

from enum import StrEnum

from pydantic import Field, field_validator

from diet_web.domain.base import ApiModel, blank_to_none
from diet_web.domain.meal_plans import MealPreferences


class ActivityLevel(StrEnum):
    """Physical activity levels used for calorie targets."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class Sex(StrEnum):
    """Sex codes as sent by the API."""

    MALE = "L"
    FEMALE = "P"


class DietGoal(StrEnum):
    """Weight goal; values are the API's tokens."""

    LOSE = "menurunkan"
    MAINTAIN = "menjaga"
    GAIN = "menambah"


# Older API revisions spell the gain goal differently.
_DIET_GOAL_ALIASES = {"menaikkan": DietGoal.GAIN.value}


def parse_diet_goal(value: object) -> object:
    """Map legacy diet-goal tokens onto the canonical enum values."""
    value = blank_to_none(value)
    if isinstance(value, str):
        return _DIET_GOAL_ALIASES.get(value.strip().lower(), value.strip().lower())
    return value


class _ProfileFields(ApiModel):
    name: str | None = Field(default=None, alias="nama")
    age: int | None = Field(default=None, alias="umur")
    sex: Sex | None = Field(default=None, alias="jenis_kelamin")
    height_cm: float | None = Field(default=None, alias="tinggi_badan")
    weight_kg: float | None = Field(default=None, alias="berat_badan")
    target_weight_kg: float | None = Field(default=None, alias="target_berat")
    activity_level: ActivityLevel | None = Field(default=None, alias="aktivitas")
    diet_goal: DietGoal | None = None
    allergies: str | None = Field(default=None, alias="alergi")

    @field_validator(
        "sex",
        "activity_level",
        "age",
        "height_cm",
        "weight_kg",
        "target_weight_kg",
        mode="before",
    )
    @classmethod
    def _blank_is_missing(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("diet_goal", mode="before")
    @classmethod
    def _canonical_diet_goal(cls, value: object) -> object:
        return parse_diet_goal(value)


class User(_ProfileFields):
    """A user record as returned by the API."""

    user_id: int
    email: str
    bmr: float | None = None
    target_calories: float | None = Field(default=None, alias="target_kalori")
    is_active: bool = True
    role: str = "user"
    meal_preferences: MealPreferences | None = None

    @property
    def has_complete_profile(self) -> bool:
        """Whether the fields needed for personalised plans are filled in."""
        return bool(
            self.name and self.age and self.sex and self.height_cm and self.weight_kg
        )


class LoginCredentials(ApiModel):
    """Body of a login request."""

    email: str
    password: str


class RegistrationForm(_ProfileFields):
    """Sign-up form; the confirmation never leaves the client."""

    email: str
    password: str
    confirm_password: str | None = Field(default=None, exclude=True)

    def passwords_match(self) -> bool:
        """Whether the confirmation, if given, equals the password."""
        return self.confirm_password is None or self.confirm_password == self.password


class ProfileUpdate(_ProfileFields):
    """Editable profile fields; BMR and calorie target are server-derived."""

    bmr: float | None = Field(default=None, exclude=True)
    target_calories: float | None = Field(
        default=None, alias="target_kalori", exclude=True
    )

    def to_payload(self) -> dict[str, object]:
        """Serialize, dropping unset and blank fields."""
        return {
            key: value
            for key, value in super().to_payload().items()
            if value != ""
        }


class AuthResult(ApiModel):
    """Response of the login and register endpoints."""

    message: str = ""
    token: str
    user: User
