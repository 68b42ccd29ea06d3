"""Medical condition models."""

from enum import StrEnum

from diet_web.domain.base import ApiModel


class Severity(StrEnum):
    """Condition severity tokens used by the API."""

    MILD = "ringan"
    MODERATE = "sedang"
    SEVERE = "berat"


class MedicalCondition(ApiModel):
    """A condition the recommender knows about."""

    condition_id: int
    condition_name: str
    condition_code: str = ""
    description: str | None = None
    dietary_focus: str | None = None


class UserMedicalCondition(ApiModel):
    """A condition attached to the current user."""

    condition_id: int
    condition_name: str = ""
    condition_code: str = ""
    severity: Severity = Severity.MODERATE
    notes: str | None = None


class ConditionAssignment(ApiModel):
    """One entry of a medical-conditions update."""

    condition_id: int
    severity: Severity = Severity.MODERATE
    notes: str = ""
