"""Profile and medical-condition calls."""

from dataclasses import dataclass

from diet_web.adapters.api_client import ApiClient
from diet_web.domain.medical import (
    ConditionAssignment,
    MedicalCondition,
    Severity,
    UserMedicalCondition,
)
from diet_web.domain.users import ProfileUpdate, User


@dataclass
class UserProfileService:
    """Typed access to the /users endpoints."""

    api_client: ApiClient

    async def update_profile(self, update: ProfileUpdate) -> User:
        """Save profile edits and return the recomputed user."""
        payload = await self.api_client.put("/users/profile", json=update.to_payload())
        return User.model_validate(payload.get("user"))

    async def medical_conditions(self) -> list[MedicalCondition]:
        """Return every condition the recommender supports."""
        payload = await self.api_client.get("/users/medical-conditions")
        return [
            MedicalCondition.model_validate(item)
            for item in payload.get("conditions") or []
        ]

    async def my_medical_conditions(self) -> list[UserMedicalCondition]:
        """Return the conditions attached to the current user."""
        payload = await self.api_client.get("/users/my-medical-conditions")
        return [
            UserMedicalCondition.model_validate(item)
            for item in payload.get("conditions") or []
        ]

    async def update_medical_conditions(
        self, assignments: list[ConditionAssignment]
    ) -> str:
        """Replace the user's conditions with ``assignments``."""
        payload = await self.api_client.post(
            "/users/medical-conditions",
            json={"conditions": [item.to_payload() for item in assignments]},
        )
        message = payload.get("message")
        return message if isinstance(message, str) else ""

    async def toggle_medical_condition(
        self,
        condition: MedicalCondition,
        current: list[UserMedicalCondition],
    ) -> list[UserMedicalCondition]:
        """Attach or detach ``condition`` and return the resulting list."""
        selected = any(item.condition_id == condition.condition_id for item in current)
        if selected:
            remaining = [
                item for item in current if item.condition_id != condition.condition_id
            ]
        else:
            remaining = [
                *current,
                UserMedicalCondition(
                    condition_id=condition.condition_id,
                    condition_name=condition.condition_name,
                    condition_code=condition.condition_code,
                    severity=Severity.MODERATE,
                    notes=f"Medical condition: {condition.condition_name}",
                ),
            ]
        await self.update_medical_conditions(
            [
                ConditionAssignment(
                    condition_id=item.condition_id,
                    severity=item.severity,
                    notes=item.notes or "",
                )
                for item in remaining
            ]
        )
        return remaining
