"""Shared base for models exchanged with the remote API."""

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Model whose aliases are the API's wire names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, object]:
        """Serialize to a request body keyed by wire names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def blank_to_none(value: object) -> object:
    """Treat empty strings from the API as missing values."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
