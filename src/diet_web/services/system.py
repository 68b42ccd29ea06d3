"""Remote API health."""

from dataclasses import dataclass

from diet_web.adapters.api_client import ApiClient


@dataclass
class SystemService:
    """Typed access to the API's own health endpoint."""

    api_client: ApiClient

    async def health(self) -> dict[str, object]:
        """Return the API's health report."""
        return await self.api_client.get("/health")
