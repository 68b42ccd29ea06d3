"""Authentication calls and token bookkeeping."""

from dataclasses import dataclass

from diet_web.adapters.api_client import ApiClient
from diet_web.adapters.token_store import TokenStore
from diet_web.domain.users import AuthResult, LoginCredentials, RegistrationForm, User


@dataclass
class AuthService:
    """Login, registration and profile lookup against the API."""

    api_client: ApiClient
    token_store: TokenStore

    async def login(self, credentials: LoginCredentials) -> AuthResult:
        """Log in and persist the returned token."""
        payload = await self.api_client.post(
            "/auth/login", json=credentials.to_payload()
        )
        result = AuthResult.model_validate(payload)
        self.token_store.set(result.token)
        return result

    async def register(self, form: RegistrationForm) -> AuthResult:
        """Create an account and persist the returned token."""
        payload = await self.api_client.post(
            "/auth/register", json=form.to_payload()
        )
        result = AuthResult.model_validate(payload)
        self.token_store.set(result.token)
        return result

    async def get_profile(self) -> User:
        """Fetch the user the stored token belongs to."""
        payload = await self.api_client.get("/auth/profile")
        return User.model_validate(payload.get("user"))

    def logout(self) -> None:
        """Forget the stored token."""
        self.token_store.clear()

    def is_authenticated(self) -> bool:
        """Whether a token is stored."""
        return bool(self.token_store.get())
