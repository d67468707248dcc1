"""OAuth login providers.

Each provider turns an authorization code into a canonical profile
(name, email, provider tag). What happens with that profile, creating or
looking up the local user and issuing a token, is up to the caller.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx

from src.config import Settings, get_settings
from src.exceptions import InvalidInputError, NotFoundError, OAuthProviderError
from src.models.enums import AuthProvider

logger = logging.getLogger(__name__)


@dataclass
class OAuthProfile:
    """Provider-independent identity extracted from a third-party profile."""

    name: str
    email: str
    provider: str


class OAuthProvider(ABC):
    """Authorization-code flow against a single provider."""

    provider: AuthProvider
    authorize_url: str
    token_url: str
    profile_url: str
    scope: list[str] = []
    scope_separator = " "

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        callback_url: str,
        timeout: float = 10.0,
    ) -> None:
        if not client_id:
            raise InvalidInputError(f"{self.provider.value} login is not configured")
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.timeout = timeout

    def authorization_url(self, state: str | None = None) -> str:
        """Build the URL the user is redirected to for consent."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "response_type": "code",
        }
        if self.scope:
            params["scope"] = self.scope_separator.join(self.scope)
        if state:
            params["state"] = state
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for an access token."""
        data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "code": code,
        }
        if self.client_secret:
            data["client_secret"] = self.client_secret

        payload = await self._request("POST", self.token_url, data=data)
        access_token = payload.get("access_token")
        if not access_token:
            raise OAuthProviderError(f"{self.provider.value} did not return an access token")
        return access_token

    async def fetch_profile(self, access_token: str) -> dict[str, Any]:
        """Fetch the raw profile document for an access token."""
        return await self._request(
            "GET",
            self.profile_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )

    @abstractmethod
    def parse_profile(self, raw: dict[str, Any]) -> OAuthProfile:
        """Map the provider's raw profile document to an OAuthProfile."""

    async def authenticate(self, code: str) -> OAuthProfile:
        """Run the full code -> token -> profile exchange."""
        access_token = await self.exchange_code(code)
        raw = await self.fetch_profile(access_token)
        return self.parse_profile(raw)

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling {self.provider.value} ({url}): {e}")
            raise OAuthProviderError(f"{self.provider.value} login failed") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {self.provider.value} ({url}): {e}")
            raise OAuthProviderError(f"{self.provider.value} login failed") from e


class KakaoOAuthProvider(OAuthProvider):
    provider = AuthProvider.KAKAO
    authorize_url = "https://kauth.kakao.com/oauth/authorize"
    token_url = "https://kauth.kakao.com/oauth/token"  # noqa: S105
    profile_url = "https://kapi.kakao.com/v2/user/me"
    scope = ["account_email", "profile_nickname"]
    scope_separator = ","

    def parse_profile(self, raw: dict[str, Any]) -> OAuthProfile:
        """Map a Kakao ``/v2/user/me`` document to a profile."""
        account = raw.get("kakao_account") or {}
        properties = raw.get("properties") or {}

        email = account.get("email")
        if not email:
            raise OAuthProviderError("Kakao account has no email; email consent is required")

        name = properties.get("nickname") or (account.get("profile") or {}).get("nickname")
        return OAuthProfile(name=name or email, email=email, provider=self.provider.value)


class GoogleOAuthProvider(OAuthProvider):
    provider = AuthProvider.GOOGLE
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"  # noqa: S105
    profile_url = "https://openidconnect.googleapis.com/v1/userinfo"
    scope = ["openid", "email", "profile"]

    def parse_profile(self, raw: dict[str, Any]) -> OAuthProfile:
        """Map an OpenID Connect userinfo document to a profile."""
        email = raw.get("email")
        if not email:
            raise OAuthProviderError("Google account has no email")
        return OAuthProfile(
            name=raw.get("name") or email,
            email=email,
            provider=self.provider.value,
        )


def get_oauth_provider(provider: str, settings: Settings | None = None) -> OAuthProvider:
    """Build the provider adapter for a provider tag."""
    settings = settings or get_settings()

    if provider == AuthProvider.KAKAO.value:
        return KakaoOAuthProvider(
            settings.kakao_client_id,
            settings.kakao_client_secret,
            settings.kakao_callback_url,
            timeout=settings.oauth_timeout_seconds,
        )
    if provider == AuthProvider.GOOGLE.value:
        return GoogleOAuthProvider(
            settings.google_client_id,
            settings.google_client_secret,
            settings.google_callback_url,
            timeout=settings.oauth_timeout_seconds,
        )

    raise NotFoundError(f"Unknown login provider: {provider}")
