"""
Google OAuth 2.0 client.

Wraps authlib's httpx client for the authorization-code flow: build the
consent URL, exchange the returned code and read the user's profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from httpx import HTTPError

from leave_api.config.settings import Settings
from leave_api.core.logging import get_logger
from leave_api.services.common.errors import AuthenticationError

logger = get_logger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_SCOPE = "openid email profile"


class OAuthError(AuthenticationError):
    """Raised when the provider exchange fails or returns no usable identity."""


@dataclass(frozen=True)
class GoogleProfile:
    email: str
    name: str
    picture: Optional[str] = None


class GoogleOAuthClient:
    """Authorization-code flow against Google."""

    def __init__(self, client_id: str, client_secret: str, redirect_uri: Optional[str]) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["GoogleOAuthClient"]:
        """Return a client, or None when no credentials are configured."""
        if not settings.oauth_enabled():
            return None
        return cls(
            settings.GOOGLE_CLIENT_ID,
            settings.GOOGLE_CLIENT_SECRET,
            settings.GOOGLE_REDIRECT_URI,
        )

    def _client(self) -> AsyncOAuth2Client:
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
            scope=GOOGLE_SCOPE,
        )

    def authorization_url(self) -> Tuple[str, str]:
        """Return the consent URL and the state value it carries."""
        client = self._client()
        url, state = client.create_authorization_url(GOOGLE_AUTHORIZE_URL)
        return url, state

    async def fetch_profile(self, code: str) -> GoogleProfile:
        """
        Exchange ``code`` for a token and load the signed-in user's profile.

        Raises:
            OAuthError: If the exchange fails or the profile lacks an email
        """
        try:
            async with self._client() as client:
                await client.fetch_token(GOOGLE_TOKEN_URL, code=code)
                response = await client.get(GOOGLE_USERINFO_URL)
                response.raise_for_status()
                info = response.json()
        except (AuthlibBaseError, HTTPError) as exc:
            logger.warning("oauth_exchange_failed", error=str(exc))
            raise OAuthError("Google sign-in failed") from exc

        email = info.get("email")
        if not email:
            raise OAuthError("Google account has no email address")
        return GoogleProfile(
            email=email,
            name=info.get("name") or email.split("@", 1)[0],
            picture=info.get("picture"),
        )
