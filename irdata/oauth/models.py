"""Data models for iRacing OAuth authentication"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from irdata.settings import AUTH_BASE_URL, CLIENT_ID, REDIRECT_URI, TOKEN_ENDPOINT


@dataclass(frozen=True)
class AuthConfig:
    """OAuth client configuration, immutable once the client is built

    Attributes:
        client_id: Registered OAuth client id
        redirect_uri: Redirect URI registered for the client
        auth_base_url: Authorization server base (``/authorize`` and ``/token`` live under it)
        token_endpoint: Explicit token endpoint, e.g. a local proxy
    """
    client_id: Optional[str] = None
    redirect_uri: Optional[str] = None
    auth_base_url: str = AUTH_BASE_URL
    token_endpoint: Optional[str] = None

    @property
    def authorize_url(self) -> str:
        return f"{self.auth_base_url.rstrip('/')}/authorize"

    @property
    def token_url(self) -> str:
        return self.token_endpoint or f"{self.auth_base_url.rstrip('/')}/token"

    @classmethod
    def from_settings(cls) -> "AuthConfig":
        """Build a config from environment/.env settings"""
        return cls(
            client_id=CLIENT_ID,
            redirect_uri=REDIRECT_URI,
            auth_base_url=AUTH_BASE_URL,
            token_endpoint=TOKEN_ENDPOINT,
        )


class TokenResponse(BaseModel):
    """Token endpoint response for both code exchange and refresh"""
    access_token: str
    expires_in: Optional[int] = None
    token_type: Optional[str] = None
    refresh_token: Optional[str] = None  # Not always returned on refresh
