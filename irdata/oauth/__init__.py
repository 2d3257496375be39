"""OAuth 2.0 PKCE authentication package for the iRacing data API"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import httpx

from irdata.errors import ConfigurationError, IRacingError
from irdata.settings import TOKEN_FILE
from irdata.utils.storage import TokenStore, create_token_store
from .authorization import AuthorizationURLBuilder
from .callback import extract_code, strip_code_param
from .host import HostContext
from .models import AuthConfig, TokenResponse
from .pkce import PKCEManager, generate_challenge, generate_verifier
from .token_exchange import exchange_code
from .token_refresh import refresh_tokens

logger = logging.getLogger(__name__)


class AuthManager:
    """OAuth PKCE flow implementation

    This class owns the session (access/refresh token pair) and drives:
    - Authorization URL construction with a fresh PKCE pair
    - Authorization code exchange on callback
    - Token refresh
    - Session injection and logout

    Session mutation is not locked: a single caller is expected to drive
    authentication sequentially, even when data requests run concurrently.
    """

    def __init__(
        self,
        config: Optional[AuthConfig] = None,
        token_store: Optional[TokenStore] = None,
        host: Optional[HostContext] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        token_file: Optional[Union[str, Path]] = None,
    ):
        """
        Args:
            config: OAuth client configuration (defaults to settings)
            token_store: Explicit token store; otherwise a file store is used
                when a token file is configured, else an in-memory store
            host: Interactive host context (current URL, attempt storage)
            transport: Optional httpx transport for token endpoint requests
            token_file: Token file for the durable store (defaults to settings)
        """
        self.config = config or AuthConfig.from_settings()
        self.host = host
        self.transport = transport
        self.storage = token_store or create_token_store(token_file or TOKEN_FILE)
        # Without a host the verifier only lives as long as this manager
        self.pkce = PKCEManager(host.attempt_storage if host else {})
        self.auth_builder = AuthorizationURLBuilder(self.pkce, self.config)

    @property
    def access_token(self) -> Optional[str]:
        return self.storage.get_access_token()

    @property
    def refresh_token(self) -> Optional[str]:
        return self.storage.get_refresh_token()

    @property
    def is_logged_in(self) -> bool:
        return bool(self.storage.get_access_token())

    def get_auth_headers(self) -> Dict[str, str]:
        """Authorization headers for the current session

        Returns:
            Bearer header if logged in, otherwise an empty dict
        """
        token = self.storage.get_access_token()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    # Authorization URLs
    def generate_auth_url(self) -> str:
        """Construct the OAuth authorize URL and remember the PKCE verifier

        Returns:
            Full authorization URL
        """
        return self.auth_builder.get_authorize_url()

    def start_login_flow(self) -> str:
        """Open the authorization URL in the default browser

        Returns:
            Authorization URL that was opened
        """
        return self.auth_builder.start_login_flow()

    # Token exchange
    async def handle_callback(self, value: Optional[str] = None):
        """Exchange the authorization code from an OAuth redirect for tokens

        Args:
            value: Redirect URL or bare authorization code. Defaults to the
                host's current URL; without a host there is nothing to do.

        Raises:
            ConfigurationError: If a code was found but no PKCE verifier is stored
            IRacingAPIError: If the token endpoint rejects the exchange
        """
        if value is None and self.host is not None:
            value = self.host.current_url

        code = extract_code(value)
        if not code:
            logger.debug("No authorization code in callback input, nothing to do")
            return

        code_verifier = self.pkce.pop_verifier()
        if not code_verifier:
            raise ConfigurationError("No PKCE verifier found. Start login flow first.")

        await exchange_code(code, code_verifier, self.config, self.storage, self.transport)

    # Token refresh
    async def refresh_access_token(self) -> bool:
        """Refresh the access token

        Returns:
            True if refresh succeeded, False otherwise
        """
        return await refresh_tokens(self.config, self.storage, self.transport)

    async def handle_authentication(self) -> bool:
        """Make sure the session is logged in if at all possible

        Tries, in order: the existing session, the authorization code in the
        host's current URL, and a token refresh.

        Returns:
            True if a session is available afterwards
        """
        if self.is_logged_in:
            return True

        try:
            await self.handle_callback()
            if self.is_logged_in:
                self._clean_callback_url()
                return True
        except (IRacingError, httpx.HTTPError, ValueError) as e:
            logger.warning(f"OAuth callback handling failed, trying refresh: {e}")

        return await self.refresh_access_token()

    def _clean_callback_url(self):
        """Drop the consumed authorization code from the host's visible URL"""
        if not self.host or not self.host.current_url or not self.host.replace_url:
            return

        cleaned = strip_code_param(self.host.current_url)
        self.host.replace_url(cleaned)
        self.host.current_url = cleaned

    # Session management
    def set_session(self, access_token: str, refresh_token: Optional[str] = None):
        """Replace the session, e.g. with tokens restored out of band"""
        self.storage.clear()
        self.storage.set_access_token(access_token)
        if refresh_token:
            self.storage.set_refresh_token(refresh_token)

    def logout(self):
        """Clear the session and any pending authorization attempt"""
        self.storage.clear()
        self.pkce.clear_pkce()
        logger.info("Logged out, session cleared")


__all__ = [
    "AuthManager",
    "AuthConfig",
    "HostContext",
    "TokenResponse",
    "PKCEManager",
    "generate_verifier",
    "generate_challenge",
]
