"""OAuth authorization URL construction"""

import logging
import webbrowser
from urllib.parse import urlencode

from irdata.errors import ConfigurationError
from irdata.settings import SCOPES
from .models import AuthConfig
from .pkce import PKCEManager

logger = logging.getLogger(__name__)


class AuthorizationURLBuilder:
    """Builds OAuth authorization URLs with PKCE"""

    def __init__(self, pkce_manager: PKCEManager, config: AuthConfig):
        self.pkce = pkce_manager
        self.config = config

    def get_authorize_url(self) -> str:
        """Construct OAuth authorize URL with PKCE

        A fresh verifier is generated and stored for every call, replacing
        any verifier left over from an earlier attempt.

        Returns:
            Full authorization URL

        Raises:
            ConfigurationError: If client_id or redirect_uri is not configured
        """
        if not self.config.client_id or not self.config.redirect_uri:
            raise ConfigurationError("client_id and redirect_uri required for OAuth")

        _, code_challenge = self.pkce.generate_pkce()

        params = {
            "response_type": "code",
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "scope": SCOPES,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }

        logger.debug(f"Built authorization URL for client {self.config.client_id}")
        return f"{self.config.authorize_url}?{urlencode(params)}"

    def start_login_flow(self) -> str:
        """Send the user to the iRacing login page in their default browser

        Returns:
            Authorization URL, so headless callers can print it instead
        """
        url = self.get_authorize_url()
        if not webbrowser.open(url):
            logger.info("No browser available, open the authorization URL manually")
        return url
