"""OAuth authorization code exchange"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from irdata.api.content import parse_error_body
from irdata.errors import ConfigurationError, IRacingAPIError
from irdata.settings import CONNECT_TIMEOUT, REQUEST_TIMEOUT
from irdata.utils.storage import TokenStore
from .models import AuthConfig, TokenResponse

logger = logging.getLogger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


async def exchange_code(
    code: str,
    code_verifier: str,
    config: AuthConfig,
    storage: TokenStore,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TokenResponse:
    """Exchange an authorization code for tokens and store them

    Args:
        code: Authorization code from the OAuth redirect
        code_verifier: PKCE verifier generated for this attempt
        config: OAuth client configuration
        storage: Token store receiving the new tokens
        transport: Optional httpx transport override

    Returns:
        Parsed token response

    Raises:
        ConfigurationError: If client_id or redirect_uri is not configured
        IRacingAPIError: If the token endpoint rejects the exchange
    """
    if not config.client_id or not config.redirect_uri:
        raise ConfigurationError("client_id and redirect_uri required for OAuth")

    data = {
        "grant_type": "authorization_code",
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "code": code,
        "code_verifier": code_verifier,
    }

    logger.info(f"Exchanging authorization code for tokens at {config.token_url}")

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
        transport=transport,
    ) as client:
        response = await client.post(
            config.token_url,
            content=urlencode(data),
            headers=FORM_HEADERS,
        )

    if not response.is_success:
        raise IRacingAPIError(
            f"Failed to exchange code for token: {response.status_code} {response.reason_phrase}",
            response.status_code,
            response.reason_phrase,
            parse_error_body(response),
        )

    tokens = TokenResponse.model_validate(response.json())
    storage.set_access_token(tokens.access_token)
    if tokens.refresh_token:
        storage.set_refresh_token(tokens.refresh_token)

    logger.info("Authentication complete with OAuth Bearer tokens")
    return tokens
