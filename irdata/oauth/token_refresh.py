"""OAuth token refresh functionality"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from irdata.errors import ConfigurationError
from irdata.settings import CONNECT_TIMEOUT, REQUEST_TIMEOUT
from irdata.utils.storage import TokenStore
from .models import AuthConfig, TokenResponse
from .token_exchange import FORM_HEADERS

logger = logging.getLogger(__name__)


async def refresh_tokens(
    config: AuthConfig,
    storage: TokenStore,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Obtain a new access token with the stored refresh token

    A rejected refresh clears the whole session so the user has to log in
    again. A transport failure leaves the session untouched.

    Args:
        config: OAuth client configuration
        storage: Token store holding the refresh token
        transport: Optional httpx transport override

    Returns:
        True if refresh succeeded, False otherwise

    Raises:
        ConfigurationError: If a refresh token exists but client_id is not configured
    """
    refresh_token = storage.get_refresh_token()
    if not refresh_token:
        logger.debug("No refresh token available for refresh")
        return False

    if not config.client_id:
        raise ConfigurationError("client_id required for token refresh")

    data = {
        "grant_type": "refresh_token",
        "client_id": config.client_id,
        "refresh_token": refresh_token,
    }

    logger.info("Attempting to refresh OAuth tokens...")
    try:
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
            logger.warning(f"Token refresh rejected with status {response.status_code}, clearing session")
            storage.clear()
            return False

        tokens = TokenResponse.model_validate(response.json())
    except httpx.HTTPError as e:
        logger.error(f"Token refresh request failed: {e}")
        return False
    except (ValueError, ValidationError) as e:
        logger.error(f"Failed to parse token refresh response: {e}")
        return False

    storage.set_access_token(tokens.access_token)
    # Refresh token rotation is optional on the server side
    if tokens.refresh_token:
        storage.set_refresh_token(tokens.refresh_token)

    logger.info("Successfully refreshed OAuth tokens")
    return True
