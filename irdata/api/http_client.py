"""Authenticated HTTP requests against the iRacing data API"""

import logging
import time
from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import quote

import httpx

from irdata.errors import IRacingAPIError, UnauthorizedError
from irdata.settings import CONNECT_TIMEOUT, REQUEST_TIMEOUT
from .content import JSON_CONTENT_TYPE, parse_error_body, parse_response, payload_size
from .models import RawResponse

if TYPE_CHECKING:
    from irdata.oauth import AuthManager

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves unescaped beyond quote()'s defaults
URI_COMPONENT_SAFE = "!~*'()"


def build_url(base_url: str, path: str) -> str:
    """Join base URL and resource path with exactly one slash between them"""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def proxied_url(url: str, file_proxy_url: Optional[str] = None) -> str:
    """Rewrite an external file URL through the configured file proxy, if any

    The original URL is passed as the ``url`` query parameter, encoded the
    same way as JavaScript's encodeURIComponent.
    """
    if not file_proxy_url:
        return url
    separator = "&" if "?" in file_proxy_url else "?"
    return f"{file_proxy_url}{separator}url={quote(url, safe=URI_COMPONENT_SAFE)}"


def _request_headers(auth: "AuthManager", headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    return {
        **auth.get_auth_headers(),
        **(headers or {}),
        "Content-Type": JSON_CONTENT_TYPE,
    }


def _timeout() -> httpx.Timeout:
    return httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT)


async def send_authenticated(
    auth: "AuthManager",
    url: str,
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs: Any,
) -> RawResponse:
    """Send a request with the session's bearer token

    A 401 triggers one token refresh; if it succeeds the request is sent
    once more with the new token. There is no further retry.

    Args:
        auth: Auth manager owning the session
        url: Fully-qualified request URL
        method: HTTP method
        headers: Extra request headers
        transport: Optional httpx transport override
        **kwargs: Passed through to httpx (json, params, ...)

    Returns:
        Parsed payload with size, timing and content type

    Raises:
        UnauthorizedError: If the request is still unauthorized after the refresh attempt
        IRacingAPIError: For any other non-2xx response
    """
    start = time.perf_counter()

    async with httpx.AsyncClient(timeout=_timeout(), transport=transport) as client:
        response = await client.request(method, url, headers=_request_headers(auth, headers), **kwargs)

        if response.status_code == 401:
            logger.info("Request unauthorized, attempting token refresh before retrying")
            if await auth.refresh_access_token():
                response = await client.request(method, url, headers=_request_headers(auth, headers), **kwargs)

    if not response.is_success:
        error_class = UnauthorizedError if response.status_code == 401 else IRacingAPIError
        raise error_class(
            f"API request failed: {response.status_code} {response.reason_phrase}",
            response.status_code,
            response.reason_phrase,
            parse_error_body(response),
        )

    data, content_type = parse_response(response)
    fetch_time_ms = (time.perf_counter() - start) * 1000

    return RawResponse(
        data=data,
        size_bytes=payload_size(response, data),
        fetch_time_ms=fetch_time_ms,
        content_type=content_type,
    )


async def fetch_external(
    url: str,
    file_proxy_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    error_context: str = "Failed to fetch data from link",
) -> RawResponse:
    """Fetch an externally hosted file without the session's credentials

    Args:
        url: File URL (e.g. a signed S3 link)
        file_proxy_url: Optional passthrough proxy the request is routed through
        transport: Optional httpx transport override
        error_context: Prefix for the error message on failure

    Raises:
        IRacingAPIError: If the file host returns a non-2xx response
    """
    fetch_url = proxied_url(url, file_proxy_url)
    logger.debug(f"Fetching external file {fetch_url}")
    start = time.perf_counter()

    async with httpx.AsyncClient(timeout=_timeout(), transport=transport) as client:
        response = await client.get(fetch_url)

    if not response.is_success:
        raise IRacingAPIError(
            f"{error_context}: {response.status_code} {response.reason_phrase}",
            response.status_code,
            response.reason_phrase,
            parse_error_body(response),
        )

    data, content_type = parse_response(response)
    fetch_time_ms = (time.perf_counter() - start) * 1000

    return RawResponse(
        data=data,
        size_bytes=payload_size(response, data),
        fetch_time_ms=fetch_time_ms,
        content_type=content_type,
    )
