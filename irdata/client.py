"""iRacing data API client"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx

from irdata.api.http_client import build_url, send_authenticated
from irdata.api.links import fetch_chunk, fetch_chunks, require_chunk_info, resolve_data
from irdata.api.models import ChunkResult, DataResult, RawResponse
from irdata.oauth import AuthConfig, AuthManager, HostContext
from irdata.settings import API_BASE, FILE_PROXY_URL
from irdata.utils.storage import TokenStore

logger = logging.getLogger(__name__)


class IRacingClient:
    """Client for the iRacing /data API

    Wraps an AuthManager for the OAuth session and provides:
    - Raw authenticated requests with refresh-and-retry on 401
    - Data requests that follow S3 links returned by the API
    - Chunk downloads for large datasets
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        file_proxy_url: Optional[str] = None,
        auth: Optional[AuthConfig] = None,
        token_store: Optional[TokenStore] = None,
        token_file: Optional[Union[str, Path]] = None,
        host: Optional[HostContext] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_url: Data API base URL (defaults to settings)
            file_proxy_url: Passthrough proxy for S3 links and chunk files
            auth: OAuth client configuration (defaults to settings)
            token_store: Explicit token store
            token_file: Token file for the durable store
            host: Interactive host context for the OAuth callback
            transport: Optional httpx transport used for every request
        """
        self.api_url = api_url or API_BASE
        self.file_proxy_url = file_proxy_url or FILE_PROXY_URL
        self.transport = transport
        self.auth = AuthManager(
            config=auth,
            token_store=token_store,
            host=host,
            transport=transport,
            token_file=token_file,
        )

    async def request_raw(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> RawResponse:
        """Authenticated request returning the payload with size/timing metadata

        Does NOT follow "link" responses.
        """
        url = build_url(self.api_url, path)
        return await send_authenticated(
            self.auth,
            url,
            method=method,
            headers=headers,
            transport=self.transport,
            **kwargs,
        )

    async def request(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> Any:
        """Authenticated request returning only the parsed payload"""
        raw = await self.request_raw(path, method=method, headers=headers, **kwargs)
        return raw.data

    async def get_data(self, path: str) -> DataResult:
        """Fetch a resource, following an S3 link in the response if present"""
        raw = await self.request_raw(path)
        return await resolve_data(raw, self.file_proxy_url, self.transport)

    async def get_chunk(self, payload: Union[DataResult, Dict[str, Any]], index: int) -> ChunkResult:
        """Download one chunk of a chunked dataset

        Args:
            payload: Payload (or DataResult) carrying ``chunk_info``
            index: Zero-based chunk index
        """
        chunk_info = require_chunk_info(payload)
        return await fetch_chunk(chunk_info, index, self.file_proxy_url, self.transport)

    async def get_chunks(
        self,
        payload: Union[DataResult, Dict[str, Any]],
        start: int = 0,
        limit: Optional[int] = None,
    ) -> ChunkResult:
        """Download a range of chunks concurrently and merge their records in order

        Args:
            payload: Payload (or DataResult) carrying ``chunk_info``
            start: First chunk index
            limit: Maximum number of chunks (defaults to all remaining)
        """
        chunk_info = require_chunk_info(payload)
        return await fetch_chunks(chunk_info, start, limit, self.file_proxy_url, self.transport)
