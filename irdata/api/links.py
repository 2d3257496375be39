"""Following S3 links and reassembling chunked datasets"""

import asyncio
import logging
from typing import Any, List, Optional

import httpx

from irdata.errors import ChunkError
from .http_client import fetch_external
from .models import (
    ChunkInfo,
    ChunkMetadata,
    ChunkResult,
    DataMetadata,
    DataResult,
    RawResponse,
    read_envelope,
)

logger = logging.getLogger(__name__)


async def resolve_data(
    raw: RawResponse,
    file_proxy_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DataResult:
    """Follow a `link` payload one level deep and describe any chunks

    Args:
        raw: Response of the original API request
        file_proxy_url: Optional passthrough proxy for the link fetch
        transport: Optional httpx transport override

    Returns:
        Final payload with link/chunk metadata. Sizes and timings cover
        both requests when a link was followed.
    """
    data = raw.data
    size_bytes = raw.size_bytes
    fetch_time_ms = raw.fetch_time_ms
    content_type = raw.content_type
    link_followed = False

    link = read_envelope(data).link
    if link:
        logger.debug("Response contains a link, following it")
        linked = await fetch_external(link, file_proxy_url, transport)
        data = linked.data
        size_bytes += linked.size_bytes
        fetch_time_ms += linked.fetch_time_ms
        content_type = linked.content_type
        link_followed = True

    chunk_info = read_envelope(data).chunk_info

    return DataResult(
        data=data,
        metadata=DataMetadata(
            s3_link_followed=link_followed,
            chunk_count=chunk_info.total_chunks if chunk_info else 0,
            chunk_rows=chunk_info.rows if chunk_info else None,
            size_bytes=size_bytes,
            fetch_time_ms=fetch_time_ms,
            content_type=content_type,
        ),
    )


def require_chunk_info(payload: Any) -> ChunkInfo:
    """Get the chunk descriptor of a payload or DataResult

    Raises:
        ChunkError: If the payload carries no chunk descriptor
    """
    if isinstance(payload, DataResult):
        payload = payload.data

    chunk_info = read_envelope(payload).chunk_info
    if chunk_info is None:
        raise ChunkError("Response does not contain chunk_info")
    return chunk_info


async def fetch_chunk(
    chunk_info: ChunkInfo,
    index: int,
    file_proxy_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChunkResult:
    """Download a single chunk file

    Raises:
        ChunkError: If index is outside [0, total_chunks)
    """
    total = chunk_info.total_chunks
    if index < 0 or index >= total:
        raise ChunkError(f"Invalid chunk index {index}. Must be between 0 and {total - 1} (total chunks: {total})")

    raw = await fetch_external(
        chunk_info.chunk_url(index),
        file_proxy_url,
        transport,
        error_context=f"Failed to fetch chunk {index}",
    )

    return ChunkResult(
        data=raw.data,
        metadata=ChunkMetadata(
            size_bytes=raw.size_bytes,
            fetch_time_ms=raw.fetch_time_ms,
            content_type=raw.content_type,
        ),
    )


def merge_chunk_results(results: List[ChunkResult]) -> ChunkResult:
    """Concatenate chunk records in the given order

    Sizes and fetch times are summed per chunk, so the reported time
    exceeds wall-clock time when chunks were fetched concurrently.
    """
    records: List[Any] = []
    for result in results:
        if isinstance(result.data, list):
            records.extend(result.data)
        else:
            records.append(result.data)

    return ChunkResult(
        data=records,
        metadata=ChunkMetadata(
            size_bytes=sum(r.metadata.size_bytes for r in results),
            fetch_time_ms=sum(r.metadata.fetch_time_ms for r in results),
            content_type=results[0].metadata.content_type if results else None,
        ),
    )


async def fetch_chunks(
    chunk_info: ChunkInfo,
    start: int = 0,
    limit: Optional[int] = None,
    file_proxy_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChunkResult:
    """Download a range of chunks concurrently and merge them in order

    Args:
        chunk_info: Chunk descriptor
        start: First chunk index
        limit: Maximum number of chunks (defaults to all remaining)
        file_proxy_url: Optional passthrough proxy
        transport: Optional httpx transport override

    Raises:
        ChunkError: If start is outside [0, total_chunks)
    """
    total = chunk_info.total_chunks
    if start < 0 or start >= total:
        raise ChunkError(f"Invalid start index {start}. Must be between 0 and {total - 1} (total chunks: {total})")

    if limit is None:
        limit = total - start
    end = min(start + limit, total)

    logger.debug(f"Fetching chunks {start}..{end - 1} of {total}")
    results = await asyncio.gather(
        *(fetch_chunk(chunk_info, index, file_proxy_url, transport) for index in range(start, end))
    )
    return merge_chunk_results(list(results))
