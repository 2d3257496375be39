"""Data API request pipeline: content parsing, authenticated requests, links and chunks"""

from .content import parse_response
from .models import (
    ChunkInfo,
    ChunkMetadata,
    ChunkResult,
    DataMetadata,
    DataResult,
    RawResponse,
)

__all__ = [
    "parse_response",
    "ChunkInfo",
    "ChunkMetadata",
    "ChunkResult",
    "DataMetadata",
    "DataResult",
    "RawResponse",
]
