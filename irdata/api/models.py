"""Wire schemas and result types for data API calls"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class ChunkInfo(BaseModel):
    """Describes a dataset split into separately downloadable files"""
    base_download_url: str
    chunk_file_names: List[str]
    chunk_size: Optional[int] = None
    num_chunks: Optional[int] = None
    rows: Optional[int] = None

    @property
    def total_chunks(self) -> int:
        return len(self.chunk_file_names)

    def chunk_url(self, index: int) -> str:
        return f"{self.base_download_url}{self.chunk_file_names[index]}"


@dataclass
class PayloadEnvelope:
    """The optional fields of a data payload that drive follow-up fetches

    Attributes:
        link: Fully-qualified URL of the real payload, if the API returned a link
        chunk_info: Chunk descriptor, if the payload is chunked
    """
    link: Optional[str] = None
    chunk_info: Optional[ChunkInfo] = None


def read_envelope(data: Any) -> PayloadEnvelope:
    """Extract the link and chunk descriptor from a parsed payload"""
    if not isinstance(data, dict):
        return PayloadEnvelope()

    link = data.get("link")
    if not isinstance(link, str) or not link.startswith("http"):
        link = None

    chunk_info = None
    raw_chunk_info = data.get("chunk_info")
    if isinstance(raw_chunk_info, dict):
        try:
            chunk_info = ChunkInfo.model_validate(raw_chunk_info)
        except ValidationError as e:
            logger.debug(f"Ignoring malformed chunk_info: {e}")

    return PayloadEnvelope(link=link, chunk_info=chunk_info)


@dataclass
class RawResponse:
    """Payload of a single request plus transfer diagnostics"""
    data: Any
    size_bytes: int
    fetch_time_ms: float
    content_type: Optional[str]


@dataclass
class DataMetadata:
    s3_link_followed: bool
    chunk_count: int
    chunk_rows: Optional[int]
    size_bytes: int
    fetch_time_ms: float
    content_type: Optional[str]


@dataclass
class DataResult:
    data: Any
    metadata: DataMetadata


@dataclass
class ChunkMetadata:
    size_bytes: int
    fetch_time_ms: float
    content_type: Optional[str]


@dataclass
class ChunkResult:
    """Records of one or more chunks, in chunk order"""
    data: Any
    metadata: ChunkMetadata
