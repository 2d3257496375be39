"""Response body parsing and content-type normalization"""

import json
import logging
from typing import Any, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"
OCTET_STREAM_CONTENT_TYPE = "application/octet-stream"


def media_type(content_type: str) -> str:
    """Strip parameters (charset etc.) from a content-type header value"""
    return content_type.split(";", 1)[0].strip().lower()


def is_json_media_type(value: str) -> bool:
    return value == JSON_CONTENT_TYPE or value.endswith("+json")


def parse_response(response: httpx.Response) -> Tuple[Any, Optional[str]]:
    """Parse a response body as JSON or text based on its content type

    Chunk files are served by iRacing as application/octet-stream even though
    they contain JSON, so that type is parsed as JSON and reported as
    application/json (keeping any charset). Without a content-type header the
    body is tried as JSON first and falls back to text. An empty body declared
    as JSON yields None.

    Args:
        response: Completed httpx response

    Returns:
        Tuple of (payload, content_type)

    Raises:
        ValueError: If a body declared as JSON is not valid JSON
    """
    content_type = response.headers.get("content-type")

    if content_type:
        declared = media_type(content_type)

        if is_json_media_type(declared):
            # e.g. 204 No Content sent with a JSON content type
            if not response.content:
                return None, content_type
            return response.json(), content_type

        if declared == OCTET_STREAM_CONTENT_TYPE:
            try:
                data = response.json()
            except ValueError:
                logger.debug("octet-stream body is not JSON, returning text")
                return response.text, content_type
            parameters = content_type[content_type.index(";"):] if ";" in content_type else ""
            return data, JSON_CONTENT_TYPE + parameters

        return response.text, content_type

    try:
        return response.json(), JSON_CONTENT_TYPE
    except ValueError:
        return response.text, TEXT_CONTENT_TYPE


def parse_error_body(response: httpx.Response) -> Optional[Any]:
    """Best-effort parse of an error response body"""
    try:
        data, _ = parse_response(response)
        return data
    except ValueError:
        return response.text or None


def payload_size(response: httpx.Response, data: Any) -> int:
    """Size of a response in bytes

    Uses the content-length header when present, otherwise the UTF-8 length
    of the payload as it was parsed.
    """
    content_length = response.headers.get("content-length")
    if content_length:
        try:
            return int(content_length)
        except ValueError:
            logger.debug(f"Ignoring invalid content-length header: {content_length}")

    if isinstance(data, str):
        return len(data.encode("utf-8"))
    return len(json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))
