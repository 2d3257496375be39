"""Helpers for reading the authorization code out of an OAuth redirect"""

import re
from typing import Optional
from urllib.parse import parse_qsl, unquote, urlsplit, urlunsplit

# Fallback for URLs urllib refuses to parse (e.g. malformed IPv6 hosts)
CODE_PATTERN = re.compile(r"[?&]code=([^&#]*)")


def looks_like_url(value: str) -> bool:
    """Check whether callback input is a redirect URL rather than a bare code"""
    return value.startswith(("http://", "https://")) or "?" in value


def extract_code(value: Optional[str]) -> Optional[str]:
    """Extract the authorization code from a redirect URL or bare code

    Args:
        value: Full redirect URL, or the code itself

    Returns:
        The authorization code, or None if none could be found
    """
    if not value:
        return None

    value = value.strip()
    if not value:
        return None

    if not looks_like_url(value):
        return value

    try:
        query = urlsplit(value).query
    except ValueError:
        match = CODE_PATTERN.search(value)
        if match and match.group(1):
            return unquote(match.group(1))
        return None

    for key, code in parse_qsl(query, keep_blank_values=True):
        if key == "code" and code:
            return code
    return None


def strip_code_param(url: str) -> str:
    """Remove only the `code` query parameter from a URL

    Other query parameters keep their original encoding, and the fragment
    is left intact.
    """
    parts = urlsplit(url)
    kept = [segment for segment in parts.query.split("&") if segment and segment.split("=", 1)[0] != "code"]
    return urlunsplit(parts._replace(query="&".join(kept)))
