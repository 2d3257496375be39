"""Exception types raised by the irdata client"""

from typing import Any, Optional


class IRacingError(Exception):
    """Base class for all irdata errors"""


class ConfigurationError(IRacingError, ValueError):
    """Raised when the client is missing configuration needed for an operation

    Examples: no client_id/redirect_uri when starting the OAuth flow, or no
    PKCE verifier stored when an authorization code comes back.
    """


class IRacingAPIError(IRacingError):
    """Raised when an upstream HTTP request fails

    Attributes:
        status: HTTP status code
        status_text: HTTP reason phrase
        body: Parsed error body (JSON object or text), if one could be read
    """

    def __init__(self, message: str, status: int, status_text: str, body: Optional[Any] = None):
        super().__init__(message)
        self.status = status
        self.status_text = status_text
        self.body = body


class UnauthorizedError(IRacingAPIError):
    """Raised when a data request is still rejected with 401 after a refresh attempt"""


class ChunkError(IRacingError, ValueError):
    """Raised for chunk requests that cannot be satisfied from the chunk descriptor"""
