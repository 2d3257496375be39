"""Python client for the iRacing data API with OAuth 2.0 PKCE authentication"""

from .api import ChunkInfo, ChunkMetadata, ChunkResult, DataMetadata, DataResult
from .client import IRacingClient
from .errors import (
    ChunkError,
    ConfigurationError,
    IRacingAPIError,
    IRacingError,
    UnauthorizedError,
)
from .oauth import AuthConfig, AuthManager, HostContext
from .utils.storage import FileTokenStore, InMemoryTokenStore, TokenStore

__version__ = "0.1.0"

__all__ = [
    "IRacingClient",
    "AuthManager",
    "AuthConfig",
    "HostContext",
    "TokenStore",
    "InMemoryTokenStore",
    "FileTokenStore",
    "DataResult",
    "DataMetadata",
    "ChunkInfo",
    "ChunkResult",
    "ChunkMetadata",
    "IRacingError",
    "ConfigurationError",
    "IRacingAPIError",
    "UnauthorizedError",
    "ChunkError",
]
