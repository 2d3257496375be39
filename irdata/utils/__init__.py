"""Shared utilities package for irdata"""

from .storage import TokenStore, InMemoryTokenStore, FileTokenStore, create_token_store

__all__ = [
    "TokenStore",
    "InMemoryTokenStore",
    "FileTokenStore",
    "create_token_store",
]
