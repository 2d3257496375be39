"""Token Store implementations: volatile in-process and durable JSON file"""

import json
import logging
import os
import platform
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

KEY_PREFIX = "irdata_"
ACCESS_TOKEN_KEY = KEY_PREFIX + "access_token"
REFRESH_TOKEN_KEY = KEY_PREFIX + "refresh_token"


class TokenStore(ABC):
    """Holds the current access/refresh token pair"""

    @abstractmethod
    def get_access_token(self) -> Optional[str]:
        pass

    @abstractmethod
    def set_access_token(self, token: str):
        pass

    @abstractmethod
    def get_refresh_token(self) -> Optional[str]:
        pass

    @abstractmethod
    def set_refresh_token(self, token: str):
        pass

    @abstractmethod
    def clear(self):
        pass


class InMemoryTokenStore(TokenStore):
    """Volatile token store, lost when the process exits"""

    def __init__(self):
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None

    def get_access_token(self) -> Optional[str]:
        return self._access_token

    def set_access_token(self, token: str):
        self._access_token = token

    def get_refresh_token(self) -> Optional[str]:
        return self._refresh_token

    def set_refresh_token(self, token: str):
        self._refresh_token = token

    def clear(self):
        self._access_token = None
        self._refresh_token = None


class FileTokenStore(TokenStore):
    """Durable token store backed by a JSON file with restrictive permissions

    Keys are prefixed with ``irdata_`` so the file can be shared with other
    settings without collisions.
    """

    def __init__(self, token_file: Union[str, Path]):
        self.token_path = Path(token_file).expanduser()
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.token_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _load(self) -> Dict[str, str]:
        if not self.token_path.exists():
            return {}

        try:
            data = json.loads(self.token_path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load tokens from {self.token_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed token file {self.token_path}")
            return {}
        return data

    def _write(self, data: Dict[str, str]):
        self.token_path.write_text(json.dumps(data, indent=2))

        # Set file permissions to 600 on Unix-like systems
        if platform.system() != "Windows":
            os.chmod(self.token_path, 0o600)

    def _set(self, key: str, value: str):
        data = self._load()
        data[key] = value
        self._write(data)

    def get_access_token(self) -> Optional[str]:
        return self._load().get(ACCESS_TOKEN_KEY)

    def set_access_token(self, token: str):
        self._set(ACCESS_TOKEN_KEY, token)

    def get_refresh_token(self) -> Optional[str]:
        return self._load().get(REFRESH_TOKEN_KEY)

    def set_refresh_token(self, token: str):
        self._set(REFRESH_TOKEN_KEY, token)

    def clear(self):
        """Remove stored tokens, deleting the file if nothing else is in it"""
        data = self._load()
        data.pop(ACCESS_TOKEN_KEY, None)
        data.pop(REFRESH_TOKEN_KEY, None)

        if data:
            self._write(data)
        elif self.token_path.exists():
            self.token_path.unlink()
            logger.debug(f"Removed token file {self.token_path}")

    @property
    def token_file(self) -> Path:
        """Get the token file path"""
        return self.token_path


def create_token_store(token_file: Optional[Union[str, Path]] = None) -> TokenStore:
    """Pick the durable store when a token file is configured, else the volatile one"""
    if token_file:
        return FileTokenStore(token_file)
    return InMemoryTokenStore()
