"""
Access token providers for the outbound send path.

The send path only needs one question answered before it POSTs: is
there a usable access token right now? Obtaining and refreshing tokens
happens elsewhere (a login flow writes the token file); providers here
only read what is available and answer None when nothing usable exists.

Token file format (written by the login flow):
    {
      "access_token": "...",
      "token_type": "bearer",
      "expires_at": 1760000000
    }
"""

import json
import threading
import time
from pathlib import Path
from typing import Protocol

from hatchet_resolver.core.logger import get_logger

logger = get_logger(__name__)


# Tokens that expire within this window are treated as already expired
EXPIRY_SAFETY_BUFFER_SECONDS = 60


class AccessTokenProvider(Protocol):
    def ensure_access_token(self) -> str | None:
        """Return a valid access token, or None when none is available."""
        ...


class StaticTokenProvider:
    """Provider returning a fixed token (or None), e.g. from HATCHET_ACCESS_TOKEN."""

    def __init__(self, token: str | None) -> None:
        self._token = token or None

    def ensure_access_token(self) -> str | None:
        return self._token


class TokenFileProvider:
    """
    Provider reading the access token from a JSON token file.

    The file is re-read when its modification time changes, so a login
    performed by another process is picked up without a restart.

    Attributes:
        token_file: Path of the JSON token file.
    """

    def __init__(self, token_file: Path) -> None:
        self.token_file = token_file
        self._lock = threading.Lock()
        self._cached: dict | None = None
        self._cached_mtime: float | None = None

    def _load_token(self) -> dict | None:
        """
        Load the token file, or None when missing or unreadable.

        Does not check expiry.
        """
        try:
            mtime = self.token_file.stat().st_mtime
        except FileNotFoundError:
            return None

        if self._cached is not None and self._cached_mtime == mtime:
            return self._cached

        try:
            with open(self.token_file, "r", encoding="utf-8") as f:
                token_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load token file {self.token_file}: {e}")
            return None

        if not isinstance(token_data, dict) or not token_data.get("access_token"):
            logger.warning(f"Invalid token structure in {self.token_file}")
            return None

        self._cached = token_data
        self._cached_mtime = mtime
        return token_data

    @staticmethod
    def _is_token_expired(token_data: dict) -> bool:
        expires_at = token_data.get("expires_at")
        if expires_at is None:
            # Tokens without expiry never expire
            return False
        try:
            return time.time() >= float(expires_at) - EXPIRY_SAFETY_BUFFER_SECONDS
        except (TypeError, ValueError):
            return True

    def ensure_access_token(self) -> str | None:
        with self._lock:
            token_data = self._load_token()
        if token_data is None:
            return None
        if self._is_token_expired(token_data):
            logger.info("Access token expired; log in again to send data")
            return None
        return str(token_data["access_token"])
