"""
Base storage interface for agent auth state.
"""

import abc
from pathlib import Path
from typing import Any, Optional

from ..auth.base import AuthState


class StoreError(Exception):
    """Base exception for store errors."""
    pass


class InvalidHandleError(StoreError, ValueError):
    """Handle is missing or blank."""
    pass


def normalize_handle(handle: Any) -> str:
    """Trimmed handle, or an empty string for non-string input."""
    if not isinstance(handle, str):
        return ""
    return handle.strip()


def require_handle(handle: Any) -> str:
    """Trimmed handle; raises InvalidHandleError when blank."""
    normalized = normalize_handle(handle)
    if not normalized:
        raise InvalidHandleError("handle is required")
    return normalized


def sanitize_handle(handle: str) -> str:
    """Replace path separators so the handle is a single file name."""
    return handle.replace("/", "_").replace("\\", "_")


class BaseStore(abc.ABC):
    """Base class for auth state storage implementations."""

    @abc.abstractmethod
    def get_path(self, handle: str) -> Path:
        """
        Get the primary storage path for a handle.

        Raises:
            InvalidHandleError: If handle is blank
        """
        pass

    @abc.abstractmethod
    async def load(self, handle: str) -> Optional[AuthState]:
        """
        Load state for a handle.

        Returns:
            AuthState if found, None otherwise
        """
        pass

    @abc.abstractmethod
    async def save(self, handle: str, state: Any) -> AuthState:
        """
        Save state for a handle, replacing any existing record.

        Returns:
            The record as written
        """
        pass

    @abc.abstractmethod
    async def clear(self, handle: str) -> bool:
        """
        Delete state for a handle.

        Returns:
            True if anything was deleted, False if nothing existed
        """
        pass
