"""
Storage module for agent auth state.
"""

from .base import BaseStore, InvalidHandleError, StoreError
from .file_store import FileStore

__all__ = [
    "BaseStore",
    "InvalidHandleError",
    "StoreError",
    "FileStore",
]
