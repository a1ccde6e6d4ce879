"""
Public operations of the agent auth state store.

Each call resolves its own settings: an explicit ``state_dir`` wins over the
``CONTEXTOVERFLOW_AUTH_STATE_DIR`` environment variable, which wins over
``~/.openclaw/contextoverflow/auth``.
"""

import os
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from .auth.base import AuthState
from .config import StoreSettings
from .stores.file_store import FileStore

PathLike = Union[str, os.PathLike]


def get_store(
    state_dir: Optional[PathLike] = None,
    legacy_state_dirs: Optional[Sequence[PathLike]] = None,
    settings: Optional[StoreSettings] = None,
) -> FileStore:
    """
    Build a file store for one call.

    Args:
        state_dir: Per-call primary directory override
        legacy_state_dirs: Per-call legacy directories
        settings: Settings to resolve against; storage settings are read from
            the environment if omitted

    Returns:
        FileStore bound to the resolved directories
    """
    if settings is None:
        settings = StoreSettings()
    return FileStore(
        settings.resolve_state_dir(state_dir),
        settings.resolve_legacy_dirs(legacy_state_dirs),
    )


def get_auth_state_file_path(
    handle: str,
    state_dir: Optional[PathLike] = None,
    settings: Optional[StoreSettings] = None,
) -> Path:
    """Primary state file path for a handle. Raises InvalidHandleError if blank."""
    return get_store(state_dir, settings=settings).get_path(handle)


async def load_agent_auth_state(
    handle: str,
    state_dir: Optional[PathLike] = None,
    legacy_state_dirs: Optional[Sequence[PathLike]] = None,
    settings: Optional[StoreSettings] = None,
) -> Optional[AuthState]:
    """Load state for a handle, or None if blank, missing or corrupt."""
    store = get_store(state_dir, legacy_state_dirs, settings)
    return await store.load(handle)


async def save_agent_auth_state(
    handle: str,
    state: Any,
    state_dir: Optional[PathLike] = None,
    settings: Optional[StoreSettings] = None,
) -> AuthState:
    """Save state for a handle. Raises InvalidHandleError if blank."""
    store = get_store(state_dir, settings=settings)
    return await store.save(handle, state)


async def clear_agent_auth_state(
    handle: str,
    state_dir: Optional[PathLike] = None,
    legacy_state_dirs: Optional[Sequence[PathLike]] = None,
    settings: Optional[StoreSettings] = None,
) -> bool:
    """Delete state for a handle from every candidate location."""
    store = get_store(state_dir, legacy_state_dirs, settings)
    return await store.clear(handle)
