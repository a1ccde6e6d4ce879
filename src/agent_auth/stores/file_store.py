"""
File-based auth state storage.
Stores one JSON file per handle, with read fallback to legacy directories.
"""

import json
import os
import time
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

import aiofiles
import aiofiles.os
import structlog

from .base import BaseStore, normalize_handle, require_handle, sanitize_handle
from ..auth.base import AuthState, normalize_state, now_iso

logger = structlog.get_logger(__name__)

CORRUPT_SUFFIX = ".corrupt-"


class FileStore(BaseStore):
    """JSON file auth state storage."""

    def __init__(
        self,
        state_dir: Union[str, os.PathLike],
        legacy_state_dirs: Optional[Sequence[Union[str, os.PathLike]]] = None,
    ):
        """
        Initialize file store.

        Args:
            state_dir: Directory for primary reads and writes
            legacy_state_dirs: Directories consulted on read and clear only
        """
        self.state_dir = Path(state_dir)
        self.legacy_state_dirs = [Path(d) for d in (legacy_state_dirs or [])]

    @staticmethod
    def _state_file(directory: Path, handle: str) -> Path:
        return directory / f"{sanitize_handle(handle)}.json"

    def get_path(self, handle: str) -> Path:
        """Get primary path for a handle's state file."""
        return self._state_file(self.state_dir, require_handle(handle))

    def read_candidates(self, handle: str) -> List[Path]:
        """
        Ordered candidate paths for a handle.

        Args:
            handle: Normalized handle

        Returns:
            Primary path first, then one per legacy directory
        """
        candidates = [self._state_file(self.state_dir, handle)]
        for legacy_dir in self.legacy_state_dirs:
            candidates.append(self._state_file(legacy_dir, handle))
        return candidates

    async def quarantine(self, path: Path) -> Optional[Path]:
        """
        Rename an unreadable state file aside.

        Args:
            path: Corrupt state file

        Returns:
            New path, or None if the rename failed
        """
        backup_path = Path(f"{path}{CORRUPT_SUFFIX}{int(time.time() * 1000)}")
        try:
            await aiofiles.os.rename(path, backup_path)
        except OSError as e:
            logger.warning("Failed to quarantine corrupt state file", path=str(path), error=str(e))
            return None

        logger.warning("Quarantined corrupt state file", path=str(path), backup_path=str(backup_path))
        return backup_path

    async def _read_state(self, path: Path, fallback_handle: str) -> Optional[AuthState]:
        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
        except FileNotFoundError:
            return None

        try:
            data = json.loads(content)
        except ValueError:
            # Covers JSONDecodeError and undecodable bytes
            await self.quarantine(path)
            return None

        return normalize_state(data, fallback_handle)

    async def load(self, handle: str) -> Optional[AuthState]:
        """
        Load state from the first candidate holding a valid record.

        Args:
            handle: Handle to look up

        Returns:
            AuthState if found, None otherwise
        """
        normalized = normalize_handle(handle)
        if not normalized:
            return None

        candidates = self.read_candidates(normalized)
        for index, candidate in enumerate(candidates):
            state = await self._read_state(candidate, normalized)
            if state is None:
                continue

            if index > 0:
                logger.info("Loaded auth state from legacy directory", handle=normalized, path=str(candidate))
            else:
                logger.debug("Loaded auth state", handle=normalized, path=str(candidate))
            return state

        return None

    async def save(self, handle: str, state: Any) -> AuthState:
        """
        Save state to the primary path, overwriting it.

        Args:
            handle: Handle to save under; overrides any handle in state
            state: Mapping or AuthState; legacy key names accepted

        Returns:
            The record as written
        """
        normalized = require_handle(handle)

        if isinstance(state, AuthState):
            state = state.to_dict()
        if not isinstance(state, Mapping):
            state = {}

        # The argument handle replaces whatever handle the caller supplied
        record = normalize_state({**state, "handle": normalized}, normalized)
        record.updated_at = now_iso()

        await aiofiles.os.makedirs(self.state_dir, exist_ok=True)
        path = self._state_file(self.state_dir, normalized)

        payload = json.dumps(record.to_dict(), indent=2, ensure_ascii=False)
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(f"{payload}\n")

        logger.debug("Saved auth state", handle=normalized, path=str(path))
        return record

    async def clear(self, handle: str) -> bool:
        """
        Delete the primary and legacy state files for a handle.

        Args:
            handle: Handle to clear

        Returns:
            True if at least one file was deleted
        """
        normalized = normalize_handle(handle)
        if not normalized:
            return False

        deleted = False
        for candidate in self.read_candidates(normalized):
            try:
                await aiofiles.os.remove(candidate)
            except FileNotFoundError:
                continue
            deleted = True

        if deleted:
            logger.debug("Cleared auth state", handle=normalized)
        return deleted
