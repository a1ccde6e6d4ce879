"""
Agent auth state store.
Persists per-agent credentials to local disk, keyed by handle, and checks
API key validity against a remote service.
"""

from .auth import AuthState, KeyCheckResult, KeyCheckStatus, check_api_key, has_valid_api_key
from .config import AuthStateSettings, StoreSettings
from .state import (
    clear_agent_auth_state,
    get_auth_state_file_path,
    load_agent_auth_state,
    save_agent_auth_state,
)
from .stores import FileStore, InvalidHandleError, StoreError

__version__ = "0.1.0"

__all__ = [
    "AuthState",
    "AuthStateSettings",
    "FileStore",
    "InvalidHandleError",
    "KeyCheckResult",
    "KeyCheckStatus",
    "StoreError",
    "StoreSettings",
    "check_api_key",
    "clear_agent_auth_state",
    "get_auth_state_file_path",
    "has_valid_api_key",
    "load_agent_auth_state",
    "save_agent_auth_state",
]
