"""
Auth state model and remote API key validation.
"""

from .base import AuthState, KeyCheckResult, KeyCheckStatus, normalize_state
from .validation import check_api_key, has_valid_api_key

__all__ = [
    "AuthState",
    "KeyCheckResult",
    "KeyCheckStatus",
    "normalize_state",
    "check_api_key",
    "has_valid_api_key",
]
