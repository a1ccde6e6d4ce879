"""
Auth state record and key-check result types.
Defines the persisted per-handle credential record and its normalization.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
from dataclasses import dataclass, field, fields

DEFAULT_PROVIDER = "ed25519"

# Attribute name -> accepted JSON keys, canonical first.
# The first truthy value in this order wins.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "api_key": ("apiKey", "api_key"),
    "public_key_pem": ("publicKeyPem", "public_key_pem"),
    "private_key_pem": ("privateKeyPem", "private_key_pem"),
    "public_key_jwk": ("publicKeyJwk", "public_jwk"),
    "private_key_jwk": ("privateKeyJwk", "private_jwk"),
    "last_provider": ("lastProvider", "last_provider", "provider"),
    "updated_at": ("updatedAt", "updated_at"),
    "base_url": ("baseUrl", "base_url"),
    "verification_provider": ("verificationProvider", "verification_provider"),
}

_JWK_FIELDS = ("public_key_jwk", "private_key_jwk")


def now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def _coalesce(raw: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return None


@dataclass
class AuthState:
    """Credential record persisted for one handle."""
    handle: str
    api_key: str = ""
    public_key_pem: str = ""
    private_key_pem: str = ""
    public_key_jwk: Optional[Dict[str, Any]] = None
    private_key_jwk: Optional[Dict[str, Any]] = None
    last_provider: str = DEFAULT_PROVIDER
    updated_at: str = field(default_factory=now_iso)
    base_url: str = ""
    verification_provider: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk dictionary with canonical key names."""
        result = {"handle": self.handle}
        for f in fields(self):
            if f.name == "handle":
                continue
            result[FIELD_ALIASES[f.name][0]] = getattr(self, f.name)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], fallback_handle: str = "") -> Optional["AuthState"]:
        """Create from a dictionary, accepting legacy key names."""
        return normalize_state(data, fallback_handle)


def normalize_state(raw: Any, fallback_handle: str = "") -> Optional[AuthState]:
    """
    Coalesce a raw record into an AuthState.

    Args:
        raw: Decoded JSON value or AuthState
        fallback_handle: Handle used when the record carries none

    Returns:
        AuthState with every field populated, or None when raw is not a
        mapping or no handle can be derived
    """
    if isinstance(raw, AuthState):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        return None

    handle = str(raw.get("handle") or fallback_handle or "").strip()
    if not handle:
        return None

    values: Dict[str, Any] = {}
    for name, keys in FIELD_ALIASES.items():
        value = _coalesce(raw, keys)
        if name in _JWK_FIELDS:
            values[name] = dict(value) if isinstance(value, Mapping) else None
        elif value is not None:
            values[name] = str(value)

    return AuthState(handle=handle, **values)


class KeyCheckStatus(Enum):
    """Outcome of a remote API key check."""
    VALID = "valid"
    MISSING_API_KEY = "missing_api_key"
    NO_REQUESTER = "no_requester"
    REQUEST_FAILED = "request_failed"
    NOT_OK = "not_ok"
    MALFORMED_RESPONSE = "malformed_response"
    ERROR_RESPONSE = "error_response"
    NO_DATA = "no_data"


@dataclass
class KeyCheckResult:
    """Remote API key check result."""
    status: KeyCheckStatus
    error: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.status is KeyCheckStatus.VALID

    def __bool__(self) -> bool:
        return self.valid
