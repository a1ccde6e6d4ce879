"""
Configuration management for the agent auth state store.
Uses Pydantic settings with environment and YAML file support.
"""

import json
import os
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional, Sequence, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import yaml


ENV_PREFIX = "CONTEXTOVERFLOW_"


def default_auth_state_dir() -> Path:
    """Built-in state directory, namespaced by application and feature."""
    return Path.home() / ".openclaw" / "contextoverflow" / "auth"


def parse_dir_list(value: str) -> List[str]:
    """
    Parse a directory list from an environment string.

    Accepts a JSON list or directories joined with the platform path separator.
    """
    value = value.strip()
    if value.startswith("["):
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [str(item) for item in parsed if item]
    return [part for part in value.split(os.pathsep) if part.strip()]


class StoreSettings(BaseSettings):
    """Settings that locate agent auth state on disk."""
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    auth_state_dir: Optional[str] = None
    legacy_state_dirs: Annotated[List[str], NoDecode] = Field(default_factory=list)

    @field_validator("legacy_state_dirs", mode="before")
    @classmethod
    def coerce_legacy_dirs(cls, v: Any) -> Any:
        """Allow a single directory or a separator-joined string where a list is expected."""
        if v is None:
            return []
        if isinstance(v, os.PathLike):
            return [os.fspath(v)]
        if isinstance(v, str):
            return parse_dir_list(v)
        return v

    def resolve_state_dir(self, state_dir: Optional[Union[str, os.PathLike]] = None) -> Path:
        """
        Resolve the primary state directory.

        Order: explicit argument, then the environment override, then the
        built-in default under the user's home directory.

        Args:
            state_dir: Per-call override

        Returns:
            Directory holding primary state files
        """
        for candidate in (state_dir, self.auth_state_dir):
            if candidate is None:
                continue
            value = os.fspath(candidate).strip()
            if value:
                return Path(value).expanduser()
        return default_auth_state_dir()

    def resolve_legacy_dirs(
        self,
        legacy_state_dirs: Optional[Sequence[Union[str, os.PathLike]]] = None,
    ) -> List[Path]:
        """
        Resolve legacy directories consulted on read and clear.

        Args:
            legacy_state_dirs: Per-call list; falls back to the configured one

        Returns:
            Ordered list of directories, blank or non-path entries dropped
        """
        source = self.legacy_state_dirs if legacy_state_dirs is None else legacy_state_dirs
        if isinstance(source, (str, os.PathLike)):
            source = [source]

        dirs = []
        for entry in source:
            if not isinstance(entry, (str, os.PathLike)):
                continue
            value = os.fspath(entry)
            if not value:
                continue
            dirs.append(Path(value).expanduser())
        return dirs

    @classmethod
    def from_file(cls, config_file: Union[str, os.PathLike]) -> "StoreSettings":
        """Load settings from a YAML file."""
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f)

        if not yaml_config:
            yaml_config = {}

        return cls(**yaml_config)

    def save_to_file(self, config_file: Union[str, os.PathLike]) -> None:
        """Save settings to a YAML file."""
        config_path = Path(config_file)
        config_dict: Dict[str, Any] = self.model_dump(exclude_none=True)

        # Ensure directory exists
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)


class AuthStateSettings(StoreSettings):
    """Settings for locating and validating agent auth state."""

    # Remote key check
    base_url: str = ""
    request_timeout_ms: int = 10000
    validation_path: str = "/me"
    request_retry: int = 0

    # Logging
    debug: bool = False
