"""
Configuration Loader - Storage Settings from YAML.

Reads the storage YAML (connection, catalog and query sections), applies
an optional deployment profile on top and validates the result with
Pydantic.

Profiles live in <base_path>/config/profiles/<name>.yaml and only hold
the settings that differ for that deployment, e.g. a local InfluxDB URL
or a shorter catalog TTL. The token is normally kept out of the files
and taken from INFLUXDB_TOKEN.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from timeseries_influxdb.config.models import StorageConfig

TOKEN_ENV_VAR = "INFLUXDB_TOKEN"
PROFILE_DIR = Path("config") / "profiles"


class ConfigLoader:
    """Builds a validated StorageConfig from YAML files and the environment."""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Directory relative config paths and profiles are resolved against
            environ: Environment to read the token from (defaults to os.environ)
        """
        self._base_path = base_path or Path(".")
        self._environ = environ if environ is not None else os.environ

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> StorageConfig:
        """
        Load the storage configuration.

        Args:
            config_path: Storage YAML file
            profile: Deployment profile overriding parts of the file

        Returns:
            Validated StorageConfig

        Raises:
            FileNotFoundError: If the file or the profile doesn't exist
            ValidationError: If a setting is invalid or no token is available
        """
        settings = self._read_yaml(self._resolve_path(config_path))

        if profile:
            settings = self._merge_configs(settings, self._load_profile(profile))

        return self.load_from_dict(settings)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> StorageConfig:
        """Validate already parsed settings, filling in the token from the environment."""
        return StorageConfig.model_validate(self._apply_environment(config_dict))

    def _apply_environment(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """An explicit token in the settings wins over INFLUXDB_TOKEN."""
        token = self._environ.get(TOKEN_ENV_VAR)
        connection = dict(config_dict.get("connection") or {})
        if token and not connection.get("token"):
            connection["token"] = token
        return {**config_dict, "connection": connection}

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self._base_path / p

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        """Read the overrides of a deployment profile."""
        profile_path = self._base_path / PROFILE_DIR / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile} ({profile_path})")
        return self._read_yaml(profile_path)

    def _merge_configs(
        self,
        base: Dict[str, Any],
        overlay: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Apply profile overrides section by section.

        Nested sections (connection, catalog, query) are merged key by key,
        so a profile setting only connection.url keeps org, bucket and token.
        """
        merged = dict(base)
        for key, value in overlay.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(current, value)
            else:
                merged[key] = value
        return merged


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> StorageConfig:
    """
    Load the storage configuration with the process environment.

    Example:
        >>> config = load_config("config/storage.yaml", profile="local")
        >>> storage = InfluxDBStorage.from_config(config)
    """
    return ConfigLoader(base_path=base_path).load(config_path, profile)
