"""
Unit Tests for ConfigLoader.

Test Aspects Covered:
    ✅ Business Logic: Config loading, profile merging, token from environment
    ✅ Error Handling: Invalid values, missing files, missing token
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from timeseries_influxdb.config.loader import ConfigLoader, load_config
from timeseries_influxdb.config.models import StorageConfig


class TestConfigLoader:
    """Test cases for ConfigLoader."""

    def test_loads_valid_yaml(self, sample_config_path: Path) -> None:
        """
        SCENARIO: Valid YAML configuration file
        EXPECTED: StorageConfig object created
        """
        # Arrange
        loader = ConfigLoader(environ={})

        # Act
        config = loader.load(sample_config_path)

        # Assert
        assert isinstance(config, StorageConfig)
        assert config.connection.url == "http://influxdb:8086"
        assert config.connection.bucket == "metrics"
        assert config.connection.token == "file-token"
        assert config.catalog.ttl_seconds == 30

    def test_applies_defaults(self) -> None:
        """
        SCENARIO: Minimal config with only the token
        EXPECTED: Defaults applied for missing fields
        """
        # Arrange
        loader = ConfigLoader(environ={})

        # Act
        config = loader.load_from_dict({"connection": {"token": "t"}})

        # Assert
        assert config.connection.url == "http://localhost:9999"
        assert config.connection.org == "opennms"
        assert config.connection.bucket == "opennms"
        assert config.catalog.ttl_seconds == 60
        assert config.catalog.lookback == "5y"
        assert config.catalog.identity_marker == "resourceId"
        assert config.query.apply_step_aggregation is False

    def test_validates_invalid_config(self, tmp_path: Path) -> None:
        """
        SCENARIO: Config with invalid values
        EXPECTED: ValidationError raised
        """
        # Arrange
        config_content = """
version: "1.0"
connection:
  token: "t"
catalog:
  ttl_seconds: -10  # Invalid: must be > 0
"""
        config_file = tmp_path / "invalid.yaml"
        config_file.write_text(config_content)

        loader = ConfigLoader(base_path=tmp_path, environ={})

        # Act & Assert
        with pytest.raises(ValidationError):
            loader.load("invalid.yaml")

    @pytest.mark.parametrize("lookback", ["5 years", "-5y", "y", ""])
    def test_rejects_invalid_lookback(self, lookback: str) -> None:
        """Lookback must be a plain Flux duration."""
        loader = ConfigLoader(environ={})

        with pytest.raises(ValidationError):
            loader.load_from_dict({"connection": {"token": "t"}, "catalog": {"lookback": lookback}})

    def test_file_not_found(self, tmp_path: Path) -> None:
        """
        SCENARIO: Config path doesn't exist
        EXPECTED: FileNotFoundError raised
        """
        # Arrange
        loader = ConfigLoader(base_path=tmp_path)

        # Act & Assert
        with pytest.raises(FileNotFoundError):
            loader.load("nonexistent.yaml")

    def test_merges_configs(self) -> None:
        """
        SCENARIO: Two configs merged together
        EXPECTED: Overlay values override base values
        """
        # Arrange
        loader = ConfigLoader()
        base = {
            "connection": {"url": "http://a:8086", "org": "opennms"},
        }
        overlay = {
            "connection": {"url": "http://b:8086"},  # Override
        }

        # Act
        merged = loader._merge_configs(base, overlay)

        # Assert
        assert merged["connection"]["org"] == "opennms"  # From base
        assert merged["connection"]["url"] == "http://b:8086"  # From overlay


class TestProfiles:
    """Test cases for profile overlays."""

    def test_profile_overrides_base(self, tmp_path: Path) -> None:
        """
        SCENARIO: Base config plus a named profile
        EXPECTED: Profile values win, the rest comes from the base
        """
        # Arrange
        (tmp_path / "storage.yaml").write_text(
            'connection:\n  url: "http://prod:8086"\n  token: "t"\n'
        )
        profiles = tmp_path / "config" / "profiles"
        profiles.mkdir(parents=True)
        (profiles / "local.yaml").write_text('connection:\n  url: "http://localhost:8086"\n')

        # Act
        config = load_config("storage.yaml", profile="local", base_path=tmp_path)

        # Assert
        assert config.connection.url == "http://localhost:8086"
        assert config.connection.token == "t"

    def test_missing_profile(self, tmp_path: Path, sample_config_path: Path) -> None:
        """Unknown profiles are reported as missing files."""
        loader = ConfigLoader(base_path=tmp_path)

        with pytest.raises(FileNotFoundError, match="Profile not found"):
            loader.load(sample_config_path, profile="nope")

    def test_shipped_local_profile(self) -> None:
        """
        SCENARIO: Repository config with the local profile
        EXPECTED: Local URL and short TTL, the rest from storage.yaml
        """
        # Arrange
        repo_root = Path(__file__).resolve().parents[2]
        loader = ConfigLoader(base_path=repo_root, environ={"INFLUXDB_TOKEN": "t"})

        # Act
        config = loader.load("config/storage.yaml", profile="local")

        # Assert
        assert config.connection.url == "http://localhost:8086"
        assert config.connection.bucket == "opennms"
        assert config.catalog.ttl_seconds == 5
        assert config.catalog.lookback == "5y"


class TestTokenFromEnvironment:
    """Test cases for INFLUXDB_TOKEN handling."""

    def test_token_taken_from_environment(self) -> None:
        """
        SCENARIO: Config has no token, environment has one
        EXPECTED: Environment token used
        """
        # Arrange
        loader = ConfigLoader(environ={"INFLUXDB_TOKEN": "env-token"})

        # Act
        config = loader.load_from_dict({"connection": {"url": "http://x:8086"}})

        # Assert
        assert config.connection.token == "env-token"
        assert config.connection.url == "http://x:8086"

    def test_file_token_wins(self, sample_config_path: Path) -> None:
        """An explicit token in the file is not overridden."""
        loader = ConfigLoader(environ={"INFLUXDB_TOKEN": "env-token"})

        config = loader.load(sample_config_path)

        assert config.connection.token == "file-token"

    def test_missing_token_fails(self) -> None:
        """
        SCENARIO: Neither config nor environment provide a token
        EXPECTED: ValidationError raised
        """
        loader = ConfigLoader(environ={})

        with pytest.raises(ValidationError):
            loader.load_from_dict({})
