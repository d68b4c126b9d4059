"""Unit tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from renewal_app.config.defaults import get_default_config
from renewal_app.config.loader import ConfigLoader
from renewal_app.config.validation import ConfigValidator


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        config = get_default_config()
        assert config.renewal.max_retries == 3
        assert config.renewal.cooldown_units == 10
        assert config.authorization.mode == "open"
        assert config.controller.allow_overwrite is False
        assert config.store.backend == "memory"
        assert config.events.sink == "memory"


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path)
        assert loader.config_dir == tmp_path

    def test_merge_config_defaults_only(self, tmp_path: Path) -> None:
        config = ConfigLoader.create(tmp_path).merge_config()

        assert config["renewal"] == {"max_retries": 3, "cooldown_units": 10}
        assert config["store"]["backend"] == "memory"

    def test_file_overrides_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "renewal.yaml").write_text(yaml.safe_dump({
            "renewal": {"max_retries": 5},
            "authorization": {"mode": "owner"},
        }))

        config = ConfigLoader.create(tmp_path).merge_config()

        assert config["renewal"]["max_retries"] == 5
        assert config["renewal"]["cooldown_units"] == 10
        assert config["authorization"]["mode"] == "owner"

    def test_overrides_win_over_file(self, tmp_path: Path) -> None:
        (tmp_path / "renewal.yaml").write_text(yaml.safe_dump({"renewal": {"max_retries": 5}}))

        config = ConfigLoader.create(tmp_path).merge_config({"renewal": {"max_retries": 1}})

        assert config["renewal"]["max_retries"] == 1

    def test_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / "renewal.yaml").write_text("")
        config = ConfigLoader.create(tmp_path).merge_config()
        assert config["renewal"]["max_retries"] == 3


class TestConfigValidator:
    """Test suite for configuration validator."""

    def test_defaults_are_valid(self, tmp_path: Path) -> None:
        config = ConfigLoader.create(tmp_path).merge_config()
        assert ConfigValidator.validate_config(config) == []

    @pytest.mark.parametrize("params", [
        {"max_retries": -1},
        {"cooldown_units": "ten"},
        {"max_retries": True},
    ])
    def test_invalid_renewal_params(self, params) -> None:
        errors = ConfigValidator.validate_renewal_params(params)
        assert len(errors) == 1
        assert errors[0].message == "Must be a non-negative integer"

    def test_invalid_auth_mode(self) -> None:
        errors = ConfigValidator.validate_authorization_params({"mode": "everyone"})
        assert [e.field for e in errors] == ["mode"]

    def test_agent_mode_requires_admin(self) -> None:
        errors = ConfigValidator.validate_authorization_params({"mode": "agent", "admin": ""})
        assert [e.field for e in errors] == ["admin"]
        assert ConfigValidator.validate_authorization_params({"mode": "agent", "admin": "root"}) == []

    def test_invalid_store_and_sink(self) -> None:
        assert ConfigValidator.validate_store_params({"backend": "redis"})[0].field == "backend"
        assert ConfigValidator.validate_event_params({"sink": "kafka"})[0].field == "sink"
        assert ConfigValidator.validate_event_params({"format": "xml"})[0].field == "format"

    def test_invalid_controller_and_logging(self) -> None:
        assert ConfigValidator.validate_controller_params({"allow_overwrite": "yes"})[0].field == "allow_overwrite"
        assert ConfigValidator.validate_logging_params({"level": "LOUD"})[0].field == "level"
        assert ConfigValidator.validate_logging_params({"include_caller": "yes"})[0].field == "include_caller"

    def test_validate_config_prefixes_sections(self) -> None:
        errors = ConfigValidator.validate_config({
            "renewal": {"max_retries": -2},
            "store": {"backend": "sqlite", "db_path": ""},
        })
        assert {e.field for e in errors} == {"renewal.max_retries", "store.db_path"}
