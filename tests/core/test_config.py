"""Tests for payoffkit.core.config."""

import json
import os

import pytest
import yaml

from payoffkit.core.config import Config, get_config, reset_config
from payoffkit.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_singleton():
    """Reset config singleton between tests."""
    reset_config()
    yield
    reset_config()


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.get("simulation.max_months") == 1200
        assert config.get("credit_card.minimum_payment_percent") == 2.0
        assert config.get("mortgage.front_end_ratio") == 28.0
        assert config.get("logging.level") == "WARNING"

    def test_yaml_config_file(self, tmp_config_file):
        config = Config(config_file=tmp_config_file)
        assert config.get("simulation.max_months") == 600
        assert config.get("credit_card.minimum_payment_floor") == 35.0
        # Untouched sections keep their defaults
        assert config.get("mortgage.back_end_ratio") == 36.0

    def test_json_config_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.json")
        with open(config_path, "w") as f:
            json.dump({"mortgage": {"pmi_ltv_threshold": 78}}, f)

        config = Config(config_file=config_path)
        assert config.get("mortgage.pmi_ltv_threshold") == 78

    def test_empty_yaml_file(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "empty.yaml")
        open(config_path, "w").close()
        assert Config(config_file=config_path).get("simulation.max_months") == 1200

    def test_missing_file(self, tmp_dir):
        with pytest.raises(ConfigurationError, match="not found"):
            Config(config_file=os.path.join(tmp_dir, "missing.yaml"))

    def test_unsupported_file_type(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.toml")
        with open(config_path, "w") as f:
            f.write("[simulation]\nmax_months = 10\n")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            Config(config_file=config_path)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PAYOFFKIT_SIMULATION__MAX_MONTHS", "600")
        config = Config()
        assert config.get("simulation.max_months") == "600"
        assert config.validated().simulation.max_months == 600

    def test_env_overrides_file(self, tmp_config_file, monkeypatch):
        monkeypatch.setenv("PAYOFFKIT_CREDIT_CARD__MINIMUM_PAYMENT_PERCENT", "4")
        config = Config(config_file=tmp_config_file)
        assert config.validated().credit_card.minimum_payment_percent == 4.0

    def test_custom_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MYAPP_LOGGING__LEVEL", "debug")
        config = Config(env_prefix="MYAPP_")
        assert config.validated().logging.level == "DEBUG"

    def test_get_missing_key(self):
        config = Config()
        assert config.get("nonexistent.key") is None
        assert config.get("nonexistent.key", "fallback") == "fallback"

    def test_set(self):
        config = Config()
        config.set("custom.nested.value", 42)
        assert config.get("custom.nested.value") == 42

    def test_extra_defaults(self):
        config = Config(defaults={"simulation": {"max_months": 360}, "custom": {"key": "value"}})
        assert config.get("simulation.max_months") == 360
        assert config.get("custom.key") == "value"


class TestValidated:
    def test_typed_model(self, tmp_config_file):
        settings = Config(config_file=tmp_config_file).validated()
        assert settings.simulation.max_months == 600
        assert settings.credit_card.minimum_payment_percent == 3.0
        assert settings.logging.level == "INFO"

    def test_invalid_value(self, tmp_dir):
        config_path = os.path.join(tmp_dir, "config.yaml")
        with open(config_path, "w") as f:
            yaml.dump({"simulation": {"max_months": 0}}, f)

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            Config(config_file=config_path).validated()

    def test_front_end_above_back_end(self):
        config = Config(defaults={"mortgage": {"front_end_ratio": 40, "back_end_ratio": 36}})
        with pytest.raises(ConfigurationError):
            config.validated()


class TestGetConfig:
    def test_singleton(self):
        c1 = get_config()
        c2 = get_config()
        assert c1 is c2

    def test_reset(self):
        c1 = get_config()
        reset_config()
        c2 = get_config()
        assert c1 is not c2

    def test_first_call_wins(self, tmp_config_file):
        config = get_config(config_file=tmp_config_file)
        assert get_config().get("simulation.max_months") == 600
        assert get_config() is config
