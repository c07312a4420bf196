"""Tests for payoffkit.core.config_schema."""

import pytest
from pydantic import ValidationError

from payoffkit.core.config_schema import (
    CreditCardConfig,
    LoggingConfig,
    MortgageConfig,
    PayoffKitConfig,
    SimulationConfig,
)


class TestPayoffKitConfig:
    def test_defaults(self):
        config = PayoffKitConfig()
        assert config.simulation.max_months == 1200
        assert config.credit_card.minimum_payment_percent == 2.0
        assert config.credit_card.minimum_payment_floor == 25.0
        assert config.mortgage.pmi_ltv_threshold == 80.0
        assert config.logging.level == "WARNING"
        assert config.logging.file is None
        assert config.logging.rotation == "10 MB"

    def test_extra_sections_allowed(self):
        config = PayoffKitConfig.model_validate({"reports": {"currency": "USD"}})
        assert config.model_extra["reports"] == {"currency": "USD"}

    def test_round_trip_through_dict(self):
        data = PayoffKitConfig().model_dump(mode="json")
        assert PayoffKitConfig.model_validate(data) == PayoffKitConfig()


class TestSections:
    def test_max_months_positive(self):
        with pytest.raises(ValidationError):
            SimulationConfig(max_months=0)

    def test_string_coercion(self):
        assert SimulationConfig.model_validate({"max_months": "360"}).max_months == 360

    @pytest.mark.parametrize("percent", [0, -1, 101])
    def test_minimum_percent_range(self, percent):
        with pytest.raises(ValidationError):
            CreditCardConfig(minimum_payment_percent=percent)

    def test_minimum_floor_non_negative(self):
        with pytest.raises(ValidationError):
            CreditCardConfig(minimum_payment_floor=-5)

    def test_front_end_cannot_exceed_back_end(self):
        with pytest.raises(ValidationError, match="front_end_ratio"):
            MortgageConfig(front_end_ratio=40, back_end_ratio=36)

    def test_pmi_threshold_below_100(self):
        with pytest.raises(ValidationError):
            MortgageConfig(pmi_ltv_threshold=100)

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="unknown log level"):
            LoggingConfig(level="chatty")
