"""Shared test fixtures for payoffkit."""

import os
import tempfile

import pytest
from loguru import logger

from payoffkit.financial.models import Debt


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop sinks added by setup_logging (the CLI binds them to captured streams)."""
    yield
    logger.remove()


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "simulation": {"max_months": 600},
        "credit_card": {"minimum_payment_percent": 3.0, "minimum_payment_floor": 35.0},
        "logging": {"level": "info"},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def two_debts():
    """Credit card at 18% and store card at 24%."""
    return [
        Debt("Credit Card", 5_000, 18, 150),
        Debt("Store Card", 3_000, 24, 90),
    ]


@pytest.fixture
def mixed_debts():
    """Three debts whose avalanche and snowball orders disagree."""
    return [
        Debt("Car Loan", 8_000, 6.5, 200),
        Debt("Visa", 2_500, 22.9, 75),
        Debt("Medical", 600, 0, 50),
    ]
