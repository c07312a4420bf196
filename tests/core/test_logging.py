"""Tests for payoffkit.core.utils.logging."""

import os

from loguru import logger

from payoffkit.core.config import Config
from payoffkit.core.config_schema import LoggingConfig
from payoffkit.core.utils.logging import setup_logging


def test_setup_logging_to_file(tmp_dir):
    log_file = os.path.join(tmp_dir, "payoffkit.log")
    setup_logging(LoggingConfig(level="info", file=log_file))

    logger.debug("hidden message")
    logger.info("visible message")
    logger.remove()

    with open(log_file) as f:
        content = f.read()
    assert "visible message" in content
    assert "hidden message" not in content


def test_level_override(tmp_dir):
    log_file = os.path.join(tmp_dir, "payoffkit.log")
    setup_logging(LoggingConfig(level="error", file=log_file), level="debug")

    logger.debug("debug message")
    logger.remove()

    with open(log_file) as f:
        assert "debug message" in f.read()


def test_defaults_to_warning(capsys):
    setup_logging()
    logger.info("quiet info")
    logger.warning("loud warning")

    captured = capsys.readouterr()
    assert "quiet info" not in captured.err
    assert "loud warning" in captured.err


def test_uses_config_file_section(tmp_dir, capsys):
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        f.write("logging:\n  level: error\n")

    setup_logging(Config(config_file=config_path).validated().logging)
    logger.warning("quiet warning")
    logger.error("loud error")

    captured = capsys.readouterr()
    assert "quiet warning" not in captured.err
    assert "loud error" in captured.err
