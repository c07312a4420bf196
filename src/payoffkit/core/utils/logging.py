"""
Logging configuration using loguru.

The calculators log through loguru directly: run summaries at debug/info and
non-convergence at warning. The CLI calls setup_logging() with the validated
``logging`` config section; library users can do the same or add loguru sinks
themselves.
"""

import sys

from loguru import logger

from payoffkit.core.config_schema import LoggingConfig

CONSOLE_FORMAT = "<level>[{level.name}]</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"


def setup_logging(settings: LoggingConfig | None = None, level: str | None = None) -> None:
    """
    Replace loguru's sinks with a stderr sink and, when configured, a log file.

    Args:
        settings: The ``logging`` config section. Defaults to LoggingConfig().
        level: Overrides ``settings.level`` (e.g. from --log-level).
    """
    settings = settings or LoggingConfig()
    level = (level or settings.level).upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if settings.file:
        logger.add(
            settings.file,
            level=level,
            format=FILE_FORMAT,
            rotation=settings.rotation,
            retention=settings.retention,
        )
        logger.debug(f"Logging to {settings.file} at {level}")
