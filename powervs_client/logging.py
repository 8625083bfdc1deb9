"""Logging configuration for powervs-client.

The package logs through loguru and is silent by default, as a library
should be. Call ``configure_logging`` (the CLI does) to see its output.

Example:
    from powervs_client.logging import configure_logging

    configure_logging(level="DEBUG")
"""
from __future__ import annotations

import sys
from typing import Literal

from loguru import logger

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: LogLevel = "INFO", debug: bool = False) -> None:
    """Enable package logging on stderr.

    Args:
        level: Minimum log level
        debug: Force DEBUG level (Power VS request tracing)
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level="DEBUG" if debug else level,
        colorize=True,
    )
    logger.enable("powervs_client")
