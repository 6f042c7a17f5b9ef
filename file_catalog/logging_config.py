# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""
Centralized logging configuration for the file catalog.

The library only creates module loggers; handlers belong to the host
application. configure_logging() sets how chatty those loggers are.
"""
import logging
from typing import Optional

from file_catalog.config import LoggingConfig

# Every module logger lives under the package logger
CATALOG_LOGGERS = [
    'file_catalog',
]


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Apply the configured level to every library logger

    Raises:
        ValueError: If the level name is unknown
    """
    config = config or LoggingConfig()
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{config.level}'")

    for logger_name in CATALOG_LOGGERS:
        logging.getLogger(logger_name).setLevel(level)
