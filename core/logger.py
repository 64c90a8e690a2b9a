"""
Service Logger Setup

Configures named service loggers from LoggingConfig.

Usage:
    from core.logger import setup_service_logger

    logger = setup_service_logger("order_service")
    logger.info("Order repository ready")
"""

import logging
import sys
from typing import Optional

from core.config.logging_config import LoggingConfig


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure and return the logger for a service.

    Calling it again for the same service reuses the existing handlers.

    Args:
        service_name: Logger name, usually the service package name
        level: Log level override (defaults to config.log_level)
        log_file: Optional file to log to in addition to the console
        config: Logging configuration (defaults to LoggingConfig.from_env())

    Returns:
        Configured logger
    """
    config = config or LoggingConfig.from_env()
    logger = logging.getLogger(service_name)
    logger.setLevel((level or config.log_level).upper())

    if getattr(logger, "_service_configured", False):
        return logger

    formatter = logging.Formatter(config.log_format)

    if config.enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    log_file = log_file or config.log_file
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    logger._service_configured = True
    return logger
