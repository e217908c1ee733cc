"""
Service logger setup

Configures the root logger once per process from LoggingConfig and returns a
named logger for the service.
"""

import logging
import sys
from typing import Optional

from core.config import LoggingConfig, get_settings

_configured = False


def setup_service_logger(service_name: str, config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Setup logging for a service

    Args:
        service_name: Logger name, usually the service package name
        config: Logging config (defaults to global settings)

    Returns:
        Configured logger
    """
    global _configured
    config = config or get_settings().logging

    if not _configured:
        root = logging.getLogger()
        root.setLevel(config.log_level.upper())
        formatter = logging.Formatter(config.log_format)

        if config.enable_console:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(formatter)
            root.addHandler(console)

        if config.log_file:
            file_handler = logging.FileHandler(config.log_file)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)
        _configured = True

    return logging.getLogger(service_name)
