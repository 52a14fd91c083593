"""
Logging configuration
"""
import logging
import os
from typing import Any

import structlog


def setup_logging(service_name: str, level: str = "INFO") -> Any:
    """
    Set up structured logging

    Args:
        service_name: Name of the service
        level: Standard logging level name

    Returns:
        Logger bound with service and environment
    """
    # Configure standard logging
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(message)s'
    )

    # Configure structlog

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return get_logger(service_name)


def get_logger(name: str) -> Any:
    # Stays lazy until first use, so module-level loggers pick up setup_logging()
    return structlog.get_logger(
        name,
        service=name,
        environment=os.getenv('ENVIRONMENT', 'dev'),
    )
