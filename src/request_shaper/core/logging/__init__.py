"""
Лог APIClient.

Example:
    >>> from request_shaper.core.logging import LoggingConfig
    >>> config = LoggingConfig.create(level="DEBUG", format="json", log_headers=True)
    >>> client = APIClient(config=ClientConfig.create(base_url=url, logging=config))
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import ClientLogger, set_correlation_id, clear_correlation_id
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter

__all__ = [
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "ClientLogger",
    "set_correlation_id",
    "clear_correlation_id",
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
]
