"""
ClientLogger - лог APIClient.

Поля записи передаются именованными аргументами и маскируются до записи,
так что токены из заголовков не попадают в лог. Correlation ID текущего
запроса хранится в thread-local и добавляется в каждую запись.
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List, Optional

from ...utils.masking import mask_sensitive_data
from .config import LoggingConfig
from .formatters import get_formatter

_request_context = threading.local()


def set_correlation_id(correlation_id: str) -> None:
    """Запомнить correlation ID запроса, который отправляет текущий поток."""
    _request_context.correlation_id = correlation_id


def clear_correlation_id() -> None:
    _request_context.__dict__.pop("correlation_id", None)


class _CorrelationIdFilter(logging.Filter):

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = getattr(_request_context, "correlation_id", None)
        if correlation_id:
            record.correlation_id = correlation_id
        return True


class ClientLogger:
    """
    Логгер, который APIClient создаёт из ClientConfig.logging.

    Имя логгера - ``request_shaper.<host>``; записи не уходят в root logger.

    Example:
        >>> logger = ClientLogger(LoggingConfig.create(format="json"), name="request_shaper.api")
        >>> logger.info("Request completed", method="GET", impersonate_user="alice")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "request_shaper"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self.config.level.levelno)
        self._logger.propagate = False
        self._logger.handlers.clear()
        for handler in self._build_handlers():
            self._logger.addHandler(handler)

    def _build_handlers(self) -> List[logging.Handler]:
        handlers: List[logging.Handler] = []
        if self.config.console:
            handlers.append(logging.StreamHandler(sys.stdout))
        if self.config.file_path:
            Path(self.config.file_path).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(RotatingFileHandler(
                self.config.file_path,
                maxBytes=self.config.max_bytes,
                backupCount=self.config.backup_count,
                encoding="utf-8",
            ))

        formatter = get_formatter(self.config.format.value)
        for handler in handlers:
            handler.setLevel(self.config.level.levelno)
            handler.setFormatter(formatter)
            if self.config.correlation_id:
                handler.addFilter(_CorrelationIdFilter())
        return handlers

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def log(self, level: int, message: str, **fields: Any) -> None:
        """Записать сообщение с полями; после close() ничего не делает."""
        if self._closed:
            return
        self._logger.log(level, message, extra=mask_sensitive_data(fields))

    def debug(self, message: str, **fields: Any) -> None:
        self.log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.log(logging.INFO, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self.log(logging.ERROR, message, **fields)

    def close(self) -> None:
        """Закрыть файлы и снять обработчики. Повторный вызов ничего не делает."""
        if self._closed:
            return
        for handler in self._logger.handlers[:]:
            handler.close()
            self._logger.removeHandler(handler)
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
