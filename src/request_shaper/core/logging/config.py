"""Настройки лога APIClient."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def levelno(self) -> int:
        return logging.getLevelName(self.value)


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Что и куда пишет APIClient.

    Запись на каждый запрос ("Request completed" / "Request failed") идёт
    на INFO/ERROR с полями method, url, status_code, duration_ms и
    impersonate_user, если запрос выполняется от чужого имени. Подробности
    о модификаторах и заголовках пишутся на DEBUG и включаются отдельно.

    Attributes:
        level: Минимальный уровень записей
        format: json, text или colored
        console: Писать в stdout
        file_path: Файл лога с ротацией (None - без файла)
        max_bytes: Размер файла, после которого он ротируется
        backup_count: Сколько старых файлов хранить
        correlation_id: Добавлять X-Correlation-ID запроса в каждую запись
        log_headers: Писать итоговые заголовки запроса (после модификаторов)
        log_modifiers: Писать список применённых модификаторов

    Example:
        >>> LoggingConfig.create(level="DEBUG", format="json", log_modifiers=True)
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    console: bool = True
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    correlation_id: bool = True
    log_headers: bool = False
    log_modifiers: bool = False

    def __post_init__(self):
        if not self.console and not self.file_path:
            raise ValueError("LoggingConfig needs console=True or a file_path")
        if self.max_bytes < 0 or self.backup_count < 0:
            raise ValueError("max_bytes and backup_count must not be negative")

    @classmethod
    def create(cls, level: str = "INFO", format: str = "text", **kwargs) -> "LoggingConfig":
        """Конфиг из строковых level/format (регистр не важен)."""
        return cls(level=LogLevel(level.upper()), format=LogFormat(format.lower()), **kwargs)
