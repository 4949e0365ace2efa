# src/request_shaper/core/warning_handler.py
"""
Обработчики заголовков Warning (RFC 7234 §5.5).

Модификатор SetWarningHandler лишь подставляет обработчик в запрос;
разбор заголовков и вызов обработчика делает APIClient после ответа.
"""

import logging
import sys
import threading
from abc import ABC, abstractmethod
from typing import Iterable, List, NamedTuple, Optional, Set, TextIO, Tuple

from .exceptions import InvalidWarningHeaderError

logger = logging.getLogger("request_shaper.warnings")


class WarningHeader(NamedTuple):
    """Один разобранный warning-value."""
    code: int
    agent: str
    text: str


class WarningHandler(ABC):
    """Получатель предупреждений из ответов сервера."""

    @abstractmethod
    def handle_warning_header(self, code: int, agent: str, text: str) -> None:
        """Вызывается для каждого warning-value ответа."""
        pass


class NoWarnings(WarningHandler):
    """Игнорирует все предупреждения."""

    def handle_warning_header(self, code: int, agent: str, text: str) -> None:
        pass


class LoggingWarningHandler(WarningHandler):
    """
    Пишет предупреждения в лог ``request_shaper.warnings``.

    Используется APIClient по умолчанию. Учитываются только коды 299
    (Miscellaneous persistent warning), остальные коды серверы API
    не используют для сообщений пользователю.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def handle_warning_header(self, code: int, agent: str, text: str) -> None:
        if code != 299 or not text:
            return
        self._log.warning(text, extra={"warning_code": code, "warning_agent": agent})


class WarningWriter(WarningHandler):
    """
    Выводит предупреждения в поток (по умолчанию stderr).

    Args:
        stream: Куда писать
        deduplicate: Печатать каждый текст только один раз
        color: Подсвечивать префикс "Warning:" (ANSI)

    Example:
        >>> writer = WarningWriter(deduplicate=True)
        >>> writer.handle_warning_header(299, "-", "v1beta1 is deprecated")
        >>> writer.warning_count
        1
    """

    YELLOW = "\033[33;1m"
    RESET = "\033[0m"

    def __init__(self, stream: Optional[TextIO] = None, deduplicate: bool = False, color: bool = False):
        self.stream = stream or sys.stderr
        self.deduplicate = deduplicate
        self.color = color
        self._lock = threading.Lock()
        self._written: Set[str] = set()
        self._count = 0

    def handle_warning_header(self, code: int, agent: str, text: str) -> None:
        if code != 299 or not text:
            return

        with self._lock:
            if self.deduplicate:
                if text in self._written:
                    return
                self._written.add(text)

            prefix = "Warning:"
            if self.color:
                prefix = f"{self.YELLOW}{prefix}{self.RESET}"
            self.stream.write(f"{prefix} {text}\n")
            self._count += 1

    @property
    def warning_count(self) -> int:
        """Сколько предупреждений было выведено."""
        with self._lock:
            return self._count


def _read_quoted(header: str, pos: int) -> Tuple[str, int]:
    """Прочитать quoted-string начиная с открывающей кавычки в ``pos``."""
    if pos >= len(header) or header[pos] != '"':
        raise InvalidWarningHeaderError("expected quoted string", header)

    chars = []
    i = pos + 1
    while i < len(header):
        c = header[i]
        if c == "\\":
            if i + 1 >= len(header):
                break
            chars.append(header[i + 1])
            i += 2
            continue
        if c == '"':
            return "".join(chars), i + 1
        chars.append(c)
        i += 1

    raise InvalidWarningHeaderError("unterminated quoted string", header)


def _parse_warning_value(header: str) -> Tuple[List[WarningHeader], Optional[InvalidWarningHeaderError]]:
    warnings = []
    pos = 0
    length = len(header)

    while True:
        while pos < length and header[pos] in " \t":
            pos += 1
        if pos >= length:
            return warnings, None

        # warn-code: три цифры
        code_str = header[pos:pos + 3]
        if len(code_str) != 3 or not code_str.isdigit():
            return warnings, InvalidWarningHeaderError("invalid warn-code", header)
        pos += 3
        if pos >= length or header[pos] != " ":
            return warnings, InvalidWarningHeaderError("missing space after warn-code", header)
        pos += 1

        # warn-agent: до следующего пробела
        end = header.find(" ", pos)
        if end <= pos:
            return warnings, InvalidWarningHeaderError("invalid warn-agent", header)
        agent = header[pos:end]
        pos = end + 1

        try:
            text, pos = _read_quoted(header, pos)
        except InvalidWarningHeaderError as e:
            return warnings, e

        # необязательный warn-date
        if pos + 1 < length and header[pos] == " " and header[pos + 1] == '"':
            try:
                _, pos = _read_quoted(header, pos + 1)
            except InvalidWarningHeaderError as e:
                return warnings, e

        warnings.append(WarningHeader(int(code_str), agent, text))

        while pos < length and header[pos] in " \t":
            pos += 1
        if pos >= length:
            return warnings, None
        if header[pos] != ",":
            return warnings, InvalidWarningHeaderError("expected comma between warning values", header)
        pos += 1


def parse_warning_headers(
    headers: Iterable[str],
) -> Tuple[List[WarningHeader], List[InvalidWarningHeaderError]]:
    """
    Разобрать значения заголовков Warning.

    Каждое значение может содержать несколько warning-value через запятую.
    Ошибка в одном значении прекращает разбор только этого значения.

    Args:
        headers: Значения заголовка Warning

    Returns:
        (предупреждения, ошибки разбора)

    Example:
        >>> parse_warning_headers(['299 - "deprecated", 299 - "again"'])
        ([WarningHeader(code=299, agent='-', text='deprecated'), WarningHeader(code=299, agent='-', text='again')], [])
    """
    results: List[WarningHeader] = []
    errors: List[InvalidWarningHeaderError] = []
    for header in headers:
        warnings, error = _parse_warning_value(header)
        results.extend(warnings)
        if error is not None:
            errors.append(error)
    return results, errors


def handle_warnings(handler: Optional[WarningHandler], headers: Iterable[str]) -> List[WarningHeader]:
    """
    Разобрать заголовки и передать каждое предупреждение обработчику.

    Ошибки разбора пишутся в лог на уровне DEBUG и не прерывают обработку.

    Returns:
        Разобранные предупреждения
    """
    warnings, errors = parse_warning_headers(headers)
    for error in errors:
        logger.debug("Skipping malformed warning header", extra={"error": str(error)})

    if handler is not None:
        for warning in warnings:
            handler.handle_warning_header(warning.code, warning.agent, warning.text)
    return warnings
