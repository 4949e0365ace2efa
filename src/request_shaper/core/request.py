# src/request_shaper/core/request.py
"""
Запрос, который видят модификаторы.

Модификаторам нужны ровно две возможности запроса - установить заголовок
и установить обработчик предупреждений. Это и есть протокол
ModifiableRequest; APIRequest - его реализация, которую APIClient
создаёт заново для каждого вызова.
"""

from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple, Union, runtime_checkable

from requests.structures import CaseInsensitiveDict

from .warning_handler import WarningHandler


def wire_value(value: str) -> Union[str, bytes]:
    """ASCII значение как есть, остальное - UTF-8 байтами."""
    return value if value.isascii() else value.encode("utf-8")


@runtime_checkable
class ModifiableRequest(Protocol):
    """Минимальный контракт запроса для модификаторов."""

    def set_header(self, name: str, *values: str) -> None:
        """Заменить все значения заголовка ``name``."""
        ...

    def set_warning_handler(self, handler: WarningHandler) -> None:
        """Установить обработчик заголовков Warning ответа."""
        ...


class APIRequest:
    """
    Изменяемый запрос до отправки.

    Заголовки хранятся как имя -> список значений (имена без учёта
    регистра). Заголовок, установленный без значений, остаётся в запросе,
    но на провод не попадает.

    Attributes:
        method: HTTP метод
        url: Полный URL
        params: Query параметры
        body: Тело запроса (сериализуется в JSON, если не bytes/str)
        content_type: Content-Type тела
        warning_handler: Обработчик заголовков Warning ответа

    Example:
        >>> req = APIRequest("GET", "https://api.example.com/api/v1/pods")
        >>> req.set_header("Impersonate-Group", "dev", "ops")
        >>> dict(req.header_items())
        {'Impersonate-Group': 'dev, ops'}
    """

    def __init__(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
        content_type: Optional[str] = None,
        warning_handler: Optional[WarningHandler] = None,
    ):
        self.method = method.upper()
        self.url = url
        self.params: Dict[str, Any] = dict(params) if params else {}
        self.body = body
        self.content_type = content_type
        self.warning_handler = warning_handler
        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()

    def set_header(self, name: str, *values: str) -> None:
        # Удаляем старый ключ, чтобы сохранить регистр последнего вызова
        self.headers.pop(name, None)
        self.headers[name] = list(values)

    def set_warning_handler(self, handler: WarningHandler) -> None:
        self.warning_handler = handler

    def get_header(self, name: str) -> Optional[List[str]]:
        """Значения заголовка или None, если он не устанавливался."""
        values = self.headers.get(name)
        return list(values) if values is not None else None

    def has_header(self, name: str) -> bool:
        return name in self.headers

    def header_items(self) -> Iterator[Tuple[str, str]]:
        """
        Заголовки в читаемой форме (для логов и отладки).

        Несколько значений склеиваются через ", ", заголовки без значений
        пропускаются. На провод уходит header_fields().
        """
        for name, values in self.headers.items():
            if values:
                yield name, ", ".join(values)

    def header_fields(self) -> Iterator[Tuple[str, Union[str, bytes]]]:
        """
        Поля заголовков в том виде, в котором они уходят на провод.

        Каждое значение - отдельное поле: ``Impersonate-Group: dev`` и
        ``Impersonate-Group: ops``, а не ``dev, ops``. Не-ASCII значения
        отдаются как UTF-8 байты (http.client кодирует str только в latin-1).
        """
        for name, values in self.headers.items():
            for value in values:
                yield name, wire_value(value)

    def __repr__(self) -> str:
        return f"APIRequest({self.method} {self.url}, headers={list(self.headers.keys())})"
