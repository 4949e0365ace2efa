"""
Иерархия исключений request-shaper.

Цепочка модификаторов тотальна и своих исключений не бросает. Всё, что
описано здесь, относится к транспорту (APIClient):

- NetworkError - запрос не дошёл до сервера
- HTTPError - сервер ответил ошибкой (в т.ч. отказ в имперсонации: 403)
- InvalidResponseError / ResponseTooLargeError - ответ нельзя принять
"""

from typing import Optional

import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class APIClientException(Exception):
    """Базовое исключение APIClient."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СЕТЕВЫЕ ОШИБКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NetworkError(APIClientException):
    """Сетевая ошибка."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class TimeoutError(NetworkError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout: Значение таймаута
    """

    def __init__(self, message: str, url: str, timeout: Optional[float] = None):
        self.timeout = timeout
        msg = message
        if timeout:
            msg += f" (timeout: {timeout}s)"
        super().__init__(msg, url)

class ConnectionError(NetworkError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - Network unreachable
    """
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ СЕРВЕРА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPError(APIClientException):
    """
    Базовая HTTP ошибка.

    Args:
        status_code: HTTP статус
        url: URL
        message: Сообщение (обычно начало тела ответа)
    """

    def __init__(self, status_code: int, url: str, message: str = ""):
        self.status_code = status_code
        self.url = url

        msg = f"HTTP {status_code} error for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg)

class BadRequestError(HTTPError):
    """400 Bad Request."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(400, url, message)

class UnauthorizedError(HTTPError):
    """401 Unauthorized."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(401, url, message)

class ForbiddenError(HTTPError):
    """
    403 Forbidden.

    Так же сервер отвечает, если текущей учётной записи не разрешено
    выдавать себя за пользователя/группы из заголовков Impersonate-*.
    """

    def __init__(self, url: str, message: str = ""):
        super().__init__(403, url, message)

class NotFoundError(HTTPError):
    """404 Not Found."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(404, url, message)

class ConflictError(HTTPError):
    """409 Conflict (например, устаревший resourceVersion при update)."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(409, url, message)

class ServerError(HTTPError):
    """5xx ошибка сервера."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОТВЕТ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class InvalidResponseError(APIClientException):
    """
    Невалидный ответ.

    Примеры:
    - Битый JSON
    - Неожиданный формат данных
    """
    pass

class ResponseTooLargeError(APIClientException):
    """
    Ответ слишком большой.

    Args:
        size: Размер ответа (bytes)
        max_size: Максимально допустимый размер
        url: URL
    """

    def __init__(self, size: int, max_size: int, url: str):
        self.size = size
        self.max_size = max_size
        self.url = url

        msg = (
            f"Response too large: {size} bytes "
            f"(max: {max_size}) for {url}"
        )
        super().__init__(msg)

class InvalidRequestError(APIClientException):
    """
    Запрос нельзя записать в HTTP.

    Например, имя заголовка с не-ASCII символами или значение с переводом
    строки. До сервера такой запрос не доходит.
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class InvalidWarningHeaderError(APIClientException):
    """
    Значение заголовка Warning не соответствует RFC 7234 §5.5.

    Args:
        message: Что именно не так
        header: Исходное значение заголовка
    """

    def __init__(self, message: str, header: str):
        self.header = header
        super().__init__(f"{message}: {header!r}")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СПЕЦИАЛЬНЫЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(APIClientException):
    """Ошибка конфигурации."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def error_for_response(response: requests.Response) -> HTTPError:
    """
    Построить HTTPError по ответу с ошибочным статусом.

    Args:
        response: Ответ сервера (status_code >= 400)

    Returns:
        Исключение, соответствующее статус коду
    """
    url = str(response.url)
    message = response.text[:200] if response.text else ""
    status_code = response.status_code

    error_cls = _STATUS_ERRORS.get(status_code)
    if error_cls is not None:
        return error_cls(url, message)
    if 500 <= status_code < 600:
        return ServerError(status_code, url, message)
    return HTTPError(status_code, url, message)


def classify_requests_exception(
    exc: Exception,
    url: str
) -> APIClientException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.Timeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
    """

    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError("Connection error", url)

    elif isinstance(exc, requests.exceptions.HTTPError):
        if exc.response is not None:
            return error_for_response(exc.response)
        return HTTPError(0, url, str(exc))

    else:
        # Неизвестная ошибка - оборачиваем
        return APIClientException(str(exc))
