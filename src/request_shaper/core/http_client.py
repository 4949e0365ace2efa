# src/request_shaper/core/http_client.py
import json
import time
import uuid
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING
from urllib.parse import quote, urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3 import HTTPHeaderDict

from ..utils.masking import mask_headers
from .config import ClientConfig
from .exceptions import (
    InvalidRequestError,
    InvalidResponseError,
    ResponseTooLargeError,
    classify_requests_exception,
    error_for_response,
)
from .headers import IMPERSONATE_USER_HEADER, WARNING_HEADER
from .logging.logger import clear_correlation_id, set_correlation_id
from .modifiers import Impersonate, SetHeader, apply_modifiers
from .options import (
    CreateOptions,
    DeleteOptions,
    GetOptions,
    ListOptions,
    Options,
    PatchOptions,
    UpdateOptions,
)
from .request import APIRequest
from .session_manager import ThreadSafeSessionManager
from .warning_handler import LoggingWarningHandler, WarningHandler, handle_warnings

if TYPE_CHECKING:
    from .logging import ClientLogger

CORRELATION_ID_HEADER = "X-Correlation-ID"


class PatchType(str, Enum):
    """Content-Type патча."""
    JSON = "application/json-patch+json"
    MERGE = "application/merge-patch+json"
    STRATEGIC_MERGE = "application/strategic-merge-patch+json"
    APPLY = "application/apply-patch+yaml"


class APIClient:
    """
    HTTP клиент API с цепочкой модификаторов запроса.

    Каждый вызов создаёт новый APIRequest и перед отправкой применяет к нему:
        1. заголовки по умолчанию (Accept, X-Correlation-ID, config.headers);
        2. имперсонацию из config.impersonate, если она задана;
        3. модификаторы из опций вызова, по порядку.

    Затем запрос отправляется через thread-local requests.Session, а
    заголовки Warning ответа передаются обработчику предупреждений запроса.

    Example:
        >>> client = APIClient(base_url="https://cluster.example.com:6443")
        >>> as_alice = Impersonate(ImpersonationConfig(username="alice", groups=["dev"]))
        >>> pod = client.get(
        ...     "/api/v1/namespaces/default/pods", "web-0",
        ...     GetOptions(request_modifiers=[as_alice]),
        ... )
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        warning_handler: Optional[WarningHandler] = None,
        **kwargs
    ):
        """
        Initialize API client.

        Args:
            base_url: Адрес API сервера (если config не передан)
            config: ClientConfig instance
            warning_handler: Обработчик предупреждений по умолчанию
                (LoggingWarningHandler, если не указан)
            **kwargs: Параметры для ClientConfig.create
        """
        if config is None:
            config = ClientConfig.create(base_url=base_url, **kwargs)

        object.__setattr__(self, '_config', config)
        object.__setattr__(self, '_warning_handler', warning_handler or LoggingWarningHandler())

        logger_instance: Optional['ClientLogger'] = None
        if config.logging:
            from .logging import ClientLogger
            logger_name = "request_shaper"
            if config.base_url:
                netloc = urlparse(config.base_url).netloc
                if netloc:
                    logger_name = f"request_shaper.{netloc}"
            logger_instance = ClientLogger(config=config.logging, name=logger_name)
        object.__setattr__(self, '_logger', logger_instance)

        object.__setattr__(
            self,
            '_session_manager',
            ThreadSafeSessionManager(session_factory=self._create_session)
        )
        object.__setattr__(self, '_initialized', True)

    def __setattr__(self, name, value):
        """Запретить изменение после init (immutability)."""
        if hasattr(self, '_initialized'):
            raise RuntimeError(
                f"Cannot modify '{name}' - APIClient is immutable. "
                f"Create new instance instead."
            )
        object.__setattr__(self, name, value)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _create_session(self) -> requests.Session:
        """Create configured session."""
        session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=self._config.pool.pool_connections,
            pool_maxsize=self._config.pool.pool_maxsize,
            pool_block=self._config.pool.pool_block,
            max_retries=0,
        )
        session.mount('http://', adapter)
        session.mount('https://', adapter)

        session.headers['User-Agent'] = self._config.user_agent
        session.verify = self._config.security.verify_ssl
        return session

    def close(self) -> None:
        """
        Закрывает сессии всех потоков и логгер.

        Safe to call multiple times.
        """
        if self._logger is not None:
            self._logger.close()
        self._session_manager.close_all()

    # ==================== Построение запроса ====================

    def _build_url(self, path: str, name: Optional[str] = None) -> str:
        """Склеить base_url, путь ресурса и (экранированное) имя объекта."""
        url = path
        if name:
            url = f"{path.rstrip('/')}/{quote(name, safe='')}"
        if url.startswith(("http://", "https://")):
            return url

        base = self._config.base_url
        if base:
            return f"{base}/{url.lstrip('/')}"
        return url

    def _default_modifiers(self, correlation_id: str) -> list:
        modifiers = [
            SetHeader("Accept", "application/json"),
            SetHeader(CORRELATION_ID_HEADER, correlation_id),
        ]
        modifiers.extend(SetHeader(name, value) for name, value in self._config.headers.items())
        if self._config.impersonate is not None:
            modifiers.append(Impersonate(self._config.impersonate))
        return modifiers

    def new_request(
        self,
        method: str,
        path: str,
        name: Optional[str] = None,
        options: Optional[Options] = None,
        body: Any = None,
        content_type: Optional[str] = None,
    ) -> APIRequest:
        """
        Построить запрос и применить к нему все модификаторы.

        Ничего не отправляет; полезно, чтобы посмотреть итоговые заголовки.

        Args:
            method: HTTP метод
            path: Путь ресурса или полный URL
            name: Имя объекта (добавляется к пути)
            options: Опции вызова (модификаторы и query параметры)
            body: Тело запроса
            content_type: Content-Type тела

        Returns:
            Готовый к отправке APIRequest
        """
        options = options if options is not None else Options()
        request = APIRequest(
            method,
            self._build_url(path, name),
            params=options.to_params(),
            body=body,
            content_type=content_type,
            warning_handler=self._warning_handler,
        )

        default_modifiers = self._default_modifiers(str(uuid.uuid4()))
        apply_modifiers(request, default_modifiers)
        apply_modifiers(request, options.request_modifiers)

        if self._logger and self._config.logging.log_modifiers:
            self._logger.debug(
                "Request modifiers applied",
                modifiers=[repr(m) for m in list(default_modifiers) + list(options.request_modifiers)],
                **self._log_fields(request)
            )
        return request

    # ==================== Отправка ====================

    @staticmethod
    def _encode_body(request: APIRequest) -> Optional[bytes]:
        body = request.body
        if body is None:
            return None
        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            return body.encode('utf-8')
        return json.dumps(body).encode('utf-8')

    def _decode(self, response: requests.Response, url: str) -> Optional[Dict[str, Any]]:
        max_size = self._config.security.max_response_size
        content_length = response.headers.get('Content-Length')
        if content_length and content_length.isdigit() and int(content_length) > max_size:
            raise ResponseTooLargeError(int(content_length), max_size, url)
        if len(response.content) > max_size:
            raise ResponseTooLargeError(len(response.content), max_size, url)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError(f"Invalid JSON in response from {url}: {e}") from e

    def _prepare(self, session: requests.Session, request: APIRequest,
                 data: Optional[bytes]) -> requests.PreparedRequest:
        """
        Подготовить запрос для session.send.

        Заголовки сессии (User-Agent, Accept-Encoding ...) остаются, если
        запрос не задаёт заголовок с тем же именем. Заголовки запроса
        кладутся в HTTPHeaderDict по одному полю на значение, так что
        ``Impersonate-Group`` с двумя группами уходит двумя полями.
        """
        prepared = session.prepare_request(requests.Request(
            method=request.method,
            url=request.url,
            params=request.params or None,
            data=data,
        ))

        fields = HTTPHeaderDict()
        for name, value in prepared.headers.items():
            if not request.has_header(name):
                fields.add(name, value)
        for name, value in request.header_fields():
            fields.add(name, value)
        if data is not None and 'Content-Type' not in fields:
            fields.add('Content-Type', request.content_type or 'application/json')

        prepared.headers = fields
        return prepared

    def _log_fields(self, request: APIRequest) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"method": request.method, "url": request.url}
        user = request.get_header(IMPERSONATE_USER_HEADER)
        if user is not None:
            fields["impersonate_user"] = user[0] if user else ""
        return fields

    def send(self, request: APIRequest) -> Optional[Dict[str, Any]]:
        """
        Отправить подготовленный запрос.

        Args:
            request: Запрос из new_request (модификаторы уже применены)

        Returns:
            Декодированное JSON тело ответа или None для пустого тела

        Raises:
            NetworkError: Запрос не дошёл до сервера
            InvalidRequestError: Заголовки запроса нельзя записать в HTTP
            HTTPError: Сервер ответил статусом >= 400
            InvalidResponseError: Тело ответа не JSON
            ResponseTooLargeError: Ответ больше security.max_response_size
        """
        data = self._encode_body(request)
        correlation_id = (request.get_header(CORRELATION_ID_HEADER) or [""])[0]
        log_fields = self._log_fields(request)
        start_time = time.time()

        if self._logger:
            set_correlation_id(correlation_id)
            if self._config.logging.log_headers:
                self._logger.debug(
                    "Request prepared",
                    headers=mask_headers(dict(request.header_items())),
                    **log_fields
                )

        try:
            try:
                session = self._session_manager.get_session()
                prepared = self._prepare(session, request, data)
                settings = session.merge_environment_settings(prepared.url, {}, None, None, None)
                response = session.send(prepared, timeout=self._config.timeout.as_tuple(), **settings)
            except requests.exceptions.RequestException as e:
                error = classify_requests_exception(e, request.url)
                self._log_failure(error, log_fields)
                raise error from e
            except (UnicodeError, ValueError) as e:
                # http.client отклоняет имена/значения заголовков, которые нельзя записать
                error = InvalidRequestError(f"Cannot send request headers: {e}", request.url)
                self._log_failure(error, log_fields)
                raise error from e

            warning = response.headers.get(WARNING_HEADER)
            if warning:
                handle_warnings(request.warning_handler, [warning])

            duration_ms = round((time.time() - start_time) * 1000, 2)

            if response.status_code >= 400:
                error = error_for_response(response)
                self._log_failure(error, log_fields, status_code=response.status_code, duration_ms=duration_ms)
                raise error

            if self._logger:
                self._logger.info(
                    "Request completed",
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                    **log_fields
                )

            return self._decode(response, request.url)
        finally:
            if self._logger:
                clear_correlation_id()

    def _log_failure(self, error: Exception, log_fields: Dict[str, Any], **extra: Any) -> None:
        if self._logger:
            self._logger.error(
                "Request failed",
                error=str(error),
                error_type=type(error).__name__,
                **log_fields,
                **extra
            )

    def do(
        self,
        method: str,
        path: str,
        name: Optional[str] = None,
        options: Optional[Options] = None,
        body: Any = None,
        content_type: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Построить запрос, применить модификаторы и отправить его."""
        request = self.new_request(method, path, name, options, body, content_type)
        return self.send(request)

    # ==================== Глаголы ====================

    def get(self, path: str, name: str, options: Optional[GetOptions] = None) -> Optional[Dict[str, Any]]:
        """
        Получить объект.

        Args:
            path: Путь коллекции, например ``/api/v1/namespaces/default/pods``
            name: Имя объекта
            options: GetOptions
        """
        return self.do("GET", path, name, options or GetOptions())

    def list(self, path: str, options: Optional[ListOptions] = None) -> Optional[Dict[str, Any]]:
        """Получить список объектов коллекции."""
        return self.do("GET", path, None, options or ListOptions())

    def create(self, path: str, obj: Any, options: Optional[CreateOptions] = None) -> Optional[Dict[str, Any]]:
        """Создать объект в коллекции."""
        return self.do("POST", path, None, options or CreateOptions(), body=obj)

    def update(self, path: str, name: str, obj: Any,
               options: Optional[UpdateOptions] = None) -> Optional[Dict[str, Any]]:
        """Заменить объект целиком."""
        return self.do("PUT", path, name, options or UpdateOptions(), body=obj)

    def delete(self, path: str, name: str, options: Optional[DeleteOptions] = None) -> Optional[Dict[str, Any]]:
        """Удалить объект."""
        return self.do("DELETE", path, name, options or DeleteOptions())

    def patch(
        self,
        path: str,
        name: str,
        data: Any,
        patch_type: PatchType = PatchType.MERGE,
        options: Optional[PatchOptions] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Частично изменить объект.

        Args:
            path: Путь коллекции
            name: Имя объекта
            data: Патч (dict/list сериализуются в JSON, str/bytes как есть)
            patch_type: Тип патча (определяет Content-Type)
            options: PatchOptions
        """
        return self.do(
            "PATCH", path, name, options or PatchOptions(),
            body=data, content_type=PatchType(patch_type).value,
        )

    # ==================== Свойства ====================

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url

    @property
    def session(self) -> requests.Session:
        """Сессия текущего потока."""
        return self._session_manager.get_session()
