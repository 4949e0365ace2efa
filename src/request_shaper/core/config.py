"""
Система конфигурации для APIClient.

Все конфиги immutable (frozen dataclasses) для потокобезопасности.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Dict, Union, TYPE_CHECKING, Mapping
from types import MappingProxyType

from .impersonation import ImpersonationConfig

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_USER_AGENT = "request-shaper"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
    """
    connect: float = 5
    read: float = 30

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONNECTION POOL CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ConnectionPoolConfig:
    """
    Конфигурация connection pool.

    Args:
        pool_connections: Количество connection pools для кеширования
        pool_maxsize: Максимум соединений в пуле
        pool_block: Блокировать при достижении лимита
    """
    pool_connections: int = 10
    pool_maxsize: int = 10
    pool_block: bool = False

    def __post_init__(self):
        """Валидация."""
        if self.pool_connections <= 0:
            raise ValueError("pool_connections must be positive")
        if self.pool_maxsize <= 0:
            raise ValueError("pool_maxsize must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SECURITY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class SecurityConfig:
    """
    Конфигурация безопасности.

    Args:
        verify_ssl: Проверять SSL сертификаты (или путь к CA bundle)
        max_response_size: Максимальный размер ответа (байты)

    Examples:
        >>> SecurityConfig(verify_ssl="/etc/ssl/cluster-ca.crt")
        >>> SecurityConfig(verify_ssl=False)  # Для тестов
    """
    verify_ssl: Union[bool, str] = True
    max_response_size: int = 100 * 1024 * 1024  # 100MB

    def __post_init__(self):
        """Валидация."""
        if self.max_response_size <= 0:
            raise ValueError("max_response_size must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация APIClient.

    Args:
        base_url: Адрес API сервера
        headers: Заголовки, которые ставятся в каждый запрос до модификаторов
        user_agent: Значение User-Agent
        timeout: Конфигурация таймаутов
        pool: Конфигурация connection pool
        security: Конфигурация безопасности
        impersonate: Имперсонация для всех запросов клиента (None - без неё)
        logging: Конфигурация логирования (None - без логирования)

    Examples:
        >>> config = ClientConfig(base_url="https://cluster.example.com:6443")
        >>> config = ClientConfig.create(
        ...     base_url="https://cluster.example.com:6443",
        ...     impersonate=ImpersonationConfig(username="alice"),
        ... )
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    user_agent: str = DEFAULT_USER_AGENT

    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    pool: ConnectionPoolConfig = field(default_factory=ConnectionPoolConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    impersonate: Optional[ImpersonationConfig] = None
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Normalize base_url and freeze mutable dicts."""
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        verify_ssl: Union[bool, str] = True,
        headers: Optional[Dict[str, str]] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        impersonate: Optional[ImpersonationConfig] = None,
        logging: Optional['LoggingConfig'] = None,
        **kwargs
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Адрес API сервера
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            verify_ssl: Проверять SSL
            headers: Заголовки по умолчанию
            user_agent: User-Agent
            impersonate: Имперсонация для всех запросов
            logging: Конфигурация логирования

        Returns:
            ClientConfig instance

        Examples:
            >>> config = ClientConfig.create(timeout=60)
            >>> config = ClientConfig.create(timeout=(5, 60), verify_ssl=False)
        """
        return cls(
            base_url=base_url,
            headers=headers or {},
            user_agent=user_agent,
            timeout=_timeout_config(timeout),
            security=SecurityConfig(verify_ssl=verify_ssl),
            impersonate=impersonate,
            logging=logging,
            **kwargs
        )

    def with_timeout(self, timeout: Union[float, Tuple[float, float], TimeoutConfig]) -> 'ClientConfig':
        """
        Создать новый конфиг с изменённым timeout.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return replace(self, timeout=_timeout_config(timeout))

    def with_headers(self, headers: Dict[str, str]) -> 'ClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-Team": "platform"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)

    def with_impersonation(self, impersonate: Optional[ImpersonationConfig]) -> 'ClientConfig':
        """
        Создать новый конфиг с другой имперсонацией (None - отключить).

        Example:
            >>> as_alice = config.with_impersonation(ImpersonationConfig(username="alice"))
        """
        return replace(self, impersonate=impersonate)


def _timeout_config(timeout: Union[float, Tuple[float, float], TimeoutConfig]) -> TimeoutConfig:
    if isinstance(timeout, TimeoutConfig):
        return timeout
    if isinstance(timeout, tuple):
        return TimeoutConfig(connect=timeout[0], read=timeout[1])
    return TimeoutConfig(connect=5, read=timeout)
