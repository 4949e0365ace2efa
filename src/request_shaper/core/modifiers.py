# src/request_shaper/core/modifiers.py
"""
Модификаторы запроса и их применение.

Модификатор - объект с единственной операцией: изменить запрос на месте
перед отправкой. Модификаторы применяются строго в порядке списка,
поэтому следующий видит изменения предыдущего.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional, Tuple, Union

from .headers import (
    IMPERSONATE_GROUP_HEADER,
    IMPERSONATE_UID_HEADER,
    IMPERSONATE_USER_HEADER,
    extra_header_name,
)
from .impersonation import ImpersonationConfig
from .request import ModifiableRequest
from .warning_handler import WarningHandler

logger = logging.getLogger(__name__)


class RequestModifier(ABC):
    """
    Базовый класс модификатора.

    Конфигурация хранится в атрибутах и не меняется при вызове,
    так что один модификатор можно применять к любому числу запросов.
    """

    @abstractmethod
    def __call__(self, request: ModifiableRequest) -> None:
        """Изменить запрос на месте."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


ModifierLike = Union[RequestModifier, Callable[[ModifiableRequest], None]]


class SetWarningHandler(RequestModifier):
    """Устанавливает обработчик предупреждений вместо обработчика по умолчанию."""

    def __init__(self, handler: WarningHandler):
        self.handler = handler

    def __call__(self, request: ModifiableRequest) -> None:
        request.set_warning_handler(self.handler)

    def __repr__(self) -> str:
        return f"SetWarningHandler({self.handler.__class__.__name__})"


class SetHeader(RequestModifier):
    """
    Устанавливает заголовок, заменяя предыдущие значения.

    Example:
        >>> SetHeader("X-Request-Source", "reconciler")
    """

    def __init__(self, name: str, *values: str):
        self.name = name
        self.values: Tuple[str, ...] = values

    def __call__(self, request: ModifiableRequest) -> None:
        request.set_header(self.name, *self.values)

    def __repr__(self) -> str:
        return f"SetHeader({self.name!r})"


class Impersonate(RequestModifier):
    """
    Добавляет заголовки имперсонации.

    На каждый вызов:
        - Impersonate-User ставится всегда, даже с пустым именем;
        - Impersonate-Uid ставится, только если uid не пустой;
        - Impersonate-Group ставится всегда, пустой список групп даёт
          заголовок без значений;
        - для каждого extra-атрибута ставится
          ``Impersonate-Extra-<sanitize_header_key(key)>``.

    Extra-атрибуты обходятся в порядке ключей mapping'а.

    Example:
        >>> config = ImpersonationConfig(username="alice", groups=["dev"])
        >>> options = GetOptions(request_modifiers=[Impersonate(config)])
    """

    def __init__(self, config: ImpersonationConfig):
        self.config = config

    def __call__(self, request: ModifiableRequest) -> None:
        config = self.config
        request.set_header(IMPERSONATE_USER_HEADER, config.username)
        if config.uid:
            request.set_header(IMPERSONATE_UID_HEADER, config.uid)
        request.set_header(IMPERSONATE_GROUP_HEADER, *config.groups)
        for key, values in config.extra.items():
            request.set_header(extra_header_name(key), *values)

    def __repr__(self) -> str:
        return f"Impersonate(username={self.config.username!r})"


def apply_modifiers(
    request: ModifiableRequest,
    modifiers: Optional[Iterable[ModifierLike]],
) -> None:
    """
    Применить модификаторы к запросу по порядку.

    Ничего не пропускается и не переупорядочивается. Исключение из
    модификатора пробрасывается как есть.

    Args:
        request: Запрос, который изменяется на месте
        modifiers: Модификаторы (None и пустой список - ничего не делать)
    """
    if not modifiers:
        return

    for modifier in modifiers:
        logger.debug("Applying request modifier %r", modifier)
        modifier(request)
