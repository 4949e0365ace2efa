# src/request_shaper/core/options.py
"""
Опции вызовов APIClient.

Каждый глагол (get/list/create/update/delete/patch) принимает свою
структуру опций. Все они содержат список модификаторов запроса, а поля
самого глагола превращаются в query параметры без интерпретации.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypeVar

from .modifiers import ModifierLike

DRY_RUN_ALL = "All"

T = TypeVar("T", bound="Options")


@dataclass
class Options:
    """
    Общие опции: модификаторы, применяемые к запросу перед отправкой.

    Attributes:
        request_modifiers: Модификаторы в порядке применения
    """
    request_modifiers: List[ModifierLike] = field(default_factory=list)

    def with_modifiers(self: T, *modifiers: ModifierLike) -> T:
        """Копия опций с модификаторами, добавленными в конец списка."""
        return dataclasses.replace(
            self,
            request_modifiers=list(self.request_modifiers) + list(modifiers),
        )

    def to_params(self) -> Dict[str, Any]:
        """Query параметры глагола (у базовых опций их нет)."""
        return {}


def _dry_run(params: Dict[str, Any], dry_run: bool) -> None:
    if dry_run:
        params["dryRun"] = DRY_RUN_ALL


@dataclass
class GetOptions(Options):
    """Опции get."""
    resource_version: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.resource_version:
            params["resourceVersion"] = self.resource_version
        return params


@dataclass
class ListOptions(Options):
    """
    Опции list.

    Attributes:
        label_selector: Фильтр по меткам, например ``app=web,tier!=db``
        field_selector: Фильтр по полям, например ``status.phase=Running``
        resource_version: С какой версии читать
        limit: Размер страницы
        continue_token: Токен следующей страницы из предыдущего ответа
        timeout_seconds: Серверный таймаут запроса
        watch: Запросить поток изменений вместо списка
    """
    label_selector: Optional[str] = None
    field_selector: Optional[str] = None
    resource_version: Optional[str] = None
    limit: Optional[int] = None
    continue_token: Optional[str] = None
    timeout_seconds: Optional[int] = None
    watch: bool = False

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.label_selector:
            params["labelSelector"] = self.label_selector
        if self.field_selector:
            params["fieldSelector"] = self.field_selector
        if self.resource_version:
            params["resourceVersion"] = self.resource_version
        if self.limit:
            params["limit"] = self.limit
        if self.continue_token:
            params["continue"] = self.continue_token
        if self.timeout_seconds is not None:
            params["timeoutSeconds"] = self.timeout_seconds
        if self.watch:
            params["watch"] = "true"
        return params


@dataclass
class CreateOptions(Options):
    """Опции create."""
    dry_run: bool = False
    field_manager: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        _dry_run(params, self.dry_run)
        if self.field_manager:
            params["fieldManager"] = self.field_manager
        return params


@dataclass
class UpdateOptions(Options):
    """Опции update."""
    dry_run: bool = False
    field_manager: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        _dry_run(params, self.dry_run)
        if self.field_manager:
            params["fieldManager"] = self.field_manager
        return params


@dataclass
class DeleteOptions(Options):
    """
    Опции delete.

    Attributes:
        dry_run: Проверить запрос без удаления
        grace_period_seconds: Сколько ждать перед удалением (0 - сразу)
        propagation_policy: Orphan, Background или Foreground
    """
    dry_run: bool = False
    grace_period_seconds: Optional[int] = None
    propagation_policy: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        _dry_run(params, self.dry_run)
        if self.grace_period_seconds is not None:
            params["gracePeriodSeconds"] = self.grace_period_seconds
        if self.propagation_policy:
            params["propagationPolicy"] = self.propagation_policy
        return params


@dataclass
class PatchOptions(Options):
    """Опции patch. ``force`` имеет смысл только для apply-патчей."""
    dry_run: bool = False
    field_manager: Optional[str] = None
    force: bool = False

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        _dry_run(params, self.dry_run)
        if self.field_manager:
            params["fieldManager"] = self.field_manager
        if self.force:
            params["force"] = "true"
        return params
