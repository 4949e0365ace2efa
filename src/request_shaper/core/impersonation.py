"""Описание имперсонации: от чьего имени выполнять запрос."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple


def _freeze_extra(extra: Optional[Mapping[str, Iterable[str]]]) -> Mapping[str, Tuple[str, ...]]:
    """
    Заморозить extra-атрибуты: значения в tuple, mapping в MappingProxyType.

    Порядок ключей сохраняется.
    """
    if not extra:
        return MappingProxyType({})
    return MappingProxyType({key: tuple(values) for key, values in extra.items()})


@dataclass(frozen=True)
class ImpersonationConfig:
    """
    Пользователь, от имени которого отправляется запрос.

    Immutable: списки и словари, переданные в конструктор, копируются
    и замораживаются, поэтому один экземпляр можно использовать из
    нескольких потоков.

    Args:
        username: Имя пользователя (не валидируется, пустое тоже передаётся)
        uid: UID пользователя (заголовок не ставится, если пустой)
        groups: Группы пользователя
        extra: Дополнительные атрибуты, ключ -> значения

    Examples:
        >>> ImpersonationConfig(username="alice", groups=["dev", "ops"])
        >>> ImpersonationConfig(
        ...     username="system:serviceaccount:ci:deployer",
        ...     extra={"reason": ["scale-up"]},
        ... )
    """
    username: str = ""
    uid: str = ""
    groups: Tuple[str, ...] = ()
    extra: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        """Freeze mutable collections."""
        object.__setattr__(self, 'groups', tuple(self.groups))
        object.__setattr__(self, 'extra', _freeze_extra(self.extra))

    def is_empty(self) -> bool:
        """True если не задано ни одно поле."""
        return not (self.username or self.uid or self.groups or self.extra)

    def with_groups(self, *groups: str) -> 'ImpersonationConfig':
        """Новый конфиг с добавленными группами."""
        return ImpersonationConfig(
            username=self.username,
            uid=self.uid,
            groups=self.groups + groups,
            extra=self.extra,
        )

    def with_extra(self, key: str, *values: str) -> 'ImpersonationConfig':
        """Новый конфиг, где extra-атрибут ``key`` заменён на ``values``."""
        extra = dict(self.extra)
        extra[key] = values
        return ImpersonationConfig(
            username=self.username,
            uid=self.uid,
            groups=self.groups,
            extra=extra,
        )
