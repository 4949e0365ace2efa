# src/request_shaper/utils/masking.py
"""
Маскирование чувствительных данных перед записью в лог.

Заголовки и поля с токенами, паролями и ключами заменяются на маску.
Заголовки имперсонации чувствительными не считаются: кто выполняет
запрос - это как раз то, что нужно видеть в логах.
"""

import re
from typing import Any, Dict, Mapping

MASK = "***REDACTED***"

SENSITIVE_KEYS = {
    'password', 'passwd', 'pwd',
    'token', 'access_token', 'refresh_token', 'id_token', 'bearer_token',
    'secret', 'client_secret', 'api_secret',
    'api_key', 'apikey', 'private_key',
    'authorization', 'proxy-authorization',
    'cookie', 'set-cookie', 'session',
    'credentials', 'client-certificate-data', 'client-key-data',
}

SENSITIVE_PATTERNS = [
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + MASK),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + MASK),
    (re.compile(r'((?:api[_-]?key|token|password)[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + MASK),
]


def is_sensitive_key(key: Any) -> bool:
    """
    Проверяет, является ли ключ чувствительным (без учёта регистра).

    Ключ считается чувствительным, если содержит одно из SENSITIVE_KEYS.
    """
    key_lower = str(key).lower()
    if key_lower in SENSITIVE_KEYS:
        return True
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def mask_sensitive_data(data: Any, mask: str = MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Args:
        data: Данные для маскирования
        mask: Строка-заменитель

    Returns:
        Копия данных с замаскированными чувствительными полями

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "Impersonate-User": "alice"})
        {'Authorization': '***REDACTED***', 'Impersonate-User': 'alice'}
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        result = data
        for pattern, replacement in SENSITIVE_PATTERNS:
            result = pattern.sub(replacement.replace(MASK, mask), result)
        return result

    if isinstance(data, Mapping):
        return {
            key: mask if is_sensitive_key(key) else mask_sensitive_data(value, mask)
            for key, value in data.items()
        }

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    return data


def mask_headers(headers: Mapping[str, Any], mask: str = MASK) -> Dict[str, Any]:
    """
    Маскирует значения чувствительных заголовков, остальные оставляет как есть.

    Example:
        >>> mask_headers({"Authorization": "Bearer abc", "Accept": "application/json"})
        {'Authorization': '***REDACTED***', 'Accept': 'application/json'}
    """
    return {
        name: mask if is_sensitive_key(name) else value
        for name, value in headers.items()
    }
