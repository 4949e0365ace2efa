# src/request_shaper/core/headers.py
"""
Имена заголовков имперсонации и санитизация ключей extra-атрибутов.

Ключ extra-атрибута становится частью имени заголовка, поэтому он
приводится к грамматике token из RFC 7230 §3.2.6 в нижнем регистре,
а всё остальное кодируется побайтно по RFC 3986 §2.1.
"""

IMPERSONATE_USER_HEADER = "Impersonate-User"
IMPERSONATE_UID_HEADER = "Impersonate-Uid"
IMPERSONATE_GROUP_HEADER = "Impersonate-Group"
IMPERSONATE_USER_EXTRA_HEADER_PREFIX = "Impersonate-Extra-"

WARNING_HEADER = "Warning"

# Не алфавитно-цифровые символы token (RFC 7230 §3.2.6)
TOKEN_SAFE_BYTES = frozenset(b"!#$&'*+-.^_`|~")


def _is_lower_alnum(b: int) -> bool:
    return 0x61 <= b <= 0x7A or 0x30 <= b <= 0x39


def _is_upper(b: int) -> bool:
    return 0x41 <= b <= 0x5A


def sanitize_header_key(key: str) -> str:
    """
    Превращает произвольный ключ в допустимую часть имени заголовка.

    Обработка идёт по UTF-8 байтам слева направо:
        1. символы token (``! # $ & ' * + - . ^ _ ` | ~``) копируются как есть;
        2. ``a-z`` и ``0-9`` копируются как есть;
        3. ``A-Z`` приводятся к нижнему регистру;
        4. любой другой байт кодируется как ``%XX`` (hex в верхнем регистре).

    Функция тотальная: пустой ключ даёт пустую строку, одиночные суррогаты
    кодируются побайтно, исключений нет.

    Args:
        key: Ключ extra-атрибута

    Returns:
        Строка из token-символов в нижнем регистре и %-последовательностей

    Examples:
        >>> sanitize_header_key("Foo Bar!")
        'foo%20bar!'
        >>> sanitize_header_key("a_b-c")
        'a_b-c'
        >>> sanitize_header_key("ключ")
        '%D0%BA%D0%BB%D1%8E%D1%87'
    """
    out = []
    for b in key.encode("utf-8", "surrogatepass"):
        if b in TOKEN_SAFE_BYTES or _is_lower_alnum(b):
            out.append(chr(b))
        elif _is_upper(b):
            out.append(chr(b + 0x20))
        else:
            out.append(f"%{b:02X}")
    return "".join(out)


def extra_header_name(key: str) -> str:
    """Имя заголовка для extra-атрибута ``key``."""
    return IMPERSONATE_USER_EXTRA_HEADER_PREFIX + sanitize_header_key(key)
