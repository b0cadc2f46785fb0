# File: site_atlas/utils.py
"""site_atlas.utils: Утилитарные функции для нормализации URL, сравнения origin и проверки ссылок."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple
from urllib.parse import urlsplit, urlunsplit

from site_atlas.logger import logger

__all__: Sequence[str] = (
    "InvalidSeedURL",
    "normalize_url",
    "origin_of",
    "same_origin",
    "is_crawlable",
    "is_http_url",
    "host_of",
    "require_http_url",
)

_HTTP_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_SKIP_PREFIXES = ("mailto:", "tel:", "javascript:")


class InvalidSeedURL(ValueError):
    """Стартовый URL не является абсолютным http(s) адресом."""


def normalize_url(url: str) -> str:
    """Нормализует URL для дедупликации: убирает фрагмент, пустой путь заменяет на ``/``,
    приводит схему и хост к нижнему регистру и убирает порт по умолчанию.

    Некорректный URL возвращается без изменений.
    """
    try:
        parts = urlsplit(url)
        # проверка порта: urlsplit ленив и падает только при обращении
        port = parts.port
    except (ValueError, TypeError, AttributeError):
        logger.debug("Cannot normalize URL, keeping as is: %r", url)
        return url
    if not parts.scheme or not parts.netloc:
        return urlunsplit(parts._replace(fragment=""))
    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"
    userinfo, at, _ = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{host}"
    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def origin_of(url: str) -> Optional[Tuple[str, str, int]]:
    """Возвращает (scheme, host, port) или None, если URL не разбирается."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except (ValueError, TypeError, AttributeError):
        return None
    scheme = parts.scheme.lower()
    host = parts.hostname
    if not scheme or not host:
        return None
    if port is None:
        port = _DEFAULT_PORTS.get(scheme, 0)
    return scheme, host, port


def same_origin(a: str, b: str) -> bool:
    """Совпадают ли scheme+host+port двух URL; ошибка разбора даёт False."""
    origin_a = origin_of(a)
    return origin_a is not None and origin_a == origin_of(b)


def is_crawlable(href: Optional[str]) -> bool:
    """Отсекает пустые ссылки и схемы mailto:, tel:, javascript:."""
    if not href:
        return False
    return not href.strip().lower().startswith(_SKIP_PREFIXES)


def is_http_url(url: str) -> bool:
    """Абсолютный URL со схемой http/https и хостом."""
    try:
        parts = urlsplit(url)
        parts.port
    except (ValueError, TypeError, AttributeError):
        return False
    return parts.scheme.lower() in _HTTP_SCHEMES and bool(parts.hostname)


def host_of(url: str) -> Optional[str]:
    """Возвращает hostname из URL или None."""
    try:
        return urlsplit(url).hostname
    except (ValueError, TypeError, AttributeError):
        return None


def require_http_url(url: object) -> str:
    """Проверяет стартовый URL и возвращает его без пробелов по краям."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidSeedURL("seed URL must be a non-empty string")
    seed = url.strip()
    if not is_http_url(seed):
        raise InvalidSeedURL(f"seed URL must be an absolute http(s) URL, got {seed!r}")
    return seed
