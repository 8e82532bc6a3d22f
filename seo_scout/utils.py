# File: seo_scout/utils.py
"""seo_scout.utils: Утилиты для работы с URL: нормализация, origin, хост, дедупликация."""

from __future__ import annotations

from typing import Collection, List, Optional, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from seo_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "origin_of",
    "host_of",
    "resolve_link",
    "is_http_url",
    "remove_duplicates",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}


def _netloc(host: str, scheme: str, port: Optional[int]) -> str:
    if ":" in host:
        host = f"[{host}]"
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        return f"{host}:{port}"
    return host


def normalize_url(url: str) -> str:
    """Нормализует URL для дедупликации во фронтире.

    Схема и хост приводятся к нижнему регистру, порт по умолчанию
    отбрасывается, пустой путь превращается в ``/``, фрагмент удаляется.
    Query-строка сохраняется как есть: для SEO это разные страницы.
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    netloc = _netloc(host, scheme, parts.port)
    if parts.username:
        userinfo = parts.username
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"
    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def origin_of(url: str) -> str:
    """Возвращает origin (``scheme://host[:port]``) для URL."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    return f"{scheme}://{_netloc(host, scheme, parts.port)}"


def host_of(url: str) -> str:
    """Хост URL в нижнем регистре, без порта; пустая строка, если хоста нет."""
    return (urlsplit(url).hostname or "").lower()


def is_http_url(url: str) -> bool:
    parts = urlsplit(url)
    return parts.scheme in ("http", "https") and bool(parts.hostname)


def resolve_link(base_url: str, href: str) -> Optional[str]:
    """Разрешает ссылку относительно страницы; None, если получился не http(s) URL."""
    try:
        absolute = urljoin(base_url, href.strip())
        if not is_http_url(absolute):
            return None
        return normalize_url(absolute)
    except ValueError as exc:
        logger.debug("Cannot resolve %r against %s: %s", href, base_url, exc)
        return None


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
