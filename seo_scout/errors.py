# File: seo_scout/errors.py
"""seo_scout.errors: Иерархия исключений краулера SEO Scout."""

from __future__ import annotations

__all__ = [
    "SEOScoutError",
    "ConfigurationError",
    "RenderError",
    "RenderTimeout",
    "FrontierExhausted",
]


class SEOScoutError(Exception):
    """Базовое исключение проекта."""


class ConfigurationError(SEOScoutError, ValueError):
    """Некорректная конфигурация обхода (например, битый стартовый URL)."""


class RenderError(SEOScoutError):
    """Страницу не удалось загрузить: сетевая ошибка или сбой навигации."""

    def __init__(self, url: str, reason: object = None) -> None:
        self.url = url
        self.reason = reason
        message = f"failed to render {url}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)


class RenderTimeout(RenderError):
    """Истёк таймаут загрузки одной страницы."""

    def __init__(self, url: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(url, f"timed out after {timeout:g}s")


class FrontierExhausted(SEOScoutError):
    """take() вызван после перехода фронтира в терминальное состояние."""
