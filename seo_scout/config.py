# === FILE: seo_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации обхода SEO Scout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Mapping, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)

from seo_scout.errors import ConfigurationError
from seo_scout.utils import host_of, origin_of

__all__ = ["CrawlConfig", "load_config", "build_config", "DEFAULT_USER_AGENT"]

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SEOScoutBot/1.0; +https://github.com/seo-scout)"


class CrawlConfig(BaseModel):
    """Конфигурация одного запуска обхода. Не меняется до конца обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: HttpUrl = Field(..., description="Стартовый URL обхода.")
    max_pages: int = Field(100, ge=1, description="Жесткий лимит по числу страниц.")
    follow_sitemap: bool = Field(True, description="Засеять фронтир URL из sitemap.xml.")
    respect_robots: bool = Field(True, description="Читать robots.txt (sitemap, crawl-delay).")
    page_timeout: float = Field(30.0, gt=0, description="Таймаут загрузки одной страницы (секунд).")
    policy_timeout: float = Field(10.0, gt=0, description="Таймаут для robots.txt и sitemap (секунд).")
    wait_selector: Optional[str] = Field(None, description="CSS-селектор, которого ждёт браузерный рендерер.")
    default_delay: float = Field(1.0, ge=0, description="Пауза между запросами без Crawl-delay (секунд).")
    crawl_deadline: Optional[float] = Field(None, gt=0, description="Мягкий дедлайн всего обхода (секунд).")
    enforce_disallow: bool = Field(False, description="Пропускать URL, закрытые Disallow.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    renderer: Literal["http", "browser"] = Field("http", description="Способ загрузки страниц.")

    @field_validator("wait_selector", mode="before")
    def _blank_selector_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def seed_url(self) -> str:
        return str(self.start_url)

    @property
    def origin(self) -> str:
        return origin_of(self.seed_url)

    @property
    def origin_host(self) -> str:
        return host_of(self.seed_url)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_mapping(path: Path) -> dict[str, Any]:
    """Разбирает YAML (.yaml/.yml) или JSON (.json) с mapping на верхнем уровне."""
    kind = path.suffix.lower().lstrip(".")
    text = path.read_text(encoding="utf-8")
    try:
        if kind in ("yaml", "yml"):
            data = yaml.safe_load(text)
        elif kind == "json":
            data = json.loads(text)
        else:
            raise ValueError(f"Неподдерживаемый формат конфига: .{kind}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ValueError(f"Неправильный {kind.upper()} в {path}: {exc}") from exc
    data = data or {}
    if not isinstance(data, dict):
        raise TypeError(f"Конфиг {path} должен быть mapping, получено {type(data).__name__}")
    return data


def _read_config_file(path: Union[str, Path, None]) -> dict[str, Any]:
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    return _read_mapping(path_obj)


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    data = _read_config_file(path)
    return CrawlConfig(**data)


def build_config(
    start_url: Optional[str] = None,
    path: Union[str, Path, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> CrawlConfig:
    """Собирает CrawlConfig из файла (если задан), URL и переопределений CLI/API.

    Значения ``None`` в ``overrides`` игнорируются. Ошибки валидации
    превращаются в :class:`ConfigurationError`, чтобы обход упал до
    первого запроса.
    """
    data: dict[str, Any] = _read_config_file(path) if path is not None else {}
    if start_url is not None:
        data["start_url"] = start_url
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    try:
        return CrawlConfig(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"Некорректная конфигурация: {exc}") from exc
