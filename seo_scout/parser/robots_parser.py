# File: seo_scout/parser/robots_parser.py
"""seo_scout.parser.robots_parser: Загрузка и разбор robots.txt в RobotsPolicy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple
from urllib.parse import urlsplit

from seo_scout.crawler.models import PageRenderer
from seo_scout.errors import RenderError
from seo_scout.logger import get_logger

__all__ = ["RobotsPolicy", "parse_robots", "resolve_robots", "robots_url_for"]

logger = get_logger("robots")

_SITEMAP = "sitemap:"
_DISALLOW = "disallow:"
_CRAWL_DELAY = "crawl-delay:"


@dataclass(frozen=True)
class RobotsPolicy:
    """Директивы robots.txt, которые использует краулер.

    Группы User-agent не различаются: учитываются все строки файла.
    """

    sitemap_urls: Tuple[str, ...] = ()
    disallow_patterns: FrozenSet[str] = frozenset()
    crawl_delay: Optional[float] = None

    @classmethod
    def empty(cls) -> RobotsPolicy:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.sitemap_urls and not self.disallow_patterns and self.crawl_delay is None

    def is_allowed(self, url: str) -> bool:
        """Проверка префикса пути против Disallow."""
        parts = urlsplit(url)
        path = parts.path or "/"
        if parts.query:
            path = f"{path}?{parts.query}"
        return not any(path.startswith(prefix) for prefix in self.disallow_patterns)


def robots_url_for(origin: str) -> str:
    return f"{origin.rstrip('/')}/robots.txt"


def _parse_delay(value: str) -> Optional[float]:
    try:
        delay = float(value)
    except ValueError:
        return None
    # inf/nan и неположительные значения отбрасываются
    if not delay > 0 or delay == float("inf"):
        return None
    return delay


def parse_robots(text: str) -> RobotsPolicy:
    """Разбирает текст robots.txt построчно.

    Args:
        text: содержимое robots.txt.

    Returns:
        RobotsPolicy с sitemap-ами (в порядке появления), префиксами Disallow
        и последним корректным Crawl-delay.
    """
    sitemaps: List[str] = []
    disallowed: List[str] = []
    crawl_delay: Optional[float] = None

    for raw in text.splitlines():
        line = raw.strip()
        lowered = line.lower()
        if lowered.startswith(_SITEMAP):
            value = line[len(_SITEMAP):].strip()
            if value:
                sitemaps.append(value)
        elif lowered.startswith(_DISALLOW):
            value = line[len(_DISALLOW):].split("#", 1)[0].strip()
            # пустой Disallow разрешает все, пропускаем
            if value:
                disallowed.append(value)
        elif lowered.startswith(_CRAWL_DELAY):
            value = line[len(_CRAWL_DELAY):].split("#", 1)[0].strip()
            delay = _parse_delay(value)
            if delay is None:
                logger.debug("Ignoring malformed Crawl-delay value %r", value)
            else:
                crawl_delay = delay

    return RobotsPolicy(
        sitemap_urls=tuple(sitemaps),
        disallow_patterns=frozenset(disallowed),
        crawl_delay=crawl_delay,
    )


async def resolve_robots(renderer: PageRenderer, origin: str, timeout: float) -> RobotsPolicy:
    """Загружает ``<origin>/robots.txt`` и возвращает RobotsPolicy.

    Любая ошибка загрузки или ответ не 2xx дают пустую политику:
    отсутствие robots.txt никогда не прерывает обход.
    """
    url = robots_url_for(origin)
    try:
        page = await renderer.fetch(url, timeout)
    except RenderError as exc:
        logger.warning("Error loading robots.txt: %s", exc)
        return RobotsPolicy.empty()
    except Exception:
        logger.exception("Unexpected error loading %s, using empty policy", url)
        return RobotsPolicy.empty()
    if not page.ok:
        logger.debug("robots.txt %s -> HTTP %s", url, page.status_code)
        return RobotsPolicy.empty()
    policy = parse_robots(page.markup)
    logger.debug(
        "robots.txt: %d sitemap(s), %d disallow rule(s), crawl-delay=%s",
        len(policy.sitemap_urls), len(policy.disallow_patterns), policy.crawl_delay,
    )
    return policy
