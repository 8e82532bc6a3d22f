# === FILE: seo_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Iterable, List, Optional

from seo_scout.config import CrawlConfig
from seo_scout.crawler.fetcher import make_renderer
from seo_scout.crawler.frontier import Frontier
from seo_scout.crawler.models import PageFacts, PageRecord, PageRenderer
from seo_scout.errors import ConfigurationError, RenderError
from seo_scout.logger import get_logger
from seo_scout.parser.html_parser import extract_page_facts
from seo_scout.parser.robots_parser import RobotsPolicy, resolve_robots
from seo_scout.parser.sitemap_parser import SitemapResolver
from seo_scout.utils import is_http_url, normalize_url, origin_of, remove_duplicates, resolve_link

__all__ = ("SiteCrawler", "crawl_site")

Extractor = Callable[[str, str, Optional[str]], PageFacts]
Sleeper = Callable[[float], Awaitable[None]]


class SiteCrawler:
    """Последовательный вежливый обход сайта в пределах бюджета страниц.

    Один экземпляр = один обход: собственный фронтир и собственный
    рендерер, который закрывается ровно один раз по завершении
    :meth:`crawl`, как при успехе, так и при ошибке.
    """

    def __init__(
        self,
        config: CrawlConfig,
        renderer: Optional[PageRenderer] = None,
        extractor: Extractor = extract_page_facts,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self.config = config
        self.extractor = extractor
        self.robots: RobotsPolicy = RobotsPolicy.empty()
        self.frontier = Frontier(config.max_pages)
        self.failed_urls: List[str] = []
        self.disallowed_urls: List[str] = []
        self.logger = get_logger("crawler")
        self._renderer = renderer
        self._sleep = sleep
        self._started = False

    @property
    def renderer(self) -> PageRenderer:
        if self._renderer is None:
            self._renderer = make_renderer(self.config)
        return self._renderer

    @property
    def politeness_delay(self) -> float:
        if self.robots.crawl_delay is not None:
            return self.robots.crawl_delay
        return self.config.default_delay

    async def crawl(self) -> List[PageRecord]:
        if self._started:
            raise RuntimeError("SiteCrawler instances are single-use")
        self._started = True
        try:
            origin = self._validate_seed()
            return await self._run(origin)
        finally:
            await self._release()

    async def _run(self, origin: str) -> List[PageRecord]:
        seed = self.config.seed_url
        self.logger.info("Старт обхода: %s (max %d pages)", seed, self.config.max_pages)
        start = time.monotonic()

        if self.config.respect_robots:
            self.robots = await resolve_robots(self.renderer, origin, self.config.policy_timeout)
            self.logger.info("Crawl delay from robots.txt: %ss", self.robots.crawl_delay or 0)

        candidates = [seed]
        if self.config.follow_sitemap:
            candidates.extend(await self._sitemap_urls(origin))
        self.frontier.seed(self._admissible(candidates))
        self.logger.info("Found %d URLs to crawl", len(self.frontier))

        results: List[PageRecord] = []
        while True:
            if self._deadline_passed(start):
                self.logger.warning(
                    "Crawl deadline of %ss reached, stopping with %d page(s)",
                    self.config.crawl_deadline, len(results),
                )
                break
            url = self.frontier.take()
            if url is None:
                break

            record = await self._visit(url)
            self.frontier.mark_visited(url)
            if record is not None:
                results.append(record)
                self._enqueue_links(record)

            await self._sleep(self.politeness_delay)

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с, ошибок: %d",
            len(results), duration, len(self.failed_urls),
        )
        if self.disallowed_urls:
            self.logger.info("Заблокировано robots.txt: %d", len(self.disallowed_urls))
        return results

    async def _visit(self, url: str) -> Optional[PageRecord]:
        self.logger.info("Crawling: %s", url)
        try:
            rendered = await self.renderer.fetch(url, self.config.page_timeout, self.config.wait_selector)
            facts = self.extractor(rendered.markup, url, self.config.origin_host)
        except RenderError as exc:
            self.logger.warning("Error crawling %s: %s", url, exc)
            self.failed_urls.append(url)
            return None
        except Exception:
            self.logger.exception("Unexpected error while processing %s", url)
            self.failed_urls.append(url)
            return None
        return PageRecord.build(url, rendered, facts)

    async def _sitemap_urls(self, origin: str) -> List[str]:
        sitemaps = list(self.robots.sitemap_urls) or [f"{origin}/sitemap.xml"]
        resolver = SitemapResolver(self.renderer, self.config.policy_timeout)
        urls: List[str] = []
        for sitemap_url in sitemaps:
            urls.extend(await resolver.resolve(sitemap_url))
        urls = remove_duplicates(urls)
        self.logger.debug("Sitemaps %s -> %d URL(s)", sitemaps, len(urls))
        return urls

    def _enqueue_links(self, record: PageRecord) -> None:
        added = 0
        for link in record.internal_links():
            absolute = resolve_link(record.url, link.target)
            if absolute is None or not self._allowed(absolute):
                continue
            if self.frontier.offer(absolute):
                added += 1
        if added:
            self.logger.debug("%s: queued %d new link(s)", record.url, added)

    def _admissible(self, urls: Iterable[str]) -> List[str]:
        admitted: List[str] = []
        for raw in urls:
            try:
                if not is_http_url(raw):
                    continue
                url = normalize_url(raw)
            except ValueError:
                self.logger.debug("Skipping malformed URL %r", raw)
                continue
            if self._allowed(url):
                admitted.append(url)
        return admitted

    def _allowed(self, url: str) -> bool:
        if not self.config.enforce_disallow or self.robots.is_allowed(url):
            return True
        if url not in self.disallowed_urls:
            self.disallowed_urls.append(url)
        return False

    def _deadline_passed(self, start: float) -> bool:
        deadline = self.config.crawl_deadline
        return deadline is not None and time.monotonic() - start >= deadline

    def _validate_seed(self) -> str:
        seed = self.config.seed_url
        try:
            valid = is_http_url(seed)
            origin = origin_of(seed)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid start URL {seed!r}: {exc}") from exc
        if not valid:
            raise ConfigurationError(f"Invalid start URL {seed!r}: http(s) URL with a host required")
        return origin

    async def _release(self) -> None:
        if self._renderer is None:
            return
        try:
            await self._renderer.close()
        except Exception as exc:
            self.logger.error("Failed to close renderer: %s", exc)


async def crawl_site(config: CrawlConfig, renderer: Optional[PageRenderer] = None) -> List[PageRecord]:
    """Обходит сайт по ``config`` и возвращает записи страниц в порядке обхода."""
    return await SiteCrawler(config, renderer=renderer).crawl()
