# File: seo_scout/engine.py
"""seo_scout.engine: Orchestration layer: обход сайта, аудит и анализ одной страницы."""

from __future__ import annotations

from typing import Optional

from seo_scout.aggregator import AuditReport, audit
from seo_scout.config import CrawlConfig
from seo_scout.crawler.crawler import SiteCrawler
from seo_scout.crawler.fetcher import make_renderer
from seo_scout.crawler.models import PageRecord, PageRenderer
from seo_scout.logger import logger
from seo_scout.parser.html_parser import extract_page_facts
from seo_scout.utils import normalize_url

__all__ = ["start_audit", "analyze_page"]


async def start_audit(config: CrawlConfig, renderer: Optional[PageRenderer] = None) -> AuditReport:
    """Обходит сайт и прогоняет правила аудита по собранным страницам."""
    pages = await SiteCrawler(config, renderer=renderer).crawl()
    logger.info("Crawled %d pages, running analysis...", len(pages))
    report = audit(pages, config.seed_url)
    logger.info("Audit complete. Health score: %d/100", report.health_score)
    return report


async def analyze_page(config: CrawlConfig, renderer: Optional[PageRenderer] = None) -> AuditReport:
    """Аудит одной страницы ``config.start_url`` без фронтира, robots и sitemap.

    Ошибка загрузки здесь не поглощается: страница единственная.
    """
    renderer = renderer if renderer is not None else make_renderer(config)
    url = normalize_url(config.seed_url)
    try:
        rendered = await renderer.fetch(url, config.page_timeout, config.wait_selector)
    finally:
        try:
            await renderer.close()
        except Exception as exc:
            logger.error("Failed to close renderer: %s", exc)
    facts = extract_page_facts(rendered.markup, url, config.origin_host)
    return audit([PageRecord.build(url, rendered, facts)], config.seed_url)

