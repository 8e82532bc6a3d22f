# File: seo_scout/parser/sitemap_parser.py
"""seo_scout.parser.sitemap_parser: Разбор sitemap.xml и рекурсивное раскрытие sitemap index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

from lxml import etree

from seo_scout.crawler.models import PageRenderer
from seo_scout.errors import RenderError
from seo_scout.logger import get_logger

__all__ = ["SitemapDocument", "SitemapResolver", "parse_sitemap", "MAX_SITEMAP_DEPTH"]

logger = get_logger("sitemap")

MAX_SITEMAP_DEPTH = 5

_INDEX_LOCS = "//*[local-name()='sitemap']/*[local-name()='loc']"
_URLSET_LOCS = "//*[local-name()='url']/*[local-name()='loc']"


@dataclass(slots=True)
class SitemapDocument:
    """Содержимое одного sitemap-документа."""

    index_entries: List[str] = field(default_factory=list)
    url_entries: List[str] = field(default_factory=list)

    @property
    def is_index(self) -> bool:
        return bool(self.index_entries)


def _loc_texts(root: etree._Element, xpath: str) -> List[str]:
    values: List[str] = []
    for loc in root.xpath(xpath):
        text = "".join(loc.itertext()).strip()
        if text:
            values.append(text)
    return values


def parse_sitemap(xml_content: str) -> SitemapDocument:
    """Разбирает XML sitemap и возвращает записи index и urlset.

    Args:
        xml_content: строка с содержимым sitemap.xml.

    Returns:
        SitemapDocument; пустой, если документ не удалось разобрать.

    Пример:
    ```python
    from seo_scout.parser.sitemap_parser import parse_sitemap

    doc = parse_sitemap(open('sitemap.xml', encoding='utf-8').read())
    print(doc.is_index, doc.url_entries)
    ```
    """
    content = xml_content.strip()
    if not content:
        return SitemapDocument()
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(content.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        logger.debug("Unparseable sitemap: %s", exc)
        return SitemapDocument()
    if root is None:
        return SitemapDocument()
    return SitemapDocument(
        index_entries=_loc_texts(root, _INDEX_LOCS),
        url_entries=_loc_texts(root, _URLSET_LOCS),
    )


class SitemapResolver:
    """Раскрывает sitemap (и вложенные sitemap index) в плоский список URL.

    Ошибка любой ветки даёт пустой результат только для этой ветки.
    Уже раскрытые sitemap-URL повторно не загружаются, поэтому циклы
    между индексами конечны.
    """

    def __init__(self, renderer: PageRenderer, timeout: float, max_depth: int = MAX_SITEMAP_DEPTH) -> None:
        self.renderer = renderer
        self.timeout = timeout
        self.max_depth = max_depth
        self._seen: Set[str] = set()

    async def resolve(self, sitemap_url: str) -> List[str]:
        return await self._resolve(sitemap_url, depth=0)

    async def _resolve(self, sitemap_url: str, depth: int) -> List[str]:
        if sitemap_url in self._seen:
            logger.warning("Sitemap %s already expanded, skipping (cycle?)", sitemap_url)
            return []
        if depth > self.max_depth:
            logger.warning("Sitemap nesting deeper than %d at %s, skipping", self.max_depth, sitemap_url)
            return []
        self._seen.add(sitemap_url)

        document = await self._load(sitemap_url)
        if document is None:
            return []

        if document.is_index:
            urls: List[str] = []
            for child in document.index_entries:
                urls.extend(await self._resolve(child, depth + 1))
            logger.debug("Sitemap index %s -> %d URL(s)", sitemap_url, len(urls))
            return urls

        logger.debug("Sitemap %s -> %d URL(s)", sitemap_url, len(document.url_entries))
        return list(document.url_entries)

    async def _load(self, sitemap_url: str) -> Optional[SitemapDocument]:
        try:
            page = await self.renderer.fetch(sitemap_url, self.timeout)
        except RenderError as exc:
            logger.warning("Error fetching sitemap %s: %s", sitemap_url, exc)
            return None
        except Exception:
            logger.exception("Unexpected error fetching sitemap %s, skipping branch", sitemap_url)
            return None
        if not page.ok:
            logger.debug("Sitemap %s -> HTTP %s", sitemap_url, page.status_code)
            return None
        return parse_sitemap(page.markup)
