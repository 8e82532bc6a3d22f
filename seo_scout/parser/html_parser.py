# === FILE: seo_scout/parser/html_parser.py ===
"""HTML fact extraction for SEO Scout.

:func:`extract_page_facts` turns rendered markup into a
:class:`~seo_scout.crawler.models.PageFacts` record:

* title, meta description, canonical: ``None`` when absent or blank.
* h1 / h2 texts, in document order.
* word count of the ``<body>`` text.
* images (src, alt, width, height) and links (classified internal/external,
  ``rel=nofollow`` flag).
* Open Graph / Twitter Card tags and JSON-LD structured data.

The function is pure and tolerant: malformed or partial markup yields default
field values, never an exception.
"""
from __future__ import annotations

import json
import re
from collections.abc import Sequence
from typing import Any, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from seo_scout.crawler.models import ImageInfo, LinkInfo, PageFacts
from seo_scout.logger import get_logger

__all__: Sequence[str] = ("extract_page_facts", "is_internal_link", "parse_dimension")

logger = get_logger("extractor")

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _attr(tag: Tag, name: str) -> str:
    """Attribute as a plain string (bs4 returns lists for multi-valued ones)."""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _text(tag: Tag) -> str:
    return tag.get_text(strip=True)


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_dimension(raw: str) -> Optional[int]:
    """``"640"`` / ``"640px"`` → 640; missing, zero or non-numeric → ``None``."""
    match = _LEADING_INT_RE.match(raw or "")
    if not match:
        return None
    value = int(match.group(1))
    return value or None


def is_internal_link(href: str, page_url: str, origin_host: str) -> bool:
    """Classify a raw href relative to the page it appears on.

    The href is resolved against ``page_url`` and its host compared with the
    crawl's origin host. When resolution itself fails the href counts as
    internal unless it starts with ``http``, an approximation that rule
    counts downstream rely on.
    """
    try:
        resolved = urlsplit(urljoin(page_url, href))
        host = (resolved.hostname or "").lower()
        # .port raises ValueError for garbage ports
        resolved.port
    except ValueError:
        return not href.startswith("http")
    return bool(host) and host == origin_host


def _links(soup: BeautifulSoup, page_url: str, origin_host: str) -> tuple[LinkInfo, ...]:
    links: list[LinkInfo] = []
    for tag in soup.find_all("a"):
        if not isinstance(tag, Tag):
            continue
        href = _attr(tag, "href")
        rel = _attr(tag, "rel").lower()
        links.append(
            LinkInfo(
                target=href,
                display_text=_text(tag),
                is_internal=is_internal_link(href, page_url, origin_host),
                is_nofollow="nofollow" in rel,
            )
        )
    return tuple(links)


def _images(soup: BeautifulSoup) -> tuple[ImageInfo, ...]:
    images: list[ImageInfo] = []
    for tag in soup.find_all("img"):
        if not isinstance(tag, Tag):
            continue
        images.append(
            ImageInfo(
                src=_attr(tag, "src"),
                alt=_attr(tag, "alt") or None,
                width=parse_dimension(_attr(tag, "width")),
                height=parse_dimension(_attr(tag, "height")),
            )
        )
    return tuple(images)


def _prefixed_meta(soup: BeautifulSoup, attr: str, prefix: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in soup.find_all("meta"):
        if not isinstance(tag, Tag):
            continue
        key = _attr(tag, attr)
        content = _attr(tag, "content")
        if key.startswith(prefix) and content:
            tags[key] = content
    return tags


def _schema_markup(soup: BeautifulSoup) -> tuple[Any, ...]:
    blocks: list[Any] = []
    for tag in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = tag.string if isinstance(tag, Tag) else None
        if not raw:
            continue
        try:
            blocks.append(json.loads(raw))
        except ValueError:
            logger.debug("Skipping invalid JSON-LD block")
    return tuple(blocks)


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    return _optional(_attr(tag, "content")) if isinstance(tag, Tag) else None


def _canonical(soup: BeautifulSoup) -> Optional[str]:
    for tag in soup.find_all("link"):
        if isinstance(tag, Tag) and "canonical" in _attr(tag, "rel").lower().split():
            return _attr(tag, "href") or None
    return None


def _word_count(soup: BeautifulSoup) -> int:
    body = soup.body
    if body is None:
        return 0
    return len(body.get_text(" ").split())


def extract_page_facts(markup: str, page_url: str, origin_host: Optional[str] = None) -> PageFacts:
    """Parse ``markup`` fetched from ``page_url`` into :class:`PageFacts`.

    Parameters
    ----------
    markup
        Rendered HTML.
    page_url
        Absolute URL the markup came from; relative hrefs resolve against it.
    origin_host
        Host that counts as "internal". Defaults to the host of ``page_url``.
    """
    soup = BeautifulSoup(markup or "", "html.parser")
    host = (origin_host or urlsplit(page_url).hostname or "").lower()

    title_tag = soup.find("title")
    title = _optional(title_tag.get_text()) if isinstance(title_tag, Tag) else None

    return PageFacts(
        title=title,
        meta_description=_meta_content(soup, name="description"),
        h1_tags=tuple(_text(t) for t in soup.find_all("h1")),
        h2_tags=tuple(_text(t) for t in soup.find_all("h2")),
        word_count=_word_count(soup),
        images=_images(soup),
        links=_links(soup, page_url, host),
        canonical=_canonical(soup),
        og_tags=_prefixed_meta(soup, "property", "og:"),
        twitter_tags=_prefixed_meta(soup, "name", "twitter:"),
        schema_markup=_schema_markup(soup),
    )
