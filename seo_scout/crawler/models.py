# seo_scout/crawler/models.py
"""
Data models for the SEO Scout crawler.

Everything here is immutable once built: a :class:`PageRecord` is produced
exactly once per visited URL and is then only read (by the rule engine and
the reports).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

__all__ = (
    "RenderedPage",
    "ImageInfo",
    "LinkInfo",
    "PageFacts",
    "PageRecord",
    "PageRenderer",
)


@dataclass(frozen=True, slots=True)
class RenderedPage:
    """Raw result of one fetch: markup, HTTP status and elapsed seconds."""

    markup: str
    status_code: int
    elapsed: float

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class PageRenderer(Protocol):
    """Contract of a page renderer owned by exactly one crawl.

    ``fetch`` raises :class:`~seo_scout.errors.RenderError` (or
    :class:`~seo_scout.errors.RenderTimeout`) on navigation failure and never
    raises on a non-2xx status. ``close`` releases the underlying resource.
    """

    async def fetch(
        self, url: str, timeout: float, wait_selector: Optional[str] = None
    ) -> RenderedPage: ...

    async def close(self) -> None: ...


@dataclass(frozen=True, slots=True)
class ImageInfo:
    src: str
    alt: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True, slots=True)
class LinkInfo:
    """One ``<a>`` element: raw href, anchor text and its classification."""

    target: str
    display_text: str
    is_internal: bool
    is_nofollow: bool


@dataclass(frozen=True, slots=True)
class PageFacts:
    """Structural facts the extractor pulls out of one HTML document."""

    title: Optional[str] = None
    meta_description: Optional[str] = None
    h1_tags: Tuple[str, ...] = ()
    h2_tags: Tuple[str, ...] = ()
    word_count: int = 0
    images: Tuple[ImageInfo, ...] = ()
    links: Tuple[LinkInfo, ...] = ()
    canonical: Optional[str] = None
    og_tags: Dict[str, str] = field(default_factory=dict)
    twitter_tags: Dict[str, str] = field(default_factory=dict)
    # JSON-LD blocks, decoded but otherwise passed through untouched
    schema_markup: Tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class PageRecord:
    """Extracted fact set for one visited URL."""

    url: str
    status_code: int
    load_time: float
    title: Optional[str] = None
    meta_description: Optional[str] = None
    h1_tags: Tuple[str, ...] = ()
    h2_tags: Tuple[str, ...] = ()
    word_count: int = 0
    images: Tuple[ImageInfo, ...] = ()
    links: Tuple[LinkInfo, ...] = ()
    canonical: Optional[str] = None
    og_tags: Dict[str, str] = field(default_factory=dict)
    twitter_tags: Dict[str, str] = field(default_factory=dict)
    schema_markup: Tuple[Any, ...] = ()

    @classmethod
    def build(cls, url: str, rendered: RenderedPage, facts: PageFacts) -> PageRecord:
        return cls(
            url=url,
            status_code=rendered.status_code,
            load_time=rendered.elapsed,
            title=facts.title,
            meta_description=facts.meta_description,
            h1_tags=facts.h1_tags,
            h2_tags=facts.h2_tags,
            word_count=facts.word_count,
            images=facts.images,
            links=facts.links,
            canonical=facts.canonical,
            og_tags=dict(facts.og_tags),
            twitter_tags=dict(facts.twitter_tags),
            schema_markup=facts.schema_markup,
        )

    def internal_links(self) -> list[LinkInfo]:
        """Links the crawler may follow: internal and not ``rel=nofollow``."""
        return [link for link in self.links if link.is_internal and not link.is_nofollow]

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "status_code": self.status_code,
            "load_time": round(self.load_time, 3),
            "title": self.title,
            "meta_description": self.meta_description,
            "h1_tags": list(self.h1_tags),
            "h2_tags": list(self.h2_tags),
            "word_count": self.word_count,
            "images": [
                {"src": i.src, "alt": i.alt, "width": i.width, "height": i.height}
                for i in self.images
            ],
            "links": [
                {
                    "href": link.target,
                    "text": link.display_text,
                    "is_internal": link.is_internal,
                    "is_nofollow": link.is_nofollow,
                }
                for link in self.links
            ],
            "canonical": self.canonical,
            "og_tags": dict(self.og_tags),
            "twitter_tags": dict(self.twitter_tags),
            "schema_markup": list(self.schema_markup),
        }
