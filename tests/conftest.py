# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Dict, List, Optional, Tuple, Union

import pytest
from aiohttp import web

from seo_scout.config import CrawlConfig
from seo_scout.crawler.models import RenderedPage
from seo_scout.errors import RenderError

Scripted = Union[str, Tuple[str, int], Exception]


class FakeRenderer:
    """Рендерер со скриптованными ответами: url -> html | (html, status) | исключение.

    Неизвестные URL отдают 404. Все вызовы fetch и close записываются.
    """

    def __init__(self, pages: Optional[Dict[str, Scripted]] = None, close_error: Optional[Exception] = None):
        self.pages: Dict[str, Scripted] = dict(pages or {})
        self.calls: List[str] = []
        self.wait_selectors: List[Optional[str]] = []
        self.close_calls = 0
        self.close_error = close_error

    async def fetch(self, url: str, timeout: float, wait_selector: Optional[str] = None) -> RenderedPage:
        self.calls.append(url)
        self.wait_selectors.append(wait_selector)
        scripted = self.pages.get(url, ("", 404))
        if isinstance(scripted, Exception):
            raise scripted
        if isinstance(scripted, tuple):
            markup, status = scripted
        else:
            markup, status = scripted, 200
        return RenderedPage(markup=markup, status_code=status, elapsed=0.01)

    async def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error

    def page_calls(self) -> List[str]:
        """Вызовы fetch без robots.txt и sitemap-ов."""
        return [u for u in self.calls if not u.endswith("/robots.txt") and "sitemap" not in u]


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


def html_page(body: str = "", title: str = "Page") -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


def links_to(*hrefs: str) -> str:
    return "".join(f'<a href="{h}">{h}</a>' for h in hrefs)


def render_failure(url: str) -> RenderError:
    return RenderError(url, "connection refused")


@pytest.fixture()
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def basic_config() -> CrawlConfig:
    """
    Return a basic valid CrawlConfig for crawler tests.
    """
    return CrawlConfig(
        start_url="https://example.com",
        max_pages=10,
        page_timeout=2.0,
        policy_timeout=1.0,
        user_agent="TestAgent/1.0",
    )


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()
