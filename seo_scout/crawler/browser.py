# seo_scout/crawler/browser.py
"""
Headless Chromium renderer (Playwright) for JavaScript-rendered sites.

One browser per renderer instance, launched lazily on the first fetch and
shut down by :meth:`BrowserRenderer.close`. Each fetch opens and closes its
own tab. Requires the ``browser`` extra (``pip install seo_scout[browser]``
followed by ``playwright install chromium``).
"""
from __future__ import annotations

import time
from typing import Optional

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from seo_scout.config import DEFAULT_USER_AGENT
from seo_scout.crawler.models import RenderedPage
from seo_scout.errors import RenderError, RenderTimeout
from seo_scout.logger import get_logger

__all__ = ("BrowserRenderer",)

logger = get_logger("browser")

_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]
_VIEWPORT = {"width": 1920, "height": 1080}
_SELECTOR_WAIT_MS = 5_000
_SETTLE_MS = 2_000


class BrowserRenderer:
    """Renders pages in headless Chromium and returns the final DOM."""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, settle_ms: int = _SETTLE_MS) -> None:
        self.user_agent = user_agent
        self.settle_ms = settle_ms
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._closed = False

    async def _ensure_browser(self) -> Browser:
        if self._browser is None:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=True, args=_LAUNCH_ARGS)
            logger.info("Chromium launched")
        return self._browser

    async def fetch(self, url: str, timeout: float, wait_selector: Optional[str] = None) -> RenderedPage:
        if self._closed:
            raise RuntimeError("renderer already closed")
        page = None
        start = time.monotonic()
        try:
            browser = await self._ensure_browser()
            page = await browser.new_page(viewport=_VIEWPORT, user_agent=self.user_agent)
            response = await page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
            status = response.status if response is not None else 0
            content_type = response.headers.get("content-type", "") if response is not None else ""
            if response is not None and "html" not in content_type.lower():
                # robots.txt, sitemap.xml: the raw body, not Chromium's viewer DOM
                html = await response.text()
            else:
                if wait_selector:
                    try:
                        await page.wait_for_selector(wait_selector, timeout=_SELECTOR_WAIT_MS)
                    except PlaywrightTimeoutError:
                        logger.warning("Selector %s not found on %s, continuing", wait_selector, url)
                if self.settle_ms:
                    await page.wait_for_timeout(self.settle_ms)
                html = await page.content()
        except PlaywrightTimeoutError as exc:
            raise RenderTimeout(url, timeout) from exc
        except PlaywrightError as exc:
            raise RenderError(url, exc) from exc
        finally:
            if page is not None:
                await self._close_page(page, url)
        return RenderedPage(markup=html, status_code=status, elapsed=time.monotonic() - start)

    @staticmethod
    async def _close_page(page, url: str) -> None:
        # ошибка закрытия вкладки не должна подменять результат fetch
        try:
            await page.close()
        except Exception as exc:
            logger.warning("Failed to close tab for %s: %s", url, exc)

    async def close(self) -> None:
        self._closed = True
        browser, self._browser = self._browser, None
        pw, self._playwright = self._playwright, None
        try:
            if browser is not None:
                await browser.close()
        finally:
            if pw is not None:
                await pw.stop()
