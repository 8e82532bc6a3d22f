# seo_scout/crawler/fetcher.py
"""
Fetcher module: plain HTTP page renderer built on one aiohttp session.

The session is opened lazily on the first fetch and closed by
:meth:`HttpRenderer.close`; a closed renderer cannot be reused. Every URL is
requested exactly once (no retries); non-2xx answers are returned to the
caller with their status code.
"""
from __future__ import annotations

import asyncio
import time
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from seo_scout.config import DEFAULT_USER_AGENT, CrawlConfig
from seo_scout.crawler.models import PageRenderer, RenderedPage
from seo_scout.errors import RenderError, RenderTimeout
from seo_scout.logger import get_logger

__all__ = ("HttpRenderer", "make_renderer")

logger = get_logger("fetcher")


class HttpRenderer:
    """Fetches raw markup over HTTP; JavaScript is not executed."""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self.user_agent = user_agent
        self.session: Optional[ClientSession] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_session(self) -> ClientSession:
        if self._closed:
            raise RuntimeError("renderer already closed")
        if self.session is None:
            self.session = ClientSession(
                headers={"User-Agent": self.user_agent},
                raise_for_status=False,
            )
        return self.session

    async def fetch(self, url: str, timeout: float, wait_selector: Optional[str] = None) -> RenderedPage:
        """
        Fetch ``url`` and return its markup, status and elapsed seconds.

        Raises RenderTimeout when ``timeout`` elapses, RenderError on any
        other transport failure.
        """
        session = self._ensure_session()
        if wait_selector:
            logger.debug("HTTP renderer ignores wait selector %r", wait_selector)
        start = time.monotonic()
        try:
            async with session.get(url, timeout=ClientTimeout(total=timeout)) as resp:
                text = await resp.text(errors="replace")
                status = resp.status
        except asyncio.TimeoutError as exc:
            raise RenderTimeout(url, timeout) from exc
        except (ClientError, UnicodeDecodeError, ValueError) as exc:
            raise RenderError(url, exc) from exc
        elapsed = time.monotonic() - start
        logger.debug("GET %s -> %s (%.2f s)", url, status, elapsed)
        return RenderedPage(markup=text, status_code=status, elapsed=elapsed)

    async def close(self) -> None:
        self._closed = True
        if self.session is not None and not self.session.closed:
            await self.session.close()


def make_renderer(config: CrawlConfig) -> PageRenderer:
    """Build the renderer selected by ``config.renderer``."""
    if config.renderer == "browser":
        from seo_scout.crawler.browser import BrowserRenderer

        return BrowserRenderer(config.user_agent)
    return HttpRenderer(config.user_agent)
