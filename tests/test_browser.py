# File: tests/test_browser.py
# BrowserRenderer against stubbed Playwright objects (no Chromium needed)
from __future__ import annotations

import logging
from typing import List, Optional

import pytest

pytest.importorskip("playwright")

from playwright.async_api import Error as PlaywrightError  # noqa: E402
from playwright.async_api import TimeoutError as PlaywrightTimeoutError  # noqa: E402

from seo_scout.crawler.browser import BrowserRenderer  # noqa: E402
from seo_scout.errors import RenderError, RenderTimeout  # noqa: E402
from seo_scout.logger import PROJECT_LOGGER  # noqa: E402

URL = "https://example.com/"


class StubResponse:
    def __init__(self, status: int = 200, content_type: str = "text/html", body: str = ""):
        self.status = status
        self.headers = {"content-type": content_type}
        self.body = body

    async def text(self) -> str:
        return self.body


class StubPage:
    def __init__(
        self,
        response: Optional[StubResponse] = None,
        dom: str = "<html><body>rendered</body></html>",
        goto_error: Optional[Exception] = None,
        missing_selector: bool = False,
        close_error: Optional[Exception] = None,
    ):
        self.response = response if response is not None else StubResponse()
        self.dom = dom
        self.goto_error = goto_error
        self.missing_selector = missing_selector
        self.close_error = close_error
        self.selectors: List[str] = []
        self.settled: List[int] = []
        self.close_calls = 0

    async def goto(self, url, wait_until=None, timeout=None):
        if self.goto_error is not None:
            raise self.goto_error
        return self.response

    async def wait_for_selector(self, selector, timeout=None):
        self.selectors.append(selector)
        if self.missing_selector:
            raise PlaywrightTimeoutError(f"waiting for {selector} failed")

    async def wait_for_timeout(self, ms):
        self.settled.append(ms)

    async def content(self) -> str:
        return self.dom

    async def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class StubBrowser:
    def __init__(self, page: Optional[StubPage] = None, new_page_error: Optional[Exception] = None):
        self.page = page
        self.new_page_error = new_page_error
        self.page_options: List[dict] = []
        self.close_calls = 0

    async def new_page(self, **options):
        self.page_options.append(options)
        if self.new_page_error is not None:
            raise self.new_page_error
        return self.page

    async def close(self) -> None:
        self.close_calls += 1


class StubPlaywright:
    def __init__(self):
        self.stop_calls = 0

    async def stop(self) -> None:
        self.stop_calls += 1


def make_renderer(browser: StubBrowser) -> tuple[BrowserRenderer, StubPlaywright]:
    renderer = BrowserRenderer(user_agent="TestAgent/1.0", settle_ms=10)
    playwright = StubPlaywright()
    renderer._browser = browser
    renderer._playwright = playwright
    return renderer, playwright


@pytest.fixture()
def project_log(caplog):
    # логгер проекта не пропагирует в root, подключаем обработчик caplog напрямую
    project = logging.getLogger(PROJECT_LOGGER)
    project.addHandler(caplog.handler)
    yield caplog
    project.removeHandler(caplog.handler)


@pytest.mark.asyncio()
async def test_html_page_returns_rendered_dom():
    page = StubPage(response=StubResponse(status=200, content_type="text/html; charset=utf-8"))
    browser = StubBrowser(page)
    renderer, _ = make_renderer(browser)

    rendered = await renderer.fetch(URL, 5.0)

    assert rendered.markup == "<html><body>rendered</body></html>"
    assert rendered.status_code == 200
    assert page.settled == [10]
    assert page.close_calls == 1
    assert browser.page_options[0]["user_agent"] == "TestAgent/1.0"


@pytest.mark.asyncio()
async def test_missing_selector_is_only_logged(project_log):
    page = StubPage(missing_selector=True)
    renderer, _ = make_renderer(StubBrowser(page))

    rendered = await renderer.fetch(URL, 5.0, wait_selector="#app")

    assert page.selectors == ["#app"]
    assert rendered.markup == page.dom
    assert "Selector #app not found" in project_log.text


@pytest.mark.asyncio()
async def test_non_html_response_returns_raw_body():
    body = "User-agent: *\nCrawl-delay: 3"
    page = StubPage(response=StubResponse(content_type="text/plain", body=body))
    renderer, _ = make_renderer(StubBrowser(page))

    rendered = await renderer.fetch("https://example.com/robots.txt", 5.0, wait_selector="#app")

    assert rendered.markup == body
    assert page.selectors == []
    assert page.settled == []


@pytest.mark.asyncio()
async def test_navigation_timeout_becomes_render_timeout():
    page = StubPage(goto_error=PlaywrightTimeoutError("Timeout 5000ms exceeded"))
    renderer, _ = make_renderer(StubBrowser(page))

    with pytest.raises(RenderTimeout):
        await renderer.fetch(URL, 5.0)
    assert page.close_calls == 1


@pytest.mark.asyncio()
async def test_new_page_failure_becomes_render_error():
    renderer, _ = make_renderer(StubBrowser(new_page_error=PlaywrightError("Target closed")))

    with pytest.raises(RenderError) as excinfo:
        await renderer.fetch(URL, 5.0)
    assert not isinstance(excinfo.value, RenderTimeout)
    assert excinfo.value.url == URL


@pytest.mark.asyncio()
async def test_tab_close_failure_does_not_mask_result(project_log):
    page = StubPage(close_error=PlaywrightError("Target closed"))
    renderer, _ = make_renderer(StubBrowser(page))

    rendered = await renderer.fetch(URL, 5.0)

    assert rendered.markup == page.dom
    assert "Failed to close tab" in project_log.text


@pytest.mark.asyncio()
async def test_tab_close_failure_does_not_mask_render_error():
    page = StubPage(goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"), close_error=OSError("gone"))
    renderer, _ = make_renderer(StubBrowser(page))

    with pytest.raises(RenderError):
        await renderer.fetch(URL, 5.0)


@pytest.mark.asyncio()
async def test_close_shuts_down_once():
    browser = StubBrowser(StubPage())
    renderer, playwright = make_renderer(browser)

    await renderer.close()
    await renderer.close()

    assert browser.close_calls == 1
    assert playwright.stop_calls == 1
    with pytest.raises(RuntimeError):
        await renderer.fetch(URL, 5.0)
