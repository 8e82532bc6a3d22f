# File: seo_scout/server.py
"""seo_scout.server: HTTP API поверх aiohttp.web.

Маршруты:
  GET  /                      описание сервиса
  GET  /health                проверка живости процесса
  GET  /api/seo/health        проверка живости API
  POST /api/seo/audit         обход сайта + аудит
  POST /api/seo/analyze-page  аудит одной страницы

Каждый запрос получает собственный краулер и рендерер, поэтому
параллельные аудиты не делят состояние.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from aiohttp import web

from seo_scout import __version__
from seo_scout.config import build_config
from seo_scout.engine import analyze_page, start_audit
from seo_scout.errors import ConfigurationError
from seo_scout.logger import get_logger
from seo_scout.utils import is_http_url

__all__ = ["create_app", "run_server"]

logger = get_logger("server")

CONFIG_PATH_KEY = web.AppKey("config_path", object)
STARTED_AT_KEY = web.AppKey("started_at", float)

_AUDIT_FIELDS = (
    "max_pages",
    "follow_sitemap",
    "respect_robots",
    "wait_selector",
    "page_timeout",
    "crawl_deadline",
    "renderer",
)
_PAGE_FIELDS = ("wait_selector", "page_timeout", "renderer")
# имена полей, которые шлёт веб-клиент
_BODY_ALIASES = {
    "maxPages": "max_pages",
    "followSitemap": "follow_sitemap",
    "respectRobotsTxt": "respect_robots",
    "waitForSelector": "wait_selector",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _fail(status: int, error: str) -> web.Response:
    return web.json_response({"success": False, "error": error}, status=status)


async def _read_body(request: web.Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise web.HTTPBadRequest(
            text='{"success": false, "error": "Request body must be JSON"}',
            content_type="application/json",
        )
    if not isinstance(body, dict):
        raise web.HTTPBadRequest(
            text='{"success": false, "error": "Request body must be a JSON object"}',
            content_type="application/json",
        )
    return body


def _valid_url(url: str) -> bool:
    try:
        return is_http_url(url)
    except ValueError:
        return False


def _config_from(request: web.Request, body: Dict[str, Any], fields: tuple[str, ...]):
    url = body.get("url")
    if not url or not isinstance(url, str):
        return None, _fail(400, "URL is required")
    options = {_BODY_ALIASES.get(key, key): value for key, value in body.items()}
    overrides = {name: options.get(name) for name in fields}
    try:
        cfg = build_config(url, request.app[CONFIG_PATH_KEY], overrides)
    except ConfigurationError as exc:
        logger.info("Rejected request for %s: %s", url, exc)
        if not _valid_url(url):
            return None, _fail(400, "Invalid URL format")
        return None, _fail(400, "Invalid crawl options")
    return cfg, None


async def handle_root(_: web.Request) -> web.Response:
    return web.json_response(
        {
            "name": "SEO Scout API",
            "version": __version__,
            "status": "active",
            "endpoints": {
                "health": "/api/seo/health",
                "audit": "POST /api/seo/audit",
                "analyzePage": "POST /api/seo/analyze-page",
            },
        }
    )


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "success": True,
            "status": "healthy",
            "timestamp": _now(),
            "uptime": round(time.monotonic() - request.app[STARTED_AT_KEY], 3),
        }
    )


async def handle_seo_health(_: web.Request) -> web.Response:
    return web.json_response(
        {"success": True, "status": "healthy", "service": "SEO Scout API", "version": __version__}
    )


async def handle_audit(request: web.Request) -> web.Response:
    body = await _read_body(request)
    cfg, error = _config_from(request, body, _AUDIT_FIELDS)
    if error is not None:
        return error
    logger.info("Starting SEO audit for: %s", cfg.start_url)
    try:
        report = await start_audit(cfg)
    except Exception as exc:
        logger.exception("SEO audit error")
        return _fail(500, str(exc) or "Failed to complete SEO audit")
    return web.json_response({"success": True, "data": report.to_dict()})


async def handle_analyze_page(request: web.Request) -> web.Response:
    body = await _read_body(request)
    cfg, error = _config_from(request, body, _PAGE_FIELDS)
    if error is not None:
        return error
    logger.info("Analyzing single page: %s", cfg.start_url)
    try:
        report = await analyze_page(cfg)
    except Exception as exc:
        logger.exception("Page analysis error")
        return _fail(500, str(exc) or "Failed to analyze page")
    return web.json_response({"success": True, "data": report.to_dict()})


@web.middleware
async def json_errors(request: web.Request, handler):
    logger.debug("%s %s", request.method, request.path)
    try:
        return await handler(request)
    except web.HTTPNotFound:
        return web.json_response(
            {"success": False, "error": "Route not found", "path": request.path, "timestamp": _now()},
            status=404,
        )


def create_app(config_path: Optional[Union[str, Path]] = None) -> web.Application:
    """Собирает aiohttp-приложение; ``config_path`` задаёт базовый конфиг обхода."""
    app = web.Application(middlewares=[json_errors])
    app[CONFIG_PATH_KEY] = config_path
    app[STARTED_AT_KEY] = time.monotonic()
    app.router.add_get("/", handle_root)
    app.router.add_get("/health", handle_health)
    app.router.add_get("/api/seo/health", handle_seo_health)
    app.router.add_post("/api/seo/audit", handle_audit)
    app.router.add_post("/api/seo/analyze-page", handle_analyze_page)
    return app


def run_server(host: str = "0.0.0.0", port: int = 3000, config_path: Optional[Union[str, Path]] = None) -> None:
    logger.info("SEO Scout API listening on %s:%d", host, port)
    web.run_app(create_app(config_path), host=host, port=port, print=None)
