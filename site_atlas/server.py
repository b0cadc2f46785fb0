# File: site_atlas/server.py
"""site_atlas.server: HTTP-обёртка над движком обхода (aiohttp.web).

Маршруты:
  GET  /         короткая инструкция
  GET  /health   проверка живости
  GET  /crawl    ?baseurl=https://example.com&maxdepth=1
  POST /crawl    {"baseurl": "https://example.com", "maxdepth": 1}
"""
from __future__ import annotations

import os
from typing import Any, Awaitable, Callable, Optional

from aiohttp import web

from site_atlas.config import CrawlConfig
from site_atlas.crawler.models import SiteModel
from site_atlas.engine import crawl_site
from site_atlas.logger import logger
from site_atlas.utils import InvalidSeedURL

__all__ = ["create_app", "run_server", "DEFAULT_PORT"]

CrawlFunc = Callable[..., Awaitable[SiteModel]]

DEFAULT_PORT = 3000
CONFIG_KEY: web.AppKey[CrawlConfig] = web.AppKey("config", CrawlConfig)
CRAWL_KEY: web.AppKey[CrawlFunc] = web.AppKey("crawl")

USAGE = (
    "Site Crawler is up.<br/>"
    "GET: <code>/crawl?baseurl=https://example.com&amp;maxdepth=1</code><br/>"
    "POST: <code>/crawl</code> with JSON body "
    '<code>{"baseurl":"https://example.com","maxdepth":1}</code>'
)


class BadRequest(ValueError):
    """Ошибка входных данных запроса."""

    def __init__(self, message: str, example: Any = None) -> None:
        super().__init__(message)
        self.example = example


def _bad_request(exc: BadRequest) -> web.Response:
    body: dict[str, Any] = {"error": str(exc)}
    if exc.example is not None:
        body["example"] = exc.example
    return web.json_response(body, status=400)


def _require_baseurl(value: Any, example: Any) -> str:
    if not value or not isinstance(value, str):
        raise BadRequest("baseurl is required and must be a string", example)
    return value


def _parse_query_depth(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        depth = int(raw.strip(), 10)
    except ValueError:
        raise BadRequest("maxdepth, if provided, must be a non-negative integer") from None
    if depth < 0:
        raise BadRequest("maxdepth, if provided, must be a non-negative integer")
    return depth


def _parse_body_depth(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    # bool is an int subclass; floats like 1.0 are not accepted either
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise BadRequest("maxdepth, if provided, must be a non-negative integer")
    return raw


async def _run_crawl(request: web.Request, baseurl: str, max_depth: Optional[int]) -> web.Response:
    crawl = request.app[CRAWL_KEY]
    config = request.app[CONFIG_KEY]
    try:
        model = await crawl(baseurl, config, max_depth=max_depth)
    except InvalidSeedURL as exc:
        return web.json_response({"error": str(exc)}, status=400)
    except Exception as exc:
        logger.error("[%s /crawl] error: %s", request.method, exc)
        return web.json_response({"error": "Crawling failed", "details": str(exc) or "Unknown error"}, status=500)
    return web.json_response(model.to_dict())


async def index(_: web.Request) -> web.Response:
    return web.Response(text=USAGE, content_type="text/html")


async def health(_: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


async def crawl_get(request: web.Request) -> web.Response:
    try:
        baseurl = _require_baseurl(
            request.query.get("baseurl"), "/crawl?baseurl=https://example.com&maxdepth=1"
        )
        max_depth = _parse_query_depth(request.query.get("maxdepth"))
    except BadRequest as exc:
        return _bad_request(exc)
    return await _run_crawl(request, baseurl, max_depth)


async def crawl_post(request: web.Request) -> web.Response:
    example = {"baseurl": "https://example.com", "maxdepth": 1}
    try:
        try:
            body = await request.json() if request.can_read_body else {}
        except ValueError:
            raise BadRequest("request body must be valid JSON", example) from None
        if not isinstance(body, dict):
            raise BadRequest("request body must be a JSON object", example)
        baseurl = _require_baseurl(body.get("baseurl"), example)
        max_depth = _parse_body_depth(body.get("maxdepth"))
    except BadRequest as exc:
        return _bad_request(exc)
    return await _run_crawl(request, baseurl, max_depth)


def create_app(config: Optional[CrawlConfig] = None, crawl: CrawlFunc = crawl_site) -> web.Application:
    """Собирает aiohttp-приложение; crawl подменяется в тестах."""
    app = web.Application()
    app[CONFIG_KEY] = config or CrawlConfig()
    app[CRAWL_KEY] = crawl
    app.router.add_get("/", index)
    app.router.add_get("/health", health)
    app.router.add_get("/crawl", crawl_get)
    app.router.add_post("/crawl", crawl_post)
    return app


def run_server(config: Optional[CrawlConfig] = None, host: str = "0.0.0.0", port: Optional[int] = None) -> None:
    """Блокирующий запуск сервиса; порт по умолчанию из переменной PORT."""
    if port is None:
        port = int(os.environ.get("PORT", DEFAULT_PORT))
    logger.info("Server listening on %s:%d", host, port)
    web.run_app(create_app(config), host=host, port=port, print=None)
