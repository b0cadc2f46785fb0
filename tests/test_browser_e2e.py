# File: tests/test_browser_e2e.py
# End-to-end crawl against real Chromium; needs `playwright install chromium`
from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from site_atlas.config import CrawlConfig
from site_atlas.engine import crawl_site

pytestmark = pytest.mark.skipif(
    os.environ.get("SITE_ATLAS_BROWSER_TESTS") != "1",
    reason="set SITE_ATLAS_BROWSER_TESTS=1 to run real-browser tests",
)


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def test_site(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def handle_root(_):
        html = (
            "<html><head><title>Home</title></head><body>"
            '<a href="/about">About</a><a href="/#top">Top</a>'
            '<a href="https://external.invalid/">Ext</a>'
            '<img src="/logo.png">'
            "</body></html>"
        )
        resp = web.Response(text=html, content_type="text/html")
        resp.set_cookie("sid", "abc")
        return resp

    async def handle_about(_):
        html = (
            "<html><head><title>About</title></head><body>"
            '<form method="post"><input type="email" name="mail" required minlength="5"></form>'
            '<a href="/">Home</a><a href="/missing">Gone</a>'
            "</body></html>"
        )
        return web.Response(text=html, content_type="text/html")

    app.router.add_get("/", handle_root)
    app.router.add_get("/about", handle_about)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_real_browser_crawl(test_site: str):
    config = CrawlConfig(max_depth=2, request_delay=0, navigation_timeout=10.0)
    model = await crawl_site(f"{test_site}/", config)

    urls = [p.requested_url for p in model.pages]
    assert urls == [f"{test_site}/", f"{test_site}/about", f"{test_site}/missing"]
    home, about, missing = (p.to_dict() for p in model.pages)

    assert home["title"] == "Home"
    assert home["a11ySummary"]["imagesMissingAlt"] == 1
    assert any(c["name"] == "sid" for c in home["cookies"])
    assert about["forms"][0]["fields"][0]["validations"] == ["required", "minlength:5"]
    assert about["a11ySummary"]["unlabeledFormControls"] == 1
    assert missing["status"] == 404
    assert model.stats.processed == 3
