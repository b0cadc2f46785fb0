# File: site_atlas/engine.py
"""site_atlas.engine: Точка входа движка обхода, общая для CLI и HTTP-сервиса."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Optional

from playwright.async_api import BrowserContext

from site_atlas.config import CrawlConfig
from site_atlas.crawler.crawler import AsyncCrawler
from site_atlas.crawler.models import SiteModel
from site_atlas.logger import logger
from site_atlas.utils import require_http_url

__all__ = ["crawl_site"]


async def crawl_site(
    seed_url: str,
    config: Optional[CrawlConfig] = None,
    *,
    max_depth: Optional[int] = None,
    session: Optional[AbstractAsyncContextManager[BrowserContext]] = None,
) -> SiteModel:
    """
    Обходит сайт от seed_url и возвращает SiteModel.

    Parameters
    ----------
    seed_url : str
        Абсолютный http(s) URL; иначе InvalidSeedURL до запуска браузера.
    config : CrawlConfig, optional
        Конфигурация запуска; по умолчанию значения CrawlConfig().
    max_depth : int, optional
        Переопределение глубины (из запроса или CLI).
    session : async context manager, optional
        Источник BrowserContext; по умолчанию запускается Chromium.
    """
    seed = require_http_url(seed_url)
    cfg = (config or CrawlConfig()).with_overrides(max_depth=max_depth)
    try:
        async with AsyncCrawler(seed, cfg, session=session) as crawler:
            return await crawler.crawl()
    except Exception as exc:
        logger.error("Crawl of %s failed: %s", seed, exc)
        raise
