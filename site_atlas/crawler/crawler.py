# === FILE: site_atlas/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import AbstractAsyncContextManager, AsyncExitStack
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from playwright.async_api import BrowserContext
from playwright.async_api import Error as PlaywrightError

from site_atlas.aggregator import build_page_record
from site_atlas.config import CrawlConfig
from site_atlas.crawler.browser import BrowserSession
from site_atlas.crawler.fetcher import Fetcher, NavigationError, error_message
from site_atlas.crawler.frontier import Frontier
from site_atlas.crawler.models import CrawlStats, FrontierEntry, PageRecord, SiteModel
from site_atlas.crawler.scope import ScopePolicy
from site_atlas.parser.inspector import PageInspector
from site_atlas.utils import require_http_url

__all__ = ("AsyncCrawler", "PolitenessGate")


class PolitenessGate:
    """Global pause before every navigation.

    The sleep happens under a lock: one worker gets a plain delay before each
    page, several workers get at most one navigation start per *delay*.
    """

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        if self.delay <= 0:
            return
        async with self._lock:
            await asyncio.sleep(self.delay)


@dataclass(slots=True)
class _Run:
    """Mutable state of one crawl run; never shared between runs."""

    frontier: Frontier
    deadline: Optional[float]
    cond: asyncio.Condition = field(default_factory=asyncio.Condition)
    pages: List[PageRecord] = field(default_factory=list)
    in_flight: int = 0
    deadline_hit: bool = False


class AsyncCrawler:
    """Браузерный BFS-краулер: frontier → fetcher → inspector → запись страницы."""

    def __init__(
        self,
        seed_url: str,
        config: Optional[CrawlConfig] = None,
        *,
        session: Optional[AbstractAsyncContextManager[BrowserContext]] = None,
        inspector: Optional[PageInspector] = None,
    ) -> None:
        # validated before any browser resource exists
        self.seed_url = require_http_url(seed_url)
        self.config = config or CrawlConfig()
        self.scope = ScopePolicy(self.seed_url, self.config)
        self.fetcher = Fetcher(self.config)
        self.inspector = inspector or PageInspector()
        self.gate = PolitenessGate(self.config.request_delay)
        self.context: Optional[BrowserContext] = None
        self.logger = logging.getLogger("SiteAtlas")
        self._session = session
        self._stack: Optional[AsyncExitStack] = None

    async def __aenter__(self) -> AsyncCrawler:
        session = self._session if self._session is not None else BrowserSession(self.config)
        stack = AsyncExitStack()
        try:
            self.context = await stack.enter_async_context(session)
        except BaseException:
            await stack.aclose()
            raise
        self._stack = stack
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.context = None
        if self._stack is not None:
            stack, self._stack = self._stack, None
            await stack.aclose()

    async def crawl(self) -> SiteModel:
        if self.context is None:
            raise RuntimeError("Browser context not initialized")
        cfg = self.config
        self.logger.info(
            "Старт обхода: %s (depth=%d, pages=%d, workers=%d)",
            self.seed_url, cfg.max_depth, cfg.max_pages, cfg.concurrency,
        )
        start = time.monotonic()
        loop = asyncio.get_running_loop()
        run = _Run(
            frontier=Frontier(cfg.max_depth, cfg.max_pages),
            deadline=loop.time() + cfg.run_timeout if cfg.run_timeout else None,
        )
        run.frontier.push(self.seed_url, 0)

        workers = [asyncio.create_task(self._worker(run)) for _ in range(cfg.concurrency)]
        try:
            await asyncio.gather(*workers)
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        frontier = run.frontier
        if frontier.exhausted and len(frontier):
            self.logger.info("Лимит страниц %d достигнут, в очереди осталось %d", cfg.max_pages, len(frontier))
        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (%.2f стр/с)",
            frontier.processed, duration, frontier.processed / duration if duration else 0,
        )
        return SiteModel(
            base_url=self.seed_url,
            max_depth=cfg.max_depth,
            max_pages=cfg.max_pages,
            pages=run.pages,
            stats=CrawlStats(unique_visited=len(frontier.visited), processed=frontier.processed),
        )

    async def _worker(self, run: _Run) -> None:
        while True:
            entry = await self._next_entry(run)
            if entry is None:
                return
            children: List[str] = []
            try:
                record, children = await self._visit(entry)
                run.pages.append(record)
            finally:
                async with run.cond:
                    for url in children:
                        run.frontier.push(url, entry.depth + 1)
                    run.in_flight -= 1
                    run.cond.notify_all()

    async def _next_entry(self, run: _Run) -> Optional[FrontierEntry]:
        loop = asyncio.get_running_loop()
        async with run.cond:
            while True:
                if run.deadline is not None and loop.time() >= run.deadline:
                    if not run.deadline_hit:
                        run.deadline_hit = True
                        self.logger.warning(
                            "Дедлайн обхода %.1f с истёк, возвращаем частичный результат", self.config.run_timeout
                        )
                    return None
                entry = run.frontier.claim(self.scope.in_origin)
                if entry is not None:
                    run.in_flight += 1
                    return entry
                if run.in_flight == 0 or run.frontier.exhausted:
                    return None
                await run.cond.wait()

    async def _visit(self, entry: FrontierEntry) -> Tuple[PageRecord, List[str]]:
        """Fetch, inspect and enrich one page; page-level failures become degraded records."""
        context = self.context
        if context is None:
            raise RuntimeError("Browser context not initialized")
        url = entry.url
        self.logger.debug("Visit %s (depth %d)", url, entry.depth)
        await self.gate.wait()
        async with self.fetcher.open_page(context) as page:
            try:
                navigation = await self.fetcher.navigate(page, url)
            except NavigationError as exc:
                self.logger.warning("Failed %s: %s", url, exc)
                return PageRecord.degraded(url, exc.final_url, str(exc)), []
            try:
                extraction = await self.inspector.inspect(page, navigation.final_url)
                cookies = await context.cookies(navigation.final_url)
            except PlaywrightError as exc:
                self.logger.warning("Extraction failed %s: %s", url, exc)
                return PageRecord.degraded(url, navigation.final_url, error_message(exc), navigation.status), []

        record = build_page_record(url, navigation, extraction, [dict(c) for c in cookies])
        children = list(self.scope.children(extraction.links, entry.depth))
        return record, children
