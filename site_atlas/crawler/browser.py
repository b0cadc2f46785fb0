# site_atlas/crawler/browser.py
"""
Browser lifecycle: one Playwright driver, one Chromium process and one browsing
context per crawl run.
"""
from __future__ import annotations

import logging
from contextlib import AsyncExitStack
from typing import Optional

from playwright.async_api import Browser, BrowserContext, async_playwright

from site_atlas.config import CrawlConfig


class BrowserSession:
    """Async context manager yielding a ready :class:`BrowserContext`.

    Everything acquired in ``__aenter__`` is released in ``__aexit__``, and a
    failure halfway through ``__aenter__`` unwinds what was already started.
    """

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self._stack: Optional[AsyncExitStack] = None
        self.logger = logging.getLogger("SiteAtlas")

    async def __aenter__(self) -> BrowserContext:
        stack = AsyncExitStack()
        try:
            playwright = await stack.enter_async_context(async_playwright())
            self.browser = await playwright.chromium.launch(
                headless=self.config.headless,
                args=list(self.config.browser_args),
            )
            stack.push_async_callback(self.browser.close)
            context_options = {}
            if self.config.user_agent:
                context_options["user_agent"] = self.config.user_agent
            self.context = await self.browser.new_context(**context_options)
            stack.push_async_callback(self.context.close)
        except BaseException:
            await stack.aclose()
            raise
        self._stack = stack
        self.logger.debug("Browser started (headless=%s)", self.config.headless)
        return self.context

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._stack is not None:
            stack, self._stack = self._stack, None
            await stack.aclose()
            self.logger.debug("Browser closed")
        self.context = None
        self.browser = None
