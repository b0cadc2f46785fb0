# site_atlas/crawler/fetcher.py
"""
Fetcher module: opens an isolated page per visit and navigates it with a timeout.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError

from site_atlas.config import CrawlConfig
from site_atlas.crawler.models import NavigationResult

_BLANK = "about:blank"


class NavigationError(Exception):
    """Navigation failed (timeout, DNS, TLS, connection reset, ...)."""

    def __init__(self, message: str, url: str, final_url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url
        self.final_url = final_url or url


class Fetcher:
    """Navigates browser pages; one page per visit, always closed afterwards."""

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self.logger = logging.getLogger("SiteAtlas")

    @asynccontextmanager
    async def open_page(self, context: BrowserContext) -> AsyncIterator[Page]:
        page = await context.new_page()
        try:
            yield page
        finally:
            try:
                await page.close()
            except PlaywrightError as exc:
                # the page may already be gone together with its target
                self.logger.debug("Page close failed: %s", exc)

    async def navigate(self, page: Page, url: str) -> NavigationResult:
        """
        Navigate *page* to *url* and wait for DOMContentLoaded.

        Any HTTP status is a success; only a failed navigation raises
        :class:`NavigationError`.
        """
        try:
            response = await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.config.navigation_timeout_ms,
            )
        except PlaywrightError as exc:
            raise NavigationError(error_message(exc), url, _current_url(page)) from exc
        status = response.status if response is not None else None
        return NavigationResult(final_url=_current_url(page) or url, status=status)


def _current_url(page: Page) -> Optional[str]:
    try:
        current = page.url
    except PlaywrightError:
        return None
    if not current or current == _BLANK:
        return None
    return current


def error_message(exc: BaseException) -> str:
    # Playwright appends a multi-line call log to its messages
    message = getattr(exc, "message", None) or str(exc)
    return message.strip().splitlines()[0] if message.strip() else exc.__class__.__name__
