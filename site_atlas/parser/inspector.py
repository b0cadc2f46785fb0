# site_atlas/parser/inspector.py
"""
Page inspector bound to a live browser page.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from site_atlas.crawler.models import ExtractionRecord
from site_atlas.parser.html_parser import extract_page

# Navigation Timing Level 1, as relative milliseconds
PERF_SCRIPT = """() => {
  const t = window.performance && window.performance.timing;
  if (!t) return {};
  const base = t.navigationStart || 0;
  return {
    domContentLoadedMs: ((t.domContentLoadedEventEnd || 0) - base) || null,
    loadEventMs: ((t.loadEventEnd || 0) - base) || null
  };
}"""

VISIBLE_TEXT_SCRIPT = "() => document.body ? document.body.innerText : null"


class PageInspector:
    """Reads the rendered DOM and the navigation timings of a loaded page."""

    def __init__(self) -> None:
        self.logger = logging.getLogger("SiteAtlas")

    async def timings(self, page: Page) -> Dict[str, Optional[float]]:
        try:
            perf = await page.evaluate(PERF_SCRIPT)
        except PlaywrightError as exc:
            self.logger.debug("Timings unavailable for %s: %s", page.url, exc)
            return {}
        return perf if isinstance(perf, dict) else {}

    async def visible_text(self, page: Page) -> Optional[str]:
        try:
            text = await page.evaluate(VISIBLE_TEXT_SCRIPT)
        except PlaywrightError as exc:
            self.logger.debug("innerText unavailable for %s: %s", page.url, exc)
            return None
        return text if isinstance(text, str) else None

    async def inspect(self, page: Page, page_url: str) -> ExtractionRecord:
        """
        Build the extraction record of *page*.

        Raises Playwright's ``Error`` only when the page itself is gone and its
        markup cannot be read at all; individual fields never raise.
        """
        perf = await self.timings(page)
        text = await self.visible_text(page)
        html = await page.content()
        return extract_page(html, page_url, perf, visible_text=text)
