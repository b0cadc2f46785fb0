# site_atlas/crawler/scope.py
"""
Scope policy: which discovered links may enter the frontier.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Mapping, Optional

from site_atlas.config import CrawlConfig
from site_atlas.utils import is_crawlable, is_http_url, same_origin


class ScopePolicy:
    """Origin, scheme and depth rules relative to the seed URL."""

    def __init__(self, seed_url: str, config: CrawlConfig) -> None:
        self.seed_url = seed_url
        self.config = config
        self.logger = logging.getLogger("SiteAtlas")

    def in_origin(self, url: str) -> bool:
        return not self.config.same_origin_only or same_origin(url, self.seed_url)

    def can_descend(self, depth: int) -> bool:
        return depth + 1 <= self.config.max_depth

    def is_eligible(self, href: Optional[str], depth: int) -> bool:
        if not is_crawlable(href) or not self.can_descend(depth):
            return False
        return is_http_url(href) and self.in_origin(href)

    def children(self, links: Iterable[Mapping[str, Optional[str]]], depth: int) -> Iterator[str]:
        """Yield eligible hrefs in document order."""
        if not self.can_descend(depth):
            return
        for link in links:
            href = link.get("href")
            if self.is_eligible(href, depth):
                yield href  # type: ignore[misc]
            else:
                self.logger.debug("Out of scope: %s", href)
