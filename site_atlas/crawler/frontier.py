# site_atlas/crawler/frontier.py
"""
Breadth-first frontier: FIFO queue of (url, depth) entries plus the visited set.
"""
from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Optional, Set

from site_atlas.crawler.models import FrontierEntry
from site_atlas.utils import normalize_url

Admit = Callable[[str], bool]


class Frontier:
    """FIFO queue that enforces the depth and total-page budgets.

    Entries are pushed without a visited check; duplicates are dropped when they
    reach the head of the queue. :meth:`claim` does the check-then-mark in one
    synchronous step, so it is atomic for every coroutine sharing the frontier.
    """

    def __init__(self, max_depth: int, max_pages: int) -> None:
        self.max_depth = max_depth
        self.max_pages = max_pages
        self.processed = 0
        self._queue: Deque[FrontierEntry] = deque()
        self._visited: Set[str] = set()

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    @property
    def exhausted(self) -> bool:
        return self.processed >= self.max_pages

    def push(self, url: str, depth: int) -> None:
        self._queue.append(FrontierEntry(url, depth))

    def claim(self, admit: Optional[Admit] = None) -> Optional[FrontierEntry]:
        """Pop entries until one may be fetched; mark it visited and count it.

        Returns None when the queue is drained or the page budget is spent.
        """
        while self._queue and not self.exhausted:
            entry = self._queue.popleft()
            if entry.depth > self.max_depth:
                continue
            key = normalize_url(entry.url)
            if key in self._visited:
                continue
            if admit is not None and not admit(entry.url):
                continue
            self._visited.add(key)
            self.processed += 1
            return entry
        return None
