"""Crawl engine: frontier, scope policy, fetcher and orchestrator."""
from site_atlas.crawler.crawler import AsyncCrawler
from site_atlas.crawler.fetcher import NavigationError
from site_atlas.crawler.frontier import Frontier
from site_atlas.crawler.scope import ScopePolicy

__all__ = ["AsyncCrawler", "Frontier", "NavigationError", "ScopePolicy"]
