"""
SiteAtlas package initializer.
Defines package version and exposes the crawl engine entry point.
"""
__version__ = "0.1.0"

from site_atlas.config import CrawlConfig, load_config
from site_atlas.crawler.models import PageRecord, SiteModel
from site_atlas.engine import crawl_site
from site_atlas.utils import InvalidSeedURL

__all__ = ["__version__", "CrawlConfig", "load_config", "PageRecord", "SiteModel", "crawl_site", "InvalidSeedURL"]
