# site_atlas/crawler/models.py
"""
Data models for the SiteAtlas crawler.

Python attributes are snake_case; :meth:`to_dict` produces the camelCase wire
format returned by the HTTP service and written by the reports.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(slots=True, frozen=True)
class FrontierEntry:
    """A queued (url, depth) pair."""

    url: str
    depth: int


@dataclass(slots=True, frozen=True)
class NavigationResult:
    """Outcome of a successful navigation."""

    final_url: str
    status: Optional[int]


@dataclass(slots=True)
class ExtractionRecord:
    """Everything the page inspector reads from one loaded page."""

    title: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)
    open_graph: Dict[str, Optional[str]] = field(default_factory=dict)
    twitter_card: Dict[str, Optional[str]] = field(default_factory=dict)
    schema_org: List[Dict[str, Any]] = field(default_factory=list)
    headings: List[Dict[str, str]] = field(default_factory=list)
    landmarks: List[Dict[str, Optional[str]]] = field(default_factory=list)
    images: List[Dict[str, Optional[str]]] = field(default_factory=list)
    buttons: List[Dict[str, Any]] = field(default_factory=list)
    links: List[Dict[str, Optional[str]]] = field(default_factory=list)
    forms: List[Dict[str, Any]] = field(default_factory=list)
    visible_text: str = ""
    error_messages: List[str] = field(default_factory=list)
    perf: Dict[str, Optional[float]] = field(default_factory=dict)
    scripts: List[str] = field(default_factory=list)


@dataclass(slots=True)
class PageRecord:
    """One processed URL; ``extraction`` is None for a degraded record."""

    requested_url: str
    final_url: str
    status: Optional[int] = None
    error: Optional[str] = None
    extraction: Optional[ExtractionRecord] = None
    links: List[Dict[str, Any]] = field(default_factory=list)
    third_party: List[str] = field(default_factory=list)
    cookies: List[Dict[str, Any]] = field(default_factory=list)
    a11y_summary: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def degraded(
        cls, requested_url: str, final_url: str, error: str, status: Optional[int] = None
    ) -> PageRecord:
        return cls(requested_url=requested_url, final_url=final_url, status=status, error=error)

    @property
    def is_degraded(self) -> bool:
        return self.extraction is None

    def to_dict(self) -> Dict[str, Any]:
        if self.extraction is None:
            return {
                "requestedUrl": self.requested_url,
                "finalUrl": self.final_url,
                "status": self.status,
                "error": self.error,
            }
        ex = self.extraction
        return {
            "requestedUrl": self.requested_url,
            "finalUrl": self.final_url,
            "status": self.status,
            "title": ex.title,
            "meta": ex.meta,
            "openGraph": ex.open_graph,
            "twitterCard": ex.twitter_card,
            "schemaOrg": ex.schema_org,
            "headings": ex.headings,
            "landmarks": ex.landmarks,
            "images": ex.images,
            "buttons": ex.buttons,
            "links": self.links,
            "forms": ex.forms,
            "visibleText": ex.visible_text,
            "errorMessages": ex.error_messages,
            "perf": ex.perf,
            "scripts": ex.scripts,
            "thirdParty": self.third_party,
            "cookies": self.cookies,
            "a11ySummary": self.a11y_summary,
        }


@dataclass(slots=True)
class CrawlStats:
    unique_visited: int = 0
    processed: int = 0


@dataclass(slots=True)
class SiteModel:
    """Terminal output of one crawl run."""

    base_url: str
    max_depth: int
    max_pages: int
    pages: List[PageRecord] = field(default_factory=list)
    stats: CrawlStats = field(default_factory=CrawlStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "maxDepth": self.max_depth,
            "maxPages": self.max_pages,
            "pages": [page.to_dict() for page in self.pages],
            "stats": {
                "uniqueVisited": self.stats.unique_visited,
                "processed": self.stats.processed,
            },
        }
