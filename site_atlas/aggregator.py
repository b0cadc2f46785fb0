# File: site_atlas/aggregator.py
"""site_atlas.aggregator: Сборка PageRecord из результатов навигации и извлечения."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from site_atlas.crawler.models import ExtractionRecord, NavigationResult, PageRecord
from site_atlas.utils import host_of, same_origin

__all__ = [
    "third_party_scripts",
    "accessibility_summary",
    "annotate_links",
    "build_page_record",
]


def third_party_scripts(scripts: Iterable[str], page_url: str) -> List[str]:
    """Скрипты, чей host отличается от host страницы; неразбираемые URL пропускаются."""
    page_host = host_of(page_url)
    third_party: List[str] = []
    for src in scripts:
        script_host = host_of(src)
        if script_host is not None and script_host != page_host:
            third_party.append(src)
    return third_party


def accessibility_summary(extraction: ExtractionRecord) -> Dict[str, int]:
    """Счётчики доступности: изображения без alt и поля форм без label."""
    missing_alt = sum(1 for img in extraction.images if not (img.get("alt") or "").strip())
    unlabeled = sum(int(form.get("a11y", {}).get("unlabeledControls") or 0) for form in extraction.forms)
    return {"imagesMissingAlt": missing_alt, "unlabeledFormControls": unlabeled}


def annotate_links(links: Iterable[Mapping[str, Optional[str]]], page_url: str) -> List[Dict[str, Any]]:
    """Добавляет к каждой ссылке флаг sameOrigin относительно итогового URL страницы."""
    return [{**link, "sameOrigin": same_origin(page_url, link.get("href") or "")} for link in links]


def build_page_record(
    requested_url: str,
    navigation: NavigationResult,
    extraction: ExtractionRecord,
    cookies: Optional[List[Dict[str, Any]]] = None,
) -> PageRecord:
    """Собирает полную запись страницы."""
    final_url = navigation.final_url
    return PageRecord(
        requested_url=requested_url,
        final_url=final_url,
        status=navigation.status,
        extraction=extraction,
        links=annotate_links(extraction.links, final_url),
        third_party=third_party_scripts(extraction.scripts, final_url),
        cookies=list(cookies or []),
        a11y_summary=accessibility_summary(extraction),
    )
