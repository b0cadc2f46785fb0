# === FILE: site_atlas/parser/html_parser.py ===
"""DOM extraction for SiteAtlas.

:func:`extract_page` turns the rendered markup of a loaded page into an
:class:`~site_atlas.crawler.models.ExtractionRecord`. The browser already ran
the page's scripts, so the markup is the DOM as it looked at DOMContentLoaded.

Every field is read by its own helper. A helper that fails leaves its field at
the default value instead of aborting the whole extraction, which keeps one
broken attribute (a malformed URL, unparsable JSON-LD, ...) from costing the
rest of the page.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from typing import Any, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_atlas.crawler.models import ExtractionRecord

__all__: Sequence[str] = ("extract_page", "TEXT_LIKE_INPUTS", "LANDMARK_TAGS")

logger = logging.getLogger("SiteAtlas")

LANDMARK_TAGS: tuple[str, ...] = ("header", "nav", "main", "aside", "footer", "section", "article", "form")
TEXT_LIKE_INPUTS: frozenset[str] = frozenset(
    ("text", "email", "password", "search", "tel", "url", "number")
)
HEADING_TAGS: tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")
# what HTMLFormElement.elements lists
FORM_CONTROL_TAGS: tuple[str, ...] = ("button", "fieldset", "input", "object", "output", "select", "textarea")
BUTTON_SELECTOR = 'button, [role="button"], input[type="button"], input[type="submit"]'
ERROR_SELECTOR = ".error, .alert, .validation-error"
_INVISIBLE_TAGS = ("script", "style", "noscript", "template")


# ---------------------------------------------------------------------------
# Small helpers
# ---------------------------------------------------------------------------


def _attr(tag: Tag, name: str) -> Optional[str]:
    """Attribute as a string; multi-valued attributes are joined; empty -> None."""
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


def _text(tag: Tag) -> str:
    return tag.get_text(" ", strip=True)


def _resolve(base_url: str, href: Optional[str]) -> Optional[str]:
    if href is None:
        return None
    try:
        return urljoin(base_url, href.strip())
    except ValueError:
        return None


def _safe(field_name: str, func: Callable[[], Any], default: Any) -> Any:
    try:
        return func()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Extraction of %s failed: %s", field_name, exc)
        return default


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------


def _title(soup: BeautifulSoup) -> Optional[str]:
    tag = soup.find("title")
    if tag is None:
        return None
    return " ".join(tag.get_text().split()) or None


def _meta_content(soup: BeautifulSoup, name: str) -> Optional[str]:
    tag = soup.find("meta", attrs={"name": name})
    return _attr(tag, "content") if isinstance(tag, Tag) else None


def _meta(soup: BeautifulSoup, base_url: str) -> dict[str, Any]:
    canonical = soup.find("link", rel="canonical", href=True)
    hreflang = [
        {"lang": _attr(link, "hreflang"), "href": _resolve(base_url, _attr(link, "href"))}
        for link in soup.select("link[rel=alternate][hreflang]")
    ]
    return {
        "description": _meta_content(soup, "description"),
        "keywords": _meta_content(soup, "keywords"),
        "canonical": _resolve(base_url, _attr(canonical, "href")) if isinstance(canonical, Tag) else None,
        "viewport": _meta_content(soup, "viewport"),
        "robots": _meta_content(soup, "robots"),
        "hreflang": hreflang,
    }


def _prefixed_meta(soup: BeautifulSoup, attr: str, prefix: str) -> dict[str, Optional[str]]:
    found: dict[str, Optional[str]] = {}
    for tag in soup.find_all("meta"):
        key = tag.get(attr)
        if isinstance(key, str) and key.startswith(prefix):
            found[key] = tag.get("content")
    return found


def _schema_org(soup: BeautifulSoup) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            obj = json.loads(script.string or script.get_text() or "{}")
        except (json.JSONDecodeError, TypeError):
            items.append({"@type": None})
            continue
        if not isinstance(obj, dict):
            obj = {}
        items.append({"@type": obj.get("@type") or None, "name": obj.get("name") or None, "url": obj.get("url") or None})
    return items


def _headings(soup: BeautifulSoup) -> list[dict[str, str]]:
    # grouped by level, h1 first
    return [{"tag": tag, "text": _text(el)} for tag in HEADING_TAGS for el in soup.find_all(tag)]


def _landmarks(soup: BeautifulSoup) -> list[dict[str, Optional[str]]]:
    found = [
        {"tag": tag, "role": _attr(el, "role"), "ariaLabel": _attr(el, "aria-label")}
        for tag in LANDMARK_TAGS
        for el in soup.find_all(tag)
    ]
    found.extend(
        {"tag": el.name, "role": _attr(el, "role"), "ariaLabel": _attr(el, "aria-label")}
        for el in soup.find_all(attrs={"role": True})
    )
    return found


def _images(soup: BeautifulSoup, base_url: str) -> list[dict[str, Optional[str]]]:
    return [
        {
            "src": _resolve(base_url, _attr(img, "src")),
            "alt": _attr(img, "alt"),
            "width": _attr(img, "width"),
            "height": _attr(img, "height"),
        }
        for img in soup.find_all("img")
    ]


def _buttons(soup: BeautifulSoup) -> list[dict[str, Any]]:
    return [
        {
            "text": _text(btn) or (_attr(btn, "value") or "").strip(),
            "enabled": not btn.has_attr("disabled"),
            "id": _attr(btn, "id"),
            "classes": _attr(btn, "class"),
        }
        for btn in soup.select(BUTTON_SELECTOR)
    ]


def _links(soup: BeautifulSoup, base_url: str) -> list[dict[str, Optional[str]]]:
    links: list[dict[str, Optional[str]]] = []
    for anchor in soup.find_all("a", href=True):
        href = _resolve(base_url, _attr(anchor, "href") or "")
        if href is None:
            continue
        links.append({"href": href, "text": _text(anchor), "rel": _attr(anchor, "rel")})
    return links


def _label_for(soup: BeautifulSoup, control: Tag) -> Optional[str]:
    control_id = _attr(control, "id")
    if control_id:
        label = soup.find("label", attrs={"for": control_id})
        if isinstance(label, Tag) and _text(label):
            return _text(label)
    ancestor = control.find_parent("label")
    if ancestor is not None:
        return _text(ancestor) or None
    return None


def validation_rules(
    required: bool, min_length: Optional[str], max_length: Optional[str], pattern: Optional[str]
) -> list[str]:
    rules: list[str] = []
    if required:
        rules.append("required")
    if min_length:
        rules.append(f"minlength:{min_length}")
    if max_length:
        rules.append(f"maxlength:{max_length}")
    if pattern:
        rules.append(f"pattern:{pattern}")
    return rules


def _field(soup: BeautifulSoup, control: Tag) -> dict[str, Any]:
    control_type = (_attr(control, "type") or control.name).lower()
    required = control.has_attr("required")
    min_length = _attr(control, "minlength")
    max_length = _attr(control, "maxlength")
    pattern = _attr(control, "pattern")
    return {
        "type": control_type,
        "name": _attr(control, "name") or _attr(control, "id"),
        "id": _attr(control, "id"),
        "required": required,
        "minLength": min_length,
        "maxLength": max_length,
        "pattern": pattern,
        "placeholder": _attr(control, "placeholder"),
        "label": _label_for(soup, control),
        "validations": validation_rules(required, min_length, max_length, pattern),
    }


def _forms(soup: BeautifulSoup, base_url: str) -> list[dict[str, Any]]:
    forms: list[dict[str, Any]] = []
    for index, form in enumerate(soup.find_all("form")):
        fields = [_field(soup, control) for control in form.find_all(list(FORM_CONTROL_TAGS))]
        unlabeled = sum(1 for f in fields if not f["label"] and f["type"] in TEXT_LIKE_INPUTS)
        action = _attr(form, "action")
        forms.append(
            {
                "index": index,
                "action": _resolve(base_url, action) if action else None,
                "method": (_attr(form, "method") or "GET").upper(),
                "fields": fields,
                "a11y": {"unlabeledControls": unlabeled},
            }
        )
    return forms


def _error_messages(soup: BeautifulSoup) -> list[str]:
    return [_text(el) for el in soup.select(ERROR_SELECTOR)]


def _scripts(soup: BeautifulSoup, base_url: str) -> list[str]:
    scripts = (_resolve(base_url, _attr(s, "src")) for s in soup.find_all("script", src=True))
    return [src for src in scripts if src]


def _visible_text(soup: BeautifulSoup) -> str:
    body = soup.body
    if body is None:
        return ""
    for element in body(list(_INVISIBLE_TAGS)):
        element.decompose()
    return body.get_text("\n", strip=True)


def _base_url(soup: BeautifulSoup, page_url: str) -> str:
    base = soup.find("base", href=True)
    if isinstance(base, Tag):
        resolved = _resolve(page_url, _attr(base, "href"))
        if resolved:
            return resolved
    return page_url


# ---------------------------------------------------------------------------
# Public function
# ---------------------------------------------------------------------------


def extract_page(
    html: str,
    page_url: str,
    perf: Optional[dict[str, Optional[float]]] = None,
    visible_text: Optional[str] = None,
) -> ExtractionRecord:
    """Build the extraction record for *html* loaded from *page_url*.

    Parameters
    ----------
    html
        Rendered markup (``page.content()``).
    page_url
        Final URL of the page, used to resolve relative URLs.
    perf
        Navigation timings gathered separately from the live page.
    visible_text
        Rendered ``innerText`` of the body when the browser supplied it;
        otherwise the text is derived from the markup.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    base_url = _safe("base", lambda: _base_url(soup, page_url), page_url)

    record = ExtractionRecord(
        title=_safe("title", lambda: _title(soup), None),
        meta=_safe("meta", lambda: _meta(soup, base_url), {}),
        open_graph=_safe("openGraph", lambda: _prefixed_meta(soup, "property", "og:"), {}),
        twitter_card=_safe("twitterCard", lambda: _prefixed_meta(soup, "name", "twitter:"), {}),
        schema_org=_safe("schemaOrg", lambda: _schema_org(soup), []),
        headings=_safe("headings", lambda: _headings(soup), []),
        landmarks=_safe("landmarks", lambda: _landmarks(soup), []),
        images=_safe("images", lambda: _images(soup, base_url), []),
        buttons=_safe("buttons", lambda: _buttons(soup), []),
        links=_safe("links", lambda: _links(soup, base_url), []),
        forms=_safe("forms", lambda: _forms(soup, base_url), []),
        error_messages=_safe("errorMessages", lambda: _error_messages(soup), []),
        scripts=_safe("scripts", lambda: _scripts(soup, base_url), []),
        perf=dict(perf or {}),
    )
    if isinstance(visible_text, str):
        record.visible_text = visible_text.strip()
    else:
        # destructive, so it runs last
        record.visible_text = _safe("visibleText", lambda: _visible_text(soup), "")
    return record
