# File: tests/test_report.py
import json

from site_atlas.aggregator import (
    accessibility_summary,
    annotate_links,
    build_page_record,
    third_party_scripts,
)
from site_atlas.crawler.models import CrawlStats, ExtractionRecord, NavigationResult, PageRecord, SiteModel
from site_atlas.report import render_html, render_json
from site_atlas.report.json_report import dumps


def make_model() -> SiteModel:
    extraction = ExtractionRecord(
        title="<Home>",
        images=[{"src": "https://a.com/x.png", "alt": None, "width": None, "height": None}],
        scripts=["https://a.com/app.js", "https://cdn.b.com/x.js"],
    )
    ok = build_page_record("https://a.com/", NavigationResult("https://a.com/", 200), extraction)
    failed = PageRecord.degraded("https://a.com/slow", "https://a.com/slow", "Timeout 30000ms exceeded.")
    return SiteModel(
        base_url="https://a.com/",
        max_depth=1,
        max_pages=100,
        pages=[ok, failed],
        stats=CrawlStats(unique_visited=2, processed=2),
    )


def test_third_party_scripts_by_host():
    scripts = ["https://a.com/1.js", "https://a.com:8443/2.js", "https://cdn.a.com/3.js", "http://[bad/4.js"]
    assert third_party_scripts(scripts, "https://a.com/page") == ["https://cdn.a.com/3.js"]


def test_accessibility_summary():
    extraction = ExtractionRecord(
        images=[{"alt": "ok"}, {"alt": None}, {"alt": " "}],
        forms=[{"a11y": {"unlabeledControls": 2}}, {"a11y": {"unlabeledControls": 1}}, {}],
    )
    assert accessibility_summary(extraction) == {"imagesMissingAlt": 2, "unlabeledFormControls": 3}


def test_annotate_links():
    links = annotate_links([{"href": "https://a.com/x"}, {"href": "https://b.com/"}, {"href": None}], "https://a.com/")
    assert [l["sameOrigin"] for l in links] == [True, False, False]


def test_render_json(tmp_path):
    model = make_model()
    path = render_json(model, tmp_path / "nested" / "report.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == model.to_dict()
    assert data["pages"][0]["thirdParty"] == ["https://cdn.b.com/x.js"]
    assert data["pages"][0]["a11ySummary"]["imagesMissingAlt"] == 1
    assert json.loads(dumps(model, pretty=True)) == data


def test_render_html(tmp_path):
    path = render_html(make_model(), tmp_path / "report.html")
    html = path.read_text(encoding="utf-8")
    assert "https://a.com/slow" in html
    assert "Timeout 30000ms exceeded." in html
    assert "&lt;Home&gt;" in html
    assert 'class="failed"' in html
