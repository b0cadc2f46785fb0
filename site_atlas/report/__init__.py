# File: site_atlas/report/__init__.py
"""site_atlas.report: Генерация отчётов (JSON и HTML) по результатам обхода."""

from site_atlas.report.html_report import render_html
from site_atlas.report.json_report import render_json

__all__ = ["render_json", "render_html"]
