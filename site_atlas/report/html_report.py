"""site_atlas.report.html_report: Генерация HTML-отчёта аудита с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_atlas.crawler.models import SiteModel

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def _page_rows(model: SiteModel) -> list[dict[str, Any]]:
    rows = []
    for page in model.pages:
        ex = page.extraction
        rows.append(
            {
                "url": page.requested_url,
                "final_url": page.final_url,
                "status": page.status,
                "title": ex.title if ex else None,
                "missing_alt": page.a11y_summary.get("imagesMissingAlt", 0),
                "unlabeled": page.a11y_summary.get("unlabeledFormControls", 0),
                "forms": len(ex.forms) if ex else 0,
                "third_party": len(page.third_party),
                "error": page.error,
            }
        )
    return rows


def render_html(
    model: SiteModel,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        model: объект SiteModel.
        output_path: путь к итоговому HTML-файлу.
        template_dir: директория с шаблоном ``report.html.j2``; по умолчанию встроенная.

    Returns:
        Path до сохранённого HTML-файла.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    rows = _page_rows(model)
    context: dict[str, Any] = {
        "base_url": model.base_url,
        "max_depth": model.max_depth,
        "max_pages": model.max_pages,
        "stats": model.stats,
        "rows": rows,
        "failed": sum(1 for row in rows if row["error"]),
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
