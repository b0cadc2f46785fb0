# site_atlas/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteAtlas.

Сериализация объекта SiteModel в файл.
"""
import json
from pathlib import Path

from site_atlas.crawler.models import SiteModel


def dumps(model: SiteModel, *, pretty: bool = False) -> str:
    """Сериализует SiteModel в JSON-строку (тот же формат, что отдаёт HTTP-сервис)."""
    return json.dumps(model.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def render_json(model: SiteModel, output_path: Path | str) -> Path:
    """
    Сохраняет модель сайта в формате JSON по указанному пути.

    :param model: объект SiteModel с результатами обхода
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(model.to_dict(), f, ensure_ascii=False, indent=2)

    return output
