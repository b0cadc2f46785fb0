# === FILE: site_atlas/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера SiteAtlas.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

__all__ = ["CrawlConfig", "load_config", "DEFAULT_BROWSER_ARGS"]

DEFAULT_BROWSER_ARGS: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")


class CrawlConfig(BaseModel):
    """Конфигурация одного запуска обхода (неизменяемая)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(1, ge=0, description="Максимальная глубина обхода ссылок.")
    max_pages: int = Field(100, ge=1, description="Жесткий лимит по числу страниц.")
    same_origin_only: bool = Field(True, description="Обходить только ссылки того же origin.")
    request_delay: float = Field(0.25, ge=0, description="Пауза перед каждой навигацией (секунд).")
    navigation_timeout: float = Field(30.0, gt=0, description="Таймаут навигации (секунд).")
    headless: bool = Field(True, description="Запускать браузер без окна.")
    concurrency: int = Field(1, ge=1, description="Число параллельных воркеров.")
    run_timeout: Optional[float] = Field(
        None, gt=0, description="Общий дедлайн обхода (секунд); по истечении новые страницы не берутся."
    )
    user_agent: Optional[str] = Field(None, min_length=1, description="Заголовок User-Agent.")
    browser_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BROWSER_ARGS),
        description="Аргументы запуска Chromium.",
    )

    @property
    def navigation_timeout_ms(self) -> float:
        return self.navigation_timeout * 1000

    def with_overrides(self, **overrides: Any) -> CrawlConfig:
        """Возвращает новую проверенную копию с заменёнными полями (None игнорируется)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return CrawlConfig(**data)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlConfig.
    Без пути использует configs/default.yaml, а если его нет, значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return CrawlConfig(**data)
    except ValidationError:
        raise
