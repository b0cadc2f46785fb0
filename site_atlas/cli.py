# === FILE: site_atlas/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteAtlas через командную строку.

Команды:
  crawl URL   Обойти сайт и вывести/сохранить модель сайта
  serve       Запустить HTTP-сервис (GET/POST /crawl)
  config      Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --depth INT         Максимальная глубина (override max_depth)
  --max-pages INT     Лимит страниц (override max_pages)
  --run-timeout SEC   Дедлайн всего обхода (секунд)
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)

Пример:
  site-atlas crawl https://example.com --depth 2 --json report.json
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_atlas import __version__
from site_atlas.config import load_config
from site_atlas.engine import crawl_site
from site_atlas.logger import DEFAULT_FORMAT, init_logging
from site_atlas.report.html_report import render_html
from site_atlas.report.json_report import dumps, render_json
from site_atlas.server import run_server
from site_atlas.utils import InvalidSeedURL

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteAtlas, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteAtlas CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        # ValidationError is a ValueError
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--depth', '-d', 'depth', type=click.IntRange(min=0), default=None,
              help='Максимальная глубина обхода (override max_depth)')
@click.option('--max-pages', '-l', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Макс. число страниц (override max_pages)')
@click.option('--run-timeout', 'run_timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Дедлайн всего обхода (секунд); по истечении возвращается частичный результат')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, url, depth, max_pages, run_timeout, json_output, html_output, pretty):
    """Обойти сайт начиная с URL."""
    try:
        cfg = ctx.obj['config'].with_overrides(max_pages=max_pages, run_timeout=run_timeout)
    except ValidationError as e:
        print_error(f'Некорректные параметры: {e}')
    click.echo(f'Starting crawl: {url}', err=True)
    try:
        model = asyncio.run(crawl_site(url, cfg, max_depth=depth))
    except InvalidSeedURL as e:
        print_error(f'Некорректный URL: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    # без файлов печатаем в stdout
    if not json_output and not html_output:
        click.echo(dumps(model, pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(model, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(model, html_output)
            click.echo(f'HTML report: {saved_html}')
        except OSError as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default='0.0.0.0', show_default=True, help='Адрес для прослушивания')
@click.option('--port', '-p', type=click.IntRange(1, 65535), default=None,
              help='Порт (по умолчанию из переменной PORT или 3000)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP-сервис обхода."""
    run_server(ctx.obj['config'], host=host, port=port)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
