# === FILE: seo_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SEO Scout через командную строку.

Команды:
  audit URL   Обойти сайт, выполнить SEO-аудит и вывести/сохранить отчёты
  page URL    Аудит одной страницы (без обхода)
  config      Показать итоговую конфигурацию
  serve       Запустить HTTP API

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (значения CLI его переопределяют)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Опции audit/page:
  --max-pages INT         Макс. число страниц (override max_pages)
  --no-sitemap            Не засевать обход из sitemap.xml
  --no-robots             Не читать robots.txt
  --renderer [http|browser]
  --json PATH / --html PATH / --template DIR / --pretty

Дополнительно:
  --version, -v       Показать версию SEO Scout

Пример:
  seo-scout audit https://example.com --max-pages 50 --json report.json
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click

from seo_scout import __version__
from seo_scout.config import build_config
from seo_scout.engine import analyze_page, start_audit
from seo_scout.logger import DEFAULT_FORMAT, LEVEL_ENV, init_logging
from seo_scout.report.html_report import render_html
from seo_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _crawl_options(func: Callable) -> Callable:
    """Опции, общие для audit и page."""
    options = [
        click.option('--renderer', type=click.Choice(['http', 'browser']), default=None,
                     help='Способ загрузки страниц (browser требует Playwright)'),
        click.option('--wait-selector', 'wait_selector', default=None,
                     help='CSS-селектор, которого ждать (только browser)'),
        click.option('--page-timeout', 'page_timeout', type=float, default=None,
                     help='Таймаут загрузки одной страницы (секунд)'),
        click.option('--json', '-j', 'json_output', default=None,
                     type=click.Path(writable=True, dir_okay=False, path_type=Path),
                     help='Сохранить JSON-отчёт в файл'),
        click.option('--html', 'html_output', default=None,
                     type=click.Path(writable=True, dir_okay=False, path_type=Path),
                     help='Сохранить HTML-отчёт в файл'),
        click.option('--template', '-t', 'template_dir', default=None,
                     type=click.Path(exists=True, file_okay=False, path_type=Path),
                     help='Папка с Jinja2-шаблонами (по умолчанию встроенный шаблон)'),
        click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load(ctx: click.Context, url: Optional[str], overrides: Dict[str, Any]):
    try:
        return build_config(url, ctx.obj.get('config_path'), overrides)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


def _emit(report, json_output, html_output, template_dir, pretty):
    # без файлов вывода отчёт печатается в stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=True)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _log_options(func: Callable) -> Callable:
    """Опции логирования группы; уровень по умолчанию берётся из SEO_SCOUT_LOG_LEVEL."""
    options = [
        click.option('--log-level', 'log_level', envvar=LEVEL_ENV, default='INFO', show_default=True,
                     type=click.Choice(LOG_LEVELS, case_sensitive=False),
                     help='Уровень логирования'),
        click.option('--log-file', 'log_file', default=None,
                     type=click.Path(writable=True, dir_okay=False, path_type=Path),
                     help='Дополнительный файл логов с ротацией'),
        click.option('--log-format', 'log_format', default=DEFAULT_FORMAT,
                     help='Формат записей logging.Formatter'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SEO Scout, version %(version)s')
@click.option('--config', '-c', 'config_path', default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='YAML/JSON-конфиг; без него берутся значения CrawlConfig по умолчанию')
@_log_options
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SEO Scout: обход сайта и SEO-аудит из командной строки."""
    init_logging(level=log_level.upper(), log_file=log_file, log_format=log_format)
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('audit', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option('--max-pages', '-l', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Макс. число страниц (override max_pages)')
@click.option('--no-sitemap', 'no_sitemap', is_flag=True,
              help='Не засевать обход URL из sitemap.xml')
@click.option('--no-robots', 'no_robots', is_flag=True,
              help='Не читать robots.txt (sitemap, crawl-delay)')
@click.option('--enforce-disallow', 'enforce_disallow', is_flag=True,
              help='Пропускать URL, закрытые Disallow в robots.txt')
@click.option('--delay', 'default_delay', type=float, default=None,
              help='Пауза между запросами без Crawl-delay (секунд)')
@click.option('--deadline', 'crawl_deadline', type=float, default=None,
              help='Мягкий дедлайн всего обхода (секунд)')
@_crawl_options
@click.pass_context
def audit_cmd(ctx, url, no_sitemap, no_robots, enforce_disallow, json_output, html_output,
              template_dir, pretty, **overrides):
    """Обойти сайт и сгенерировать отчёт SEO-аудита."""
    # флаги задают только отклонения от конфига
    overrides['follow_sitemap'] = False if no_sitemap else None
    overrides['respect_robots'] = False if no_robots else None
    overrides['enforce_disallow'] = True if enforce_disallow else None
    cfg = _load(ctx, url, overrides)
    click.echo(f'Starting SEO audit for: {cfg.start_url}', err=True)
    try:
        report = asyncio.run(start_audit(cfg))
    except Exception as e:
        print_error(f'Ошибка при аудите: {e}')
    _emit(report, json_output, html_output, template_dir, pretty)


@cli.command('page', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@_crawl_options
@click.pass_context
def page_cmd(ctx, url, json_output, html_output, template_dir, pretty, **overrides):
    """Аудит одной страницы без обхода сайта."""
    cfg = _load(ctx, url, overrides)
    click.echo(f'Analyzing single page: {cfg.start_url}', err=True)
    try:
        report = asyncio.run(analyze_page(cfg))
    except Exception as e:
        print_error(f'Ошибка при анализе страницы: {e}')
    _emit(report, json_output, html_output, template_dir, pretty)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.pass_context
def show_config(ctx, url):
    """Показать итоговую конфигурацию в JSON."""
    cfg = _load(ctx, url, {})
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default='0.0.0.0', show_default=True, help='Адрес для прослушивания')
@click.option('--port', '-p', default=3000, show_default=True, type=int, help='Порт')
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP API (POST /api/seo/audit, POST /api/seo/analyze-page)."""
    from seo_scout.server import run_server

    run_server(host=host, port=port, config_path=ctx.obj.get('config_path'))


if __name__ == "__main__":
    cli()
