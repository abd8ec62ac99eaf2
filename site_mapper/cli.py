# === FILE: site_mapper/cli.py ===
#!/usr/bin/env python3
"""
Точка входа SiteMapper: обход сайта и вывод sitemap.

Опции:
  --url URL            Корневой URL обхода (default: http://gophercises.com)
  --depth INT          Максимальная глубина обхода, включительно (default: 3)
  --config PATH        YAML/JSON-конфиг; опции командной строки имеют приоритет
  --timeout SEC        Таймаут одного запроса
  --on-error POLICY    skip — пропускать сломанные страницы, abort — прерывать обход
  --url-policy NAME    exact | strip-trailing-slash
  --format FORMAT      xml | json
  --output PATH        Сохранить результат в файл (stdout, если не указан)
  --log-level LEVEL    Уровень логирования (логи пишутся в stderr)
  --log-file PATH      Файл для логов

Пример:
  site-mapper --url https://example.com --depth 2 > sitemap.xml
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_mapper import __version__
from site_mapper.config import load_config
from site_mapper.engine import start_crawl
from site_mapper.errors import SerializationError, TransportError
from site_mapper.logger import init_logging
from site_mapper.report.json_report import dump_json, render_json
from site_mapper.report.sitemap_xml import render_sitemap, write_sitemap

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMapper, version %(version)s')
@click.option('--url', 'url', default=None, help='Корневой URL обхода.')
@click.option(
    '--depth', 'depth',
    type=click.IntRange(min=0), default=None,
    help='Максимальная глубина обхода (включительно), по умолчанию 3.'
)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option('--timeout', 'timeout', type=float, default=None, help='Таймаут одного запроса (секунд).')
@click.option(
    '--on-error', 'on_error',
    type=click.Choice(['skip', 'abort']), default=None,
    help='Что делать при ошибке загрузки страницы.'
)
@click.option(
    '--url-policy', 'url_policy',
    type=click.Choice(['exact', 'strip-trailing-slash']), default=None,
    help='Политика сравнения URL.'
)
@click.option(
    '--format', '-f', 'output_format',
    type=click.Choice(['xml', 'json']), default='xml', show_default=True,
    help='Формат результата.'
)
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить результат в файл вместо stdout.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
def cli(url, depth, config_path, timeout, on_error, url_policy, output_format, output, log_level, log_file):
    """Обойти сайт начиная с --url и вывести sitemap."""
    logger = init_logging(level=log_level, log_file=str(log_file) if log_file else None)

    try:
        cfg = load_config(config_path).with_overrides(
            base_url=url,
            max_depth=depth,
            timeout=timeout,
            on_error=on_error,
            url_policy=url_policy,
        )
    except (OSError, ValidationError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    try:
        urls = asyncio.run(start_crawl(cfg))
    except TransportError as e:
        print_error(f'Ошибка при обходе: {e}')

    try:
        if output_format == 'json':
            if output:
                render_json(urls, output)
            else:
                click.echo(dump_json(urls))
        else:
            if output:
                write_sitemap(urls, output)
            else:
                click.echo(render_sitemap(urls), nl=False)
    except SerializationError as e:
        print_error(f'Ошибка сериализации: {e}')
    except OSError as e:
        print_error(f'Ошибка при сохранении: {e}')

    if output:
        logger.info("Результат сохранён: %s (%d URL)", output, len(urls))


if __name__ == "__main__":
    cli()
