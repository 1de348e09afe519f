"""Meeting Document Search CLI

Command-line interface for searching the meeting document index and writing
a sorted, month-grouped report.
"""

import asyncio
import copy
import logging
import sys
from pathlib import Path
from typing import Optional

import aiofiles
import click
import yaml

from .collectors import SearchCollector, UpstreamFetchError
from .collectors.search_client import DEFAULT_BASE_URL
from .processors import RENDERERS, WINDOW_SPAN, AssociationMode, ProximityAssociator, build_result_set, group_by_month


DEFAULT_CONFIG_PATH = Path('config/config.yaml')
DEFAULT_TOTAL_TIMEOUT = 120


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def load_config(config_path: Optional[str] = None) -> dict:
    """Load configuration from YAML file.

    Without an explicit path the default location is used when present,
    otherwise built-in defaults apply.
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return {}
        config_path = str(DEFAULT_CONFIG_PATH)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        click.echo(f"Error: Configuration file not found at {config_path}")
        sys.exit(1)
    except yaml.YAMLError as e:
        click.echo(f"Error parsing configuration file: {e}")
        sys.exit(1)


def apply_overrides(config: dict, **overrides) -> dict:
    """Return a copy of the configuration with command-line values applied."""
    config = copy.deepcopy(config)
    portal = config.setdefault('search_portal', {}) or {}
    extraction = config.setdefault('extraction', {}) or {}
    config['search_portal'] = portal
    config['extraction'] = extraction

    for key in ('max_pages', 'page_size'):
        if overrides.get(key) is not None:
            portal[key] = overrides[key]
    for key in ('window_span', 'mode'):
        if overrides.get(key) is not None:
            extraction[key] = overrides[key]
    return config


async def write_report(report: str, output: Optional[str]):
    """Write a report to a file, or to stdout without a path."""
    if not output:
        click.echo(report)
        return

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(output_path, 'w', encoding='utf-8') as f:
        await f.write(report)


async def run_search(config: dict, query: str, output_format: str, output: Optional[str]) -> int:
    """Search, group and write the report. Returns the number of items."""
    async with SearchCollector(config) as collector:
        result_set = await collector.collect(query)

    buckets = group_by_month(result_set)
    await write_report(RENDERERS[output_format](buckets, result_set.query), output)
    return len(result_set)


@click.group()
@click.option('--config', default=None, help='Configuration file path (default: config/config.yaml)')
@click.option('--log-level', default='INFO', help='Logging level')
@click.pass_context
def cli(ctx, config, log_level):
    """Meeting document search - sorted, deduplicated search results."""
    ctx.ensure_object(dict)

    # Setup logging
    setup_logging(log_level)

    # Load configuration
    ctx.obj['config'] = load_config(config)


@cli.command()
@click.option('--query', '-q', default='', help='Search term')
@click.option('--format', 'output_format', type=click.Choice(sorted(RENDERERS)), default='json',
              help='Report format')
@click.option('--output', '-o', default=None, help='Write the report to this file instead of stdout')
@click.option('--mode', type=click.Choice([mode.value for mode in AssociationMode]), default=None,
              help='Link/date association strategy')
@click.option('--max-pages', type=click.IntRange(min=1), default=None, help='Maximum pages to fetch')
@click.option('--page-size', type=click.IntRange(min=1), default=None, help='Requested results per page')
@click.option('--window-span', type=click.IntRange(min=0), default=None,
              help='Characters searched around each link or date')
@click.pass_context
def search(ctx, query, output_format, output, mode, max_pages, page_size, window_span):
    """Search the meeting document index and write a sorted report."""
    config = apply_overrides(
        ctx.obj['config'],
        max_pages=max_pages,
        page_size=page_size,
        window_span=window_span,
        mode=mode
    )
    total_timeout = (config.get('search_portal') or {}).get('total_timeout', DEFAULT_TOTAL_TIMEOUT)

    try:
        count = asyncio.run(asyncio.wait_for(
            run_search(config, query, output_format, output),
            timeout=total_timeout
        ))
    except UpstreamFetchError as e:
        click.echo(f"❌ Search failed on page {e.page_index}: {e}", err=True)
        sys.exit(1)
    except asyncio.TimeoutError:
        click.echo(f"❌ Search timed out after {total_timeout} seconds", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)

    if output:
        click.echo(f"✅ Wrote {count} documents to {output}")


@cli.command()
@click.option('--file', 'html_file', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Saved search result page')
@click.option('--format', 'output_format', type=click.Choice(sorted(RENDERERS)), default='json',
              help='Report format')
@click.option('--mode', type=click.Choice([mode.value for mode in AssociationMode]), default=None,
              help='Link/date association strategy')
@click.option('--window-span', type=click.IntRange(min=0), default=None,
              help='Characters searched around each link or date')
@click.pass_context
def extract(ctx, html_file, output_format, mode, window_span):
    """Extract documents from a saved search page without fetching."""
    config = apply_overrides(ctx.obj['config'], window_span=window_span, mode=mode)
    portal = config['search_portal']
    extraction = config['extraction']

    try:
        associator = ProximityAssociator(
            portal.get('base_url', DEFAULT_BASE_URL),
            window_span=int(extraction.get('window_span', WINDOW_SPAN)),
            mode=extraction.get('mode', AssociationMode.ANCHOR.value)
        )
    except ValueError as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)

    html = Path(html_file).read_text(encoding='utf-8', errors='replace')
    result_set = build_result_set(associator.extract(html), query=Path(html_file).name, pages_fetched=1)
    click.echo(RENDERERS[output_format](group_by_month(result_set), result_set.query))


if __name__ == '__main__':
    cli()
