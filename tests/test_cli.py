"""Tests for the command-line interface."""

import json

import httpx
import pytest
import yaml
from click.testing import CliRunner

from meeting_search.__main__ import apply_overrides, cli

from conftest import SEARCH_URL


def parse_report(output: str) -> dict:
    return json.loads(output[output.index('{'):])


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, config):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump(config), encoding='utf-8')
    return str(path)


def test_search_writes_html_report(runner, router, config_file, tmp_path, make_hit, make_page):
    router.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(
        200, text=make_page(make_hit('/doc/123.pdf', 'Beslut om skola', '2024-03-15'))
    ))
    output = tmp_path / 'reports' / 'skola.html'

    result = runner.invoke(cli, [
        '--config', config_file, '--log-level', 'WARNING',
        'search', '--query', 'skola', '--format', 'html', '--output', str(output)
    ])

    assert result.exit_code == 0, result.output
    assert 'Wrote 1 documents' in result.output
    html = output.read_text(encoding='utf-8')
    assert 'Beslut om skola' in html
    assert 'https://sammantraden.huddinge.se/doc/123.pdf' in html


def test_search_prints_json_by_default(runner, router, config_file, make_hit, make_page):
    router.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(
        200, text=make_page(make_hit('/doc/123.pdf', 'Beslut om skola', '2024-03-15'))
    ))

    result = runner.invoke(cli, ['--config', config_file, '--log-level', 'WARNING', 'search', '-q', 'skola'])

    assert result.exit_code == 0, result.output
    report = parse_report(result.output)
    assert report['count'] == 1
    assert report['months'][0]['month'] == '2024-03'


def test_empty_query_makes_no_request(runner, router, config_file):
    route = router.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(200, text=''))

    result = runner.invoke(cli, ['--config', config_file, '--log-level', 'WARNING', 'search'])

    assert result.exit_code == 0, result.output
    assert parse_report(result.output)['count'] == 0
    assert not route.called


def test_upstream_failure_is_reported(runner, router, config_file):
    router.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(502))

    result = runner.invoke(cli, ['--config', config_file, '--log-level', 'WARNING', 'search', '-q', 'skola'])

    assert result.exit_code == 1
    assert 'page 1' in result.output
    assert '502' in result.output
    assert '"count"' not in result.output


def test_extract_from_saved_page(runner, tmp_path, config_file, make_hit, make_page):
    saved = tmp_path / 'page.html'
    saved.write_text(make_page(
        make_hit('/doc/1.pdf', 'Kallelse', '2024-01-10'),
        make_hit('/doc/2.pdf', 'Protokoll', '2024-02-10')
    ), encoding='utf-8')

    result = runner.invoke(cli, [
        '--config', config_file, '--log-level', 'WARNING',
        'extract', '--file', str(saved), '--format', 'csv'
    ])

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[0] == 'month,date,title,page_url,download_url'
    assert lines[1].startswith('2024-02,2024-02-10,Protokoll,')


@pytest.mark.parametrize("section, key, value, expected", [
    ('extraction', 'mode', 'sideways', 'sideways'),
    ('search_portal', 'pagination', 'bogus', 'bogus'),
    ('search_portal', 'max_pages', 0, 'max_pages'),
])
def test_search_rejects_invalid_settings(runner, router, tmp_path, config, section, key, value, expected):
    route = router.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(200, text=''))
    config[section][key] = value
    path = tmp_path / 'invalid.yaml'
    path.write_text(yaml.safe_dump(config), encoding='utf-8')

    result = runner.invoke(cli, ['--config', str(path), '--log-level', 'WARNING', 'search', '-q', 'skola'])

    assert result.exit_code == 1
    assert 'Invalid configuration' in result.output
    assert expected in result.output
    assert not isinstance(result.exception, ValueError)
    assert not route.called


def test_extract_rejects_invalid_mode(runner, tmp_path, config, make_hit, make_page):
    config['extraction']['mode'] = 'sideways'
    path = tmp_path / 'invalid.yaml'
    path.write_text(yaml.safe_dump(config), encoding='utf-8')
    saved = tmp_path / 'page.html'
    saved.write_text(make_page(make_hit('/doc/1.pdf', 'Kallelse', '2024-01-10')), encoding='utf-8')

    result = runner.invoke(cli, [
        '--config', str(path), '--log-level', 'WARNING',
        'extract', '--file', str(saved)
    ])

    assert result.exit_code == 1
    assert 'Invalid configuration' in result.output
    assert 'sideways' in result.output


def test_missing_config_file_exits(runner, tmp_path):
    result = runner.invoke(cli, ['--config', str(tmp_path / 'missing.yaml'), 'search', '-q', 'x'])

    assert result.exit_code == 1
    assert 'Configuration file not found' in result.output


def test_apply_overrides_does_not_mutate_input(config):
    updated = apply_overrides(config, max_pages=9, window_span=42, mode='date', page_size=None)

    assert updated['search_portal']['max_pages'] == 9
    assert updated['search_portal']['page_size'] == 2
    assert updated['extraction'] == {'window_span': 42, 'mode': 'date'}
    assert config['search_portal']['max_pages'] == 5
    assert config['extraction']['window_span'] == 200


def test_apply_overrides_on_empty_config():
    updated = apply_overrides({}, max_pages=3)

    assert updated == {'search_portal': {'max_pages': 3}, 'extraction': {}}
