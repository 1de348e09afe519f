"""Shared fixtures for the meeting search tests."""

import pytest
import respx


BASE_URL = "https://sammantraden.huddinge.se"
SEARCH_URL = f"{BASE_URL}/search"

# Wider than any test window, so hits never see each other
HIT_PADDING = ' ' * 600

EMPTY_PAGE = '<html><body><p>Inga träffar</p></body></html>'


def hit(href: str, title: str, day: str) -> str:
    """One search hit: a title link followed by its date."""
    return f'<div class="hit"><a href="{href}">{title}</a> <span class="date">{day}</span></div>'


def page(*hits: str, footer: str = '') -> str:
    """A result page holding the given hits."""
    return '<html><body>' + HIT_PADDING.join(hits) + HIT_PADDING + footer + '</body></html>'


@pytest.fixture
def make_hit():
    return hit


@pytest.fixture
def make_page():
    return page


@pytest.fixture
def config():
    """Configuration with small pages and no retry delay."""
    return {
        'search_portal': {
            'base_url': BASE_URL,
            'search_path': '/search',
            'page_size': 2,
            'max_pages': 5,
            'retry_attempts': 2,
            'retry_backoff': 0,
        },
        'extraction': {
            'window_span': 200,
            'mode': 'anchor',
        },
    }


@pytest.fixture
def router():
    """Mocked upstream; every test registers its own search route."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock
