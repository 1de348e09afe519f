"""Anchor Locator

Finds hyperlinks in a search result page together with their position in the
raw markup, and classifies them as title candidates or document links.
"""

import logging
import re
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from ..schemas import Anchor


logger = logging.getLogger(__name__)

DOCUMENT_SUFFIXES = ('.pdf', '.doc', '.docx', '.xls', '.xlsx', '.rtf', '.txt')

DOWNLOAD_LABEL_PATTERN = re.compile(r'ladda\s*ner|download', re.IGNORECASE)

# Pager and other control links that never name a document
NAVIGATION_PATTERN = re.compile(
    r'^[\W_]*(?:nästa|föregående|next|previous|prev)(?:\s+(?:sida|page))?[\W_]*$'
    r'|^[\W_]*\d+[\W_]*$',
    re.IGNORECASE
)


def flatten_text(text: str) -> str:
    """Collapse all whitespace runs to single spaces and trim."""
    return ' '.join(text.split())


def _line_offsets(html: str) -> List[int]:
    """Offsets at which each line of ``html`` starts."""
    offsets = [0]
    for match in re.finditer('\n', html):
        offsets.append(match.end())
    return offsets


def locate_anchors(html: str, include_empty: bool = False) -> List[Anchor]:
    """Find all hyperlink anchors in document order.

    Anchors without an ``href``, and anchors whose ``href`` starts with ``#``
    are discarded. Anchors with no visible text are discarded unless
    ``include_empty`` is set.

    Args:
        html: Raw page markup
        include_empty: Keep anchors whose flattened text is empty

    Returns:
        List of anchors with absolute offsets into ``html``
    """
    if not html:
        return []

    soup = BeautifulSoup(html, 'html.parser')
    line_offsets = _line_offsets(html)
    lowered = html.lower()
    cursor = 0
    anchors = []

    for link in soup.find_all('a'):
        # html.parser records where each tag starts; fall back to scanning
        if link.sourceline is not None and link.sourcepos is not None:
            position = line_offsets[link.sourceline - 1] + link.sourcepos
        else:
            found = lowered.find('<a', cursor)
            position = found if found >= 0 else cursor
        cursor = position + 1

        href = link.get('href')
        if href is None:
            continue
        href = href.strip()
        if href.startswith('#'):
            continue

        text = flatten_text(link.get_text(' '))
        if not text and not include_empty:
            logger.debug(f"Skipping anchor without text at {position}: {href}")
            continue

        anchors.append(Anchor(href=href, text=text, position=position))

    return anchors


def is_download_label(text: str) -> bool:
    return bool(DOWNLOAD_LABEL_PATTERN.search(text))


def is_title_candidate(anchor: Anchor) -> bool:
    """Check if an anchor's text can serve as a document title.

    Args:
        anchor: Located anchor

    Returns:
        True unless the text is empty, a download label or a pager control
    """
    if not anchor.text or anchor.href.startswith('#'):
        return False
    if is_download_label(anchor.text):
        return False
    return not NAVIGATION_PATTERN.search(anchor.text)


def is_document_href(href: str) -> bool:
    """Check if an href points at a downloadable document.

    Args:
        href: Raw or resolved href

    Returns:
        True for document file suffixes, ``/documents/`` paths and
        download endpoints, whether named in the path or the query string
    """
    if not href:
        return False
    try:
        parsed = urlparse(href)
    except ValueError:
        return False

    path = parsed.path.lower()
    if path.endswith(DOCUMENT_SUFFIXES):
        return True
    return '/documents/' in path or 'download' in path or 'download' in parsed.query.lower()


def resolve_url(href: str, base_url: str) -> Optional[str]:
    """Resolve an href against the site base.

    Args:
        href: Raw href attribute value
        base_url: Site origin to resolve relative links against

    Returns:
        Absolute http(s) URL, or None if the href cannot be resolved
    """
    if not href:
        return None
    try:
        url = urljoin(base_url, href)
        parsed = urlparse(url)
    except ValueError as e:
        logger.debug(f"Could not resolve {href!r}: {e}")
        return None

    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return None
    return url
