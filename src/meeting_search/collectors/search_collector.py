"""Search Collector

Drives the paginated fetch-and-extract loop against the meeting document
search and builds the deduplicated result set for a query.
"""

import logging
import re
from typing import Dict, List, Optional

import httpx

from ..processors import AssociationMode, Deduplicator, ProximityAssociator, WINDOW_SPAN, build_result_set
from ..schemas import Item, ResultSet
from .search_client import PaginationProtocol, SearchClient


logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 50

NEXT_LINK_PATTERN = re.compile(r'rel\s*=\s*["\']?next\b', re.IGNORECASE)
# A link or button whose whole text is "Nästa"/"Next", optionally with an arrow
NEXT_LABEL_PATTERN = re.compile(
    r'>\s*(?:nästa|next)(?:\s+(?:sida|page))?\s*(?:»|›|&raquo;|&rsaquo;|&gt;)?\s*<',
    re.IGNORECASE
)
PAGE_PARAM_PATTERN = re.compile(r'[?&](?:amp;)?page=(\d+)')


def has_next_page(html: str, page_index: int) -> bool:
    """Check if a page links to a following page of results.

    Args:
        html: Raw page markup
        page_index: 1-based index of the page the markup belongs to

    Returns:
        True if a next link, a "next" label or a link to a later page exists
    """
    if NEXT_LINK_PATTERN.search(html) or NEXT_LABEL_PATTERN.search(html):
        return True
    return any(int(match) > page_index for match in PAGE_PARAM_PATTERN.findall(html))


class SearchCollector:
    """Collects meeting documents matching a search term."""

    def __init__(self, config: Dict, client: Optional[httpx.AsyncClient] = None):
        """Initialize collector with configuration.

        Args:
            config: Configuration dictionary containing search portal and
                extraction settings
            client: Optional preconfigured HTTP client
        """
        self.config = config
        portal = config.get('search_portal') or {}
        extraction = config.get('extraction') or {}

        self.max_pages = int(portal.get('max_pages', DEFAULT_MAX_PAGES))
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {self.max_pages}")

        self.search_client = SearchClient(config, client=client)
        self.associator = ProximityAssociator(
            self.search_client.base_url,
            window_span=int(extraction.get('window_span', WINDOW_SPAN)),
            mode=AssociationMode(extraction.get('mode', AssociationMode.ANCHOR.value))
        )

    async def __aenter__(self):
        """Async context manager entry."""
        await self.search_client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.search_client.__aexit__(exc_type, exc_val, exc_tb)

    async def collect(self, query: str) -> ResultSet:
        """Fetch every result page for a query and build the result set.

        Any upstream failure aborts the whole query; pages read so far are
        discarded.

        Args:
            query: Search term

        Returns:
            Deduplicated, date-sorted result set

        Raises:
            UpstreamFetchError: If any page fails to load
        """
        query = (query or '').strip()
        if not query:
            logger.info("Empty query, skipping upstream search")
            return ResultSet(query='')

        logger.info(f"Starting search for: {query}")
        deduplicator = Deduplicator()
        page_index = 1

        while True:
            html = await self.search_client.fetch_page(query, page_index)
            candidates = self.associator.extract(html)
            accepted = deduplicator.add(candidates)
            logger.info(
                f"Page {page_index}: {len(candidates)} candidates, {len(accepted)} new"
            )

            stop_reason = self._stop_reason(html, candidates, page_index)
            if stop_reason:
                logger.info(f"Stopping after page {page_index}: {stop_reason}")
                break
            page_index += 1

        result_set = build_result_set(deduplicator.items, query, pages_fetched=page_index)
        logger.info(f"Found {len(result_set)} unique documents for {query!r} in {page_index} pages")
        return result_set

    def _stop_reason(self, html: str, candidates: List[Item], page_index: int) -> Optional[str]:
        """Decide whether the pagination loop ends after this page.

        Args:
            html: Raw markup of the current page
            candidates: Items extracted from the current page
            page_index: 1-based index of the current page

        Returns:
            Reason for stopping, or None to fetch the next page
        """
        if not candidates:
            return 'no items on page'

        protocol = self.search_client.protocol
        if protocol is PaginationProtocol.OFFSET and len(candidates) < self.search_client.page_size:
            return f'partial page ({len(candidates)} < {self.search_client.page_size})'
        if protocol is PaginationProtocol.PAGE and not has_next_page(html, page_index):
            return 'no next page link'

        if page_index >= self.max_pages:
            logger.warning(f"Page ceiling of {self.max_pages} reached")
            return 'page ceiling reached'

        return None
