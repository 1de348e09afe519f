"""Search Client

HTTP transport for the upstream search endpoint: builds page requests,
retries transport failures and maps failures to ``UpstreamFetchError``.
"""

import asyncio
import logging
from enum import Enum
from typing import Dict, Optional
from urllib.parse import urljoin

import httpx


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://sammantraden.huddinge.se'
DEFAULT_USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36'


class PaginationProtocol(str, Enum):
    """Page cursor shape sent to the search endpoint."""
    OFFSET = 'offset'  # pindex=<n>&psize=<size>
    PAGE = 'page'      # page=<n>


class UpstreamFetchError(Exception):
    """A search page could not be fetched.

    Attributes:
        page_index: 1-based index of the page being fetched
        url: Requested URL
        status_code: HTTP status, or None for transport failures
    """

    def __init__(self, page_index: int, url: str, status_code: Optional[int] = None, reason: str = ''):
        self.page_index = page_index
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            message = f"HTTP {status_code} on page {page_index} ({url})"
        else:
            message = f"Transport error on page {page_index} ({url})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SearchClient:
    """Fetches raw search result pages one at a time."""

    def __init__(self, config: Dict, client: Optional[httpx.AsyncClient] = None):
        """Initialize search client.

        Args:
            config: Configuration dictionary containing search portal settings
            client: Optional preconfigured HTTP client; one is created otherwise
        """
        portal = config.get('search_portal') or {}
        self.base_url = portal.get('base_url', DEFAULT_BASE_URL)
        self.search_url = urljoin(self.base_url, portal.get('search_path', '/search'))
        self.query_param = portal.get('query_param', 'text')
        self.protocol = PaginationProtocol(portal.get('pagination', PaginationProtocol.OFFSET.value))
        self.page_size = int(portal.get('page_size', 20))
        self.timeout = portal.get('timeout', 30)
        self.retry_attempts = max(1, int(portal.get('retry_attempts', 3)))
        self.retry_backoff = float(portal.get('retry_backoff', 1.0))
        self.user_agent = portal.get('user_agent', DEFAULT_USER_AGENT)

        self.client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={'User-Agent': self.user_agent}
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.client and self._owns_client:
            await self.client.aclose()
            self.client = None

    def build_params(self, query: str, page_index: int) -> Dict[str, str]:
        """Query parameters for one page of results.

        Args:
            query: Search term
            page_index: 1-based page index

        Returns:
            Parameter mapping for the request
        """
        params = {self.query_param: query}
        if self.protocol is PaginationProtocol.PAGE:
            params['page'] = str(page_index)
        else:
            params['pindex'] = str(page_index)
            params['psize'] = str(self.page_size)
        return params

    async def fetch_page(self, query: str, page_index: int) -> str:
        """Fetch one page of search results.

        Transport errors are retried with exponential backoff; HTTP error
        statuses are not.

        Args:
            query: Search term
            page_index: 1-based page index

        Returns:
            Raw page markup

        Raises:
            UpstreamFetchError: On a non-success status or after the last
                failed transport attempt
        """
        if self.client is None:
            raise RuntimeError("SearchClient must be used as an async context manager")

        params = self.build_params(query, page_index)
        url = str(httpx.URL(self.search_url, params=params))
        logger.debug(f"Fetching page {page_index}: {url}")

        for attempt in range(self.retry_attempts):
            try:
                response = await self.client.get(self.search_url, params=params)
            except httpx.RequestError as e:
                logger.warning(f"Request for page {page_index} failed (attempt {attempt + 1}): {e}")
                if attempt == self.retry_attempts - 1:
                    raise UpstreamFetchError(page_index, url, reason=str(e) or type(e).__name__) from e
                await asyncio.sleep(self.retry_backoff * 2 ** attempt)  # Exponential backoff
                continue

            if not response.is_success:
                raise UpstreamFetchError(page_index, str(response.url), response.status_code)

            return response.text
