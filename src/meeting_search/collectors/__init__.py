"""Data collection from the meeting document search."""

from .search_client import PaginationProtocol, SearchClient, UpstreamFetchError
from .search_collector import SearchCollector, has_next_page

__all__ = ["PaginationProtocol", "SearchClient", "SearchCollector", "UpstreamFetchError", "has_next_page"]
