"""Extraction and grouping of documents from search result pages."""

from .date_scanner import iter_date_tokens
from .anchor_locator import locate_anchors, is_document_href, is_title_candidate, resolve_url
from .proximity_associator import AssociationMode, ProximityAssociator, WINDOW_SPAN
from .deduplicator import Deduplicator, build_result_set, deduplicate
from .month_grouper import group_by_month
from .report_renderer import RENDERERS, render_csv, render_html, render_json

__all__ = [
    'iter_date_tokens',
    'locate_anchors',
    'is_document_href',
    'is_title_candidate',
    'resolve_url',
    'AssociationMode',
    'ProximityAssociator',
    'WINDOW_SPAN',
    'Deduplicator',
    'build_result_set',
    'deduplicate',
    'group_by_month',
    'RENDERERS',
    'render_csv',
    'render_html',
    'render_json'
]
