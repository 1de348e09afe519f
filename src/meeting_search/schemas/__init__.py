"""Schema definitions for the meeting document search."""

from .document_schemas import (
    DateToken,
    Anchor,
    Item,
    ResultSet,
    MonthBucket,
    UNDATED_PLACEHOLDER,
    UNDATED_LABEL
)

__all__ = [
    'DateToken',
    'Anchor',
    'Item',
    'ResultSet',
    'MonthBucket',
    'UNDATED_PLACEHOLDER',
    'UNDATED_LABEL'
]
