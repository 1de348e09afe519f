"""Core data schemas for extracted search-index documents."""

from dataclasses import dataclass, field
import datetime
from typing import Dict, List, Any, Optional, Tuple


UNDATED_PLACEHOLDER = "—"
UNDATED_LABEL = "Utan datum"


@dataclass(frozen=True)
class DateToken:
    """Calendar date found in scanned text, with its character offset."""
    value: datetime.date
    position: int


@dataclass(frozen=True)
class Anchor:
    """Hyperlink candidate found in a page."""
    href: str  # raw attribute value, possibly relative
    text: str  # flattened visible text
    position: int  # offset of the opening <a> tag


@dataclass
class Item:
    """Canonical extracted document record."""
    title: str = ""
    page_url: Optional[str] = None
    download_url: Optional[str] = None
    date: Optional[datetime.date] = None
    source_position: int = 0  # only used for window computation

    def identity_key(self) -> Tuple[str, str, str]:
        """Key under which two items are considered the same document."""
        return (
            self.title,
            self.page_url or "",
            self.date.isoformat() if self.date else "",
        )

    def has_content(self) -> bool:
        return bool(self.title or self.page_url or self.date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'page_url': self.page_url,
            'download_url': self.download_url,
            'date': self.date.isoformat() if self.date else UNDATED_PLACEHOLDER,
        }


@dataclass
class ResultSet:
    """Deduplicated items for one query.

    ``dated`` is sorted by date descending (ties keep first-seen order),
    ``undated`` keeps discovery order.
    """
    query: str
    dated: List[Item] = field(default_factory=list)
    undated: List[Item] = field(default_factory=list)
    pages_fetched: int = 0

    @property
    def items(self) -> List[Item]:
        return self.dated + self.undated

    def __len__(self) -> int:
        return len(self.dated) + len(self.undated)


@dataclass
class MonthBucket:
    """Items sharing a (year, month), or the undated sentinel bucket."""
    key: Optional[Tuple[int, int]]  # None marks the undated bucket
    items: List[Item] = field(default_factory=list)

    @property
    def label(self) -> str:
        if self.key is None:
            return UNDATED_LABEL
        year, month = self.key
        return f"{year:04d}-{month:02d}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'month': self.label if self.key else None,
            'label': self.label,
            'items': [item.to_dict() for item in self.items],
        }
