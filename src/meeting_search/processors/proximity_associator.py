"""Proximity Associator

Binds document links to dates by their distance in the raw markup.

The search pages carry no machine-readable link between a title and its
date, so association is a best-effort heuristic: a date belongs to the link
it sits closest to, within a bounded window. Two strategies exist:

* anchor-centred (default): every title link picks the nearest date in its
  window, and, when it is not a document link itself, the first document
  link between it and the next title link (else the closest one before it
  that no earlier title has taken).
* date-centred: every date picks the first usable title link and the first
  document link in its window. This suits pages where dates outnumber links.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence, TypeVar

from ..schemas import Anchor, DateToken, Item
from .anchor_locator import is_document_href, is_title_candidate, locate_anchors, resolve_url
from .date_scanner import iter_date_tokens


logger = logging.getLogger(__name__)

# Characters searched on each side of an anchor or date
WINDOW_SPAN = 500

Positioned = TypeVar('Positioned', Anchor, DateToken)


class AssociationMode(str, Enum):
    """Association strategy."""
    ANCHOR = 'anchor'
    DATE = 'date'
    AUTO = 'auto'  # date-centred when dates outnumber title links


def nearest(candidates: Iterable[Positioned], position: int) -> Optional[Positioned]:
    """Pick the candidate closest to ``position``; ties go to the earlier offset."""
    return min(
        candidates,
        key=lambda candidate: (abs(candidate.position - position), candidate.position),
        default=None
    )


class ProximityAssociator:
    """Extracts candidate items from a search result page."""

    def __init__(
        self,
        base_url: str,
        window_span: int = WINDOW_SPAN,
        mode: AssociationMode = AssociationMode.ANCHOR
    ):
        """Initialize associator.

        Args:
            base_url: Site origin used to resolve relative links
            window_span: Characters searched on each side of the window centre
            mode: Association strategy
        """
        if window_span < 0:
            raise ValueError(f"window_span must not be negative, got {window_span}")
        self.base_url = base_url
        self.window_span = window_span
        self.mode = AssociationMode(mode)

    def extract(self, html: str) -> List[Item]:
        """Extract candidate items from a page, in discovery order.

        Args:
            html: Raw page markup

        Returns:
            Items that carry at least a title, page link or date
        """
        if not html:
            return []

        dates = list(iter_date_tokens(html))
        links = locate_anchors(html, include_empty=True)
        titles = [anchor for anchor in links if is_title_candidate(anchor)]

        mode = self.select_mode(titles, dates)
        logger.debug(
            f"Associating {len(titles)} title links and {len(dates)} dates ({mode.value}-centred)"
        )

        if mode is AssociationMode.DATE:
            items = self._associate_by_date(links, dates)
        else:
            items = self._associate_by_anchor(titles, links, dates)

        return [item for item in items if item.has_content()]

    def select_mode(self, titles: Sequence[Anchor], dates: Sequence[DateToken]) -> AssociationMode:
        if self.mode is not AssociationMode.AUTO:
            return self.mode
        if len(titles) < len(dates):
            return AssociationMode.DATE
        return AssociationMode.ANCHOR

    def _in_window(self, position: int, candidates: Iterable[Positioned]) -> List[Positioned]:
        start = position - self.window_span
        end = position + self.window_span
        return [candidate for candidate in candidates if start <= candidate.position <= end]

    def _first_resolved(self, anchors: Iterable[Anchor]) -> Optional[str]:
        for anchor in anchors:
            url = resolve_url(anchor.href, self.base_url)
            if url:
                return url
        return None

    def _own_documents(
        self,
        anchor: Anchor,
        documents: List[Anchor],
        previous_title: Optional[Anchor],
        next_title: Optional[Anchor]
    ) -> List[Anchor]:
        """Order the document links a title link may borrow its download from.

        Only links between the neighbouring title links are considered, so a
        hit never borrows the download link of the hit before or after it.
        Links following the title come first, nearest first, then links
        preceding it, nearest first.

        Args:
            anchor: Title link looking for a download link
            documents: Document-shaped links on the page
            previous_title: Title link before ``anchor``, if any
            next_title: Title link after ``anchor``, if any

        Returns:
            Candidate document links in preference order
        """
        lower = previous_title.position if previous_title else None
        upper = next_title.position if next_title else None
        nearby = [
            doc for doc in self._in_window(anchor.position, documents)
            if (lower is None or doc.position > lower) and (upper is None or doc.position < upper)
        ]
        following = sorted(
            (doc for doc in nearby if doc.position > anchor.position),
            key=lambda doc: doc.position
        )
        preceding = sorted(
            (doc for doc in nearby if doc.position < anchor.position),
            key=lambda doc: doc.position,
            reverse=True
        )
        return following + preceding

    def _associate_by_anchor(
        self,
        titles: List[Anchor],
        links: List[Anchor],
        dates: List[DateToken]
    ) -> List[Item]:
        documents = [anchor for anchor in links if is_document_href(anchor.href)]
        claimed = set()  # positions of document links already lent to a title
        items = []

        for index, anchor in enumerate(titles):
            token = nearest(self._in_window(anchor.position, dates), anchor.position)
            page_url = resolve_url(anchor.href, self.base_url)

            if is_document_href(anchor.href):
                download_url = page_url
            else:
                previous_title = titles[index - 1] if index > 0 else None
                next_title = titles[index + 1] if index + 1 < len(titles) else None
                download_url = None
                for doc in self._own_documents(anchor, documents, previous_title, next_title):
                    if doc.position in claimed:
                        continue
                    download_url = resolve_url(doc.href, self.base_url)
                    if download_url:
                        claimed.add(doc.position)
                        break

            # Links with neither a date nor a document nearby are site chrome
            if token is None and download_url is None:
                logger.debug(f"Skipping unassociated link {anchor.text!r} at {anchor.position}")
                continue

            items.append(Item(
                title=anchor.text,
                page_url=page_url,
                download_url=download_url,
                date=token.value if token else None,
                source_position=anchor.position
            ))

        return items

    def _associate_by_date(self, links: List[Anchor], dates: List[DateToken]) -> List[Item]:
        items = []

        for token in dates:
            nearby = self._in_window(token.position, links)
            candidates = [anchor for anchor in nearby if is_title_candidate(anchor)]

            title = ''
            page_url = None
            for anchor in candidates:
                page_url = resolve_url(anchor.href, self.base_url)
                if page_url:
                    title = anchor.text
                    break
            else:
                if candidates:
                    title = candidates[0].text

            download_url = self._first_resolved(
                anchor for anchor in nearby if is_document_href(anchor.href)
            )

            items.append(Item(
                title=title,
                page_url=page_url,
                download_url=download_url,
                date=token.value,
                source_position=token.position
            ))

        return items
