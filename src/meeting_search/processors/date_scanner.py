"""Date Token Scanner

Finds ISO-like dates (``YYYY-MM-DD``, ``YYYY/MM/DD``, ``YYYY.MM.DD``) in raw
page text and parses them into calendar dates.
"""

import logging
import re
from datetime import date
from typing import Iterator, Optional

from ..schemas import DateToken


logger = logging.getLogger(__name__)

# Year must start with 20; either separator may be any of - / .
DATE_PATTERN = re.compile(r'(?<!\d)(20\d{2})[-/.](\d{2})[-/.](\d{2})(?!\d)')


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    """Construct a date, rejecting out-of-range fields.

    Args:
        year: Four digit year
        month: Month number
        day: Day of month

    Returns:
        The date, or None if the fields do not form a real calendar date
    """
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        # e.g. 2023-02-30
        return None


def iter_date_tokens(text: str, start: int = 0, end: Optional[int] = None) -> Iterator[DateToken]:
    """Yield valid date tokens in ``text[start:end]``, left to right.

    Each call compiles its own match iterator, so scans never share cursor
    state. Offsets on the returned tokens are absolute offsets into ``text``.

    Args:
        text: Text to scan
        start: Offset to start scanning at
        end: Offset to stop scanning at (defaults to the end of the text)

    Yields:
        DateToken for every well-formed, valid date
    """
    if not text:
        return
    start = max(0, start)
    end = len(text) if end is None else min(end, len(text))
    if start >= end:
        return

    # No endpos: the trailing lookahead must see characters past ``end``.
    for match in DATE_PATTERN.finditer(text, start):
        if match.start() >= end:
            break
        year, month, day = match.groups()
        value = _build_date(int(year), int(month), int(day))
        if value is None:
            logger.debug(f"Discarding invalid date token {match.group(0)!r} at {match.start()}")
            continue
        yield DateToken(value=value, position=match.start())
