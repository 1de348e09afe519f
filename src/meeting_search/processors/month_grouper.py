"""Chronological grouping of a result set into month buckets."""

from typing import List

from ..schemas import MonthBucket, ResultSet


def group_by_month(result_set: ResultSet) -> List[MonthBucket]:
    """Split a result set into month buckets, preserving its order.

    A new bucket starts whenever the (year, month) key changes from the
    previous item, so a date-descending result set gives buckets newest
    first followed by a single undated bucket.

    Args:
        result_set: Sorted, deduplicated result set

    Returns:
        List of month buckets
    """
    buckets: List[MonthBucket] = []

    for item in result_set.items:
        key = (item.date.year, item.date.month) if item.date else None
        if not buckets or buckets[-1].key != key:
            buckets.append(MonthBucket(key=key))
        buckets[-1].items.append(item)

    return buckets
