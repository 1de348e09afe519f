"""Tests for month bucket grouping."""

from datetime import date

from meeting_search.processors.deduplicator import build_result_set
from meeting_search.processors.month_grouper import group_by_month
from meeting_search.schemas import UNDATED_LABEL, Item, ResultSet


def test_buckets_follow_result_order():
    items = [
        Item(title="Mars A", date=date(2024, 3, 15)),
        Item(title="Utan datum"),
        Item(title="Jan", date=date(2024, 1, 2)),
        Item(title="Mars B", date=date(2024, 3, 1)),
        Item(title="Dec", date=date(2023, 12, 31)),
    ]

    buckets = group_by_month(build_result_set(items, "q"))

    assert [bucket.key for bucket in buckets] == [(2024, 3), (2024, 1), (2023, 12), None]
    assert [bucket.label for bucket in buckets] == ["2024-03", "2024-01", "2023-12", UNDATED_LABEL]
    assert [item.title for item in buckets[0].items] == ["Mars A", "Mars B"]
    assert [item.title for item in buckets[-1].items] == ["Utan datum"]


def test_same_month_in_different_years_are_separate():
    items = [Item(title="2024", date=date(2024, 5, 1)), Item(title="2023", date=date(2023, 5, 1))]

    buckets = group_by_month(build_result_set(items, "q"))

    assert [bucket.key for bucket in buckets] == [(2024, 5), (2023, 5)]


def test_only_undated_items():
    buckets = group_by_month(build_result_set([Item(title="A"), Item(title="B")], "q"))

    assert len(buckets) == 1
    assert buckets[0].key is None
    assert buckets[0].to_dict()['month'] is None


def test_empty_result_set():
    assert group_by_month(ResultSet(query="q")) == []


def test_bucket_serialization():
    item = Item(title="Beslut", page_url="https://x/p", date=date(2024, 3, 15))

    bucket = group_by_month(build_result_set([item], "q"))[0]

    assert bucket.to_dict() == {
        'month': '2024-03',
        'label': '2024-03',
        'items': [{
            'title': 'Beslut',
            'page_url': 'https://x/p',
            'download_url': None,
            'date': '2024-03-15',
        }],
    }
