"""Tests for the date token scanner."""

from datetime import date

import pytest

from meeting_search.processors.date_scanner import iter_date_tokens


class TestIterDateTokens:
    """Scanning text for date tokens."""

    def test_finds_dates_with_all_separators(self):
        text = "Möte 2024-03-15, protokoll 2023/12/01 och beslut 2022.06.30"

        tokens = list(iter_date_tokens(text))

        assert [token.value for token in tokens] == [
            date(2024, 3, 15),
            date(2023, 12, 1),
            date(2022, 6, 30),
        ]
        assert tokens[0].position == text.index("2024-03-15")
        assert tokens[1].position == text.index("2023/12/01")

    def test_mixed_separators_are_accepted(self):
        text = "Möte 2024-03/15 och 2023.12-01"

        tokens = list(iter_date_tokens(text))

        assert [token.value for token in tokens] == [date(2024, 3, 15), date(2023, 12, 1)]
        assert tokens[0].position == text.index("2024-03/15")

    def test_other_separators_are_rejected(self):
        assert list(iter_date_tokens("2024 03 15")) == []
        assert list(iter_date_tokens("2024_03_15")) == []

    def test_rejects_tokens_inside_longer_digit_runs(self):
        assert list(iter_date_tokens("12024-03-15")) == []
        assert list(iter_date_tokens("2024-03-155")) == []

    def test_year_must_start_with_20(self):
        assert list(iter_date_tokens("1999-03-15")) == []

    @pytest.mark.parametrize("text", ["2024-13-01", "2024-00-10", "2024-04-32", "2024-02-30", "2023-02-29"])
    def test_invalid_calendar_dates_are_discarded(self, text):
        assert list(iter_date_tokens(text)) == []

    def test_leap_day_is_accepted(self):
        assert [token.value for token in iter_date_tokens("2024-02-29")] == [date(2024, 2, 29)]

    def test_invalid_token_does_not_hide_later_valid_one(self):
        tokens = list(iter_date_tokens("2024-02-30 2024-03-01"))

        assert [token.value for token in tokens] == [date(2024, 3, 1)]
        assert tokens[0].position == 11

    def test_span_limits_are_respected(self):
        text = "2024-01-01 xx 2024-02-02"

        assert [t.position for t in iter_date_tokens(text, start=5)] == [14]
        assert [t.position for t in iter_date_tokens(text, 0, 14)] == [0]
        assert [t.position for t in iter_date_tokens(text, 0, 15)] == [0, 14]

    def test_span_start_does_not_split_digit_runs(self):
        assert list(iter_date_tokens("12024-03-15", start=1)) == []

    def test_scans_are_independent(self):
        text = "a 2024-01-01 b 2024-02-02"

        first = list(iter_date_tokens(text))
        partial = iter_date_tokens(text)
        next(partial)
        second = list(iter_date_tokens(text))

        assert first == second

    def test_empty_and_degenerate_input(self):
        assert list(iter_date_tokens("")) == []
        assert list(iter_date_tokens("2024-01-01", start=5, end=2)) == []
