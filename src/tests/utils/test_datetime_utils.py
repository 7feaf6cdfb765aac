"""Tests for datetime helpers."""

import re
from datetime import date, timezone

import pytest

from film_recipes.utils.datetime_utils import parse_publish_date, utc_now, utc_timestamp


class TestUtcHelpers:
    """Tests for utc_now() and utc_timestamp()."""

    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo == timezone.utc

    def test_timestamp_format(self):
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", utc_timestamp())


class TestParsePublishDate:
    """Tests for parse_publish_date()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2023-03-05", date(2023, 3, 5)),
            ("2023-03-05T10:00:00Z", date(2023, 3, 5)),
            ("3/5/2023", date(2023, 3, 5)),
            ("March 5, 2023", date(2023, 3, 5)),
            ("Mar 5, 2023", date(2023, 3, 5)),
            ("5 March 2023", date(2023, 3, 5)),
            ("March 2023", date(2023, 3, 1)),
        ],
    )
    def test_formats(self, value, expected):
        assert parse_publish_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "sometime last year"])
    def test_unparseable_is_none(self, value):
        assert parse_publish_date(value) is None
