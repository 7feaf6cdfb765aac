"""Tests for slug generation helpers."""

from itertools import islice

import pytest

from film_recipes.utils.slug_utils import create_slug, slug_candidates, validate_slug_format


class TestCreateSlug:
    """Tests for create_slug()."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Kodak Portra 400", "kodak-portra-400"),
            ("Pacific Blues!", "pacific-blues"),
            ("  Café   Noir ", "cafe-noir"),
            ("Fujicolor Superia 800 (v2)", "fujicolor-superia-800-v2"),
            ("X-Trans IV", "x-trans-iv"),
        ],
    )
    def test_dash_slugs(self, name, expected):
        assert create_slug(name) == expected

    def test_underscore_separator(self):
        assert create_slug("Dynamic Range", separator="_") == "dynamic_range"

    def test_empty_and_punctuation_only(self):
        assert create_slug("") == ""
        assert create_slug("!!!") == ""

    def test_deterministic(self):
        assert create_slug("Classic Negative") == create_slug("Classic Negative")


class TestSlugCandidates:
    """Tests for slug_candidates()."""

    def test_sequence(self):
        assert list(islice(slug_candidates("kodachrome"), 4)) == [
            "kodachrome",
            "kodachrome-1",
            "kodachrome-2",
            "kodachrome-3",
        ]


class TestValidateSlugFormat:
    """Tests for validate_slug_format()."""

    def test_valid(self):
        assert validate_slug_format("pacific-blues")
        assert validate_slug_format("dynamic_range", separator="_")

    def test_invalid(self):
        assert not validate_slug_format("")
        assert not validate_slug_format("Pacific-Blues")
        assert not validate_slug_format("-leading")
        assert not validate_slug_format("double--dash")
        assert not validate_slug_format("dynamic_range")
