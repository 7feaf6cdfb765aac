"""
Tests for the recipe export engine.

The query layer is mocked for batch, by-id and failure isolation tests; an
end-to-end test runs against the in-memory database.
"""

import io
import json
from unittest.mock import patch

import pytest

from film_recipes.services import recipe_query_service
from film_recipes.services.exceptions import RecipeNotFound
from film_recipes.services.recipe_export_service import (
    ExportOptions,
    export_recipe_by_id,
    export_recipes,
)
from film_recipes.services.recipe_import_service import import_rows


def _recipe_row(recipe_id, name):
    return {
        "id": recipe_id,
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "description": None,
        "publish_date": None,
        "view_count": 0,
        "is_featured": False,
        "difficulty_level": None,
        "source_type": "community",
        "source_url": None,
        "author_name": "Ritchie Roesch",
        "author_slug": "ritchie-roesch",
        "author_bio": None,
        "author_website_url": None,
        "author_social_handle": None,
        "author_social_platform": None,
        "author_is_verified": False,
        "system_name": "X-Trans IV",
        "system_manufacturer": "Fujifilm",
        "sensor_name": None,
        "sensor_type": None,
        "sensor_megapixels": None,
        "sensor_description": None,
        "camera_name": None,
        "camera_release_year": None,
        "film_sim_name": "Classic Chrome",
        "film_sim_label": "Classic Chrome",
        "film_sim_description": None,
        "style_category_name": None,
    }


@pytest.fixture
def mock_queries():
    """Patch the query layer with two recipes."""
    rows = [_recipe_row(1, "Kodachrome 64"), _recipe_row(2, "Portra 400")]
    with patch.object(recipe_query_service, "fetch_recipes", return_value=rows) as fetch, \
            patch.object(recipe_query_service, "fetch_recipe_settings", return_value=[]), \
            patch.object(recipe_query_service, "fetch_recipe_tags", return_value=[]), \
            patch.object(recipe_query_service, "fetch_recipe_images", return_value=[]):
        yield fetch


class TestExportRecipes:
    """Tests for export_recipes()."""

    def test_batch_document(self, mock_queries, tmp_path):
        output = tmp_path / "nested" / "recipes.json"
        stats = export_recipes(ExportOptions(output_path=str(output)))

        assert stats.total_recipes == 2
        assert stats.exported_recipes == 2
        assert stats.errors == 0
        assert stats.output_file == str(output)

        document = json.loads(output.read_text(encoding="utf-8"))
        assert document["metadata"]["version"] == "1.0"
        assert document["metadata"]["totalRecipes"] == 2
        assert document["metadata"]["exportDate"].endswith("Z")
        assert [r["name"] for r in document["recipes"]] == ["Kodachrome 64", "Portra 400"]

    def test_filters_are_passed_to_query(self, mock_queries):
        export_recipes(
            ExportOptions(stream=io.StringIO(), active_only=True, featured_only=True)
        )
        mock_queries.assert_called_once_with(active_only=True, featured_only=True)

    def test_failing_recipe_is_isolated(self, mock_queries):
        def settings_for(recipe_id):
            if recipe_id == 1:
                raise RuntimeError("connection reset")
            return []

        stream = io.StringIO()
        with patch.object(recipe_query_service, "fetch_recipe_settings", side_effect=settings_for):
            stats = export_recipes(ExportOptions(stream=stream))

        assert stats.total_recipes == 2
        assert stats.exported_recipes == 1
        assert stats.errors == 1
        document = json.loads(stream.getvalue())
        assert document["metadata"]["totalRecipes"] == 1
        assert [r["name"] for r in document["recipes"]] == ["Portra 400"]

    def test_malformed_row_is_isolated(self, mock_queries):
        broken = [{"setting_name": "Dynamic Range"}]
        with patch.object(recipe_query_service, "fetch_recipe_settings", return_value=broken):
            stats = export_recipes(ExportOptions(stream=io.StringIO()))

        assert stats.errors == 2
        assert stats.exported_recipes == 0

    def test_dry_run_writes_nothing(self, mock_queries, tmp_path):
        output = tmp_path / "recipes.json"
        stats = export_recipes(ExportOptions(output_path=str(output), dry_run=True))

        assert stats.exported_recipes == 2
        assert not output.exists()
        assert "Dry run" in stats.get_summary()

    def test_compact_output(self, mock_queries):
        stream = io.StringIO()
        export_recipes(ExportOptions(stream=stream, pretty_print=False))
        assert "\n" not in stream.getvalue()

    def test_without_metadata(self, mock_queries):
        stream = io.StringIO()
        export_recipes(ExportOptions(stream=stream, include_metadata=False))
        assert isinstance(json.loads(stream.getvalue()), list)


class TestExportRecipeById:
    """Tests for export_recipe_by_id()."""

    def test_single_document(self, tmp_path):
        data = {"recipe": _recipe_row(7, "Kodachrome 64"), "settings": [], "tags": [], "images": []}
        output = tmp_path / "recipe.json"
        with patch.object(recipe_query_service, "fetch_recipe_by_id", return_value=data):
            stats = export_recipe_by_id(7, ExportOptions(output_path=str(output)))

        assert stats.exported_recipes == 1
        document = json.loads(output.read_text(encoding="utf-8"))
        assert "metadata" not in document
        assert document["name"] == "Kodachrome 64"

    def test_unknown_id_writes_nothing(self, tmp_path):
        output = tmp_path / "recipe.json"
        with patch.object(recipe_query_service, "fetch_recipe_by_id", return_value=None):
            with pytest.raises(RecipeNotFound):
                export_recipe_by_id(99, ExportOptions(output_path=str(output)))
        assert not output.exists()


class TestExportEndToEnd:
    """Import then export against the in-memory database."""

    def test_round_trip(self, test_db, recipe_row_factory):
        import_rows([recipe_row_factory()])
        stream = io.StringIO()

        stats = export_recipes(ExportOptions(stream=stream))

        assert stats.exported_recipes == 1
        recipe = json.loads(stream.getvalue())["recipes"][0]
        assert recipe["slug"] == "kodachrome-64"
        assert recipe["publishDate"] == "2021-03-14"
        assert recipe["system"]["camera"]["name"] == "X-T4"
        assert recipe["settings"]["dynamic_range"]["value"] == "DR200"
        assert recipe["settings"]["exposure_compensation"]["range"]["min"] == "0"
        assert recipe["settings"]["exposure_compensation"]["unit"] == "EV"
        for entry in recipe["settings"].values():
            assert ("value" in entry) != ("range" in entry)
        assert [i["type"] for i in recipe["images"]] == ["primary", "secondary"]
