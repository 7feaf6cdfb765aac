"""
Tests for the transactional recipe import.

Tests cover:
- Row persistence: entities, settings, ranges, tags and images
- Idempotent re-import and slug collisions across authors
- Dry runs and caller-owned sessions
- Per-row error isolation, skips and warnings
- Truncation and batch-fatal failures
- CSV reading
"""

from unittest.mock import patch

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError

from film_recipes.models import (
    Author,
    FilmSimulation,
    Image,
    Recipe,
    RecipeSettingRange,
    RecipeSettingValue,
    RecipeTag,
    SettingDefinition,
    SystemSetting,
    Tag,
)
from film_recipes.services.database import count_rows, session_scope
from film_recipes.services.exceptions import ImportBatchError, SourceFileError
from film_recipes.services.recipe_import_service import (
    RecipeImportResult,
    RecipeRow,
    import_recipes_from_csv,
    import_rows,
    parse_settings_cell,
    read_recipe_rows,
)


def _setting_values(session, recipe_slug):
    rows = session.execute(
        select(SettingDefinition.slug, RecipeSettingValue.value)
        .join(RecipeSettingValue, RecipeSettingValue.setting_definition_id == SettingDefinition.id)
        .join(Recipe, Recipe.id == RecipeSettingValue.recipe_id)
        .where(Recipe.slug == recipe_slug)
    ).all()
    return {slug: value for slug, value in rows}


def _setting_ranges(session):
    return [
        tuple(row)
        for row in session.execute(
            select(
                SettingDefinition.slug,
                RecipeSettingRange.min_value,
                RecipeSettingRange.max_value,
            ).join(
                RecipeSettingRange, RecipeSettingRange.setting_definition_id == SettingDefinition.id
            )
        )
    ]


def _recipe(session, slug):
    return session.execute(select(Recipe).where(Recipe.slug == slug)).scalar_one()


class TestImportRow:
    """A complete row is persisted with all of its associations."""

    def test_import_creates_recipe(self, test_db, recipe_row_factory):
        result = import_rows([recipe_row_factory()])

        assert result.imported == 1
        assert result.updated == 0
        assert not result.has_errors

        with session_scope() as session:
            recipe = _recipe(session, "kodachrome-64")
            assert recipe.name == "Kodachrome 64"
            assert recipe.source_type == "community"
            assert recipe.publish_date.isoformat() == "2021-03-14"
            assert recipe.author.slug == "ritchie-roesch"
            assert recipe.film_simulation.name == "Classic Chrome"
            assert recipe.camera_model.name == "X-T4"
            assert recipe.sensor.name == "X-Trans IV"
            assert recipe.style_category.name == "Color"

    def test_settings_are_canonical(self, test_db, recipe_row_factory):
        import_rows([recipe_row_factory()])

        with session_scope() as session:
            values = _setting_values(session, "kodachrome-64")
            assert values["dynamic_range"] == "DR200"
            assert values["highlight_tone"] == "+0.5"
            assert values["shadow_tone"] == "-1"
            assert values["grain_effect"] == "Weak"
            assert values["grain_effect_size"] == "Small"
            assert values["wb_shift_red"] == "2"
            assert values["wb_shift_blue"] == "-5"
            assert values["iso_max"] == "6400"
            assert values["exposure_compensation_min"] == "0"
            assert float(values["exposure_compensation_max"]) == pytest.approx(2 / 3)
            assert len(values) == 10
            assert count_rows(session, SystemSetting) == 10

    def test_min_max_pair_becomes_range(self, test_db, recipe_row_factory):
        import_rows([recipe_row_factory()])

        with session_scope() as session:
            ranges = session.execute(
                select(SettingDefinition.name, RecipeSettingRange.min_value)
                .join(RecipeSettingRange, RecipeSettingRange.setting_definition_id == SettingDefinition.id)
            ).all()
            # ISO only has an upper bound, so only exposure forms a range
            assert [name for name, _ in ranges] == ["Exposure Compensation"]
            assert ranges[0][1] == "0"

    def test_tags_and_images(self, test_db, recipe_row_factory):
        import_rows([recipe_row_factory()])

        with session_scope() as session:
            recipe = _recipe(session, "kodachrome-64")
            assert sorted(rt.tag.name for rt in recipe.recipe_tags) == ["Daylight", "Vintage"]
            assert [(i.image_type, i.sort_order) for i in recipe.images] == [
                ("primary", 0),
                ("secondary", 1),
            ]
            assert recipe.images[0].alt_text == "Kodachrome 64"
            assert all(tag.usage_count == 1 for tag in session.execute(select(Tag)).scalars())

    def test_last_value_for_a_setting_wins(self, test_db, recipe_row_factory):
        row = recipe_row_factory(settings=[("DR", "DR200"), ("Dynamic Range", "400%")])
        import_rows([row])

        with session_scope() as session:
            assert _setting_values(session, "kodachrome-64") == {"dynamic_range": "DR400"}

    def test_later_iso_range_replaces_single_value(self, test_db, recipe_row_factory):
        row = recipe_row_factory(settings=[("ISO", "800"), ("ISO", "200-3200")])
        import_rows([row])

        with session_scope() as session:
            assert _setting_values(session, "kodachrome-64") == {
                "iso_min": "200",
                "iso_max": "3200",
            }
            assert _setting_ranges(session) == [("iso", "200", "3200")]

    def test_later_iso_value_replaces_range(self, test_db, recipe_row_factory):
        row = recipe_row_factory(settings=[("ISO", "200-3200"), ("ISO", "800")])
        import_rows([row])

        with session_scope() as session:
            assert _setting_values(session, "kodachrome-64") == {"iso": "800"}
            assert _setting_ranges(session) == []

    def test_ignored_settings_are_skipped(self, test_db, recipe_row_factory):
        row = recipe_row_factory(settings=[("Aperture", "f/8"), ("Sharpness", "-2")])
        result = import_rows([row])

        assert result.imported == 1
        with session_scope() as session:
            assert _setting_values(session, "kodachrome-64") == {"sharpness": "-2"}


class TestIdempotence:
    """Re-running an import updates instead of duplicating."""

    def test_reimport_updates(self, test_db, recipe_row_factory):
        import_rows([recipe_row_factory()])
        result = import_rows([recipe_row_factory(description="Updated")])

        assert result.imported == 0
        assert result.updated == 1

        with session_scope() as session:
            assert count_rows(session, Recipe) == 1
            assert count_rows(session, Author) == 1
            assert count_rows(session, Tag) == 2
            assert count_rows(session, FilmSimulation) == 1
            assert count_rows(session, RecipeSettingValue) == 10
            assert count_rows(session, RecipeTag) == 2
            assert count_rows(session, Image) == 2
            assert _recipe(session, "kodachrome-64").description == "Updated"

    def test_same_name_other_author_gets_suffix(self, test_db, recipe_row_factory):
        result = import_rows(
            [
                recipe_row_factory(line=2),
                recipe_row_factory(line=3, creator="Someone Else"),
            ]
        )

        assert result.imported == 2
        with session_scope() as session:
            slugs = sorted(session.execute(select(Recipe.slug)).scalars())
            assert slugs == ["kodachrome-64", "kodachrome-64-1"]

    def test_suffixed_recipe_is_updated_on_reimport(self, test_db, recipe_row_factory):
        rows = [recipe_row_factory(line=2), recipe_row_factory(line=3, creator="Someone Else")]
        import_rows(rows)
        result = import_rows(rows)

        assert result.updated == 2
        with session_scope() as session:
            assert count_rows(session, Recipe) == 2

    def test_shared_tag_usage_count(self, test_db, recipe_row_factory):
        import_rows(
            [
                recipe_row_factory(line=2),
                recipe_row_factory(line=3, name="Portra 400", tags=["Vintage"]),
            ]
        )

        with session_scope() as session:
            vintage = session.execute(select(Tag).where(Tag.slug == "vintage")).scalar_one()
            assert vintage.usage_count == 2


class TestDryRun:
    """Dry runs report real statistics and persist nothing."""

    def test_dry_run_rolls_back(self, test_db, recipe_row_factory):
        result = import_rows([recipe_row_factory()], dry_run=True)

        assert result.dry_run is True
        assert result.imported == 1
        assert "DRY RUN" in result.get_summary()

        with session_scope() as session:
            assert count_rows(session, Recipe) == 0
            assert count_rows(session, Author) == 0

    def test_dry_run_statistics_match_real_run(self, test_db, recipe_row_factory):
        rows = [
            recipe_row_factory(line=2),
            recipe_row_factory(line=3, settings=[("DR", "DR400"), ("ISO", "whatever")]),
            recipe_row_factory(line=4, name=""),
            recipe_row_factory(line=5, name="Broken", settings=[("Film Sim Strength", "High")]),
            recipe_row_factory(line=6, name="Portra 400"),
        ]

        dry = import_rows(rows, dry_run=True)
        real = import_rows(rows)

        assert (dry.imported, dry.updated, dry.skipped) == (2, 1, 1)
        assert (dry.imported, dry.updated, dry.skipped, dry.total) == (
            real.imported,
            real.updated,
            real.skipped,
            real.total,
        )
        assert dry.errors == real.errors
        assert dry.warnings == real.warnings

    def test_dry_run_truncate_is_rolled_back(self, test_db, recipe_row_factory):
        import_rows([recipe_row_factory()])
        result = import_rows([], dry_run=True, truncate=True)

        assert result.truncated["recipes"] == 1
        with session_scope() as session:
            assert count_rows(session, Recipe) == 1

    def test_caller_session_dry_run_is_contained(self, test_db, recipe_row_factory):
        with session_scope() as session:
            session.add(Author(name="Kept Author", slug="kept-author"))
            session.flush()
            result = import_rows([recipe_row_factory()], dry_run=True, session=session)
            assert result.imported == 1

        with session_scope() as session:
            assert count_rows(session, Recipe) == 0
            assert [a.slug for a in session.execute(select(Author)).scalars()] == ["kept-author"]

    def test_caller_session_owns_commit(self, test_db, recipe_row_factory):
        with session_scope() as session:
            import_rows([recipe_row_factory()], session=session)
            session.rollback()

        with session_scope() as session:
            assert count_rows(session, Recipe) == 0


class TestRowIsolation:
    """A bad row is recorded and the batch carries on."""

    def test_unknown_setting_rejects_only_that_row(self, test_db, recipe_row_factory):
        rows = [
            recipe_row_factory(line=2),
            recipe_row_factory(
                line=3,
                creator="New Creator",
                name="Broken",
                settings=[("Film Sim Strength", "High")],
            ),
            recipe_row_factory(line=4, name="Portra 400"),
        ]
        result = import_rows(rows)

        assert result.imported == 2
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.row == 3
        assert error.name == "Broken"
        assert error.error_type == "UnknownSettingError"
        assert "Film Sim Strength" in error.message

        with session_scope() as session:
            assert count_rows(session, Recipe) == 2
            # Entities created by the rejected row were rolled back with it
            assert session.execute(
                select(Author).where(Author.slug == "new-creator")
            ).scalar_one_or_none() is None

    def test_constraint_violation_rolls_back_only_that_row(self, test_db, recipe_row_factory):
        with session_scope() as session:
            session.execute(
                text(
                    "CREATE TRIGGER reject_blocked_images BEFORE INSERT ON images "
                    "WHEN NEW.full_url LIKE '%blocked.example%' "
                    "BEGIN SELECT RAISE(ABORT, 'image host is blocked'); END"
                )
            )

        rows = [
            recipe_row_factory(line=2),
            recipe_row_factory(
                line=3,
                creator="New Creator",
                name="Blocked",
                tags=["Night"],
                images=["https://blocked.example/a.jpg"],
            ),
            recipe_row_factory(line=4, name="Portra 400"),
        ]
        result = import_rows(rows)

        assert result.imported == 2
        assert [(e.row, e.error_type) for e in result.errors] == [(3, "IntegrityError")]
        with session_scope() as session:
            assert sorted(session.execute(select(Recipe.slug)).scalars()) == [
                "kodachrome-64",
                "portra-400",
            ]
            # The author, recipe and tag written before the failing insert are gone
            assert session.execute(
                select(Author).where(Author.slug == "new-creator")
            ).scalar_one_or_none() is None
            assert session.execute(
                select(Tag).where(Tag.slug == "night")
            ).scalar_one_or_none() is None

    def test_missing_required_reference(self, test_db, recipe_row_factory):
        result = import_rows([recipe_row_factory(film_simulation="")])

        assert result.imported == 0
        assert result.errors[0].error_type == "ValidationError"
        assert "Film simulation" in result.errors[0].message

    def test_skipped_rows(self, test_db, recipe_row_factory):
        rows = [
            RecipeRow(line=2),
            recipe_row_factory(line=3, name=""),
            recipe_row_factory(line=4, creator=""),
        ]
        result = import_rows(rows)

        assert result.skipped == 3
        assert result.total == 3
        assert len(result.warnings) == 3
        assert "missing creator" in result.warnings[2]

    def test_unparseable_composite_is_a_warning(self, test_db, recipe_row_factory):
        row = recipe_row_factory(settings=[("ISO", "whatever works"), ("Sharpness", "+1")])
        result = import_rows([row])

        assert result.imported == 1
        assert any("ISO: whatever works" in warning for warning in result.warnings)

    def test_result_to_dict(self, test_db, recipe_row_factory):
        result = import_rows(
            [recipe_row_factory(line=2), recipe_row_factory(line=3, film_simulation="")]
        )

        data = result.to_dict()
        assert data["total"] == 2
        assert data["imported"] == 1
        assert data["errors"][0]["row"] == 3


class TestTruncateAndBatchErrors:
    """Truncation and batch-fatal failures."""

    def test_truncate_replaces_recipes(self, test_db, recipe_row_factory):
        import_rows([recipe_row_factory()])
        result = import_rows([recipe_row_factory(name="Portra 400", tags=[])], truncate=True)

        assert result.truncated["recipes"] == 1
        assert result.imported == 1
        with session_scope() as session:
            assert list(session.execute(select(Recipe.slug)).scalars()) == ["portra-400"]
            # Reference data survives truncation
            assert count_rows(session, Author) == 1
            assert all(tag.usage_count == 0 for tag in session.execute(select(Tag)).scalars())

    def test_truncate_failure_aborts_batch(self, test_db, recipe_row_factory):
        failure = OperationalError("DELETE FROM recipes", {}, Exception("database is locked"))
        with patch(
            "film_recipes.services.recipe_import_service.truncate_recipe_data",
            side_effect=failure,
        ):
            with pytest.raises(ImportBatchError) as exc_info:
                import_rows([recipe_row_factory()], truncate=True)

        assert exc_info.value.stage == "truncate"
        with session_scope() as session:
            assert count_rows(session, Recipe) == 0

    def test_commit_failure_aborts_batch(self, test_db, recipe_row_factory):
        failure = OperationalError("COMMIT", {}, Exception("disk I/O error"))
        with patch.object(test_db.registry(), "commit", side_effect=failure):
            with pytest.raises(ImportBatchError) as exc_info:
                import_rows([recipe_row_factory()])

        assert exc_info.value.stage == "commit"
        with session_scope() as session:
            assert count_rows(session, Recipe) == 0


class TestReadRecipeRows:
    """Tests for CSV reading."""

    HEADER = "Creator,Name,Type,Color /BW,Camera,Sensor,Base,Settings,Published,URL,Tags,Images\n"

    def test_parse_settings_cell(self):
        assert parse_settings_cell("DR: 400%\nWB Shift: R:4 B:-5\nnotes\n: empty") == [
            ("DR", "400%"),
            ("WB Shift", "R:4 B:-5"),
        ]
        assert parse_settings_cell(None) == []

    def test_reads_multiline_settings(self, tmp_path):
        csv_file = tmp_path / "recipes.csv"
        csv_file.write_text(
            self.HEADER
            + 'Ritchie Roesch,Kodachrome 64,X-Trans IV,Color,X-T4,,Classic Chrome,'
            + '"DR: DR200\nGrain: Weak, Small",2021-03-14,https://example.com,'
            + '"Vintage, Daylight",https://example.com/a.jpg https://example.com/b.jpg\n',
            encoding="utf-8",
        )

        rows = read_recipe_rows(str(csv_file))

        assert len(rows) == 1
        row = rows[0]
        assert row.name == "Kodachrome 64"
        assert row.settings == [("DR", "DR200"), ("Grain", "Weak, Small")]
        assert row.tags == ["Vintage", "Daylight"]
        assert row.images == ["https://example.com/a.jpg", "https://example.com/b.jpg"]
        assert row.sensor == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceFileError):
            read_recipe_rows(str(tmp_path / "missing.csv"))

    def test_import_from_csv(self, test_db, tmp_path):
        csv_file = tmp_path / "recipes.csv"
        csv_file.write_text(
            self.HEADER
            + "Ritchie Roesch,Kodachrome 64,X-Trans IV,Color,X-T4,,Classic Chrome,"
            + '"DR: DR200",,,,\n'
            + ",,,,,,,,,,,\n",
            encoding="utf-8",
        )

        result = import_recipes_from_csv(str(csv_file))

        assert isinstance(result, RecipeImportResult)
        assert result.imported == 1
        assert result.skipped == 1
