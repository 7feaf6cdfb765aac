"""
Recipe Query Service - read-only queries feeding the export pipeline.

Returns plain dict rows shaped for the export transformer:
- fetch_recipes(): recipes joined with author, system, sensor, camera,
  film simulation and style category
- fetch_recipe_settings(): value and range rows per setting definition
- fetch_recipe_tags() / fetch_recipe_images(): association rows

Each fetch opens its own short-lived session unless one is supplied.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from film_recipes.models import (
    Author,
    CameraModel,
    CameraSystem,
    FilmSimulation,
    Image,
    Recipe,
    RecipeSettingRange,
    RecipeSettingValue,
    RecipeTag,
    Sensor,
    SettingCategory,
    SettingDefinition,
    StyleCategory,
    Tag,
)
from .database import session_scope

Row = Dict[str, Any]


def _run(stmt, session: Optional[Session]) -> List[Row]:
    if session is not None:
        return [dict(row) for row in session.execute(stmt).mappings().all()]
    with session_scope() as sess:
        return [dict(row) for row in sess.execute(stmt).mappings().all()]


def _recipe_select():
    return (
        select(
            Recipe.id,
            Recipe.name,
            Recipe.slug,
            Recipe.description,
            Recipe.publish_date,
            Recipe.view_count,
            Recipe.is_featured,
            Recipe.difficulty_level,
            Recipe.source_type,
            Recipe.source_url,
            Author.name.label("author_name"),
            Author.slug.label("author_slug"),
            Author.bio.label("author_bio"),
            Author.website_url.label("author_website_url"),
            Author.social_handle.label("author_social_handle"),
            Author.social_platform.label("author_social_platform"),
            Author.is_verified.label("author_is_verified"),
            CameraSystem.name.label("system_name"),
            CameraSystem.manufacturer.label("system_manufacturer"),
            Sensor.name.label("sensor_name"),
            Sensor.type.label("sensor_type"),
            Sensor.megapixels.label("sensor_megapixels"),
            Sensor.description.label("sensor_description"),
            CameraModel.name.label("camera_name"),
            CameraModel.release_year.label("camera_release_year"),
            FilmSimulation.name.label("film_sim_name"),
            FilmSimulation.label.label("film_sim_label"),
            FilmSimulation.description.label("film_sim_description"),
            StyleCategory.name.label("style_category_name"),
        )
        .select_from(Recipe)
        .join(Author, Recipe.author_id == Author.id)
        .join(CameraSystem, Recipe.system_id == CameraSystem.id)
        .outerjoin(Sensor, Recipe.sensor_id == Sensor.id)
        .outerjoin(CameraModel, Recipe.camera_model_id == CameraModel.id)
        .join(FilmSimulation, Recipe.film_simulation_id == FilmSimulation.id)
        .outerjoin(StyleCategory, Recipe.style_category_id == StyleCategory.id)
    )


def fetch_recipes(
    active_only: bool = False,
    featured_only: bool = False,
    session: Optional[Session] = None,
) -> List[Row]:
    """
    Fetch joined recipe rows, newest first.

    Args:
        active_only: Only recipes with is_active set
        featured_only: Only recipes with is_featured set
        session: Optional session to run the query in
    """
    stmt = _recipe_select()
    if active_only:
        stmt = stmt.where(Recipe.is_active.is_(True))
    if featured_only:
        stmt = stmt.where(Recipe.is_featured.is_(True))
    stmt = stmt.order_by(Recipe.created_at.desc(), Recipe.id.desc())
    return _run(stmt, session)


def fetch_recipe_settings(recipe_id: int, session: Optional[Session] = None) -> List[Row]:
    """
    Fetch the settings of a recipe, one row per setting definition.

    A definition with both a value and a range for the recipe yields a
    single row carrying both. Ordered by category, then definition.
    """
    value_join = and_(
        RecipeSettingValue.setting_definition_id == SettingDefinition.id,
        RecipeSettingValue.recipe_id == recipe_id,
    )
    range_join = and_(
        RecipeSettingRange.setting_definition_id == SettingDefinition.id,
        RecipeSettingRange.recipe_id == recipe_id,
    )
    stmt = (
        select(
            SettingDefinition.slug.label("setting_slug"),
            SettingDefinition.name.label("setting_name"),
            SettingCategory.name.label("category_name"),
            SettingDefinition.unit,
            RecipeSettingValue.value,
            RecipeSettingRange.min_value,
            RecipeSettingRange.max_value,
            func.coalesce(RecipeSettingValue.notes, RecipeSettingRange.notes, "").label("notes"),
        )
        .select_from(SettingDefinition)
        .join(SettingCategory, SettingDefinition.category_id == SettingCategory.id)
        .outerjoin(RecipeSettingValue, value_join)
        .outerjoin(RecipeSettingRange, range_join)
        .where(
            or_(
                RecipeSettingValue.recipe_id == recipe_id,
                RecipeSettingRange.recipe_id == recipe_id,
            )
        )
        .order_by(SettingCategory.sort_order, SettingDefinition.sort_order, SettingDefinition.id)
    )
    return _run(stmt, session)


def fetch_recipe_tags(recipe_id: int, session: Optional[Session] = None) -> List[Row]:
    """Fetch the tags of a recipe ordered by name."""
    stmt = (
        select(
            Tag.name.label("tag_name"),
            Tag.slug.label("tag_slug"),
            Tag.category.label("tag_category"),
        )
        .join(RecipeTag, RecipeTag.tag_id == Tag.id)
        .where(RecipeTag.recipe_id == recipe_id)
        .order_by(Tag.name)
    )
    return _run(stmt, session)


def fetch_recipe_images(recipe_id: int, session: Optional[Session] = None) -> List[Row]:
    """Fetch the images of a recipe in display order."""
    stmt = (
        select(
            Image.image_type,
            Image.thumb_url,
            Image.full_url,
            Image.width,
            Image.height,
            Image.alt_text,
            Image.caption,
            Image.sort_order,
        )
        .where(Image.recipe_id == recipe_id)
        .order_by(Image.sort_order, Image.id)
    )
    return _run(stmt, session)


def fetch_recipe_by_id(recipe_id: int, session: Optional[Session] = None) -> Optional[Dict]:
    """
    Fetch one recipe with its settings, tags and images.

    Returns:
        Dict with keys recipe, settings, tags, images; None if the id is unknown
    """
    rows = _run(_recipe_select().where(Recipe.id == recipe_id), session)
    if not rows:
        return None
    return {
        "recipe": rows[0],
        "settings": fetch_recipe_settings(recipe_id, session=session),
        "tags": fetch_recipe_tags(recipe_id, session=session),
        "images": fetch_recipe_images(recipe_id, session=session),
    }
