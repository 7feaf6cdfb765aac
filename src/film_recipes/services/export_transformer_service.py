"""
Export Transformer Service - reshape joined recipe rows into the public
recipe document.

Input rows come from recipe_query_service (snake_case column keys); output
is the nested camelCase document served to the public site. No database
access happens here. A row missing a required key raises KeyError so the
export engine can drop the whole recipe.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence


def _iso(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def transform_author(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": row["author_name"],
        "slug": row["author_slug"],
        "bio": row["author_bio"],
        "websiteUrl": row["author_website_url"],
        "socialHandle": row["author_social_handle"],
        "socialPlatform": row["author_social_platform"],
        "isVerified": row["author_is_verified"],
    }


def transform_system(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Camera system with optional sensor and camera; absent parts become None."""
    sensor: Optional[Dict[str, Any]] = None
    if row["sensor_name"]:
        sensor = {
            "name": row["sensor_name"],
            "type": row["sensor_type"],
            "megapixels": row["sensor_megapixels"],
            "description": row["sensor_description"],
        }

    camera: Optional[Dict[str, Any]] = None
    if row["camera_name"]:
        camera = {
            "name": row["camera_name"],
            "releaseYear": row["camera_release_year"],
        }

    return {
        "name": row["system_name"],
        "manufacturer": row["system_manufacturer"],
        "sensor": sensor,
        "camera": camera,
    }


def transform_film_simulation(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": row["film_sim_name"],
        "label": row["film_sim_label"],
        "description": row["film_sim_description"],
    }


def transform_setting(row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Build one settings entry.

    Rows with both a min and a max become a ``range`` entry, everything else
    a ``value`` entry; an entry never carries both.
    """
    setting: Dict[str, Any] = {
        "name": row["setting_name"],
        "category": row["category_name"],
        "notes": row.get("notes") or "",
    }
    if row.get("unit"):
        setting["unit"] = row["unit"]

    min_value = row.get("min_value")
    max_value = row.get("max_value")
    if min_value is not None and max_value is not None:
        setting["range"] = {"min": min_value, "max": max_value}
    else:
        setting["value"] = row.get("value") or ""
    return setting


def transform_settings(rows: Sequence[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Key settings by slug, e.g. ``settings["dynamic_range"]``."""
    return {row["setting_slug"]: transform_setting(row) for row in rows}


def transform_tags(rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {"name": row["tag_name"], "slug": row["tag_slug"], "category": row["tag_category"]}
        for row in rows
    ]


def transform_images(rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    # Order is kept as delivered by the query layer
    return [
        {
            "type": row["image_type"],
            "thumbUrl": row["thumb_url"],
            "fullUrl": row["full_url"],
            "width": row["width"],
            "height": row["height"],
            "altText": row["alt_text"],
            "caption": row["caption"],
            "sortOrder": row["sort_order"],
        }
        for row in rows
    ]


def transform_recipe(
    recipe_row: Mapping[str, Any],
    setting_rows: Sequence[Mapping[str, Any]],
    tag_rows: Sequence[Mapping[str, Any]],
    image_rows: Sequence[Mapping[str, Any]],
) -> Dict[str, Any]:
    """
    Transform one recipe and its related rows into an export document.

    Args:
        recipe_row: Joined recipe row from fetch_recipes()
        setting_rows: Rows from fetch_recipe_settings()
        tag_rows: Rows from fetch_recipe_tags()
        image_rows: Rows from fetch_recipe_images()

    Returns:
        Recipe export document

    Raises:
        KeyError: If a row lacks a required column
    """
    return {
        "name": recipe_row["name"],
        "slug": recipe_row["slug"],
        "description": recipe_row["description"],
        "publishDate": _iso(recipe_row["publish_date"]),
        "viewCount": recipe_row["view_count"],
        "isFeatured": recipe_row["is_featured"],
        "difficultyLevel": recipe_row["difficulty_level"],
        "sourceType": recipe_row["source_type"],
        "sourceUrl": recipe_row["source_url"],
        "styleCategory": recipe_row["style_category_name"],
        "filmSimulation": transform_film_simulation(recipe_row),
        "author": transform_author(recipe_row),
        "system": transform_system(recipe_row),
        "settings": transform_settings(setting_rows),
        "tags": transform_tags(tag_rows),
        "images": transform_images(image_rows),
    }
