"""
Row Resolver - find-or-create resolution of the reference entities a
spreadsheet row points at.

Each resolver reads by natural key first and only on a miss issues a
conflict-tolerant upsert, so two batches racing on the same key converge on
one row instead of failing on a duplicate key. All functions take the
caller's session; nothing here commits.

Natural keys:
    Author          slug of the name
    CameraSystem    name
    Sensor          name
    CameraModel     (system_id, slug of the name)
    FilmSimulation  (system_id, slug of the name)
    StyleCategory   normalized name ("BW" -> "B&W")
    Tag             slug of the name
"""

from typing import Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from film_recipes.models import (
    Author,
    CameraModel,
    CameraSystem,
    FilmSimulation,
    Recipe,
    Sensor,
    StyleCategory,
    Tag,
)
from film_recipes.utils.constants import STYLE_BW, STYLE_COLOR, UNKNOWN_SENSOR_TYPE
from film_recipes.utils.slug_utils import create_slug, slug_candidates
from .database import insert_or_update
from .exceptions import ValidationError

MAX_SLUG_ATTEMPTS = 10000

STYLE_ALIASES = {
    "bw": STYLE_BW,
    "b&w": STYLE_BW,
    "b/w": STYLE_BW,
    "b & w": STYLE_BW,
    "black and white": STYLE_BW,
    "black & white": STYLE_BW,
    "monochrome": STYLE_BW,
    "color": STYLE_COLOR,
    "colour": STYLE_COLOR,
}


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _require_slug(value: str, label: str) -> str:
    if not value:
        raise ValidationError([f"{label} is required"])
    slug = create_slug(value)
    if not slug:
        raise ValidationError([f"{label} '{value}' has no usable characters"])
    return slug


# ============================================================================
# Reference entities
# ============================================================================


def resolve_author(session: Session, name: Optional[str]) -> int:
    """
    Find or create an author by the slug of its name.

    Raises:
        ValidationError: If the name is blank
    """
    name = _clean(name)
    slug = _require_slug(name, "Author name")

    existing = session.execute(select(Author.id).where(Author.slug == slug)).scalar_one_or_none()
    if existing is not None:
        return existing

    return insert_or_update(session, Author, {"name": name, "slug": slug}, ["slug"])


def resolve_camera_system(session: Session, name: Optional[str]) -> int:
    """
    Find or create a camera system by name.

    New systems use their name as manufacturer until edited by an admin.

    Raises:
        ValidationError: If the name is blank
    """
    name = _clean(name)
    if not name:
        raise ValidationError(["Camera system is required"])

    existing = session.execute(
        select(CameraSystem.id).where(CameraSystem.name == name)
    ).scalar_one_or_none()
    if existing is not None:
        return existing

    return insert_or_update(
        session, CameraSystem, {"name": name, "manufacturer": name}, ["name"]
    )


def resolve_sensor(session: Session, name: Optional[str]) -> Optional[int]:
    """Find or create a sensor by name. Blank names resolve to None."""
    name = _clean(name)
    if not name:
        return None

    existing = session.execute(select(Sensor.id).where(Sensor.name == name)).scalar_one_or_none()
    if existing is not None:
        return existing

    return insert_or_update(
        session, Sensor, {"name": name, "type": UNKNOWN_SENSOR_TYPE}, ["name"]
    )


def resolve_camera_model(
    session: Session,
    name: Optional[str],
    system_id: int,
    sensor_id: Optional[int] = None,
) -> Optional[int]:
    """
    Find or create a camera model within a system. Blank names resolve to None.

    A known sensor is recorded on an existing model that differs from it.
    """
    name = _clean(name)
    if not name:
        return None
    slug = create_slug(name)
    if not slug:
        return None

    row = session.execute(
        select(CameraModel.id, CameraModel.sensor_id).where(
            CameraModel.system_id == system_id, CameraModel.slug == slug
        )
    ).first()
    if row is not None:
        if sensor_id is not None and row.sensor_id != sensor_id:
            session.execute(
                update(CameraModel).where(CameraModel.id == row.id).values(sensor_id=sensor_id)
            )
        return row.id

    values = {"system_id": system_id, "sensor_id": sensor_id, "name": name, "slug": slug}
    update_columns = ["sensor_id"] if sensor_id is not None else None
    return insert_or_update(
        session, CameraModel, values, ["system_id", "slug"], update_columns=update_columns
    )


def resolve_film_simulation(session: Session, name: Optional[str], system_id: int) -> int:
    """
    Find or create a film simulation within a system.

    Raises:
        ValidationError: If the name is blank
    """
    name = _clean(name)
    slug = _require_slug(name, "Film simulation")

    existing = session.execute(
        select(FilmSimulation.id).where(
            FilmSimulation.system_id == system_id, FilmSimulation.slug == slug
        )
    ).scalar_one_or_none()
    if existing is not None:
        return existing

    return insert_or_update(
        session,
        FilmSimulation,
        {"system_id": system_id, "name": name, "slug": slug, "label": name},
        ["system_id", "slug"],
    )


def normalize_style_name(name: Optional[str]) -> str:
    """
    Map spreadsheet style spellings onto style category names.

    Examples:
        >>> normalize_style_name("BW")
        'B&W'
        >>> normalize_style_name(" colour ")
        'Color'
    """
    name = _clean(name)
    return STYLE_ALIASES.get(name.lower(), name)


def resolve_style_category(session: Session, name: Optional[str]) -> Optional[int]:
    """Find or create a style category. Blank names resolve to None."""
    name = normalize_style_name(name)
    if not name:
        return None

    existing = session.execute(
        select(StyleCategory.id).where(StyleCategory.name == name)
    ).scalar_one_or_none()
    if existing is not None:
        return existing

    return insert_or_update(session, StyleCategory, {"name": name}, ["name"])


def resolve_tag(session: Session, name: Optional[str]) -> int:
    """
    Find or create a tag by the slug of its name.

    Raises:
        ValidationError: If the name is blank
    """
    name = _clean(name)
    slug = _require_slug(name, "Tag name")

    existing = session.execute(select(Tag.id).where(Tag.slug == slug)).scalar_one_or_none()
    if existing is not None:
        return existing

    return insert_or_update(session, Tag, {"name": name, "slug": slug}, ["slug"])


# ============================================================================
# Recipe slugs
# ============================================================================


def ensure_unique_recipe_slug(
    session: Session, base_slug: str, author_id: int
) -> Tuple[str, Optional[int]]:
    """
    Pick the slug a recipe by ``author_id`` should be stored under.

    Probes ``base``, ``base-1``, ``base-2``, ... and stops at the first
    candidate that is either free or already owned by the same author.

    Args:
        session: Active session
        base_slug: Slug derived from the recipe name
        author_id: Author of the recipe being written

    Returns:
        Tuple of (slug, id of the recipe to update or None for a new recipe)

    Raises:
        ValueError: If no candidate is found within MAX_SLUG_ATTEMPTS probes
    """
    for attempt, candidate in enumerate(slug_candidates(base_slug)):
        if attempt > MAX_SLUG_ATTEMPTS:
            raise ValueError(
                f"Unable to generate unique slug for '{base_slug}' after "
                f"{MAX_SLUG_ATTEMPTS} attempts"
            )

        row = session.execute(
            select(Recipe.id, Recipe.author_id).where(Recipe.slug == candidate)
        ).first()
        if row is None:
            return candidate, None
        if row.author_id == author_id:
            return candidate, row.id
