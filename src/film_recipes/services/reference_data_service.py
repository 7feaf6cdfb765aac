"""
Reference data seeding for setting categories, setting definitions and
style categories.

Setting definitions are immutable reference data: the import pipeline only
ever looks them up. Seeding is idempotent and can be re-run after schema
changes to add new definitions.

Usage:
    from film_recipes.services.reference_data_service import seed_reference_data

    counts = seed_reference_data()
"""

from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from film_recipes.models import SettingCategory, SettingDefinition, StyleCategory
from film_recipes.utils.constants import (
    SETTING_CATEGORIES,
    SETTING_DEFINITIONS,
    STYLE_CATEGORIES,
)
from .database import insert_or_update, session_scope
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def seed_reference_data(session: Optional[Session] = None) -> Dict[str, int]:
    """
    Upsert setting categories, setting definitions and style categories.

    Args:
        session: Optional SQLAlchemy session for transactional composition

    Returns:
        Number of rows written per table
    """
    if session is not None:
        return _seed_reference_data_impl(session)
    with session_scope() as sess:
        return _seed_reference_data_impl(sess)


def _seed_reference_data_impl(session: Session) -> Dict[str, int]:
    category_ids: Dict[str, int] = {}
    for category in SETTING_CATEGORIES:
        category_ids[category["slug"]] = insert_or_update(
            session,
            SettingCategory,
            dict(category),
            conflict_columns=["slug"],
            update_columns=["name", "description", "sort_order"],
        )

    for name, slug, category_slug, data_type, unit, sort_order in SETTING_DEFINITIONS:
        insert_or_update(
            session,
            SettingDefinition,
            {
                "category_id": category_ids[category_slug],
                "name": name,
                "slug": slug,
                "data_type": data_type,
                "unit": unit,
                "sort_order": sort_order,
            },
            conflict_columns=["slug"],
            update_columns=["category_id", "name", "data_type", "unit", "sort_order"],
        )

    for style in STYLE_CATEGORIES:
        insert_or_update(
            session,
            StyleCategory,
            dict(style),
            conflict_columns=["name"],
            update_columns=["description"],
        )

    counts = {
        "setting_categories": len(SETTING_CATEGORIES),
        "setting_definitions": len(SETTING_DEFINITIONS),
        "style_categories": len(STYLE_CATEGORIES),
    }
    log_operation(logger, operation="seed_reference_data", outcome="success", **counts)
    return counts


def load_setting_definitions(session: Session) -> Dict[str, int]:
    """
    Map of lower-cased canonical setting name to setting definition id.

    Only active definitions are returned.
    """
    rows = session.execute(
        select(SettingDefinition.name, SettingDefinition.id).where(
            SettingDefinition.is_active.is_(True)
        )
    ).all()
    return {name.lower(): definition_id for name, definition_id in rows}
