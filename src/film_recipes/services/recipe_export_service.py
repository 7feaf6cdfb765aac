"""
Recipe Export Service - write recipes as public JSON documents.

Two entry points:
- export_recipes(): every (optionally active or featured) recipe, wrapped
  in a metadata envelope
- export_recipe_by_id(): one recipe document without the envelope

A recipe whose related rows cannot be fetched or transformed is counted as
an error and left out of the batch; the rest of the batch still exports.

Usage:
    from film_recipes.services.recipe_export_service import ExportOptions, export_recipes

    stats = export_recipes(ExportOptions(output_path="public/recipes.json"))
    print(stats.get_summary())
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from film_recipes.services import recipe_query_service
from film_recipes.utils.constants import EXPORT_SCHEMA_VERSION
from film_recipes.utils.datetime_utils import utc_timestamp
from .exceptions import RecipeNotFound
from .export_transformer_service import transform_recipe
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)

STREAM_OUTPUT_NAME = "<stream>"


# ============================================================================
# Options and Result Classes
# ============================================================================


@dataclass
class ExportOptions:
    """Options controlling one export run."""

    output_path: Optional[str] = None
    stream: Optional[TextIO] = None
    pretty_print: bool = True
    include_metadata: bool = True
    active_only: bool = False
    featured_only: bool = False
    dry_run: bool = False

    @property
    def output_name(self) -> str:
        if self.output_path:
            return str(self.output_path)
        if self.stream is not None:
            return STREAM_OUTPUT_NAME
        return ""


class ExportStats:
    """Statistics of an export run."""

    def __init__(self, output_file: str = ""):
        self.total_recipes = 0
        self.exported_recipes = 0
        self.errors = 0
        self.output_file = output_file
        self.dry_run = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_recipes": self.total_recipes,
            "exported_recipes": self.exported_recipes,
            "errors": self.errors,
            "output_file": self.output_file,
        }

    def get_summary(self) -> str:
        """Get a summary string of the export results."""
        if self.dry_run:
            lines = [f"Dry run: would write to {self.output_file or '(no output)'}"]
        else:
            lines = [f"Exported to {self.output_file}"]
        lines.append(f"  Exported: {self.exported_recipes}/{self.total_recipes} recipes")
        if self.errors:
            lines.append(f"  Errors:   {self.errors}")
        return "\n".join(lines)


# ============================================================================
# Export Functions
# ============================================================================


def export_recipes(options: ExportOptions) -> ExportStats:
    """
    Export all matching recipes as one batch document.

    Args:
        options: Filters, output sink and formatting

    Returns:
        ExportStats; ``errors`` counts recipes left out of the batch
    """
    stats = ExportStats(options.output_name)
    stats.dry_run = options.dry_run

    recipe_rows = recipe_query_service.fetch_recipes(
        active_only=options.active_only, featured_only=options.featured_only
    )
    stats.total_recipes = len(recipe_rows)
    logger.info("Exporting %d recipes", stats.total_recipes)

    recipes: List[Dict[str, Any]] = []
    for recipe_row in recipe_rows:
        recipe_id = recipe_row.get("id")
        try:
            settings = recipe_query_service.fetch_recipe_settings(recipe_id)
            tags = recipe_query_service.fetch_recipe_tags(recipe_id)
            images = recipe_query_service.fetch_recipe_images(recipe_id)
            recipes.append(transform_recipe(recipe_row, settings, tags, images))
        except Exception as e:
            stats.errors += 1
            log_operation(
                logger,
                operation="export_recipe",
                outcome="failed",
                level=logging.ERROR,
                recipe_id=recipe_id,
                recipe_name=recipe_row.get("name"),
                error=str(e),
            )
            continue
        stats.exported_recipes += 1

    if options.include_metadata:
        document: Any = {
            "metadata": {
                "version": EXPORT_SCHEMA_VERSION,
                "exportDate": utc_timestamp(),
                "totalRecipes": len(recipes),
            },
            "recipes": recipes,
        }
    else:
        document = recipes

    if not options.dry_run:
        _write_document(document, options)

    log_operation(
        logger,
        operation="export_recipes",
        outcome="dry_run" if options.dry_run else "written",
        exported=stats.exported_recipes,
        total=stats.total_recipes,
        errors=stats.errors,
        file_path=stats.output_file,
    )
    return stats


def export_recipe_by_id(recipe_id: int, options: ExportOptions) -> ExportStats:
    """
    Export a single recipe document, without the metadata envelope.

    Raises:
        RecipeNotFound: If no recipe has the given id; nothing is written
    """
    stats = ExportStats(options.output_name)
    stats.dry_run = options.dry_run
    stats.total_recipes = 1

    data = recipe_query_service.fetch_recipe_by_id(recipe_id)
    if data is None:
        raise RecipeNotFound(recipe_id)

    document = transform_recipe(data["recipe"], data["settings"], data["tags"], data["images"])
    stats.exported_recipes = 1

    if not options.dry_run:
        _write_document(document, options)

    log_operation(
        logger,
        operation="export_recipe_by_id",
        outcome="dry_run" if options.dry_run else "written",
        recipe_id=recipe_id,
        file_path=stats.output_file,
    )
    return stats


def _write_document(document: Any, options: ExportOptions) -> None:
    indent = 2 if options.pretty_print else None
    separators = None if options.pretty_print else (",", ":")

    if options.stream is not None:
        json.dump(document, options.stream, indent=indent, separators=separators, ensure_ascii=False)
        return

    if not options.output_path:
        raise ValueError("ExportOptions needs an output_path or a stream")

    path = Path(options.output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=indent, separators=separators, ensure_ascii=False)
