"""
Recipe Import Service - transactional import of community recipe spreadsheets.

One batch runs inside one transaction. Every row runs inside its own
SAVEPOINT: a row that fails validation, references an unknown setting or
violates a constraint is rolled back to its savepoint, recorded in the
result and skipped, and the batch carries on. Only failures of the
batch-level statements (truncate, commit, rollback, savepoint control) abort
the whole batch.

Dry runs execute the full pipeline and then roll back unconditionally, so the
reported statistics match a real run with zero persisted effect.

Usage:
    from film_recipes.services.recipe_import_service import import_recipes_from_csv

    result = import_recipes_from_csv("recipes.csv", dry_run=True)
    print(result.get_summary())
"""

import csv
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from film_recipes.models import (
    Image,
    Recipe,
    RecipeSettingRange,
    RecipeSettingValue,
    RecipeTag,
    SystemSetting,
    Tag,
)
from film_recipes.utils.constants import (
    IMPORT_SOURCE_TYPE,
    RANGE_SETTINGS,
    RECIPE_CSV_COLUMNS,
)
from film_recipes.utils.datetime_utils import parse_publish_date, utc_now
from film_recipes.utils.slug_utils import create_slug
from .database import insert_or_ignore, session_scope, truncate_recipe_data
from .exceptions import (
    ImportBatchError,
    ServiceError,
    SourceFileError,
    UnknownSettingError,
    ValidationError,
)
from .logging_utils import get_service_logger, log_operation
from .reference_data_service import load_setting_definitions
from .row_resolver import (
    ensure_unique_recipe_slug,
    resolve_author,
    resolve_camera_model,
    resolve_camera_system,
    resolve_film_simulation,
    resolve_sensor,
    resolve_style_category,
    resolve_tag,
)
from .setting_transformer import CanonicalSetting, SettingOutcome, resolve_setting_cell

logger = get_service_logger(__name__)

# Errors that reject a single row without aborting the batch
ROW_LEVEL_ERRORS = (ServiceError, SQLAlchemyError, ValueError)


# ============================================================================
# Input Rows
# ============================================================================


def parse_settings_cell(text: Optional[str]) -> List[Tuple[str, str]]:
    """
    Split a multi-line Settings cell into ``(raw_name, raw_value)`` pairs.

    Each line is ``Name: value``; the first colon separates name from value.
    Lines without a colon or with an empty side are ignored.

    Examples:
        >>> parse_settings_cell("DR: 400%\\nWB Shift: R:4 B:-5\\nnotes")
        [('DR', '400%'), ('WB Shift', 'R:4 B:-5')]
    """
    cells = []
    if not text:
        return cells
    for line in text.splitlines():
        line = line.strip()
        if ":" not in line:
            continue
        name, value = line.split(":", 1)
        name, value = name.strip(), value.strip()
        if name and value:
            cells.append((name, value))
    return cells


def _split_list(text: Optional[str], separators: str = ",") -> List[str]:
    if not text:
        return []
    for separator in separators[1:]:
        text = text.replace(separator, separators[0])
    return [item.strip() for item in text.split(separators[0]) if item.strip()]


@dataclass
class RecipeRow:
    """One parsed spreadsheet row, located by its 1-based source line."""

    line: int
    creator: str = ""
    name: str = ""
    system: str = ""
    style: str = ""
    camera: str = ""
    sensor: str = ""
    film_simulation: str = ""
    settings: List[Tuple[str, str]] = field(default_factory=list)
    published: str = ""
    source_url: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Optional[str]], line: int) -> "RecipeRow":
        """
        Build a row from a CSV record keyed by spreadsheet column headers.

        Args:
            record: Mapping of column header to cell text (see RECIPE_CSV_COLUMNS)
            line: Source line of the record, used in error reports
        """

        def cell(key: str) -> str:
            return (record.get(RECIPE_CSV_COLUMNS[key]) or "").strip()

        return cls(
            line=line,
            creator=cell("creator"),
            name=cell("name"),
            system=cell("system"),
            style=cell("style"),
            camera=cell("camera"),
            sensor=cell("sensor"),
            film_simulation=cell("film_simulation"),
            settings=parse_settings_cell(record.get(RECIPE_CSV_COLUMNS["settings"])),
            published=cell("published"),
            source_url=cell("source_url"),
            description=cell("description"),
            tags=_split_list(cell("tags")),
            images=_split_list(cell("images"), separators=", \n"),
        )

    @property
    def is_blank(self) -> bool:
        """True when the row carries no recipe data at all."""
        return not any(
            [self.creator, self.name, self.system, self.film_simulation, self.settings]
        )


def read_recipe_rows(file_path: str) -> List[RecipeRow]:
    """
    Read recipe rows from a CSV file with a header line.

    Raises:
        SourceFileError: If the file is missing, unreadable or not valid CSV
    """
    try:
        with open(file_path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            rows = []
            for record in reader:
                # line_num is the line the record ended on; multi-line cells span several
                rows.append(RecipeRow.from_record(record, reader.line_num))
            return rows
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise SourceFileError(file_path, str(e)) from e


# ============================================================================
# Result Class
# ============================================================================


@dataclass
class RowError:
    """A rejected source row."""

    row: int
    name: str
    message: str
    error_type: str = "row"


class RecipeImportResult:
    """Statistics and diagnostics for one import batch."""

    def __init__(self):
        self.imported = 0
        self.updated = 0
        self.skipped = 0
        self.errors: List[RowError] = []
        self.warnings: List[str] = []
        self.dry_run = False
        self.truncated: Dict[str, int] = {}

    @property
    def total(self) -> int:
        """Rows processed (imported + updated + skipped + errors)."""
        return self.imported + self.updated + self.skipped + len(self.errors)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def add_imported(self) -> None:
        self.imported += 1

    def add_updated(self) -> None:
        self.updated += 1

    def add_skip(self, row: int, name: str, reason: str) -> None:
        """Record a skipped row."""
        self.skipped += 1
        label = f"'{name}'" if name else "(unnamed)"
        self.warnings.append(f"Row {row} {label} skipped: {reason}")

    def add_error(self, row: int, name: str, message: str, error_type: str = "row") -> None:
        """Record a rejected row."""
        self.errors.append(RowError(row=row, name=name, message=message, error_type=error_type))

    def add_warning(self, row: int, message: str) -> None:
        """Record a non-fatal diagnostic for a row."""
        self.warnings.append(f"Row {row}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "imported": self.imported,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": [
                {"row": e.row, "name": e.name, "message": e.message, "error_type": e.error_type}
                for e in self.errors
            ],
            "warnings": list(self.warnings),
            "dry_run": self.dry_run,
        }

    def get_summary(self) -> str:
        """Generate user-friendly summary for CLI display."""
        lines = [
            "=" * 60,
            "Recipe Import Summary",
        ]
        if self.dry_run:
            lines.append("*** DRY RUN - No changes committed ***")
        lines.append("=" * 60)

        if self.truncated:
            removed = sum(self.truncated.values())
            lines.append(f"Truncated {removed} existing recipe rows before import")
            lines.append("")

        lines.append(f"Total Processed: {self.total}")
        lines.append(f"  Imported: {self.imported}")
        lines.append(f"  Updated:  {self.updated}")
        lines.append(f"  Skipped:  {self.skipped}")
        lines.append(f"  Errors:   {len(self.errors)}")

        if self.errors:
            lines.append("\nErrors:")
            for error in self.errors[:10]:
                lines.append(f"  - Row {error.row} '{error.name}': {error.message}")
            if len(self.errors) > 10:
                lines.append(f"  ... and {len(self.errors) - 10} more errors")

        if self.warnings and len(self.warnings) <= 10:
            lines.append("\nWarnings:")
            for warning in self.warnings:
                lines.append(f"  - {warning}")
        elif self.warnings:
            lines.append(f"\n{len(self.warnings)} warnings (use --verbose for full list)")

        lines.append("=" * 60)
        return "\n".join(lines)


# ============================================================================
# Entry Points
# ============================================================================


def import_recipes_from_csv(
    file_path: str,
    dry_run: bool = False,
    truncate: bool = False,
    session: Optional[Session] = None,
) -> RecipeImportResult:
    """
    Import recipes from a CSV spreadsheet.

    Raises:
        SourceFileError: If the file cannot be read (nothing is written)
        ImportBatchError: If a batch-level statement fails (batch rolled back)
    """
    rows = read_recipe_rows(file_path)
    log_operation(logger, operation="read_recipe_rows", outcome="success",
                  file_path=file_path, rows=len(rows))
    return import_rows(rows, dry_run=dry_run, truncate=truncate, session=session)


def import_rows(
    rows: Iterable[RecipeRow],
    dry_run: bool = False,
    truncate: bool = False,
    session: Optional[Session] = None,
) -> RecipeImportResult:
    """
    Import parsed recipe rows in one transaction.

    Args:
        rows: Parsed rows, processed strictly in order
        dry_run: Roll back everything after processing the last row
        truncate: Delete existing recipes and their recipe-scoped rows first,
            inside the same transaction
        session: Optional session for transactional composition. The caller
            then owns commit; a dry run is contained in a savepoint.

    Returns:
        RecipeImportResult with per-row outcomes

    Raises:
        ImportBatchError: If a batch-level statement fails
    """
    rows = list(rows)

    if session is not None:
        if not dry_run:
            return _import_rows_impl(rows, dry_run, truncate, session)
        savepoint = session.begin_nested()
        try:
            return _import_rows_impl(rows, dry_run, truncate, session)
        finally:
            savepoint.rollback()

    with session_scope() as sess:
        result = _import_rows_impl(rows, dry_run, truncate, sess)
        _end_batch(sess, dry_run)
        log_operation(
            logger,
            operation="import_rows",
            outcome="rolled_back" if dry_run else "committed",
            total=result.total,
            imported=result.imported,
            updated=result.updated,
            skipped=result.skipped,
            errors=len(result.errors),
        )
        return result


def _end_batch(session: Session, dry_run: bool) -> None:
    stage = "rollback" if dry_run else "commit"
    try:
        if dry_run:
            session.rollback()
        else:
            session.commit()
    except SQLAlchemyError as e:
        log_operation(logger, operation="import_rows", outcome="batch_failed",
                      level=logging.ERROR, stage=stage, error=str(e))
        try:
            session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback after failed %s also failed", stage)
        raise ImportBatchError(stage, e) from e


def _import_rows_impl(
    rows: List[RecipeRow], dry_run: bool, truncate: bool, session: Session
) -> RecipeImportResult:
    result = RecipeImportResult()
    result.dry_run = dry_run

    log_operation(logger, operation="import_rows", outcome="started",
                  rows=len(rows), dry_run=dry_run, truncate=truncate)

    if truncate:
        try:
            result.truncated = truncate_recipe_data(session)
        except SQLAlchemyError as e:
            raise ImportBatchError("truncate", e) from e

    try:
        definitions = load_setting_definitions(session)
    except SQLAlchemyError as e:
        raise ImportBatchError("load_setting_definitions", e) from e

    for row in rows:
        _process_row(session, row, definitions, result)

    return result


# ============================================================================
# Row Processing
# ============================================================================


def _process_row(
    session: Session, row: RecipeRow, definitions: Dict[str, int], result: RecipeImportResult
) -> None:
    if row.is_blank:
        result.add_skip(row.line, "", "blank row")
        return
    if not row.name:
        result.add_skip(row.line, "", "missing recipe name")
        return
    if not row.creator:
        result.add_skip(row.line, row.name, "missing creator")
        return

    try:
        savepoint = session.begin_nested()
    except SQLAlchemyError as e:
        raise ImportBatchError("savepoint", e) from e

    try:
        created = _import_row(session, row, definitions, result)
    except ROW_LEVEL_ERRORS as e:
        try:
            savepoint.rollback()
        except SQLAlchemyError as rollback_error:
            raise ImportBatchError("rollback to savepoint", rollback_error) from rollback_error
        result.add_error(row.line, row.name, str(e), type(e).__name__)
        log_operation(logger, operation="import_row", outcome="error", level=logging.WARNING,
                      row=row.line, recipe_name=row.name, error=str(e))
        return

    try:
        savepoint.commit()
    except SQLAlchemyError as e:
        raise ImportBatchError("release savepoint", e) from e

    if created:
        result.add_imported()
    else:
        result.add_updated()
    log_operation(logger, operation="import_row", outcome="created" if created else "updated",
                  level=logging.DEBUG, row=row.line, recipe_name=row.name)


def _import_row(
    session: Session, row: RecipeRow, definitions: Dict[str, int], result: RecipeImportResult
) -> bool:
    """Write one row. Returns True if a new recipe was created."""
    missing = []
    if not row.system:
        missing.append("Camera system (Type) is required")
    if not row.film_simulation:
        missing.append("Film simulation (Base) is required")
    if missing:
        raise ValidationError(missing)

    author_id = resolve_author(session, row.creator)
    system_id = resolve_camera_system(session, row.system)
    sensor_id = resolve_sensor(session, row.sensor)
    camera_model_id = resolve_camera_model(session, row.camera, system_id, sensor_id)
    film_simulation_id = resolve_film_simulation(session, row.film_simulation, system_id)
    style_category_id = resolve_style_category(session, row.style)

    settings = _collect_settings(row, definitions, result)

    base_slug = create_slug(row.name)
    if not base_slug:
        raise ValidationError([f"Recipe name '{row.name}' has no usable characters"])
    slug, existing_id = ensure_unique_recipe_slug(session, base_slug, author_id)

    values = {
        "author_id": author_id,
        "system_id": system_id,
        "camera_model_id": camera_model_id,
        "sensor_id": sensor_id,
        "film_simulation_id": film_simulation_id,
        "style_category_id": style_category_id,
        "name": row.name,
        "source_url": row.source_url or None,
        "publish_date": parse_publish_date(row.published),
    }
    if row.description:
        values["description"] = row.description

    if existing_id is None:
        recipe_id = session.execute(
            insert(Recipe)
            .values(slug=slug, source_type=IMPORT_SOURCE_TYPE, **values)
            .returning(Recipe.id)
        ).scalar_one()
    else:
        recipe_id = existing_id
        session.execute(
            update(Recipe).where(Recipe.id == recipe_id).values(updated_at=utc_now(), **values)
        )

    _replace_settings(session, recipe_id, system_id, settings, definitions)
    _replace_tags(session, recipe_id, row.tags)
    if row.images:
        _replace_images(session, recipe_id, row.name, row.images)

    session.flush()
    return existing_id is None


def _collect_settings(
    row: RecipeRow, definitions: Dict[str, int], result: RecipeImportResult
) -> Dict[int, CanonicalSetting]:
    """
    Transform the row's raw setting cells into canonical settings keyed by
    setting definition id. A later cell for the same definition wins.

    Raises:
        UnknownSettingError: If a canonical name has no setting definition
    """
    collected: Dict[int, CanonicalSetting] = {}
    for raw_name, raw_value in row.settings:
        resolution = resolve_setting_cell(raw_name, raw_value)

        if resolution.outcome == SettingOutcome.IGNORED:
            continue
        if resolution.outcome == SettingOutcome.DROPPED:
            result.add_warning(
                row.line, f"setting '{raw_name}: {raw_value}' could not be parsed and was dropped"
            )
            continue

        for setting in resolution.settings:
            definition_id = definitions.get(setting.name.lower())
            if definition_id is None:
                raise UnknownSettingError(setting.name, raw_name)
            collected.pop(definition_id, None)
            collected[definition_id] = setting
            _clear_overridden_bounds(collected, setting.name, definitions)
    return collected


def _clear_overridden_bounds(
    collected: Dict[int, CanonicalSetting], name: str, definitions: Dict[str, int]
) -> None:
    """Keep one of value or min/max per range setting, whichever came last."""
    for range_name, (min_name, max_name) in RANGE_SETTINGS.items():
        if name == range_name:
            for bound in (min_name, max_name):
                collected.pop(definitions.get(bound.lower()), None)
        elif name in (min_name, max_name):
            bounds = (definitions.get(min_name.lower()), definitions.get(max_name.lower()))
            if all(bound in collected for bound in bounds):
                collected.pop(definitions.get(range_name.lower()), None)


def _replace_settings(
    session: Session,
    recipe_id: int,
    system_id: int,
    settings: Dict[int, CanonicalSetting],
    definitions: Dict[str, int],
) -> None:
    session.execute(delete(RecipeSettingValue).where(RecipeSettingValue.recipe_id == recipe_id))
    session.execute(delete(RecipeSettingRange).where(RecipeSettingRange.recipe_id == recipe_id))

    for definition_id, setting in settings.items():
        insert_or_ignore(
            session,
            SystemSetting,
            {"system_id": system_id, "setting_definition_id": definition_id},
            ["system_id", "setting_definition_id"],
        )
        session.execute(
            insert(RecipeSettingValue).values(
                recipe_id=recipe_id, setting_definition_id=definition_id, value=setting.value
            )
        )

    # Min/max pairs also populate the range of their combined definition
    values_by_name = {setting.name: setting.value for setting in settings.values()}
    for range_name, (min_name, max_name) in RANGE_SETTINGS.items():
        range_definition_id = definitions.get(range_name.lower())
        if range_definition_id is None:
            continue
        if min_name in values_by_name and max_name in values_by_name:
            session.execute(
                insert(RecipeSettingRange).values(
                    recipe_id=recipe_id,
                    setting_definition_id=range_definition_id,
                    min_value=values_by_name[min_name],
                    max_value=values_by_name[max_name],
                )
            )


def _replace_tags(session: Session, recipe_id: int, tag_names: List[str]) -> None:
    previous = set(
        session.execute(select(RecipeTag.tag_id).where(RecipeTag.recipe_id == recipe_id))
        .scalars()
        .all()
    )
    session.execute(delete(RecipeTag).where(RecipeTag.recipe_id == recipe_id))

    current = set()
    for tag_name in tag_names:
        tag_id = resolve_tag(session, tag_name)
        insert_or_ignore(
            session, RecipeTag, {"recipe_id": recipe_id, "tag_id": tag_id}, ["recipe_id", "tag_id"]
        )
        current.add(tag_id)

    touched = previous | current
    if touched:
        usage = (
            select(func.count(RecipeTag.id))
            .where(RecipeTag.tag_id == Tag.id)
            .scalar_subquery()
        )
        session.execute(update(Tag).where(Tag.id.in_(touched)).values(usage_count=usage))


def _replace_images(session: Session, recipe_id: int, recipe_name: str, urls: List[str]) -> None:
    session.execute(delete(Image).where(Image.recipe_id == recipe_id))
    for index, url in enumerate(urls):
        session.execute(
            insert(Image).values(
                recipe_id=recipe_id,
                image_type="primary" if index == 0 else "secondary",
                thumb_url=url,
                full_url=url,
                alt_text=recipe_name,
                sort_order=index,
            )
        )
