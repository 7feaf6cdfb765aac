"""
Author Import Service - upsert recipe authors from an author spreadsheet.

The spreadsheet carries a display name, a free-text "Site or Profile" cell
and an optional URL. The profile cell is usually ``handle (Platform)``, a
bare handle (assumed Instagram) or a short description which becomes the
author's bio.

Usage:
    from film_recipes.services.author_import_service import import_authors_from_csv

    result = import_authors_from_csv("authors.csv", dry_run=True)
    print(result.get_summary())
"""

import csv
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from film_recipes.models import Author
from film_recipes.utils.constants import AUTHOR_CSV_COLUMNS
from film_recipes.utils.slug_utils import create_slug
from .database import insert_or_update, session_scope
from .exceptions import ImportBatchError, SourceFileError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)

DEFAULT_PLATFORM = "Instagram"

PLATFORM_ALIASES: Dict[str, str] = {
    "instagram": "Instagram",
    "insta": "Instagram",
    "ig": "Instagram",
    "facebook": "Facebook",
    "face nook": "Facebook",
    "fb": "Facebook",
    "youtube": "YouTube",
    "twitter": "Twitter",
    "x": "Twitter",
    "flickr": "Flickr",
}

UNKNOWN_PROFILES = {"unknown", "unkown", "n/a", "-"}

_HANDLE_WITH_PLATFORM = re.compile(r"^(.+?)\s*\(([^)]+)\)\s*$")
_BARE_HANDLE = re.compile(r"^@?[\w.-]+$")


@dataclass
class SocialProfile:
    """Social account and bio parsed from a profile cell."""

    handle: Optional[str] = None
    platform: Optional[str] = None
    bio: Optional[str] = None


def normalize_platform(platform: str) -> str:
    """Map platform spellings onto display names; unknown platforms pass through."""
    platform = platform.strip()
    return PLATFORM_ALIASES.get(platform.lower(), platform)


def parse_social_profile(text: Optional[str]) -> SocialProfile:
    """
    Parse a "Site or Profile" cell.

    Examples:
        >>> parse_social_profile("visualohio (instagram)")
        SocialProfile(handle='visualohio', platform='Instagram', bio=None)
        >>> parse_social_profile("@fujixweekly")
        SocialProfile(handle='fujixweekly', platform='Instagram', bio=None)
        >>> parse_social_profile("Street photographer in Lisbon")
        SocialProfile(handle=None, platform=None, bio='Street photographer in Lisbon')
    """
    text = (text or "").strip()
    if not text or text.lower() in UNKNOWN_PROFILES:
        return SocialProfile()

    match = _HANDLE_WITH_PLATFORM.match(text)
    if match and _BARE_HANDLE.match(match.group(1).strip()):
        return SocialProfile(
            handle=match.group(1).strip().lstrip("@"),
            platform=normalize_platform(match.group(2)),
        )

    if _BARE_HANDLE.match(text):
        return SocialProfile(handle=text.lstrip("@"), platform=DEFAULT_PLATFORM)

    return SocialProfile(bio=text)


# ============================================================================
# Result Class
# ============================================================================


class AuthorImportResult:
    """Statistics for one author import batch."""

    def __init__(self):
        self.imported = 0
        self.updated = 0
        self.skipped = 0
        self.warnings: List[str] = []
        self.dry_run = False

    @property
    def total(self) -> int:
        return self.imported + self.updated + self.skipped

    def get_summary(self) -> str:
        """Generate user-friendly summary for CLI display."""
        lines = ["=" * 60, "Author Import Summary"]
        if self.dry_run:
            lines.append("*** DRY RUN - No changes committed ***")
        lines.append("=" * 60)
        lines.append(f"Total Processed: {self.total}")
        lines.append(f"  New authors: {self.imported}")
        lines.append(f"  Updated:     {self.updated}")
        lines.append(f"  Skipped:     {self.skipped}")
        if self.warnings:
            lines.append("\nWarnings:")
            for warning in self.warnings[:10]:
                lines.append(f"  - {warning}")
            if len(self.warnings) > 10:
                lines.append(f"  ... and {len(self.warnings) - 10} more warnings")
        lines.append("=" * 60)
        return "\n".join(lines)


# ============================================================================
# Entry Points
# ============================================================================


def read_author_records(file_path: str) -> List[Dict[str, Optional[str]]]:
    """
    Read author records from a CSV file with a header line.

    Raises:
        SourceFileError: If the file is missing, unreadable or not valid CSV
    """
    try:
        with open(file_path, "r", encoding="utf-8-sig", newline="") as f:
            return list(csv.DictReader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise SourceFileError(file_path, str(e)) from e


def import_authors_from_csv(
    file_path: str, dry_run: bool = False, session: Optional[Session] = None
) -> AuthorImportResult:
    """Import authors from a CSV spreadsheet."""
    records = read_author_records(file_path)
    return import_authors(records, dry_run=dry_run, session=session)


def import_authors(
    records: Iterable[Dict[str, Optional[str]]],
    dry_run: bool = False,
    session: Optional[Session] = None,
) -> AuthorImportResult:
    """
    Upsert authors keyed by the slug of their name.

    Args:
        records: Mappings of column header to cell text (see AUTHOR_CSV_COLUMNS)
        dry_run: Roll back after processing every record
        session: Optional SQLAlchemy session for transactional composition

    Raises:
        ImportBatchError: If the batch cannot be written or committed
    """
    records = list(records)
    if session is not None:
        return _import_authors_impl(records, dry_run, session)

    with session_scope() as sess:
        result = _import_authors_impl(records, dry_run, sess)
        try:
            if dry_run:
                sess.rollback()
            else:
                sess.commit()
        except SQLAlchemyError as e:
            raise ImportBatchError("rollback" if dry_run else "commit", e) from e
        log_operation(
            logger,
            operation="import_authors",
            outcome="rolled_back" if dry_run else "committed",
            imported=result.imported,
            updated=result.updated,
            skipped=result.skipped,
        )
        return result


def _import_authors_impl(
    records: List[Dict[str, Optional[str]]], dry_run: bool, session: Session
) -> AuthorImportResult:
    result = AuthorImportResult()
    result.dry_run = dry_run

    for index, record in enumerate(records, start=2):
        name = (record.get(AUTHOR_CSV_COLUMNS["name"]) or "").strip()
        slug = create_slug(name)
        if not slug:
            result.skipped += 1
            result.warnings.append(f"Row {index}: missing author name")
            continue

        profile = parse_social_profile(record.get(AUTHOR_CSV_COLUMNS["profile"]))
        website_url = (record.get(AUTHOR_CSV_COLUMNS["url"]) or "").strip() or None

        try:
            existing = session.execute(
                select(Author.id).where(Author.slug == slug)
            ).scalar_one_or_none()
            insert_or_update(
                session,
                Author,
                {
                    "name": name,
                    "slug": slug,
                    "bio": profile.bio,
                    "website_url": website_url,
                    "social_handle": profile.handle,
                    "social_platform": profile.platform,
                },
                ["slug"],
                update_columns=["name", "bio", "website_url", "social_handle", "social_platform"],
            )
        except SQLAlchemyError as e:
            raise ImportBatchError(f"author row {index}", e) from e

        if existing is None:
            result.imported += 1
        else:
            result.updated += 1

    return result
