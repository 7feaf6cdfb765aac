"""Datetime utilities for timezone-aware UTC timestamps and loose date parsing.

Usage:
    from film_recipes.utils.datetime_utils import utc_now, parse_publish_date

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)

    # Spreadsheet dates
    parse_publish_date("March 5, 2023")  # date(2023, 3, 5)
"""

from datetime import date, datetime, timezone
from typing import Optional

# Formats seen in community spreadsheets, tried in order after ISO parsing
PUBLISH_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %Y",
    "%b %Y",
    "%Y/%m/%d",
)


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime.

    This is the replacement for the deprecated datetime.utcnow().

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def utc_timestamp() -> str:
    """Current UTC time as an ISO 8601 string with a trailing 'Z'.

    Millisecond precision, e.g. '2024-05-01T12:30:00.123Z'.
    """
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_publish_date(value: Optional[str]) -> Optional[date]:
    """Parse a free-form publish date from a spreadsheet cell.

    Args:
        value: Raw cell text

    Returns:
        The parsed date, or None when the cell is blank or unparseable
    """
    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in PUBLISH_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None
