"""Slug generation utilities for natural-key lookups.

This module provides utilities for generating URL-safe, deterministic slugs
from names with Unicode support. Slugs are the natural keys for authors,
tags, camera models, film simulations and recipes (dash separated) and for
setting definitions (underscore separated).

Key Features:
- Unicode normalization (NFD decomposition)
- ASCII transliteration
- Deterministic output (same input always gives same slug)
- Candidate generation for numeric uniqueness suffixes

Examples:
    >>> create_slug("Kodak Portra 400")
    'kodak-portra-400'

    >>> create_slug("Classic Chrome", separator="_")
    'classic_chrome'
"""

import re
import unicodedata
from typing import Iterator

DEFAULT_SEPARATOR = "-"


def create_slug(name: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Generate URL-safe slug from a name.

    Algorithm:
        1. Normalize Unicode to NFD (decompose accented characters)
        2. Encode to ASCII, ignoring non-ASCII characters
        3. Convert to lowercase
        4. Replace every run of non-alphanumeric characters with the separator
        5. Strip leading/trailing separators

    Args:
        name: Name to convert to slug
        separator: Character placed between words (default "-")

    Returns:
        Slug string (lowercase, alphanumeric + separator only)

    Examples:
        >>> create_slug("Pacific Blues!")
        'pacific-blues'

        >>> create_slug("  Café   Noir ")
        'cafe-noir'

        >>> create_slug("Dynamic Range", separator="_")
        'dynamic_range'

    Note:
        Empty or punctuation-only input results in an empty slug (caller should validate)
    """
    if not name:
        return ""

    normalized = unicodedata.normalize("NFD", name)
    slug = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = re.sub(r"[^a-z0-9]+", separator, slug)
    return slug.strip(separator)


def slug_candidates(base_slug: str) -> Iterator[str]:
    """Yield ``base``, ``base-1``, ``base-2``, ... for uniqueness probing.

    Examples:
        >>> gen = slug_candidates("pacific-blues")
        >>> next(gen), next(gen), next(gen)
        ('pacific-blues', 'pacific-blues-1', 'pacific-blues-2')
    """
    yield base_slug
    counter = 1
    while True:
        yield f"{base_slug}-{counter}"
        counter += 1


def validate_slug_format(slug: str, separator: str = DEFAULT_SEPARATOR) -> bool:
    """Validate that a slug meets format requirements.

    Valid slugs must:
        - Contain only lowercase letters, digits, and the separator
        - Not start or end with the separator
        - Not contain consecutive separators
        - Not be empty

    Examples:
        >>> validate_slug_format("pacific-blues")
        True

        >>> validate_slug_format("Pacific-Blues")
        False

        >>> validate_slug_format("dynamic_range", separator="_")
        True
    """
    if not slug:
        return False

    sep = re.escape(separator)
    if not re.match(rf"^[a-z0-9{sep}]+$", slug):
        return False

    if slug.startswith(separator) or slug.endswith(separator):
        return False

    if separator * 2 in slug:
        return False

    return True
