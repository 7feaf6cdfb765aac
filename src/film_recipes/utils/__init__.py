"""Utilities package for the film-recipes platform."""

from .slug_utils import create_slug, slug_candidates, validate_slug_format

__all__ = [
    "create_slug",
    "slug_candidates",
    "validate_slug_format",
]
