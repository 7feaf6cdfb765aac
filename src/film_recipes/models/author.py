"""
Author model for recipe creators.
"""

from sqlalchemy import Boolean, Column, String, Text

from .base import BaseModel


class Author(BaseModel):
    """
    Recipe author (natural key: slug).

    Attributes:
        name: Display name as written in the source spreadsheet
        slug: Case-normalized unique slug of the name
        bio: Free text profile description
        website_url: Personal site or profile URL
        social_handle: Handle without the leading "@"
        social_platform: Normalized platform name (e.g. "Instagram")
        is_verified: Whether the author has been verified by an admin
    """

    __tablename__ = "authors"

    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False, unique=True, index=True)
    bio = Column(Text, nullable=True)
    website_url = Column(String(500), nullable=True)
    social_handle = Column(String(100), nullable=True)
    social_platform = Column(String(50), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
