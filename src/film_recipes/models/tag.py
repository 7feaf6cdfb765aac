"""
Tag and style category models.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String, Text

from .base import BaseModel


class Tag(BaseModel):
    """
    Recipe tag (natural key: slug).

    Attributes:
        name: Display name
        slug: Unique slug
        category: One of subject, mood, technique, season (nullable)
        usage_count: Number of recipes carrying the tag
    """

    __tablename__ = "tags"

    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    category = Column(String(20), nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "category IS NULL OR category IN ('subject', 'mood', 'technique', 'season')",
            name="ck_tag_category_valid",
        ),
    )


class StyleCategory(BaseModel):
    """
    Recipe style category such as "Color" or "B&W" (natural key: name).
    """

    __tablename__ = "style_categories"

    name = Column(String(50), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
