"""
Base model class for all database models.

Every table gets an integer surrogate key plus created/updated timestamps;
natural keys (slugs, names) are declared per model as unique constraints.
"""

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base

from film_recipes.utils.datetime_utils import utc_now

Base = declarative_base()


class BaseModel(Base):
    """Abstract base: ``id``, ``created_at`` and ``updated_at``."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
