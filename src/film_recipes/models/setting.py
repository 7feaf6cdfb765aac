"""
Setting reference models.

This module contains:
- SettingCategory: Groups definitions for display ordering
- SettingDefinition: Canonical setting identity (immutable reference data)
- SystemSetting: Links a definition to a camera system that supports it
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class SettingCategory(BaseModel):
    """Setting category (natural key: slug)."""

    __tablename__ = "setting_categories"

    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    definitions = relationship("SettingDefinition", back_populates="category")


class SettingDefinition(BaseModel):
    """
    Canonical setting definition.

    Attributes:
        category_id: Owning category
        name: Canonical name emitted by the setting transformer
        slug: Unique slug, used as the key in exported settings maps
        data_type: One of enum, integer, numeric, text, boolean
        unit: Optional display unit
    """

    __tablename__ = "setting_definitions"

    category_id = Column(
        Integer, ForeignKey("setting_categories.id", ondelete="RESTRICT"), nullable=False
    )
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, unique=True)
    data_type = Column(String(20), nullable=False)
    unit = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    is_required = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    category = relationship("SettingCategory", back_populates="definitions")

    __table_args__ = (
        CheckConstraint(
            "data_type IN ('enum', 'integer', 'numeric', 'text', 'boolean')",
            name="ck_setting_definition_data_type",
        ),
    )


class SystemSetting(BaseModel):
    """Marks a setting definition as supported by a camera system."""

    __tablename__ = "system_settings"

    system_id = Column(
        Integer, ForeignKey("camera_systems.id", ondelete="CASCADE"), nullable=False
    )
    setting_definition_id = Column(
        Integer, ForeignKey("setting_definitions.id", ondelete="CASCADE"), nullable=False
    )
    is_supported = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "system_id", "setting_definition_id", name="uq_system_setting_definition"
        ),
    )
