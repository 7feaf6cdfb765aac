"""
Database models package.

This package contains all SQLAlchemy ORM models for the relational store.
"""

from .base import Base, BaseModel
from .author import Author
from .camera import CameraSystem, Sensor, CameraModel, FilmSimulation
from .tag import Tag, StyleCategory
from .setting import SettingCategory, SettingDefinition, SystemSetting
from .recipe import Recipe, RecipeSettingValue, RecipeSettingRange, RecipeTag, Image

__all__ = [
    "Base",
    "BaseModel",
    # Reference entities
    "Author",
    "CameraSystem",
    "Sensor",
    "CameraModel",
    "FilmSimulation",
    "Tag",
    "StyleCategory",
    # Setting reference data
    "SettingCategory",
    "SettingDefinition",
    "SystemSetting",
    # Recipes
    "Recipe",
    "RecipeSettingValue",
    "RecipeSettingRange",
    "RecipeTag",
    "Image",
]
