"""
Recipe models for film-simulation recipes.

This module contains:
- Recipe: Central entity referencing author, system and film simulation
- RecipeSettingValue: Single canonical value assigned to a recipe
- RecipeSettingRange: Min/max canonical range assigned to a recipe
- RecipeTag: Junction table linking recipes to tags
- Image: Sample images attached to a recipe

Recipe-scoped rows (values, ranges, tags, images) are removed with their
recipe.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Recipe(BaseModel):
    """
    Film-simulation recipe.

    Attributes:
        author_id: Author (required)
        system_id: Camera system (required)
        film_simulation_id: Base film simulation (required)
        camera_model_id: Camera body (optional)
        sensor_id: Sensor (optional)
        style_category_id: Style category (optional)
        name: Recipe name
        slug: Unique slug, suffixed with -1, -2, ... on collision across authors
        difficulty_level: beginner, intermediate or advanced (nullable)
        source_type: original, curated or community
        publish_date: Original publication date
        view_count: Public view counter
        is_featured: Featured on the public site
        is_active: Visible on the public site
    """

    __tablename__ = "recipes"

    author_id = Column(
        Integer, ForeignKey("authors.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    system_id = Column(
        Integer, ForeignKey("camera_systems.id", ondelete="RESTRICT"), nullable=False
    )
    camera_model_id = Column(
        Integer, ForeignKey("camera_models.id", ondelete="RESTRICT"), nullable=True
    )
    sensor_id = Column(Integer, ForeignKey("sensors.id", ondelete="RESTRICT"), nullable=True)
    film_simulation_id = Column(
        Integer, ForeignKey("film_simulations.id", ondelete="RESTRICT"), nullable=False
    )
    style_category_id = Column(
        Integer, ForeignKey("style_categories.id", ondelete="RESTRICT"), nullable=True
    )

    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    difficulty_level = Column(String(20), nullable=True)
    source_url = Column(String(500), nullable=True)
    source_type = Column(String(20), nullable=False, default="original")
    publish_date = Column(Date, nullable=True)
    view_count = Column(Integer, nullable=False, default=0)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    author = relationship("Author")
    system = relationship("CameraSystem")
    camera_model = relationship("CameraModel")
    sensor = relationship("Sensor")
    film_simulation = relationship("FilmSimulation")
    style_category = relationship("StyleCategory")

    setting_values = relationship(
        "RecipeSettingValue", back_populates="recipe", cascade="all, delete-orphan"
    )
    setting_ranges = relationship(
        "RecipeSettingRange", back_populates="recipe", cascade="all, delete-orphan"
    )
    recipe_tags = relationship(
        "RecipeTag", back_populates="recipe", cascade="all, delete-orphan"
    )
    images = relationship(
        "Image",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="Image.sort_order",
    )

    __table_args__ = (
        CheckConstraint(
            "difficulty_level IS NULL OR difficulty_level IN ('beginner', 'intermediate', 'advanced')",
            name="ck_recipe_difficulty_level",
        ),
        CheckConstraint(
            "source_type IN ('original', 'curated', 'community')",
            name="ck_recipe_source_type",
        ),
        Index("idx_recipe_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        """String representation of recipe."""
        return f"Recipe(id={self.id}, slug='{self.slug}', author_id={self.author_id})"


class RecipeSettingValue(BaseModel):
    """Single-valued setting assignment for a recipe."""

    __tablename__ = "recipe_setting_values"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    setting_definition_id = Column(
        Integer, ForeignKey("setting_definitions.id", ondelete="RESTRICT"), nullable=False
    )
    value = Column(String(100), nullable=False)
    notes = Column(Text, nullable=True)

    recipe = relationship("Recipe", back_populates="setting_values")
    definition = relationship("SettingDefinition")

    __table_args__ = (
        UniqueConstraint("recipe_id", "setting_definition_id", name="uq_recipe_setting_value"),
    )


class RecipeSettingRange(BaseModel):
    """Min/max setting assignment for a recipe."""

    __tablename__ = "recipe_setting_ranges"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    setting_definition_id = Column(
        Integer, ForeignKey("setting_definitions.id", ondelete="RESTRICT"), nullable=False
    )
    min_value = Column(String(50), nullable=False)
    max_value = Column(String(50), nullable=False)
    recommended_value = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    recipe = relationship("Recipe", back_populates="setting_ranges")
    definition = relationship("SettingDefinition")

    __table_args__ = (
        UniqueConstraint("recipe_id", "setting_definition_id", name="uq_recipe_setting_range"),
    )


class RecipeTag(BaseModel):
    """Junction between recipes and tags."""

    __tablename__ = "recipe_tags"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="RESTRICT"), nullable=False)

    recipe = relationship("Recipe", back_populates="recipe_tags")
    tag = relationship("Tag")

    __table_args__ = (UniqueConstraint("recipe_id", "tag_id", name="uq_recipe_tag"),)


class Image(BaseModel):
    """
    Sample image for a recipe.

    Binary handling lives outside this platform; only URLs and
    presentation metadata are stored.
    """

    __tablename__ = "images"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    image_type = Column(String(20), nullable=False, default="secondary")
    thumb_url = Column(String(500), nullable=False)
    full_url = Column(String(500), nullable=False)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    alt_text = Column(String(500), nullable=True)
    caption = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    recipe = relationship("Recipe", back_populates="images")

    __table_args__ = (
        CheckConstraint("image_type IN ('primary', 'secondary')", name="ck_image_type"),
        Index("idx_image_recipe_sort", "recipe_id", "sort_order"),
    )
