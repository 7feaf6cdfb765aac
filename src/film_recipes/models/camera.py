"""
Camera reference models.

This module contains:
- CameraSystem: A manufacturer's camera line (e.g. "Fujifilm X-Trans V")
- Sensor: An image sensor used by camera models
- CameraModel: A camera body within a system
- FilmSimulation: A film simulation available on a system

All of these are natural-keyed reference rows shared by every recipe that
points at them. Recipe references use RESTRICT so a referenced row cannot be
deleted.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class CameraSystem(BaseModel):
    """
    Camera system (natural key: name).

    Attributes:
        name: Unique system name
        manufacturer: Manufacturer name
        is_active: Whether the system is offered in the catalogue
    """

    __tablename__ = "camera_systems"

    name = Column(String(100), nullable=False, unique=True)
    manufacturer = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    camera_models = relationship("CameraModel", back_populates="system")
    film_simulations = relationship("FilmSimulation", back_populates="system")


class Sensor(BaseModel):
    """
    Image sensor (natural key: name).

    Attributes:
        name: Unique sensor name (e.g. "X-Trans IV")
        type: Sensor type, "Unknown" when created by an import
        megapixels: Resolution, if known
        description: Free text
    """

    __tablename__ = "sensors"

    name = Column(String(100), nullable=False, unique=True)
    type = Column(String(50), nullable=False)
    megapixels = Column(Float, nullable=True)
    description = Column(Text, nullable=True)


class CameraModel(BaseModel):
    """
    Camera body within a system (natural key: system + slug).
    """

    __tablename__ = "camera_models"

    system_id = Column(
        Integer, ForeignKey("camera_systems.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    sensor_id = Column(
        Integer, ForeignKey("sensors.id", ondelete="SET NULL"), nullable=True
    )
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False)
    release_year = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    system = relationship("CameraSystem", back_populates="camera_models")
    sensor = relationship("Sensor")

    __table_args__ = (UniqueConstraint("system_id", "slug", name="uq_camera_model_system_slug"),)


class FilmSimulation(BaseModel):
    """
    Film simulation offered by a system (natural key: system + slug).

    Attributes:
        name: Simulation name as written by recipe authors
        label: Display label
        description: Free text
    """

    __tablename__ = "film_simulations"

    system_id = Column(
        Integer, ForeignKey("camera_systems.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False)
    label = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    system = relationship("CameraSystem", back_populates="film_simulations")

    __table_args__ = (
        UniqueConstraint("system_id", "slug", name="uq_film_simulation_system_slug"),
    )
