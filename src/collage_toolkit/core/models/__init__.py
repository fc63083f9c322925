"""
Module: core.models

Purpose:
    Geometry values and per-image records for the collage pipeline.
"""

from .geometry import (
    Dimensions,
    Geometry,
    GeometryMode,
    GEOMETRY_GRAMMAR,
    parse_geometry,
    parse_dims,
)
from .records import ImageRecord, Position

__all__ = [
    "Dimensions",
    "Geometry",
    "GeometryMode",
    "GEOMETRY_GRAMMAR",
    "parse_geometry",
    "parse_dims",
    "ImageRecord",
    "Position",
]
