"""
Module: builder.components

Purpose:
    Pluggable strategy components for the five pipeline roles. The role
    interfaces live in ``base``; concrete strategies live in one module
    per role and are collected by ``builder.registry``.

Key Classes:
    - CollageComponent: Shared negotiation capability
    - ProgressMonitor, InputImageReader, DimensionInitializer,
      PositionCalculator, CollageRenderer: Role interfaces
    - ComponentRole: Role enum (parse order)

Modules:
    - monitor: Log / Silent progress monitors
    - readers: Pillow raster reader
    - dimensions: Uniform / Native sizing
    - positioners: Random / TileInOrder placement
    - renderers: Raster / SVG / ImageMagickScript / PDF output
"""

from .base import (
    CollageComponent,
    CollageRenderer,
    ComponentRole,
    DimensionInitializer,
    InputImageReader,
    PositionCalculator,
    ProgressMonitor,
)

__all__ = [
    "CollageComponent",
    "CollageRenderer",
    "ComponentRole",
    "DimensionInitializer",
    "InputImageReader",
    "PositionCalculator",
    "ProgressMonitor",
]
