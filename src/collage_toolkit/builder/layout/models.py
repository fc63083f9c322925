"""
Module: builder.layout.models

Purpose:
    Immutable results of canvas resolution, consumed by renderers.

Key Classes:
    - CanvasConstraints: Declared padding, aspect ratio and min/max size
    - PlacedImage: One image at its final canvas position
    - CanvasPlan: Resolved canvas size plus ordered placements

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.canvas: Creates CanvasPlans
    - builder.output: Renders CanvasPlans
    - builder.controller: Manifest writing
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from collage_toolkit.core.models import Dimensions, Geometry, ImageRecord, Position


@dataclass(frozen=True)
class CanvasConstraints:
    """Declared canvas constraints (each may be unspecified)."""

    padding: Geometry
    aspect_ratio: Geometry
    min_size: Dimensions
    max_size: Dimensions


@dataclass(frozen=True)
class PlacedImage:
    """
    An image at its final, canvas-relative position.

    Attributes:
        source: Input image path
        native_size: Size reported by the reader
        placed_size: Size on the canvas
        position: Top-left corner on the canvas
        handle: Opaque reader handle (may be None)
    """

    source: Path
    native_size: Dimensions
    placed_size: Dimensions
    position: Position
    handle: Any = None

    @classmethod
    def from_record(cls, record: ImageRecord, position: Position) -> PlacedImage:
        return cls(
            source=record.source,
            native_size=record.native_size,
            placed_size=record.placed_size,
            position=position,
            handle=record.handle,
        )

    @property
    def box(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) on the canvas."""
        return (
            self.position.x,
            self.position.y,
            self.position.x + self.placed_size.width,
            self.position.y + self.placed_size.height,
        )


@dataclass(frozen=True)
class CanvasPlan:
    """
    Resolved output canvas (immutable).

    Attributes:
        canvas: Concrete canvas size
        images: Placements in input order
        padding: Resolved padding in pixels on each side

    Example:
        >>> plan.canvas
        Dimensions(width=120, height=120)
        >>> plan.images[0].position
        Position(x=10, y=10)
    """

    canvas: Dimensions
    images: tuple[PlacedImage, ...]
    padding: Dimensions = Dimensions(0, 0)

    @property
    def image_count(self) -> int:
        return len(self.images)

    def to_dict(self) -> dict:
        """Serialize for the JSON manifest."""
        return {
            "canvas": {"width": self.canvas.width, "height": self.canvas.height},
            "padding": {"width": self.padding.width, "height": self.padding.height},
            "images": [
                {
                    "source": str(image.source),
                    "native_size": str(image.native_size),
                    "placed_size": str(image.placed_size),
                    "x": image.position.x,
                    "y": image.position.y,
                }
                for image in self.images
            ],
        }
