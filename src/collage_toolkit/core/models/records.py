"""
Module: core.models.records

Purpose:
    Per-image records that flow through one pipeline run. The reader
    creates them, the dimension initializer sets ``placed_size`` and the
    position calculator sets ``position``.

Key Classes:
    - Position: Integer x/y coordinate
    - ImageRecord: One input image and its evolving geometry

Used By:
    - builder.components (all roles)
    - builder.layout.canvas
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .geometry import Dimensions


@dataclass(frozen=True, slots=True)
class Position:
    """Top-left coordinate in pixels. May be negative before resolution."""

    x: int = 0
    y: int = 0

    def translated(self, dx: int, dy: int) -> Position:
        return Position(self.x + dx, self.y + dy)


@dataclass
class ImageRecord:
    """
    Mutable record for a single input image.

    Attributes:
        source: Path (or identifier) of the input image
        native_size: Size reported by the reader
        handle: Opaque reader handle passed through to renderers
        placed_size: Size on the canvas, set by the dimension initializer
        position: Top-left position, set by the position calculator

    Example:
        >>> record = ImageRecord(Path("a.jpg"), Dimensions(400, 300))
        >>> record.placed_size = Dimensions(200, 150)
        >>> record.right
        200
    """

    source: Path
    native_size: Dimensions
    handle: Any = None
    placed_size: Dimensions = field(default_factory=Dimensions.zero)
    position: Position = field(default_factory=Position)

    @property
    def right(self) -> int:
        return self.position.x + self.placed_size.width

    @property
    def bottom(self) -> int:
        return self.position.y + self.placed_size.height

    @property
    def box(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) of the placed image."""
        return (self.position.x, self.position.y, self.right, self.bottom)
