"""
Module: core.models.geometry

Purpose:
    Geometry value types used throughout the collage pipeline and the
    parser for the compact textual geometry notation ``[W]x[H][%][+X][+Y]``.
    ``"0x0"`` (or an empty string) is the universal "unconstrained"
    sentinel; it parses to an explicit UNSPECIFIED mode rather than an
    absolute zero size.

Key Functions:
    - parse_geometry(text): Parse a geometry descriptor
    - parse_dims(text): Parse a plain WxH size

Key Classes:
    - GeometryMode: UNSPECIFIED / ABSOLUTE / PERCENTAGE
    - Dimensions: Non-negative width/height pair
    - Geometry: Size + offset + mode descriptor

Dependencies:
    - re (std)
    - dataclasses (std)

Used By:
    - core.models.records
    - builder.parameters, builder.config
    - builder.layout.canvas
    - cli
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from collage_toolkit.core.errors import ParseError


_GEOMETRY_RE = re.compile(
    r"^(?P<width>[0-9]*)[xX](?P<height>[0-9]*)(?P<pct>%?)"
    r"(?P<x>[+-][0-9]+)?(?P<y>[+-][0-9]+)?(?P<pct_tail>%?)$"
)

GEOMETRY_GRAMMAR = "[W]x[H][%][+X][+Y]"


class GeometryMode(Enum):
    """How the numeric fields of a Geometry are interpreted."""

    UNSPECIFIED = "unspecified"
    ABSOLUTE = "absolute"
    PERCENTAGE = "percentage"


@dataclass(frozen=True, slots=True)
class Dimensions:
    """
    Width/height pair in pixels.

    A zero on an axis means "unconstrained" when used as a min/max
    canvas bound; ``Dimensions(0, 0)`` means fully unspecified.

    Invariants:
        - width >= 0
        - height >= 0

    Example:
        >>> Dimensions(800, 600).area
        480000
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        if self.width < 0:
            raise ValueError(f"width must be >= 0: {self.width}")
        if self.height < 0:
            raise ValueError(f"height must be >= 0: {self.height}")

    @classmethod
    def zero(cls) -> Dimensions:
        return cls(0, 0)

    @property
    def is_unspecified(self) -> bool:
        """True when both axes are zero."""
        return self.width == 0 and self.height == 0

    @property
    def area(self) -> int:
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True, slots=True)
class Geometry:
    """
    Generalised size/offset descriptor.

    For PERCENTAGE geometries width and height are percentages of a
    reference size supplied by the consumer (see ``resolve``).

    Attributes:
        width: Width (pixels or percent)
        height: Height (pixels or percent)
        x_offset: Signed horizontal offset
        y_offset: Signed vertical offset
        mode: Interpretation of the numeric fields

    Example:
        >>> g = parse_geometry("10x5%")
        >>> g.resolve(Dimensions(200, 100))
        Dimensions(width=20, height=5)
    """

    width: int = 0
    height: int = 0
    x_offset: int = 0
    y_offset: int = 0
    mode: GeometryMode = GeometryMode.UNSPECIFIED

    def __post_init__(self) -> None:
        """Validate geometry on construction."""
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"geometry size must be non-negative: {self.width}x{self.height}"
            )

    @classmethod
    def unspecified(cls) -> Geometry:
        return cls()

    @property
    def is_unspecified(self) -> bool:
        return self.mode is GeometryMode.UNSPECIFIED

    @property
    def is_percentage(self) -> bool:
        return self.mode is GeometryMode.PERCENTAGE

    @property
    def size(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    def resolve(self, reference: Dimensions) -> Dimensions:
        """
        Convert to absolute pixels.

        Percentages are taken of ``reference`` per axis and rounded to the
        nearest pixel; absolute geometries ignore the reference.

        Args:
            reference: Size that percentages are relative to

        Returns:
            Absolute Dimensions (zero when unspecified)
        """
        if self.mode is GeometryMode.UNSPECIFIED:
            return Dimensions.zero()
        if self.mode is GeometryMode.PERCENTAGE:
            return Dimensions(
                round(reference.width * self.width / 100),
                round(reference.height * self.height / 100),
            )
        return Dimensions(self.width, self.height)

    def __str__(self) -> str:
        text = f"{self.width}x{self.height}"
        if self.mode is GeometryMode.PERCENTAGE:
            text += "%"
        if self.x_offset or self.y_offset:
            text += f"{self.x_offset:+d}{self.y_offset:+d}"
        return text


def parse_geometry(text: str) -> Geometry:
    """
    Parse a geometry descriptor.

    Accepted forms: ``"800x600"``, ``"10x10+5+5"``, ``"10x5%"``,
    ``"x100"`` (missing side is zero), ``"0x0"`` / ``""`` (unspecified).

    Args:
        text: Geometry text

    Returns:
        Parsed Geometry

    Raises:
        ParseError: On malformed input (missing ``x``, non-numeric or
            negative sizes, dangling separators, duplicate ``%``)

    Example:
        >>> parse_geometry("10x10+5-5")
        Geometry(width=10, height=10, x_offset=5, y_offset=-5, mode=<GeometryMode.ABSOLUTE: 'absolute'>)
    """
    if text is None:
        raise ParseError("Geometry text is required")

    stripped = text.strip()
    if not stripped:
        return Geometry.unspecified()

    if stripped.startswith("-"):
        raise ParseError(f"Invalid geometry {text!r}: width must be non-negative")

    match = _GEOMETRY_RE.match(stripped)
    if match is None:
        raise ParseError(f"Invalid geometry {text!r}: expected {GEOMETRY_GRAMMAR}")

    if match.group("pct") and match.group("pct_tail"):
        raise ParseError(f"Invalid geometry {text!r}: '%' given twice")

    width = int(match.group("width") or 0)
    height = int(match.group("height") or 0)
    x_offset = int(match.group("x") or 0)
    y_offset = int(match.group("y") or 0)
    is_percentage = bool(match.group("pct") or match.group("pct_tail"))

    if width == 0 and height == 0 and x_offset == 0 and y_offset == 0:
        mode = GeometryMode.UNSPECIFIED
    elif is_percentage:
        mode = GeometryMode.PERCENTAGE
    else:
        mode = GeometryMode.ABSOLUTE

    return Geometry(width, height, x_offset, y_offset, mode)


def parse_dims(text: str) -> Dimensions:
    """
    Parse a plain ``WxH`` size.

    Percentages and offsets are rejected because min/max canvas sizes
    are always absolute.

    Raises:
        ParseError: On malformed input
    """
    geometry = parse_geometry(text)
    if geometry.is_percentage:
        raise ParseError(f"Invalid size {text!r}: percentages are not allowed")
    if geometry.x_offset or geometry.y_offset:
        raise ParseError(f"Invalid size {text!r}: offsets are not allowed")
    return geometry.size
