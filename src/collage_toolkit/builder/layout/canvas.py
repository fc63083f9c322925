"""
Module: builder.layout.canvas

Purpose:
    Resolve a concrete output canvas from the positioned images and the
    declared constraints (padding, aspect ratio, min/max size).

    Resolution steps, in order:
      1. Tight bounding box of all placed images, translated to (0, 0)
      2. Expand by padding on all four sides (percentages are of the box)
      3. Grow to the declared min size
      4. Grow the short side to match the aspect ratio
      5. Reject anything above the declared max size
      6. Translate every image by the padding offset plus half of any
         extra space added in steps 3-4 (content stays centred)

    Padding is applied before aspect growth, so padding is never eaten by
    ratio correction and the canvas is never smaller than the images plus
    padding.

Key Functions:
    - resolve_canvas(): Records + constraints -> CanvasPlan

Dependencies:
    - builder.layout.models: CanvasPlan, PlacedImage

Used By:
    - builder.controller: Resolving stage
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from collage_toolkit.core.errors import LayoutError, UnsatisfiableConstraintsError
from collage_toolkit.core.models import Dimensions, Geometry, ImageRecord

from .models import CanvasConstraints, CanvasPlan, PlacedImage

logger = logging.getLogger(__name__)


def resolve_canvas(
    records: Sequence[ImageRecord],
    constraints: CanvasConstraints,
) -> CanvasPlan:
    """
    Compute the canvas size and final image positions.

    Args:
        records: Sized and positioned image records, in input order
        constraints: Declared padding/aspect/min/max

    Returns:
        CanvasPlan with canvas-relative positions

    Raises:
        LayoutError: If there are no records or a record was never sized
        UnsatisfiableConstraintsError: If min exceeds max on an axis, the
            images plus padding exceed max, or the aspect ratio cannot be
            met inside max

    Example:
        >>> record = ImageRecord(Path("a.png"), Dimensions(100, 100))
        >>> record.placed_size = Dimensions(100, 100)
        >>> plan = resolve_canvas([record], CanvasConstraints(
        ...     parse_geometry("10x10"), Geometry(), Dimensions(0, 0), Dimensions(0, 0)))
        >>> plan.canvas
        Dimensions(width=120, height=120)
    """
    if not records:
        raise LayoutError("No images to place on the canvas")

    min_size = constraints.min_size
    max_size = constraints.max_size
    _check_bounds(min_size, max_size)

    for record in records:
        if record.placed_size.width == 0 or record.placed_size.height == 0:
            raise LayoutError(f"Image {record.source} has no placed size")

    left = min(r.position.x for r in records)
    top = min(r.position.y for r in records)
    content = Dimensions(
        max(r.right for r in records) - left,
        max(r.bottom for r in records) - top,
    )

    padding = constraints.padding.resolve(content)
    padded = Dimensions(
        content.width + 2 * padding.width,
        content.height + 2 * padding.height,
    )
    logger.debug(f"Content box {content}, padding {padding}, padded box {padded}")

    if max_size.width and padded.width > max_size.width:
        raise UnsatisfiableConstraintsError(
            f"Images plus padding need width {padded.width} but max width is {max_size.width}"
        )
    if max_size.height and padded.height > max_size.height:
        raise UnsatisfiableConstraintsError(
            f"Images plus padding need height {padded.height} but max height is {max_size.height}"
        )

    width = max(padded.width, min_size.width)
    height = max(padded.height, min_size.height)

    if not constraints.aspect_ratio.is_unspecified:
        width, height = _grow_to_ratio(width, height, constraints.aspect_ratio)
        if (max_size.width and width > max_size.width) or (
            max_size.height and height > max_size.height
        ):
            raise UnsatisfiableConstraintsError(
                f"Aspect ratio {constraints.aspect_ratio.width}:{constraints.aspect_ratio.height} "
                f"needs a {width}x{height} canvas, which exceeds max size {max_size}"
            )

    canvas = Dimensions(width, height)
    offset_x = padding.width + (width - padded.width) // 2 - left
    offset_y = padding.height + (height - padded.height) // 2 - top

    images = tuple(
        PlacedImage.from_record(record, record.position.translated(offset_x, offset_y))
        for record in records
    )

    logger.info(f"Resolved canvas {canvas} for {len(images)} images")
    return CanvasPlan(canvas=canvas, images=images, padding=padding)


def _check_bounds(min_size: Dimensions, max_size: Dimensions) -> None:
    """Reject min > max on any axis where both are declared."""
    if min_size.width and max_size.width and min_size.width > max_size.width:
        raise UnsatisfiableConstraintsError(
            f"Min width {min_size.width} exceeds max width {max_size.width}"
        )
    if min_size.height and max_size.height and min_size.height > max_size.height:
        raise UnsatisfiableConstraintsError(
            f"Min height {min_size.height} exceeds max height {max_size.height}"
        )


def _grow_to_ratio(width: int, height: int, ratio: Geometry) -> Tuple[int, int]:
    """
    Grow the short side so width:height matches ``ratio``.

    Neither side ever shrinks. Integer ceilings keep the result at or
    just above the exact ratio.
    """
    if ratio.width == 0 or ratio.height == 0:
        raise UnsatisfiableConstraintsError(
            f"Aspect ratio needs two positive sides: {ratio}"
        )
    if width * ratio.height < height * ratio.width:
        width = -(-height * ratio.width // ratio.height)
    elif width * ratio.height > height * ratio.width:
        height = -(-width * ratio.height // ratio.width)
    return width, height
