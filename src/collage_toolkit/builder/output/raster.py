"""
Module: builder.output.raster

Purpose:
    Render a CanvasPlan to a raster image file with Pillow.

Key Functions:
    - render_raster(): Composite all placements and save

Dependencies:
    - PIL: Compositing and encoding
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from collage_toolkit.core.errors import EncodeError
from collage_toolkit.builder.layout.models import CanvasPlan

from .atomic import atomic_output
from .sources import open_placed

logger = logging.getLogger(__name__)

RASTER_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".tif": "TIFF",
    ".tiff": "TIFF",
}


def render_raster(
    plan: CanvasPlan,
    output_path: Path,
    *,
    background: str = "white",
    quality: int = 90,
) -> None:
    """
    Composite every placement onto a new canvas and save it.

    Images are resized to their placed size with LANCZOS resampling and
    pasted in input order, so later images cover earlier ones. Alpha
    channels are respected.

    Args:
        plan: Resolved canvas plan
        output_path: Target file; its extension selects the format
        background: Any Pillow colour
        quality: JPEG quality (ignored for other formats)

    Raises:
        EncodeError: If the format is unsupported or encoding fails
        OutputWriteError: If the file cannot be written
    """
    image_format = RASTER_FORMATS.get(output_path.suffix.lower())
    if image_format is None:
        raise EncodeError(f"Unsupported raster format: {output_path.suffix!r}")

    mode = "RGB" if image_format == "JPEG" else "RGBA"
    size = (plan.canvas.width, plan.canvas.height)
    try:
        canvas = Image.new(mode, size, background)
    except ValueError as e:
        raise EncodeError(f"Invalid background colour {background!r}") from e

    for placed in plan.images:
        with open_placed(placed) as source:
            tile = source.convert("RGBA").resize(
                (placed.placed_size.width, placed.placed_size.height),
                Image.Resampling.LANCZOS,
            )
        canvas.paste(tile, (placed.position.x, placed.position.y), tile)

    save_kwargs = {"quality": quality} if image_format == "JPEG" else {}
    with atomic_output(output_path) as temp_path:
        try:
            canvas.save(temp_path, format=image_format, **save_kwargs)
        except (OSError, ValueError) as e:
            raise EncodeError(f"Failed to encode {output_path.name}: {e}") from e

    logger.info(f"Rendered {plan.image_count} images to {output_path} ({plan.canvas})")
