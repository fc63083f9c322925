"""
Module: builder.output.pdf

Purpose:
    Render a CanvasPlan to a single-page PDF using ReportLab.

Dependencies:
    - reportlab: PDF generation
    - PIL: Source image access
"""

from __future__ import annotations

import logging
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from collage_toolkit.core.errors import EncodeError
from collage_toolkit.builder.layout.models import CanvasPlan

from .atomic import atomic_output
from .sources import open_placed

logger = logging.getLogger(__name__)

POINTS_PER_INCH = 72


def _px_to_pt(px: float, dpi: int) -> float:
    return px * POINTS_PER_INCH / dpi


def render_pdf(
    plan: CanvasPlan,
    output_path: Path,
    *,
    dpi: int = POINTS_PER_INCH,
    background: str = "white",
) -> None:
    """
    Write the collage as one PDF page sized to the canvas.

    Pixel coordinates are converted to points at ``dpi``; the default of
    72 maps one pixel to one point. PDF y runs bottom-up, so each image
    is drawn from its bottom edge.

    Raises:
        EncodeError: If the background colour is invalid or ReportLab fails
        OutputWriteError: If the file cannot be written
    """
    try:
        fill = colors.toColor(background)
    except ValueError as e:
        raise EncodeError(f"Invalid background colour {background!r}") from e

    page_width = _px_to_pt(plan.canvas.width, dpi)
    page_height = _px_to_pt(plan.canvas.height, dpi)

    with atomic_output(output_path) as temp_path:
        c = canvas.Canvas(str(temp_path), pagesize=(page_width, page_height))
        c.setFillColor(fill)
        c.rect(0, 0, page_width, page_height, stroke=0, fill=1)

        for placed in plan.images:
            with open_placed(placed) as source:
                reader = ImageReader(source.convert("RGBA"))
            left, top, _, bottom = placed.box
            c.drawImage(
                reader,
                _px_to_pt(left, dpi),
                page_height - _px_to_pt(bottom, dpi),
                width=_px_to_pt(placed.placed_size.width, dpi),
                height=_px_to_pt(placed.placed_size.height, dpi),
                mask="auto",
            )

        c.showPage()
        try:
            c.save()
        except (OSError, ValueError) as e:
            raise EncodeError(f"Failed to write PDF {output_path.name}: {e}") from e

    logger.info(f"Rendered {plan.image_count} images to {output_path} ({plan.canvas})")
