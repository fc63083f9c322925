"""
Module: builder.output.svg

Purpose:
    Render a CanvasPlan to an SVG document. Images are referenced by
    relative path, or embedded as base64 data URIs.
"""

from __future__ import annotations

import base64
import logging
import mimetypes
import os
from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import quoteattr

from collage_toolkit.core.errors import ImageReadError
from collage_toolkit.builder.layout.models import CanvasPlan, PlacedImage

from .atomic import atomic_output

logger = logging.getLogger(__name__)


def render_svg(
    plan: CanvasPlan,
    output_path: Path,
    *,
    background: Optional[str] = None,
    embed: bool = False,
) -> None:
    """
    Write an SVG document with one ``<image>`` per placement.

    Args:
        plan: Resolved canvas plan
        output_path: Target .svg file
        background: Fill colour for a full-canvas rect (None = transparent)
        embed: Embed image bytes instead of linking to the source files

    Raises:
        ImageReadError: If an embedded source cannot be read
        OutputWriteError: If the file cannot be written
    """
    width, height = plan.canvas.width, plan.canvas.height
    lines: List[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        (
            '<svg xmlns="http://www.w3.org/2000/svg" '
            'xmlns:xlink="http://www.w3.org/1999/xlink" '
            f'width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
        ),
    ]
    if background:
        lines.append(f'  <rect width="100%" height="100%" fill={quoteattr(background)}/>')

    for placed in plan.images:
        href = _data_uri(placed) if embed else _relative_href(placed.source, output_path)
        lines.append(
            f'  <image x="{placed.position.x}" y="{placed.position.y}" '
            f'width="{placed.placed_size.width}" height="{placed.placed_size.height}" '
            f'preserveAspectRatio="none" xlink:href={quoteattr(href)}/>'
        )
    lines.append("</svg>")

    with atomic_output(output_path) as temp_path:
        temp_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    logger.info(f"Rendered {plan.image_count} images to {output_path} ({plan.canvas})")


def _relative_href(source: Path, output_path: Path) -> str:
    """Source path relative to the SVG's directory, with forward slashes."""
    source = Path(source).resolve()
    try:
        relative = os.path.relpath(source, output_path.resolve().parent)
    except ValueError:
        # Different drives on Windows
        return source.as_uri()
    return Path(relative).as_posix()


def _data_uri(placed: PlacedImage) -> str:
    mime, _ = mimetypes.guess_type(str(placed.source))
    try:
        payload = Path(placed.source).read_bytes()
    except OSError as e:
        raise ImageReadError(f"Cannot embed {placed.source}: {e}") from e
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime or 'application/octet-stream'};base64,{encoded}"
