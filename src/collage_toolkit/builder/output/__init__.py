"""
Module: builder.output

Purpose:
    Output backends for resolved CanvasPlans: Pillow raster images, SVG
    documents, ImageMagick shell scripts, and ReportLab PDFs. Every
    backend writes atomically so a failed render leaves no partial file.

Key Functions:
    - render_raster(), render_svg(), render_imagemagick_script(),
      render_pdf(): Backends
    - resolve_output_target(): Output type sniffing
    - atomic_output(): Temp-file-then-replace writer
"""

from .atomic import atomic_output
from .formats import resolve_output_target
from .pdf import render_pdf
from .raster import RASTER_FORMATS, render_raster
from .script import render_imagemagick_script
from .svg import render_svg

__all__ = [
    "atomic_output",
    "resolve_output_target",
    "render_pdf",
    "RASTER_FORMATS",
    "render_raster",
    "render_imagemagick_script",
    "render_svg",
]
