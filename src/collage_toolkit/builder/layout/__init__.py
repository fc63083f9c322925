"""
Module: builder.layout

Purpose:
    Canvas resolution for the collage builder. Turns sized, positioned
    image records and the declared constraints into a CanvasPlan.

Key Functions:
    - resolve_canvas(): Main entry point

Key Classes:
    - CanvasPlan: Resolved canvas + placements
    - PlacedImage: Final placement of one image
    - CanvasConstraints: Declared constraints
"""

from .models import CanvasConstraints, CanvasPlan, PlacedImage
from .canvas import resolve_canvas

__all__ = [
    "CanvasConstraints",
    "CanvasPlan",
    "PlacedImage",
    "resolve_canvas",
]
