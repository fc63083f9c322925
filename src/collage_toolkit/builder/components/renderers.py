"""
Module: builder.components.renderers

Purpose:
    Collage renderer components. Each validates its options during the
    parse phase and delegates the actual output to ``builder.output``.

Key Classes:
    - RasterCollageRenderer: JPEG / PNG / TIFF via Pillow
    - SVGCollageRenderer: SVG document
    - ImageMagickScriptCollageRenderer: Shell script for ImageMagick
    - PDFCollageRenderer: Single-page PDF via ReportLab
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from PIL import ImageColor
from reportlab.lib import colors

from collage_toolkit.core.errors import ParseParameterError
from collage_toolkit.builder.output import (
    render_imagemagick_script,
    render_pdf,
    render_raster,
    render_svg,
)

from .base import CollageRenderer

if TYPE_CHECKING:
    from collage_toolkit.builder.layout.models import CanvasPlan
    from collage_toolkit.builder.parameters import ParameterSet


def _pillow_colour(name: str, flag: str) -> str:
    try:
        ImageColor.getrgb(name)
    except ValueError:
        raise ParseParameterError(f"--{flag} is not a colour: {name!r}") from None
    return name


class RasterCollageRenderer(CollageRenderer):

    variant = "Raster"
    description = "Raster image (JPEG, PNG, TIFF) via Pillow"
    extensions = ("jpg", "jpeg", "png", "tif", "tiff")

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(params, "raster-background", "white", "Canvas colour for raster output")
        self._declare(params, "jpeg-quality", "90", "JPEG quality (1-95)")

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        settings = self.settings(params)
        settings["background"] = _pillow_colour(
            self._option(params, "raster-background"), "raster-background"
        )
        settings["quality"] = self._int_option(params, "jpeg-quality", minimum=1, maximum=95)

    def render(self, plan: CanvasPlan, output_path: Path, params: ParameterSet) -> None:
        settings = self.settings(params)
        render_raster(
            plan,
            output_path,
            background=settings.get("background", "white"),
            quality=settings.get("quality", 90),
        )


class SVGCollageRenderer(CollageRenderer):

    variant = "SVG"
    description = "SVG document linking or embedding the source images"
    extensions = ("svg",)

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(params, "svg-background", "", "Canvas colour for SVG output (empty = none)")
        self._declare(params, "svg-embed", "false", "Embed images as base64 instead of linking")

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        settings = self.settings(params)
        settings["background"] = self._option(params, "svg-background") or None
        settings["embed"] = self._bool_option(params, "svg-embed")

    def render(self, plan: CanvasPlan, output_path: Path, params: ParameterSet) -> None:
        settings = self.settings(params)
        render_svg(
            plan,
            output_path,
            background=settings.get("background"),
            embed=settings.get("embed", False),
        )


class ImageMagickScriptCollageRenderer(CollageRenderer):

    variant = "ImageMagickScript"
    description = "Shell script that builds the collage with ImageMagick"
    extensions = ("sh",)

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(params, "script-background", "white", "Canvas colour used by the script")
        self._declare(
            params,
            "script-output",
            "",
            "Image written by the script (default: output path with .jpg)",
        )

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        settings = self.settings(params)
        settings["background"] = self._option(params, "script-background") or "white"
        script_output = self._option(params, "script-output")
        settings["image_path"] = Path(script_output) if script_output else None

    def render(self, plan: CanvasPlan, output_path: Path, params: ParameterSet) -> None:
        settings = self.settings(params)
        render_imagemagick_script(
            plan,
            output_path,
            background=settings.get("background", "white"),
            image_path=settings.get("image_path"),
        )


class PDFCollageRenderer(CollageRenderer):

    variant = "PDF"
    description = "Single-page PDF via ReportLab"
    extensions = ("pdf",)

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(params, "pdf-dpi", "72", "Pixels per inch when converting to PDF points")
        self._declare(params, "pdf-background", "white", "Page colour for PDF output")

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        settings = self.settings(params)
        settings["dpi"] = self._int_option(params, "pdf-dpi", minimum=1)
        background = self._option(params, "pdf-background")
        try:
            colors.toColor(background)
        except ValueError:
            raise ParseParameterError(f"--pdf-background is not a colour: {background!r}") from None
        settings["background"] = background

    def render(self, plan: CanvasPlan, output_path: Path, params: ParameterSet) -> None:
        settings = self.settings(params)
        render_pdf(
            plan,
            output_path,
            dpi=settings.get("dpi", 72),
            background=settings.get("background", "white"),
        )
