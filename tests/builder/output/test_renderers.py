"""
Unit tests for collage output: raster, SVG, ImageMagick script and PDF
renderers, atomic writes and output type sniffing.
"""

import os
from pathlib import Path

import pytest
from PIL import Image

from collage_toolkit.builder.components.renderers import (
    PDFCollageRenderer,
    RasterCollageRenderer,
    SVGCollageRenderer,
)
from collage_toolkit.builder.layout import CanvasPlan, PlacedImage
from collage_toolkit.builder.output import (
    atomic_output,
    render_imagemagick_script,
    render_pdf,
    render_raster,
    render_svg,
    resolve_output_target,
)
from collage_toolkit.core.errors import (
    DecodeError,
    EncodeError,
    ImageReadError,
    ParseError,
    ParseParameterError,
)
from collage_toolkit.core.models import Dimensions, Position


@pytest.fixture
def plan(make_image):
    """A 120x120 canvas with one red 100x100 image at (10, 10)."""
    source = make_image("red.png", size=(50, 50), color="red")
    placed = PlacedImage(
        source=source,
        native_size=Dimensions(50, 50),
        placed_size=Dimensions(100, 100),
        position=Position(10, 10),
    )
    return CanvasPlan(canvas=Dimensions(120, 120), images=(placed,), padding=Dimensions(10, 10))


def leftovers(directory: Path):
    """Hidden temp files left behind by atomic writes."""
    return [p.name for p in directory.iterdir() if p.name.startswith(".")]


def truncated_plan(source: Path) -> CanvasPlan:
    """Helper: a one-image plan whose source has corrupt pixel data."""
    placed = PlacedImage(
        source=source,
        native_size=Dimensions(64, 64),
        placed_size=Dimensions(64, 64),
        position=Position(0, 0),
    )
    return CanvasPlan(canvas=Dimensions(64, 64), images=(placed,))


class TestRenderRaster:
    """Tests for render_raster()."""

    def test_render_when_png_then_canvas_size_and_pixels(self, plan, tmp_path):
        """Output has the canvas size with images at their positions."""
        # Arrange
        output = tmp_path / "out" / "collage.png"

        # Act
        render_raster(plan, output, background="white")

        # Assert
        with Image.open(output) as image:
            assert image.size == (120, 120)
            assert image.convert("RGB").getpixel((60, 60)) == (255, 0, 0)
            assert image.convert("RGB").getpixel((2, 2)) == (255, 255, 255)

    def test_render_when_jpeg_then_rgb_image(self, plan, tmp_path):
        """JPEG output is written without alpha."""
        output = tmp_path / "collage.jpg"

        render_raster(plan, output, quality=80)

        with Image.open(output) as image:
            assert image.format == "JPEG"
            assert image.mode == "RGB"

    def test_render_when_source_missing_then_no_partial_output(self, plan, tmp_path):
        """A failed render leaves neither output nor temp files behind."""
        # Arrange
        missing = PlacedImage(
            source=tmp_path / "gone.png",
            native_size=Dimensions(5, 5),
            placed_size=Dimensions(5, 5),
            position=Position(0, 0),
        )
        broken = CanvasPlan(canvas=plan.canvas, images=plan.images + (missing,))
        output = tmp_path / "collage.png"

        # Act & Assert
        with pytest.raises(ImageReadError):
            render_raster(broken, output)
        assert not output.exists()
        assert leftovers(tmp_path) == []

    def test_render_when_source_truncated_then_raises_decode_error(self, truncated_image, tmp_path):
        """Corrupt pixel data surfaces as DecodeError with no partial output."""
        output = tmp_path / "collage.png"

        with pytest.raises(DecodeError):
            render_raster(truncated_plan(truncated_image), output)
        assert not output.exists()
        assert leftovers(tmp_path) == []

    def test_render_when_unsupported_extension_then_raises_encode_error(self, plan, tmp_path):
        """Only jpg/jpeg/png/tif/tiff are raster outputs."""
        with pytest.raises(EncodeError):
            render_raster(plan, tmp_path / "collage.bmp")


class TestAtomicOutput:
    """Tests for atomic_output()."""

    def test_atomic_when_block_raises_then_target_untouched(self, tmp_path):
        """An existing target survives a failed write."""
        # Arrange
        target = tmp_path / "result.txt"
        target.write_text("old")

        # Act
        with pytest.raises(RuntimeError):
            with atomic_output(target) as temp_path:
                temp_path.write_text("half written")
                raise RuntimeError("encoder crashed")

        # Assert
        assert target.read_text() == "old"
        assert leftovers(tmp_path) == []

    def test_atomic_when_block_succeeds_then_target_replaced(self, tmp_path):
        """A successful write replaces the target."""
        target = tmp_path / "result.txt"
        target.write_text("old")

        with atomic_output(target) as temp_path:
            assert temp_path.parent == tmp_path
            temp_path.write_text("new")

        assert target.read_text() == "new"


class TestRenderSvg:
    """Tests for render_svg()."""

    def test_render_when_linked_then_relative_href(self, plan, tmp_path):
        """Images are referenced relative to the SVG file."""
        output = tmp_path / "collage.svg"

        render_svg(plan, output, background="#fff")

        text = output.read_text(encoding="utf-8")
        assert 'width="120" height="120"' in text
        assert 'x="10" y="10" width="100" height="100"' in text
        assert 'xlink:href="red.png"' in text
        assert 'fill="#fff"' in text

    def test_render_when_embedded_then_data_uri(self, plan, tmp_path):
        """svg embedding inlines the image bytes."""
        output = tmp_path / "collage.svg"

        render_svg(plan, output, embed=True)

        text = output.read_text(encoding="utf-8")
        assert 'xlink:href="data:image/png;base64,' in text
        assert "<rect" not in text


class TestRenderImageMagickScript:
    """Tests for render_imagemagick_script()."""

    def test_render_when_written_then_executable_convert_script(self, plan, tmp_path):
        """The script rebuilds the canvas with convert and is executable."""
        # Arrange
        output = tmp_path / "collage.sh"

        # Act
        render_imagemagick_script(plan, output, background="black")

        # Assert
        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "#!/bin/sh"
        assert lines[2] == "convert -size 120x120 xc:black \\"
        assert "-resize 100x100! \\) -geometry +10+10 -composite \\" in lines[3]
        assert lines[-1].strip().endswith("collage.jpg")
        if os.name == "posix":
            assert os.access(output, os.X_OK)

    def test_render_when_image_path_given_then_script_targets_it(self, plan, tmp_path):
        """script-output overrides the image the script writes."""
        output = tmp_path / "collage.sh"

        render_imagemagick_script(plan, output, image_path=Path("final.png"))

        assert output.read_text(encoding="utf-8").splitlines()[-1].strip() == "final.png"


class TestRenderPdf:
    """Tests for render_pdf()."""

    def test_render_when_written_then_pdf_document(self, plan, tmp_path):
        """Output is a PDF file."""
        output = tmp_path / "collage.pdf"

        render_pdf(plan, output)

        assert output.read_bytes().startswith(b"%PDF")
        assert leftovers(tmp_path) == []

    def test_render_when_source_truncated_then_raises_decode_error(self, truncated_image, tmp_path):
        """Corrupt pixel data fails the PDF render as DecodeError."""
        output = tmp_path / "collage.pdf"

        with pytest.raises(DecodeError):
            render_pdf(truncated_plan(truncated_image), output)
        assert not output.exists()
        assert leftovers(tmp_path) == []

    def test_render_when_background_invalid_then_raises_encode_error(self, plan, tmp_path):
        """Invalid colours are encode errors."""
        with pytest.raises(EncodeError):
            render_pdf(plan, tmp_path / "collage.pdf", background="not-a-colour")


class TestRendererOptions:
    """Tests for renderer option parsing."""

    def test_parse_when_raster_background_invalid_then_raises_parse_parameter_error(self, registered_params):
        """raster-background must be a Pillow colour."""
        registered_params.set_option_value("raster-background", "nope")

        with pytest.raises(ParseParameterError, match="--raster-background"):
            RasterCollageRenderer().parse_custom_parameters(registered_params)

    def test_parse_when_jpeg_quality_out_of_range_then_raises_parse_parameter_error(self, registered_params):
        """jpeg-quality is limited to 1-95."""
        registered_params.set_option_value("jpeg-quality", "100")

        with pytest.raises(ParseParameterError, match="--jpeg-quality"):
            RasterCollageRenderer().parse_custom_parameters(registered_params)

    def test_parse_when_pdf_background_invalid_then_raises_parse_parameter_error(self, registered_params):
        """pdf-background must be a ReportLab colour."""
        registered_params.set_option_value("pdf-background", "not-a-colour")

        with pytest.raises(ParseParameterError, match="--pdf-background"):
            PDFCollageRenderer().parse_custom_parameters(registered_params)

    def test_render_when_svg_options_parsed_then_embedded(self, registered_params, plan, tmp_path):
        """The SVG renderer passes its parsed settings through."""
        renderer = SVGCollageRenderer()
        registered_params.set_option_value("svg-embed", "yes")
        renderer.parse_custom_parameters(registered_params)
        output = tmp_path / "collage.svg"

        renderer.render(plan, output, registered_params)

        assert "base64," in output.read_text(encoding="utf-8")


class TestResolveOutputTarget:
    """Tests for resolve_output_target()."""

    def test_resolve_when_type_given_then_type_wins(self, registry):
        """An explicit type beats the output extension."""
        path, key = resolve_output_target(Path("out.png"), [Path("a.jpg")], "pdf", registry)

        assert key == "CollageRenderer_PDF"
        assert path == Path("out.png")

    def test_resolve_when_output_has_extension_then_extension_used(self, registry):
        """The output extension picks the renderer."""
        path, key = resolve_output_target(Path("out.svg"), [Path("a.jpg")], None, registry)

        assert (path, key) == (Path("out.svg"), "CollageRenderer_SVG")

    def test_resolve_when_no_extension_then_first_input_extension_appended(self, registry):
        """Without an output extension the first input decides."""
        path, key = resolve_output_target(Path("Collage"), [Path("a.png"), Path("b.jpg")], None, registry)

        assert (path, key) == (Path("Collage.png"), "CollageRenderer_Raster")

    def test_resolve_when_nothing_known_then_jpg(self, registry):
        """jpg is the fallback type."""
        path, key = resolve_output_target(Path("Collage"), [Path("noext")], None, registry)

        assert (path, key) == (Path("Collage.jpg"), "CollageRenderer_Raster")

    def test_resolve_when_type_unknown_then_raises_parse_error(self, registry):
        """Unknown types are configuration errors."""
        with pytest.raises(ParseError, match="Unrecognized output type"):
            resolve_output_target(Path("out.gif"), [], None, registry)
