"""
Unit tests for CollageConfig.
"""

from pathlib import Path

import pytest

from collage_toolkit.builder.config import CollageConfig
from collage_toolkit.builder.parameters import ParameterSet
from collage_toolkit.core.errors import ParseError, ParseParameterError, UnknownComponentError
from collage_toolkit.core.models import Dimensions, parse_geometry


class TestCollageConfig:
    """Tests for CollageConfig construction."""

    def test_init_when_defaults_then_creates_valid_config(self):
        """Defaults select the standard strategies."""
        config = CollageConfig(inputs=("a.png",))

        assert config.inputs == (Path("a.png"),)
        assert config.output_path == Path("Collage")
        assert (config.reader, config.sizer, config.positioner, config.monitor) == (
            "Raster", "Uniform", "Random", "Log",
        )
        assert config.padding == "0x0"

    def test_init_when_no_inputs_then_raises_error(self):
        """At least one input image is required."""
        with pytest.raises(ValueError, match="At least one input"):
            CollageConfig(inputs=())

    def test_init_when_output_empty_then_raises_error(self):
        """An empty output path is invalid."""
        with pytest.raises(ValueError, match="output_path"):
            CollageConfig(inputs=("a.png",), output_path="")


class TestCollageConfigApply:
    """Tests for CollageConfig.apply()."""

    def test_apply_when_valid_then_params_filled(self, registry, registered_params):
        """apply() selects strategies and copies constraints."""
        # Arrange
        config = CollageConfig(
            inputs=("a.png", "b.png"),
            output_path="out",
            padding="5x5%",
            aspect_ratio="16x9",
            min_size="100x0",
            positioner="TileInOrder",
            output_type="svg",
            options={"tile-spacing": "3"},
            manifest=True,
        )

        # Act
        config.apply(registered_params, registry)

        # Assert
        registered_params.validate_selection()
        assert registered_params.position_calculator.key == "PositionCalculator_TileInOrder"
        assert registered_params.collage_renderer.key == "CollageRenderer_SVG"
        assert registered_params.output_path == Path("out.svg")
        assert registered_params.manifest_path == Path("out.svg.json")
        assert registered_params.input_files == [Path("a.png"), Path("b.png")]
        assert registered_params.padding == parse_geometry("5x5%")
        assert registered_params.min_canvas_size == Dimensions(100, 0)
        assert registered_params.option_value(
            registered_params.position_calculator, "tile-spacing"
        ) == "3"

    def test_apply_when_variant_unknown_then_raises_unknown_component(self, registry, registered_params):
        """Unknown variants fail with UnknownComponentError."""
        config = CollageConfig(inputs=("a.png",), sizer="Huge")

        with pytest.raises(UnknownComponentError, match="DimensionInitializer_Huge"):
            config.apply(registered_params, registry)

    @pytest.mark.parametrize("aspect", ["4x0", "x3", "4x3%"])
    def test_apply_when_aspect_invalid_then_raises_parse_error(self, registry, registered_params, aspect):
        """Aspect ratios need two positive absolute sides."""
        config = CollageConfig(inputs=("a.png",), aspect_ratio=aspect)

        with pytest.raises(ParseError):
            config.apply(registered_params, registry)

    def test_apply_when_max_is_percentage_then_raises_parse_error(self, registry, registered_params):
        """Min/max sizes must be absolute."""
        config = CollageConfig(inputs=("a.png",), max_size="50x50%")

        with pytest.raises(ParseError):
            config.apply(registered_params, registry)

    def test_apply_when_option_unknown_then_raises_parse_parameter_error(self, registry, registered_params):
        """Options must have been declared during registration."""
        config = CollageConfig(inputs=("a.png",), options={"no-such-option": "1"})

        with pytest.raises(ParseParameterError):
            config.apply(registered_params, registry)

    def test_apply_when_not_registered_then_options_rejected(self, registry):
        """Option values can only be set after registration."""
        config = CollageConfig(inputs=("a.png",), options={"random-seed": "1"})

        with pytest.raises(ParseParameterError):
            config.apply(ParameterSet(), registry)
