"""
Module: builder.config

Purpose:
    Configuration dataclass for a collage run. Immutable configuration
    with validation on construction; geometry text is parsed when the
    configuration is applied to a ParameterSet.

Key Classes:
    - CollageConfig: Main configuration for building a collage

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: create_collage()
    - cli: Command-line entry point
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from collage_toolkit.core.errors import ParseError
from collage_toolkit.core.models import Geometry, parse_dims, parse_geometry

from .components.base import ComponentRole
from .output.formats import resolve_output_target

if TYPE_CHECKING:
    from .parameters import ParameterSet
    from .registry import ComponentRegistry

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = Path("Collage")
DEFAULT_GEOMETRY = "0x0"
DEFAULT_MONITOR = "Log"
DEFAULT_READER = "Raster"
DEFAULT_SIZER = "Uniform"
DEFAULT_POSITIONER = "Random"


@dataclass(frozen=True)
class CollageConfig:
    """
    Configuration for building a collage (immutable).

    Attributes:
        inputs: Input image paths, in collage order
        output_path: Output file (extension may be omitted)
        padding: Padding geometry around the images (``"10x10"``, ``"5x5%"``)
        aspect_ratio: Canvas aspect ratio (``"16x9"``, ``"0x0"`` = auto)
        min_size: Minimum canvas size (``"0x0"`` = none)
        max_size: Maximum canvas size (``"0x0"`` = none)
        monitor: ProgressMonitor variant
        reader: InputImageReader variant
        sizer: DimensionInitializer variant
        positioner: PositionCalculator variant
        output_type: Output type (default: sniffed from paths)
        options: Raw values for component options, keyed by option name
        manifest: Also write ``<output>.json`` describing the plan

    Example:
        >>> config = CollageConfig(
        ...     inputs=(Path("a.jpg"), Path("b.jpg")),
        ...     output_path=Path("out.png"),
        ...     aspect_ratio="16x9",
        ...     options={"random-seed": "7"},
        ... )
    """

    inputs: Tuple[Path, ...]
    output_path: Path = DEFAULT_OUTPUT

    # Canvas constraints
    padding: str = DEFAULT_GEOMETRY
    aspect_ratio: str = DEFAULT_GEOMETRY
    min_size: str = DEFAULT_GEOMETRY
    max_size: str = DEFAULT_GEOMETRY

    # Strategy selection
    monitor: str = DEFAULT_MONITOR
    reader: str = DEFAULT_READER
    sizer: str = DEFAULT_SIZER
    positioner: str = DEFAULT_POSITIONER
    output_type: Optional[str] = None

    options: Dict[str, str] = field(default_factory=dict)
    manifest: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        object.__setattr__(self, "inputs", tuple(Path(p) for p in self.inputs))
        object.__setattr__(self, "output_path", Path(self.output_path))
        if not self.inputs:
            raise ValueError("At least one input image is required")
        if not str(self.output_path) or self.output_path == Path("."):
            raise ValueError("output_path must not be empty")

    def apply(self, params: ParameterSet, registry: ComponentRegistry) -> None:
        """
        Copy this configuration into a registered ParameterSet.

        Args:
            params: ParameterSet after the registration phase
            registry: Registry to select components from

        Raises:
            UnknownComponentError: If a strategy variant does not exist
            ParseError: If geometry text or the output type is invalid
            ParseParameterError: If an option name was never registered
        """
        params.select(registry.lookup(ComponentRole.PROGRESS_MONITOR, self.monitor))
        params.select(registry.lookup(ComponentRole.INPUT_IMAGE_READER, self.reader))
        params.select(registry.lookup(ComponentRole.DIMENSION_INITIALIZER, self.sizer))
        params.select(registry.lookup(ComponentRole.POSITION_CALCULATOR, self.positioner))

        output_path, renderer_key = resolve_output_target(
            self.output_path, self.inputs, self.output_type, registry
        )
        params.select(registry.get(renderer_key))

        params.input_files = list(self.inputs)
        params.output_path = output_path
        if self.manifest:
            params.manifest_path = output_path.with_name(f"{output_path.name}.json")

        params.padding = parse_geometry(self.padding)
        params.aspect_ratio = _parse_aspect_ratio(self.aspect_ratio)
        params.min_canvas_size = parse_dims(self.min_size)
        params.max_canvas_size = parse_dims(self.max_size)

        for name, value in self.options.items():
            params.set_option_value(name, value)

        logger.debug(
            f"Configured {len(self.inputs)} inputs -> {output_path} "
            f"({', '.join(c.key for c in params.selected_components)})"
        )


def _parse_aspect_ratio(text: str) -> Geometry:
    """Aspect ratio must be unspecified or absolute with two positive sides."""
    geometry = parse_geometry(text)
    if geometry.is_unspecified:
        return geometry
    if geometry.is_percentage:
        raise ParseError(f"Invalid aspect ratio {text!r}: percentages are not allowed")
    if geometry.width == 0 or geometry.height == 0:
        raise ParseError(f"Invalid aspect ratio {text!r}: both sides must be positive")
    return geometry
