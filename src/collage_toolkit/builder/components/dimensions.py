"""
Module: builder.components.dimensions

Purpose:
    Dimension initializers set the placed size of every image before
    positioning.

Key Classes:
    - UniformDimensionInitializer: Scale every image to a common area
    - NativeDimensionInitializer: Keep native sizes
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Sequence

from collage_toolkit.core.errors import LayoutError
from collage_toolkit.core.models import Dimensions, ImageRecord

from .base import DimensionInitializer

if TYPE_CHECKING:
    from collage_toolkit.builder.layout.models import CanvasConstraints
    from collage_toolkit.builder.parameters import ParameterSet

logger = logging.getLogger(__name__)


def _check_native(record: ImageRecord) -> None:
    if record.native_size.width == 0 or record.native_size.height == 0:
        raise LayoutError(f"Image {record.source} has zero size ({record.native_size})")


def _available_space(constraints: CanvasConstraints) -> Dimensions:
    """
    Largest size a single image may take under the declared max canvas.

    Absolute padding is subtracted on both sides. Zero means no limit on
    that axis.
    """
    max_size = constraints.max_size
    padding = constraints.padding
    pad_x = padding.width if not padding.is_percentage else 0
    pad_y = padding.height if not padding.is_percentage else 0

    width = max(1, max_size.width - 2 * pad_x) if max_size.width else 0
    height = max(1, max_size.height - 2 * pad_y) if max_size.height else 0
    return Dimensions(width, height)


class UniformDimensionInitializer(DimensionInitializer):
    """
    Scale every image so all of them cover the same area.

    Each image keeps its own aspect ratio. The common area defaults to
    the mean native area; ``uniform-area`` overrides it. Images larger
    than the declared max canvas (minus padding) are shrunk to fit.

    Example:
        >>> # 100x100 and 400x100 with uniform-area=10000
        >>> [r.placed_size for r in records]
        [Dimensions(width=100, height=100), Dimensions(width=200, height=50)]
    """

    variant = "Uniform"
    description = "Scale all images to the same area"

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(
            params,
            "uniform-area",
            "0",
            "Target area in pixels for every image (0 = mean native area)",
        )

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        self.settings(params)["area"] = self._int_option(params, "uniform-area", minimum=0)

    def initialize(self, records: Sequence[ImageRecord], params: ParameterSet) -> None:
        if not records:
            return
        for record in records:
            _check_native(record)

        target_area = self.settings(params).get("area", 0)
        if not target_area:
            target_area = sum(r.native_size.area for r in records) / len(records)

        limit = _available_space(params.constraints)

        for record in records:
            scale = math.sqrt(target_area / record.native_size.area)
            width = record.native_size.width * scale
            height = record.native_size.height * scale

            if limit.width and width > limit.width:
                height *= limit.width / width
                width = limit.width
            if limit.height and height > limit.height:
                width *= limit.height / height
                height = limit.height

            record.placed_size = Dimensions(max(1, round(width)), max(1, round(height)))
            logger.debug(f"{record.source.name}: {record.native_size} -> {record.placed_size}")

        logger.info(f"Scaled {len(records)} images to ~{round(target_area)} px² each")


class NativeDimensionInitializer(DimensionInitializer):

    variant = "Native"
    description = "Keep every image at its native size"

    def initialize(self, records: Sequence[ImageRecord], params: ParameterSet) -> None:
        for record in records:
            _check_native(record)
            record.placed_size = record.native_size
