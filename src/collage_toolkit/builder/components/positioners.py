"""
Module: builder.components.positioners

Purpose:
    Position calculators assign a tentative top-left position to every
    sized image. Coordinates need not start at the origin; the canvas
    resolver normalises them.

Key Classes:
    - RandomPositionCalculator: Scatter images with low overlap
    - TileInOrderPositionCalculator: Row-major tiling in input order
"""

from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from collage_toolkit.core.errors import LayoutError, ParseParameterError
from collage_toolkit.core.models import Geometry, ImageRecord, Position

from .base import PositionCalculator

if TYPE_CHECKING:
    from collage_toolkit.builder.parameters import ParameterSet

logger = logging.getLogger(__name__)

Box = Tuple[int, int, int, int]


def _check_sized(records: Sequence[ImageRecord]) -> None:
    for record in records:
        if record.placed_size.width == 0 or record.placed_size.height == 0:
            raise LayoutError(f"Image {record.source} was not sized before positioning")


def _ratio(aspect: Geometry) -> float:
    """Width/height ratio of a declared aspect, 1.0 when unspecified."""
    if aspect.is_unspecified or aspect.width == 0 or aspect.height == 0:
        return 1.0
    return aspect.width / aspect.height


def _overlap(a: Box, b: Box) -> int:
    """Intersection area of two (left, top, right, bottom) boxes."""
    width = min(a[2], b[2]) - max(a[0], b[0])
    height = min(a[3], b[3]) - max(a[1], b[1])
    if width <= 0 or height <= 0:
        return 0
    return width * height


def _random_box(rng: random.Random, region_w: int, region_h: int, width: int, height: int) -> Box:
    x = rng.randint(0, region_w - width)
    y = rng.randint(0, region_h - height)
    return (x, y, x + width, y + height)


class RandomPositionCalculator(PositionCalculator):
    """
    Scatter images over a region sized from their total area.

    The region area is ``total image area / random-fill`` and its shape
    follows the declared aspect ratio. For each image, in input order,
    ``random-attempts`` candidate positions are drawn and the one with
    the least overlap with already placed images is kept.
    """

    variant = "Random"
    description = "Scatter images randomly with minimal overlap"

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(params, "random-seed", "", "Seed for reproducible layouts (empty = random)")
        self._declare(params, "random-fill", "0.6", "Fraction of the region covered by images (0-1]")
        self._declare(params, "random-attempts", "20", "Candidate positions tried per image")

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        settings = self.settings(params)

        seed_text = self._option(params, "random-seed")
        settings["seed"] = self._int_option(params, "random-seed") if seed_text else None

        fill = self._float_option(params, "random-fill")
        if not 0 < fill <= 1:
            raise ParseParameterError(f"--random-fill must be in (0, 1]: {fill}")
        settings["fill"] = fill
        settings["attempts"] = self._int_option(params, "random-attempts", minimum=1)

    def position(self, records: Sequence[ImageRecord], params: ParameterSet) -> None:
        if not records:
            return
        _check_sized(records)

        settings = self.settings(params)
        seed: Optional[int] = settings.get("seed")
        fill: float = settings.get("fill", 0.6)
        attempts: int = settings.get("attempts", 20)
        rng = random.Random(seed)

        region_w, region_h = self._region(records, fill, _ratio(params.aspect_ratio))
        logger.debug(f"Random placement region {region_w}x{region_h} (fill {fill})")

        placed: List[Box] = []
        for record in records:
            width, height = record.placed_size.width, record.placed_size.height
            box = _random_box(rng, region_w, region_h, width, height)
            overlap = sum(_overlap(box, other) for other in placed)

            for _ in range(attempts - 1):
                if overlap == 0:
                    break
                candidate = _random_box(rng, region_w, region_h, width, height)
                candidate_overlap = sum(_overlap(candidate, other) for other in placed)
                if candidate_overlap < overlap:
                    box, overlap = candidate, candidate_overlap

            record.position = Position(box[0], box[1])
            placed.append(box)

        logger.info(f"Randomly positioned {len(records)} images")

    @staticmethod
    def _region(records: Sequence[ImageRecord], fill: float, ratio: float) -> Tuple[int, int]:
        total_area = sum(r.placed_size.area for r in records)
        max_w = max(r.placed_size.width for r in records)
        max_h = max(r.placed_size.height for r in records)

        region_area = total_area / fill
        width = max(max_w, round(math.sqrt(region_area * ratio)))
        height = max(max_h, round(region_area / width))
        return width, height


class TileInOrderPositionCalculator(PositionCalculator):
    """
    Tile images row by row in input order.

    Each row is as tall as its tallest image; shorter images are centred
    vertically. ``tile-columns`` of 0 picks the column count whose grid
    shape is closest to the declared aspect ratio (square by default).
    """

    variant = "TileInOrder"
    description = "Tile images in rows, in input order"

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(params, "tile-columns", "0", "Images per row (0 = automatic)")
        self._declare(params, "tile-spacing", "0", "Gap between tiles in pixels")

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        settings = self.settings(params)
        settings["columns"] = self._int_option(params, "tile-columns", minimum=0)
        settings["spacing"] = self._int_option(params, "tile-spacing", minimum=0)

    def position(self, records: Sequence[ImageRecord], params: ParameterSet) -> None:
        if not records:
            return
        _check_sized(records)

        settings = self.settings(params)
        spacing: int = settings.get("spacing", 0)
        columns: int = settings.get("columns", 0) or self._auto_columns(
            records, spacing, _ratio(params.aspect_ratio)
        )
        columns = min(columns, len(records))

        y = 0
        for start in range(0, len(records), columns):
            row = records[start:start + columns]
            row_height = max(r.placed_size.height for r in row)
            x = 0
            for record in row:
                record.position = Position(x, y + (row_height - record.placed_size.height) // 2)
                x += record.placed_size.width + spacing
            y += row_height + spacing

        logger.info(f"Tiled {len(records)} images in {columns} columns")

    @staticmethod
    def _auto_columns(records: Sequence[ImageRecord], spacing: int, ratio: float) -> int:
        count = len(records)
        mean_w = sum(r.placed_size.width for r in records) / count + spacing
        mean_h = sum(r.placed_size.height for r in records) / count + spacing

        best_columns = 1
        best_error = math.inf
        for columns in range(1, count + 1):
            rows = math.ceil(count / columns)
            grid_ratio = (columns * mean_w) / (rows * mean_h)
            error = abs(math.log(grid_ratio / ratio))
            if error < best_error:
                best_columns, best_error = columns, error
        return best_columns
