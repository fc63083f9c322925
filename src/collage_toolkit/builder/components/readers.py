"""
Module: builder.components.readers

Purpose:
    Input image readers. Only image headers are read here; pixel data is
    decoded later by the renderer through the returned handle.

Key Classes:
    - RasterHandle: Re-opens a source image for rendering
    - RasterImageReader: Pillow-based reader

Dependencies:
    - PIL: Header parsing and EXIF orientation
    - concurrent.futures (std): Optional parallel header reads
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Sequence, Tuple

from PIL import ExifTags, Image, ImageOps, UnidentifiedImageError

from collage_toolkit.core.errors import DecodeError, ImageReadError
from collage_toolkit.core.models import Dimensions, ImageRecord

from .base import InputImageReader

if TYPE_CHECKING:
    from collage_toolkit.builder.parameters import ParameterSet

logger = logging.getLogger(__name__)

# EXIF orientations that rotate the image by 90 or 270 degrees
_TRANSPOSED_ORIENTATIONS = {5, 6, 7, 8}


@dataclass(frozen=True)
class RasterHandle:
    """
    Opaque handle passed from the raster reader to renderers.

    Attributes:
        path: Source image path
        exif_orientation: Whether to apply the EXIF orientation on open
    """

    path: Path
    exif_orientation: bool = True

    def open(self) -> Image.Image:
        """
        Open the image with orientation applied.

        Raises:
            ImageReadError: If the file cannot be opened
            DecodeError: If the file is not an image or its pixels are corrupt
        """
        image = open_image(self.path)
        if not self.exif_orientation:
            return image
        # exif_transpose returns a loaded copy, so the file can be closed
        with image:
            try:
                return ImageOps.exif_transpose(image)
            except OSError as e:
                raise DecodeError(f"Cannot decode {self.path}: {e}") from e


def open_image(path: Path) -> Image.Image:
    """Open ``path`` with Pillow, mapping failures to collage errors."""
    try:
        return Image.open(path)
    except FileNotFoundError as e:
        raise ImageReadError(f"Input image not found: {path}") from e
    except UnidentifiedImageError as e:
        raise DecodeError(f"Not a readable image: {path}") from e
    except OSError as e:
        raise ImageReadError(f"Cannot open {path}: {e}") from e


class RasterImageReader(InputImageReader):
    """
    Read native sizes of raster images with Pillow.

    With ``exif-orientation`` enabled, width and height are swapped for
    images whose EXIF data rotates them by a quarter turn, so the size
    matches what the renderer will draw.
    """

    variant = "Raster"
    description = "Read raster images (JPEG, PNG, TIFF, ...) with Pillow"

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(
            params,
            "exif-orientation",
            "true",
            "Honour EXIF orientation when sizing and drawing images",
        )
        self._declare(
            params,
            "reader-workers",
            "1",
            "Number of threads used to read image headers",
        )

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        settings = self.settings(params)
        settings["exif_orientation"] = self._bool_option(params, "exif-orientation")
        settings["workers"] = self._int_option(params, "reader-workers", minimum=1, maximum=64)

    def read(self, path: Path, params: ParameterSet) -> Tuple[Dimensions, RasterHandle]:
        exif_orientation = self.settings(params).get("exif_orientation", True)
        path = Path(path)

        with open_image(path) as image:
            width, height = image.size
            if exif_orientation:
                try:
                    # PNG keeps EXIF after the pixel data, so this may decode
                    orientation = image.getexif().get(ExifTags.Base.Orientation, 1)
                except OSError as e:
                    raise DecodeError(f"Cannot decode {path}: {e}") from e
                if orientation in _TRANSPOSED_ORIENTATIONS:
                    width, height = height, width

        logger.debug(f"Read {path.name}: {width}x{height}")
        return Dimensions(width, height), RasterHandle(path, exif_orientation)

    def read_all(self, paths: Sequence[Path], params: ParameterSet) -> List[ImageRecord]:
        """Read all headers, in parallel when configured, keeping input order."""
        workers = min(self.settings(params).get("workers", 1), len(paths))
        if workers <= 1:
            return super().read_all(paths, params)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields in submission order and re-raises the first failure
            results = list(pool.map(lambda p: self.read(p, params), paths))

        return [
            ImageRecord(source=Path(path), native_size=size, handle=handle)
            for path, (size, handle) in zip(paths, results)
        ]
