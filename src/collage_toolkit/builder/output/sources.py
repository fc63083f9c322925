"""Open placed source images for pixel-level renderers."""

from __future__ import annotations

from PIL import Image

from collage_toolkit.core.errors import DecodeError
from collage_toolkit.builder.components.readers import open_image
from collage_toolkit.builder.layout.models import PlacedImage


def open_placed(placed: PlacedImage) -> Image.Image:
    """
    Open the pixels behind a placement, fully decoded.

    Uses the reader's handle when it can open images itself, otherwise
    opens the source path directly. Readers only look at headers, so a
    truncated or corrupt file first fails here.

    Raises:
        ImageReadError: If the source is missing
        DecodeError: If the source is not an image or its pixels are corrupt
    """
    opener = getattr(placed.handle, "open", None)
    image = opener() if callable(opener) else open_image(placed.source)
    try:
        image.load()
    except OSError as e:
        image.close()
        raise DecodeError(f"Cannot decode {placed.source}: {e}") from e
    return image
