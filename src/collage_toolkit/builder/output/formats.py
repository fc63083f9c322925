"""
Module: builder.output.formats

Purpose:
    Work out the output path and renderer from the requested output
    type, the output path extension, or the first input's extension.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from collage_toolkit.core.errors import ParseError

if TYPE_CHECKING:
    from collage_toolkit.builder.registry import ComponentRegistry

DEFAULT_OUTPUT_TYPE = "jpg"


def resolve_output_target(
    output_path: Path,
    inputs: Sequence[Path],
    output_type: Optional[str],
    registry: ComponentRegistry,
) -> Tuple[Path, str]:
    """
    Pick the output type and final output path.

    Precedence: explicit ``output_type``, then the extension of
    ``output_path``, then the extension of the first input, then
    ``jpg``. When ``output_path`` has no extension, the chosen type's
    extension is appended.

    Returns:
        (output_path, renderer_key)

    Raises:
        ParseError: If no renderer handles the chosen type

    Example:
        >>> resolve_output_target(Path("Collage"), [Path("a.png")], None, registry)
        (PosixPath('Collage.png'), 'CollageRenderer_Raster')
    """
    output_path = Path(output_path)
    extension = output_path.suffix.lower().lstrip(".")

    if output_type:
        chosen = output_type.lower().lstrip(".")
    elif extension:
        chosen = extension
    elif inputs and Path(inputs[0]).suffix:
        chosen = Path(inputs[0]).suffix.lower().lstrip(".")
    else:
        chosen = DEFAULT_OUTPUT_TYPE

    renderer = registry.renderer_for_type(chosen)
    if renderer is None:
        raise ParseError(f"Unrecognized output type: {chosen!r}")

    if not extension:
        output_path = output_path.with_name(f"{output_path.name}.{chosen}")

    return output_path, renderer.key
