"""
Module: builder.output.script

Purpose:
    Render a CanvasPlan as a POSIX shell script that rebuilds the
    collage with ImageMagick's ``convert``.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import List, Optional

from collage_toolkit.core.errors import OutputWriteError
from collage_toolkit.builder.layout.models import CanvasPlan

from .atomic import atomic_output

logger = logging.getLogger(__name__)


def render_imagemagick_script(
    plan: CanvasPlan,
    output_path: Path,
    *,
    background: str = "white",
    image_path: Optional[Path] = None,
) -> None:
    """
    Write an executable ImageMagick script for the plan.

    Args:
        plan: Resolved canvas plan
        output_path: Target .sh file
        background: ImageMagick colour for the empty canvas
        image_path: Image the script writes (default: output with .jpg)

    Raises:
        OutputWriteError: If the script cannot be written
    """
    target = image_path or output_path.with_suffix(".jpg")
    lines: List[str] = [
        "#!/bin/sh",
        "set -e",
        (
            f"convert -size {plan.canvas.width}x{plan.canvas.height} "
            f"xc:{shlex.quote(background)} \\"
        ),
    ]
    for placed in plan.images:
        lines.append(
            f"  \\( {shlex.quote(str(placed.source))} -auto-orient "
            f"-resize {placed.placed_size.width}x{placed.placed_size.height}! \\) "
            f"-geometry +{placed.position.x}+{placed.position.y} -composite \\"
        )
    lines.append(f"  {shlex.quote(str(target))}")

    with atomic_output(output_path) as temp_path:
        temp_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        try:
            temp_path.chmod(0o755)
        except OSError as e:
            raise OutputWriteError(f"Cannot make {output_path} executable: {e}") from e

    logger.info(f"Wrote ImageMagick script {output_path} -> {target}")
