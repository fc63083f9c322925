"""Atomic file output: write to a temp file, then replace the target."""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from collage_toolkit.core.errors import OutputWriteError

logger = logging.getLogger(__name__)


@contextmanager
def atomic_output(path: Path) -> Iterator[Path]:
    """
    Yield a temporary path beside ``path`` to write into.

    On normal exit the temp file replaces ``path``; if the block raises,
    the temp file is removed and ``path`` is left untouched.

    Raises:
        OutputWriteError: If the directory or temp file cannot be created,
            or the final replace fails

    Example:
        >>> with atomic_output(Path("out/collage.svg")) as tmp:
        ...     tmp.write_text(svg_text)
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            prefix=f".{path.stem}-",
            suffix=path.suffix,
            dir=path.parent,
            delete=False,
        ) as f:
            temp_path = Path(f.name)
    except OSError as e:
        raise OutputWriteError(f"Cannot create output in {path.parent}: {e}") from e

    try:
        yield temp_path
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise

    try:
        # replace() overwrites existing files on all platforms
        temp_path.replace(path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise OutputWriteError(f"Cannot write {path}: {e}") from e

    logger.debug(f"Wrote {path}")
