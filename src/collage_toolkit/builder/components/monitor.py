"""
Module: builder.components.monitor

Purpose:
    Progress monitors. They observe pipeline state transitions and never
    influence the outcome once parameters are parsed.

Key Classes:
    - LogProgressMonitor: Reports through the logging module
    - SilentProgressMonitor: Discards all reports
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from collage_toolkit.core.errors import MonitorError, ParseParameterError

from .base import ProgressMonitor

if TYPE_CHECKING:
    from collage_toolkit.builder.parameters import ParameterSet

logger = logging.getLogger(__name__)

_LEVELS = ("DEBUG", "INFO", "WARNING")


class LogProgressMonitor(ProgressMonitor):
    """Log each stage with a running step count and elapsed time."""

    variant = "Log"
    description = "Report progress through the log"

    def register_custom_parameters(self, params: ParameterSet) -> None:
        self._declare(
            params,
            "progress-level",
            "INFO",
            f"Log level for progress reports ({', '.join(_LEVELS)})",
        )

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        level_name = self._option(params, "progress-level").upper()
        if level_name not in _LEVELS:
            raise ParseParameterError(
                f"--progress-level must be one of {', '.join(_LEVELS)}: {level_name!r}"
            )
        settings = self.settings(params)
        settings["level"] = getattr(logging, level_name)
        settings["started"] = time.perf_counter()
        settings["reports"] = 0

    def report(self, stage: str, params: ParameterSet) -> None:
        settings = self.settings(params)
        if "level" not in settings:
            raise MonitorError("Progress monitor used before its parameters were parsed")

        settings["reports"] += 1
        elapsed = time.perf_counter() - settings["started"]
        if stage == "Done":
            logger.log(settings["level"], f"Collage finished in {elapsed:.2f}s")
        else:
            logger.log(settings["level"], f"[{settings['reports']}] {stage} ({elapsed:.2f}s)")


class SilentProgressMonitor(ProgressMonitor):

    variant = "Silent"
    description = "Do not report progress"

    def report(self, stage: str, params: ParameterSet) -> None:
        return None
