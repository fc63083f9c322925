"""
Module: builder.controller

Purpose:
    Orchestrate the complete collage pipeline.
    Register → Parse → Read → Initialize → Position → Resolve → Render

    Each state is entered only after the previous one succeeded; the
    first failure moves the pipeline to FAILED and nothing later runs.
    The renderer runs exactly once, after the CanvasPlan is resolved.

Key Functions:
    - create_collage(): Main entry point for programmatic use

Key Classes:
    - PipelineState: Pipeline states
    - PipelineResult: Structured success/failure result
    - CollagePipeline: The state machine

Dependencies:
    - builder.registry: Component catalog
    - builder.parameters: Negotiation context
    - builder.layout: Canvas resolution
    - builder.output: Atomic manifest writing

Used By:
    - cli: Command-line entry point
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from collage_toolkit.core.errors import (
    CollageError,
    MonitorError,
    ParseParameterError,
    RegistrationError,
)

from .config import CollageConfig
from .layout import CanvasPlan, resolve_canvas
from .output import atomic_output
from .parameters import ParameterSet
from .registry import ComponentRegistry, default_registry

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Pipeline states in execution order, plus the FAILED sink."""

    REGISTERING = "Registering"
    PARSING = "Parsing"
    READING = "Reading"
    INITIALIZING = "Initializing"
    POSITIONING = "Positioning"
    RESOLVING = "Resolving"
    RENDERING = "Rendering"
    DONE = "Done"
    FAILED = "Failed"


@dataclass(frozen=True)
class PipelineResult:
    """
    Outcome of one pipeline run (immutable).

    Attributes:
        state: DONE or FAILED
        output_path: Rendered artifact (success only)
        plan: Resolved canvas plan (if resolution was reached)
        error: The failure (FAILED only)
        failed_state: State in which the failure happened
        manifest_path: JSON manifest (if requested and written)

    Example:
        >>> result = pipeline.run(params)
        >>> if not result.ok:
        ...     print(result.error_kind, result.error)
    """

    state: PipelineState
    output_path: Optional[Path] = None
    plan: Optional[CanvasPlan] = None
    error: Optional[CollageError] = None
    failed_state: Optional[PipelineState] = None
    manifest_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.DONE

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error is not None else None


class CollagePipeline:
    """
    State machine driving one collage run.

    ``register`` may be called on its own first (the CLI does this to
    build flags from declared options); ``run`` then continues from the
    parsing phase. Otherwise ``run`` registers the ParameterSet itself,
    so one pipeline can run many parameter sets.

    Example:
        >>> pipeline = CollagePipeline(default_registry())
        >>> params = ParameterSet()
        >>> result = pipeline.run(params, configure=lambda p: config.apply(p, registry))
    """

    def __init__(self, registry: ComponentRegistry) -> None:
        self._registry = registry
        self._state: Optional[PipelineState] = None

    @property
    def state(self) -> Optional[PipelineState]:
        return self._state

    # ─────────────────────────────────────────────────────────────────────────
    # Negotiation
    # ─────────────────────────────────────────────────────────────────────────

    def register(self, params: ParameterSet) -> None:
        """
        Registration phase: every known component declares its options.

        All-or-nothing: if any component fails, no declaration survives.

        Raises:
            RegistrationError: On the first failing component
        """
        self._state = PipelineState.REGISTERING
        with params.registration():
            for component in self._registry:
                try:
                    component.register_custom_parameters(params)
                except RegistrationError:
                    raise
                except CollageError as e:
                    raise RegistrationError(f"{component.key}: {e}") from e

        logger.debug(f"Registered {len(params.declared_options)} custom options")

    def parse(self, params: ParameterSet) -> None:
        """
        Parsing phase: the five selected components parse their options.

        Order is monitor, reader, dimension initializer, position
        calculator, renderer. The monitor's first report closes the
        phase; a monitor failure here aborts the run.

        Raises:
            ParseParameterError: If selection is incomplete or a component
                rejects its options
            MonitorError: If the monitor cannot report
        """
        self._state = PipelineState.PARSING
        params.validate_selection()
        if not params.input_files:
            raise ParseParameterError("At least one input image is required")
        if params.output_path is None:
            raise ParseParameterError("No output path set")

        for component in params.selected_components:
            try:
                component.parse_custom_parameters(params)
            except ParseParameterError:
                raise
            except CollageError as e:
                raise ParseParameterError(f"{component.key}: {e}") from e
            logger.debug(f"Parsed options for {component.key}")

        params.progress_monitor.report(PipelineState.PARSING.value, params)

    # ─────────────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────────────

    def run(
        self,
        params: ParameterSet,
        configure: Optional[Callable[[ParameterSet], None]] = None,
    ) -> PipelineResult:
        """
        Run the pipeline to completion or first failure.

        Never raises CollageError; failures come back as a FAILED result.

        Args:
            params: Negotiation context for this run
            configure: Called after registration and before parsing, to
                select components and fill constraints/option values

        Returns:
            PipelineResult
        """
        plan: Optional[CanvasPlan] = None
        try:
            if not params.registered:
                self.register(params)
            self._state = PipelineState.PARSING
            if configure is not None:
                configure(params)
            self.parse(params)

            self._enter(PipelineState.READING, params)
            params.images = params.input_image_reader.read_all(params.input_files, params)
            logger.info(f"Read {len(params.images)} images")

            self._enter(PipelineState.INITIALIZING, params)
            params.dimension_initializer.initialize(params.images, params)

            self._enter(PipelineState.POSITIONING, params)
            params.position_calculator.position(params.images, params)

            self._enter(PipelineState.RESOLVING, params)
            plan = resolve_canvas(params.images, params.constraints)

            self._enter(PipelineState.RENDERING, params)
            params.collage_renderer.render(plan, params.output_path, params)

            manifest_path = None
            if params.manifest_path is not None:
                try:
                    manifest_path = self._write_manifest(params, plan)
                except CollageError:
                    # A failed run leaves no output behind
                    params.output_path.unlink(missing_ok=True)
                    raise

        except CollageError as e:
            failed_state = self._state
            self._state = PipelineState.FAILED
            logger.error(f"Collage failed while {failed_state.value if failed_state else 'starting'}: {e}")
            if failed_state not in (None, PipelineState.REGISTERING, PipelineState.PARSING):
                self._report(PipelineState.FAILED, params)
            return PipelineResult(
                state=PipelineState.FAILED,
                plan=plan,
                error=e,
                failed_state=failed_state,
            )

        self._enter(PipelineState.DONE, params)
        return PipelineResult(
            state=PipelineState.DONE,
            output_path=params.output_path,
            plan=plan,
            manifest_path=manifest_path,
        )

    def _enter(self, state: PipelineState, params: ParameterSet) -> None:
        self._state = state
        self._report(state, params)

    def _report(self, state: PipelineState, params: ParameterSet) -> None:
        """Report to the monitor; failures after parsing are only logged."""
        try:
            params.progress_monitor.report(state.value, params)
        except MonitorError as e:
            logger.warning(f"Progress monitor failed at {state.value}: {e}")

    @staticmethod
    def _write_manifest(params: ParameterSet, plan: CanvasPlan) -> Path:
        """
        Write the resolved plan as JSON next to the output.

        Raises:
            OutputWriteError: If the manifest cannot be written
        """
        manifest = {
            "output": str(params.output_path),
            "renderer": params.collage_renderer.key,
            "constraints": {
                "padding": str(params.padding),
                "aspect_ratio": str(params.aspect_ratio),
                "min_size": str(params.min_canvas_size),
                "max_size": str(params.max_canvas_size),
            },
            **plan.to_dict(),
        }
        with atomic_output(params.manifest_path) as temp_path:
            temp_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        logger.info(f"Wrote manifest {params.manifest_path}")
        return params.manifest_path


def create_collage(
    config: CollageConfig,
    registry: Optional[ComponentRegistry] = None,
) -> PipelineResult:
    """
    Build a collage from a configuration.

    Args:
        config: Collage configuration
        registry: Component registry (default: built-in components)

    Returns:
        PipelineResult (never raises CollageError)

    Example:
        >>> config = CollageConfig(
        ...     inputs=(Path("a.jpg"), Path("b.jpg")),
        ...     output_path=Path("collage.png"),
        ...     positioner="TileInOrder",
        ...     padding="10x10",
        ... )
        >>> result = create_collage(config)
        >>> result.plan.canvas
        Dimensions(width=..., height=...)
    """
    if registry is None:
        registry = default_registry()
    pipeline = CollagePipeline(registry)
    params = ParameterSet()
    return pipeline.run(params, configure=lambda p: config.apply(p, registry))
