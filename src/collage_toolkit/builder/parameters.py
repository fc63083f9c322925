"""
Module: builder.parameters

Purpose:
    The shared, mutable negotiation and execution context for one
    collage run. Holds the selected strategy per role, the declared
    canvas constraints, input/output paths, the image records, the
    option namespace filled during registration, and one private custom
    area per component.

Key Classes:
    - OptionSpec: A custom option declared by a component
    - ParameterSet: The negotiation context

Dependencies:
    - contextlib (std)

Used By:
    - builder.components: Option declaration and parsing
    - builder.config: Applying user configuration
    - builder.controller: Pipeline orchestration
    - cli: Building flags from declared options
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from collage_toolkit.core.errors import ParseParameterError, RegistrationError
from collage_toolkit.core.models import Dimensions, Geometry, ImageRecord

from .layout.models import CanvasConstraints

from .components.base import (
    CollageComponent,
    CollageRenderer,
    ComponentRole,
    DimensionInitializer,
    InputImageReader,
    PositionCalculator,
    ProgressMonitor,
)

logger = logging.getLogger(__name__)

_OPTION_NAME_RE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")


@dataclass(frozen=True)
class OptionSpec:
    """
    A custom option declared during the registration phase.

    Attributes:
        owner: Registry key of the declaring component
        name: Globally unique option name (used as ``--name``)
        default: Raw default value
        help: One-line description
    """

    owner: str
    name: str
    default: str = ""
    help: str = ""

    @property
    def flag(self) -> str:
        return f"--{self.name}"


class ParameterSet:
    """
    Negotiation/execution context passed by reference through a run.

    Exactly one component must occupy each role before execution; this
    is checked by ``validate_selection``.

    Example:
        >>> params = ParameterSet()
        >>> params.select(registry.get("PositionCalculator_Random"))
        >>> params.padding = parse_geometry("10x10")
    """

    def __init__(self) -> None:
        self._selected: Dict[ComponentRole, CollageComponent] = {}
        self._options: Dict[str, OptionSpec] = {}
        self._option_values: Dict[str, str] = {}
        self._custom: Dict[str, Dict[str, Any]] = {}
        self._registered = False

        self.input_files: List[Path] = []
        self.output_path: Optional[Path] = None
        self.manifest_path: Optional[Path] = None

        self.padding: Geometry = Geometry.unspecified()
        self.aspect_ratio: Geometry = Geometry.unspecified()
        self.min_canvas_size: Dimensions = Dimensions.zero()
        self.max_canvas_size: Dimensions = Dimensions.zero()

        self.images: List[ImageRecord] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Role selection
    # ─────────────────────────────────────────────────────────────────────────

    def select(self, component: CollageComponent) -> None:
        """Put ``component`` in its role slot, replacing any previous one."""
        self._selected[component.role] = component

    def selected(self, role: ComponentRole) -> CollageComponent:
        try:
            return self._selected[role]
        except KeyError:
            raise ParseParameterError(f"No component selected for {role.value}") from None

    @property
    def selected_components(self) -> Tuple[CollageComponent, ...]:
        """Selected components in parse order (missing roles skipped)."""
        return tuple(self._selected[role] for role in ComponentRole if role in self._selected)

    def validate_selection(self) -> None:
        """
        Check that every role is filled by a component of that role.

        Raises:
            ParseParameterError: If a role is empty or mis-filled
        """
        missing = [role.value for role in ComponentRole if role not in self._selected]
        if missing:
            raise ParseParameterError(f"No component selected for: {', '.join(missing)}")
        for role, component in self._selected.items():
            if component.role is not role:
                raise ParseParameterError(f"{component.key} cannot fill role {role.value}")

    @property
    def progress_monitor(self) -> ProgressMonitor:
        return self.selected(ComponentRole.PROGRESS_MONITOR)  # type: ignore[return-value]

    @property
    def input_image_reader(self) -> InputImageReader:
        return self.selected(ComponentRole.INPUT_IMAGE_READER)  # type: ignore[return-value]

    @property
    def dimension_initializer(self) -> DimensionInitializer:
        return self.selected(ComponentRole.DIMENSION_INITIALIZER)  # type: ignore[return-value]

    @property
    def position_calculator(self) -> PositionCalculator:
        return self.selected(ComponentRole.POSITION_CALCULATOR)  # type: ignore[return-value]

    @property
    def collage_renderer(self) -> CollageRenderer:
        return self.selected(ComponentRole.COLLAGE_RENDERER)  # type: ignore[return-value]

    # ─────────────────────────────────────────────────────────────────────────
    # Option namespace (registration phase)
    # ─────────────────────────────────────────────────────────────────────────

    def declare_option(
        self,
        owner: CollageComponent,
        name: str,
        *,
        default: str = "",
        help: str = "",
    ) -> OptionSpec:
        """
        Declare a custom option in the shared namespace.

        Raises:
            RegistrationError: If the name is malformed or already taken
        """
        if not _OPTION_NAME_RE.match(name):
            raise RegistrationError(f"{owner.key}: invalid option name {name!r}")
        existing = self._options.get(name)
        if existing is not None:
            raise RegistrationError(
                f"{owner.key}: option --{name} already registered by {existing.owner}"
            )
        spec = OptionSpec(owner=owner.key, name=name, default=default, help=help)
        self._options[name] = spec
        logger.debug(f"{owner.key} registered --{name}")
        return spec

    @contextmanager
    def registration(self) -> Iterator[ParameterSet]:
        """
        All-or-nothing registration scope.

        Declarations made inside the block are discarded if it raises.
        """
        snapshot = dict(self._options)
        try:
            yield self
        except Exception:
            self._options = snapshot
            raise
        self._registered = True

    @property
    def registered(self) -> bool:
        """True once a registration scope has completed on this set."""
        return self._registered

    @property
    def declared_options(self) -> Tuple[OptionSpec, ...]:
        return tuple(self._options.values())

    def set_option_value(self, name: str, value: str) -> None:
        """
        Record a raw value for a declared option.

        Raises:
            ParseParameterError: If no component declared ``name``
        """
        if name not in self._options:
            raise ParseParameterError(f"Unknown option: --{name}")
        self._option_values[name] = str(value)

    def option_value(self, owner: CollageComponent, name: str) -> str:
        """
        Raw value of an option owned by ``owner`` (default if unset).

        Raises:
            ParseParameterError: If ``owner`` did not declare ``name``
        """
        spec = self._options.get(name)
        if spec is None or spec.owner != owner.key:
            raise ParseParameterError(f"{owner.key} did not register option --{name}")
        return self._option_values.get(name, spec.default)

    # ─────────────────────────────────────────────────────────────────────────
    # Per-component custom areas
    # ─────────────────────────────────────────────────────────────────────────

    def custom_area(self, component: CollageComponent) -> Dict[str, Any]:
        """Private settings dict for ``component``, keyed by its registry key."""
        return self._custom.setdefault(component.key, {})

    # ─────────────────────────────────────────────────────────────────────────
    # Constraints
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def constraints(self) -> CanvasConstraints:
        return CanvasConstraints(
            padding=self.padding,
            aspect_ratio=self.aspect_ratio,
            min_size=self.min_canvas_size,
            max_size=self.max_canvas_size,
        )
