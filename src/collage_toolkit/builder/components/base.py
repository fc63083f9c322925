"""
Module: builder.components.base

Purpose:
    Abstract strategy interfaces for the five pipeline roles. Every
    component takes part in the two-phase parameter negotiation
    (``register_custom_parameters`` then ``parse_custom_parameters``) in
    addition to its role-specific operation.

Key Classes:
    - ComponentRole: The five pipeline roles, in parse order
    - CollageComponent: Negotiation capability shared by all roles
    - ProgressMonitor, InputImageReader, DimensionInitializer,
      PositionCalculator, CollageRenderer: Role interfaces

Dependencies:
    - abc (std)

Used By:
    - builder.registry: Component catalog
    - builder.parameters: Role slots
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional, Sequence, Tuple

from collage_toolkit.core.errors import ParseParameterError
from collage_toolkit.core.models import Dimensions, ImageRecord

if TYPE_CHECKING:
    from collage_toolkit.builder.layout.models import CanvasPlan
    from collage_toolkit.builder.parameters import ParameterSet


class ComponentRole(Enum):
    """Pipeline roles. Declaration order is the parse order."""

    PROGRESS_MONITOR = "ProgressMonitor"
    INPUT_IMAGE_READER = "InputImageReader"
    DIMENSION_INITIALIZER = "DimensionInitializer"
    POSITION_CALCULATOR = "PositionCalculator"
    COLLAGE_RENDERER = "CollageRenderer"


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class CollageComponent(ABC):
    """
    Base class for all strategy components.

    Components are process-wide singletons held by the registry, so they
    must not keep per-run state on ``self``. Parsed settings go into the
    component's own custom area of the ParameterSet instead.

    Subclasses set ``role`` (via the role base class) and ``variant``.
    """

    role: ClassVar[ComponentRole]
    variant: ClassVar[str]
    description: ClassVar[str] = ""

    @property
    def key(self) -> str:
        """Registry key, e.g. ``"PositionCalculator_Random"``."""
        return f"{self.role.value}_{self.variant}"

    def register_custom_parameters(self, params: ParameterSet) -> None:
        """Declare custom option names. Default: none."""

    def parse_custom_parameters(self, params: ParameterSet) -> None:
        """Validate custom option values into the custom area. Default: none."""

    # ─────────────────────────────────────────────────────────────────────────
    # Option helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _declare(self, params: ParameterSet, name: str, default: str, help: str) -> None:
        params.declare_option(self, name, default=default, help=help)

    def _option(self, params: ParameterSet, name: str) -> str:
        return params.option_value(self, name).strip()

    def _int_option(
        self,
        params: ParameterSet,
        name: str,
        *,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> int:
        raw = self._option(params, name)
        try:
            value = int(raw)
        except ValueError:
            raise ParseParameterError(f"--{name} must be an integer: {raw!r}") from None
        if minimum is not None and value < minimum:
            raise ParseParameterError(f"--{name} must be >= {minimum}: {value}")
        if maximum is not None and value > maximum:
            raise ParseParameterError(f"--{name} must be <= {maximum}: {value}")
        return value

    def _float_option(self, params: ParameterSet, name: str) -> float:
        raw = self._option(params, name)
        try:
            return float(raw)
        except ValueError:
            raise ParseParameterError(f"--{name} must be a number: {raw!r}") from None

    def _bool_option(self, params: ParameterSet, name: str) -> bool:
        raw = self._option(params, name).lower()
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        raise ParseParameterError(f"--{name} must be a boolean: {raw!r}")

    def settings(self, params: ParameterSet) -> Dict[str, Any]:
        """This component's private custom area."""
        return params.custom_area(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key}>"


class ProgressMonitor(CollageComponent):
    """Side-channel observer of pipeline state transitions."""

    role = ComponentRole.PROGRESS_MONITOR

    @abstractmethod
    def report(self, stage: str, params: ParameterSet) -> None:
        """
        Report that the pipeline entered ``stage``.

        Raises:
            MonitorError: If the report cannot be delivered
        """


class InputImageReader(CollageComponent):
    """Reads native sizes (and an opaque handle) for input images."""

    role = ComponentRole.INPUT_IMAGE_READER

    @abstractmethod
    def read(self, path: Path, params: ParameterSet) -> Tuple[Dimensions, Any]:
        """
        Read one image.

        Returns:
            (native_size, handle)

        Raises:
            ImageReadError: If the file cannot be opened
            DecodeError: If the file is not a decodable image
        """

    def read_all(self, paths: Sequence[Path], params: ParameterSet) -> List[ImageRecord]:
        """Read every path, preserving input order."""
        records = []
        for path in paths:
            native_size, handle = self.read(path, params)
            records.append(ImageRecord(source=Path(path), native_size=native_size, handle=handle))
        return records


class DimensionInitializer(CollageComponent):
    """Sets ``placed_size`` on every record."""

    role = ComponentRole.DIMENSION_INITIALIZER

    @abstractmethod
    def initialize(self, records: Sequence[ImageRecord], params: ParameterSet) -> None:
        """
        Raises:
            LayoutError: If an image cannot be sized
        """


class PositionCalculator(CollageComponent):
    """Sets a tentative ``position`` on every record."""

    role = ComponentRole.POSITION_CALCULATOR

    @abstractmethod
    def position(self, records: Sequence[ImageRecord], params: ParameterSet) -> None:
        """
        Raises:
            LayoutError: If the images cannot be positioned
        """


class CollageRenderer(CollageComponent):
    """Writes the final artifact from a resolved CanvasPlan."""

    role = ComponentRole.COLLAGE_RENDERER
    extensions: ClassVar[Tuple[str, ...]] = ()

    @abstractmethod
    def render(self, plan: CanvasPlan, output_path: Path, params: ParameterSet) -> None:
        """
        Raises:
            EncodeError: If the artifact cannot be encoded
            OutputWriteError: If the artifact cannot be written
        """

