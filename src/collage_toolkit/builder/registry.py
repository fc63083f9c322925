"""
Module: builder.registry

Purpose:
    Catalog of strategy components keyed by ``<Role>_<Variant>``. Built
    once, then frozen; lookups of unknown keys fail explicitly. The
    registry does not check that selected components work together;
    that is the negotiation phase's job.

Key Functions:
    - default_registry(): The process-wide registry of built-in components

Key Classes:
    - ComponentRegistry: Key -> singleton component mapping

Used By:
    - builder.config: Strategy selection
    - builder.controller: Registration phase
    - cli: Flag generation and output type sniffing
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, Iterator, Optional, Tuple

from collage_toolkit.core.errors import UnknownComponentError

from .components.base import CollageComponent, CollageRenderer, ComponentRole
from .components.dimensions import NativeDimensionInitializer, UniformDimensionInitializer
from .components.monitor import LogProgressMonitor, SilentProgressMonitor
from .components.positioners import RandomPositionCalculator, TileInOrderPositionCalculator
from .components.readers import RasterImageReader
from .components.renderers import (
    ImageMagickScriptCollageRenderer,
    PDFCollageRenderer,
    RasterCollageRenderer,
    SVGCollageRenderer,
)

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """
    Mapping from registry key to component instance.

    Iteration follows insertion order, which is also the order used for
    the registration phase.

    Example:
        >>> registry = ComponentRegistry([RandomPositionCalculator()]).freeze()
        >>> registry.get("PositionCalculator_Random")
        <RandomPositionCalculator PositionCalculator_Random>
        >>> registry.get("PositionCalculator_Spiral")
        Traceback (most recent call last):
        UnknownComponentError: Unknown component: 'PositionCalculator_Spiral' ...
    """

    def __init__(self, components: Iterable[CollageComponent] = ()) -> None:
        self._components: Dict[str, CollageComponent] = {}
        self._frozen = False
        for component in components:
            self.add(component)

    def add(self, component: CollageComponent) -> None:
        """
        Add a component under its key.

        Raises:
            RuntimeError: If the registry is frozen
            ValueError: If the key is already taken
        """
        if self._frozen:
            raise RuntimeError("Component registry is frozen")
        if component.key in self._components:
            raise ValueError(f"Duplicate component key: {component.key}")
        self._components[component.key] = component

    def freeze(self) -> ComponentRegistry:
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def get(self, key: str) -> CollageComponent:
        """
        Raises:
            UnknownComponentError: If no component has this key
        """
        try:
            return self._components[key]
        except KeyError:
            raise UnknownComponentError(key, tuple(self._components)) from None

    def lookup(self, role: ComponentRole, variant: str) -> CollageComponent:
        """
        Find the ``variant`` of ``role``.

        Raises:
            UnknownComponentError: If the variant does not exist for this role
        """
        key = f"{role.value}_{variant}"
        component = self._components.get(key)
        if component is None:
            raise UnknownComponentError(key, self.variants(role))
        return component

    def variants(self, role: ComponentRole) -> Tuple[str, ...]:
        return tuple(c.variant for c in self._components.values() if c.role is role)

    def renderer_for_type(self, output_type: str) -> Optional[CollageRenderer]:
        """Renderer handling the file extension ``output_type``, if any."""
        output_type = output_type.lower().lstrip(".")
        for component in self._components.values():
            if isinstance(component, CollageRenderer) and output_type in component.extensions:
                return component
        return None

    def __iter__(self) -> Iterator[CollageComponent]:
        return iter(self._components.values())

    def __len__(self) -> int:
        return len(self._components)

    def __contains__(self, key: object) -> bool:
        return key in self._components


@lru_cache(maxsize=1)
def default_registry() -> ComponentRegistry:
    """
    Registry of every built-in component (built once, frozen).

    Returns:
        Frozen ComponentRegistry
    """
    registry = ComponentRegistry(
        [
            LogProgressMonitor(),
            SilentProgressMonitor(),
            RasterImageReader(),
            UniformDimensionInitializer(),
            NativeDimensionInitializer(),
            RandomPositionCalculator(),
            TileInOrderPositionCalculator(),
            RasterCollageRenderer(),
            SVGCollageRenderer(),
            ImageMagickScriptCollageRenderer(),
            PDFCollageRenderer(),
        ]
    ).freeze()
    logger.debug(f"Built component registry with {len(registry)} components")
    return registry
