"""
Module: builder

Purpose:
    Collage building pipeline. Negotiates parameters with pluggable
    strategy components, reads and sizes the input images, positions
    them, resolves the output canvas and renders the final artifact.

Key Functions:
    - create_collage(): Main entry point for collage generation
    - default_registry(): Built-in component catalog

Key Classes:
    - CollageConfig: Configuration for building
    - CollagePipeline: Pipeline state machine
    - ParameterSet: Negotiation context
    - ComponentRegistry: Strategy catalog

Dependencies:
    - PIL: Image reading and raster output
    - reportlab: PDF output
    - collage_toolkit.core.models: Geometry and image records

Used By:
    - collage_toolkit.cli: Command-line interface
"""

from .config import CollageConfig
from .parameters import OptionSpec, ParameterSet
from .registry import ComponentRegistry, default_registry
from .controller import (
    CollagePipeline,
    PipelineResult,
    PipelineState,
    create_collage,
)

__all__ = [
    # Config
    "CollageConfig",
    # Negotiation
    "OptionSpec",
    "ParameterSet",
    # Registry
    "ComponentRegistry",
    "default_registry",
    # Controller
    "CollagePipeline",
    "PipelineResult",
    "PipelineState",
    "create_collage",
]
