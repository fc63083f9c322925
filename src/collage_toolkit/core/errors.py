"""
Module: core.errors

Purpose:
    Error taxonomy shared by every stage of the collage pipeline.
    Core code raises these; the pipeline controller turns them into a
    structured result and only the CLI maps them to exit codes.

Key Classes:
    - CollageError: Base class for all collage failures
    - ParseError, UnknownComponentError: Configuration errors
    - RegistrationError, ParseParameterError: Negotiation failures
    - ImageReadError, DecodeError, EncodeError, OutputWriteError: I/O
    - LayoutError, UnsatisfiableConstraintsError: Geometry failures
    - MonitorError: Progress monitor failures

Used By:
    - Every module in collage_toolkit
"""

from __future__ import annotations


class CollageError(Exception):
    """Base class for collage pipeline errors."""

    kind = "collage_error"


class ParseError(CollageError, ValueError):
    """Malformed geometry or configuration text."""

    kind = "parse_error"


class UnknownComponentError(CollageError, LookupError):
    """Requested strategy key is not in the registry."""

    kind = "unknown_component"

    def __init__(self, key: str, available: tuple[str, ...] = ()) -> None:
        self.key = key
        self.available = available
        message = f"Unknown component: {key!r}"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)


class RegistrationError(CollageError):
    """A component could not register its custom parameters."""

    kind = "registration_error"


class ParseParameterError(CollageError):
    """A selected component rejected its custom parameter values."""

    kind = "parse_parameter_error"


class ImageReadError(CollageError, OSError):
    """Input image could not be opened."""

    kind = "io_error"


class DecodeError(CollageError):
    """Input image exists but could not be decoded."""

    kind = "decode_error"


class EncodeError(CollageError):
    """Renderer could not encode the output artifact."""

    kind = "encode_error"


class OutputWriteError(CollageError, OSError):
    """Output artifact could not be written to disk."""

    kind = "io_error"


class LayoutError(CollageError):
    """Sizing or positioning strategy failed."""

    kind = "layout_error"


class UnsatisfiableConstraintsError(CollageError):
    """Canvas constraints cannot be honoured simultaneously."""

    kind = "unsatisfiable_constraints"


class MonitorError(CollageError):
    """Progress monitor failed to report."""

    kind = "monitor_error"
