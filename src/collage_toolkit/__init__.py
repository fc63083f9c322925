"""Top-level package for the collage toolkit.

Provides subpackages:
- collage_toolkit.core – geometry, image records and the error taxonomy
- collage_toolkit.builder – component registry, negotiation and pipeline
- collage_toolkit.cli – command-line entry point
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    # In dev mode, read directly from pyproject.toml
    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import PackageNotFoundError, version as pkg_version
        return pkg_version("collage-toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
