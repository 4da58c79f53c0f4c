"""Top-level package for Atlas Export.

Provides subpackages:
- atlas_export.core – template/geometry models, units, template documents
- atlas_export.primitives – cartographic drawing primitives
- atlas_export.capture – map surface interface and screenshot capture
- atlas_export.assets – logo and image loading
- atlas_export.layout – page compositor
- atlas_export.output – PDF/PNG/JPEG encoding
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text().splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.3.1"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("atlas-export")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
