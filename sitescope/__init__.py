"""SiteScope package bootstrap."""

from pathlib import Path

__all__ = [
    "__version__",
]

try:
    # VERSION lives next to the package in a source checkout
    _version_file = Path(__file__).parent.parent / "VERSION"
    if _version_file.exists():
        __version__ = _version_file.read_text().strip()
    else:
        __version__ = "0.3.0"
except OSError:
    __version__ = "0.3.0"
