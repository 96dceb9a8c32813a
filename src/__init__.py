"""scaffoldkit — generator/action discovery and template URL resolution."""

from scaffoldkit.version import __version__

__all__ = ["__version__"]
