"""launchvault: read-only launch catalog API and Space-Track orbit sync."""

__version__ = "0.1.0"
__author__ = "launchvault Team"

__all__ = ["__version__", "__author__"]
