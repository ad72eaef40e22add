"""Version information for formula-commons."""

__version__ = "0.3.0"
