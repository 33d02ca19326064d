"""p4unity - Perforce change-content trigger for Unity .meta hygiene."""

__version__ = "0.3.0"
