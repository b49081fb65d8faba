"""Template driven path rendering for music libraries."""

__version__ = "0.1.0"
