"""Task board backend with per-category task ordering."""

__version__ = "0.1.0"
