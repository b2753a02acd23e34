"""Client toolkit for the cross-chain swap API."""

__version__ = "0.1.0"

__all__ = ["__version__"]
