"""Namespace-aware Twig component resolution for incremental bundlers."""

__version__ = "0.3.1"

__all__ = ["__version__"]
