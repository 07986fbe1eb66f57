"""yucon — general purpose unit converter."""

__version__ = "0.4.0"
