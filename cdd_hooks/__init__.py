"""Status tracking and notification hooks for contract-driven development projects."""

__version__ = "0.4.0"

__all__ = ["__version__"]
