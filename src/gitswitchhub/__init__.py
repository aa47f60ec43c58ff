"""GitSwitchHub - multiple GitHub accounts behind one git credential helper."""

__version__ = "0.1.0"

__all__ = ["__version__"]
