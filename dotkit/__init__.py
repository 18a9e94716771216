"""dotkit — shell-environment bootstrap kit."""

__version__ = "0.1.0"
