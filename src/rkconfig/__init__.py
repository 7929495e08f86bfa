"""Local persistence for keyboard configurations and profiles."""

__version__ = "0.1.0"
