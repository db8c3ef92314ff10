"""Static random image API builder."""

__version__ = "0.1.0"
