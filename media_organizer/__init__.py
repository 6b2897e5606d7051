"""Sort photos and videos into date and camera folders."""

__version__ = "0.3.0"
