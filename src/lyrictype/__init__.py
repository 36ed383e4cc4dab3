"""LyricType - type along to time-coded song lyrics."""

__version__ = "0.1.0"
