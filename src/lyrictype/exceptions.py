"""Custom exceptions for LyricType."""

class LyricTypeError(Exception):
    """Base exception for LyricType."""
    pass

class ConfigError(LyricTypeError):
    """Invalid configuration value."""
    pass

class LyricsError(LyricTypeError):
    """Error fetching or processing lyrics."""
    pass

class ValidationError(LyricTypeError):
    """Invalid input parameters."""
    pass
