"""Custom exceptions for usefulreadme."""


class UsefulReadmeError(Exception):
    """Base exception for usefulreadme operations."""


class ConfigurationError(UsefulReadmeError):
    """Invalid configuration; aborts the whole render pass."""


class ParseError(UsefulReadmeError):
    """Error during POD or changelog parsing."""


class ConversionError(UsefulReadmeError):
    """Error during format conversion."""
