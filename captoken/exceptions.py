"""
CapToken Exceptions

Base exception classes shared across the package.
"""


class CapTokenException(Exception):
    """Base exception for CapToken."""
    pass


class ConfigurationError(CapTokenException):
    """Configuration error."""
    pass
