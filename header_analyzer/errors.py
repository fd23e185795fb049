"""Exceptions raised by the header analyzer.

Malformed header content is never raised: it is logged or recorded as a
warning on the HeaderSet. Only argument-shape problems surface as errors.
"""


class HeaderAnalyzerError(Exception):
    """Base class for all header analyzer errors."""


class InvalidArgumentError(HeaderAnalyzerError, TypeError, ValueError):
    """A public function was called with an argument of the wrong type or value."""


class ConfigError(HeaderAnalyzerError):
    """A settings file could not be read or contained invalid values."""
