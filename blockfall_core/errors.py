"""Exceptions raised by the engine."""


class ConfigurationError(ValueError):
    """Raised at construction time for invalid sizes or timing values."""
