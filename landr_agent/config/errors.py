"""Configuration error definitions."""


class ConfigurationError(Exception):
    """Raised for missing keys, unknown providers or invalid settings.

    Configuration errors are fatal: they are raised at construction time,
    are never retried, and abort an agent run even when raised from inside
    a tool.
    """
    pass
