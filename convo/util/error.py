"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Raised when required settings are missing or malformed.

    Typically the messaging identity: inbox id or private key.
    """

    pass


class DependencyInjectionError(UtilError):
    """Raised when a provider implementation cannot be resolved."""

    pass
