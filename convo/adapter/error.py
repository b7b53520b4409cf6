"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class MessagingError(AdapterError):
    """Messaging gateway request failed."""

    pass


class KeyProviderError(AdapterError):
    """Signing key material is unavailable or malformed."""

    pass
