"""Interface layer errors.

Translates errors raised below the interface into HTTP responses.
"""

from fastapi import HTTPException, status

from convo.adapter.error import KeyProviderError, MessagingError
from convo.domain.error import (
    AlreadyExistsError,
    DomainError,
    ExpiredError,
    NotFoundError,
)
from convo.protocol.error import ProtocolError


class InterfaceError(Exception):
    """Base interface error."""

    pass


def to_http_exception(error: Exception) -> HTTPException:
    """Map a domain, protocol or adapter error to an HTTP exception.

    Args:
        error: Error raised while handling a request

    Returns:
        HTTP exception to raise in its place
    """
    if isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, AlreadyExistsError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, ExpiredError):
        code = status.HTTP_410_GONE
    elif isinstance(error, (ProtocolError, DomainError, ValueError)):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, KeyProviderError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(error, MessagingError):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return HTTPException(status_code=code, detail=str(error))
