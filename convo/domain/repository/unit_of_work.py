"""Unit of work interface."""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """Transaction boundary shared by the repositories of one request.

    Writes are committed when the request ends. Long-running operations
    call :meth:`commit` to make their writes visible early and to release
    the underlying connection before they start waiting.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Commit everything written so far."""
        pass
