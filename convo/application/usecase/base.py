"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """One application operation, taking and returning pydantic models.

    Routes build the request from the HTTP body and return the response
    as-is, so both sides double as the API schema.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """Run the use case."""
