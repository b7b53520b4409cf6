"""Base class for single-value wrappers."""

from typing import Generic, TypeVar

from pydantic import ConfigDict, RootModel

T = TypeVar("T")


class RootValueObject(RootModel[T], Generic[T]):
    """Immutable, hashable wrapper around one primitive.

    Inbox ids and invite tags are compared and used as dict keys by value,
    which the frozen config gives us. ``str()`` yields the wrapped value so
    instances drop straight into log attributes and URLs.
    """

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.root)
