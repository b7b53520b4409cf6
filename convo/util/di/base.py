"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal, get_args

from dishka import Provider

# Swappable collaborators: storage, the messaging gateway and our identity
Component = Literal["persistence", "messaging", "keys"]

COMPONENTS: frozenset[str] = frozenset(get_args(Component))


class ProviderBase(Provider):
    """Base for all DI providers.

    A component base sets ``__mock_component__`` and gets one production and
    one mock subclass, told apart by ``__is_mock__``. Providers without a
    component (config, domain, application) are used as-is.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def is_mockable(cls) -> bool:
        """Whether implementations of this component can be swapped."""
        return cls.__mock_component__ is not None and bool(cls.__subclasses__())
