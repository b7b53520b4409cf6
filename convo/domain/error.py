"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ExpiredError(DomainError):
    """Raised when an invite or its conversation has expired."""

    def __init__(self, what: str = "Invite"):
        self.what = what
        super().__init__(f"{what} has expired")


class AlreadyUsedError(DomainError):
    """Raised when a single-use invite has already been redeemed."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Invite {tag} has already been used")


class TagMismatchError(DomainError):
    """Raised when an invite tag does not match the conversation's current tag."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invite tag {actual} does not match conversation tag")


class AlreadyExistsError(DomainError):
    """Raised when creating a resource whose identifier is taken."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} already exists: {identifier}")
