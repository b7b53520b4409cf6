"""In-memory unit of work for testing."""

from convo.domain.repository import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """Counts commits; in-memory writes are visible immediately."""

    def __init__(self) -> None:
        self.commits = 0

    async def commit(self) -> None:
        self.commits += 1
