"""Abstract database client consumed by the migration engine."""

from abc import ABC, abstractmethod

from ..models.enums import TriggerOperation, TriggerType


class DatabaseClient(ABC):
    """Capability interface over a document database driver.

    Implementations wrap a concrete driver. Every method must be idempotent:
    creation calls succeed when the target already exists and upserts replace
    an existing object with the same id. Driver failures should surface as
    ``DatabaseClientError``; the engine propagates whatever is raised.
    """

    @abstractmethod
    async def create_database_if_not_exists(self, database_id: str) -> None:
        """Create the database unless it already exists."""

    @abstractmethod
    async def create_container_if_not_exists(self, database_id: str, container_id: str) -> None:
        """Create the container inside the database unless it already exists."""

    @abstractmethod
    async def upsert_stored_procedure(
        self, database_id: str, container_id: str | None, id: str, body: str
    ) -> None:
        """Create or replace a stored procedure."""

    @abstractmethod
    async def upsert_trigger(
        self,
        database_id: str,
        container_id: str | None,
        id: str,
        body: str,
        trigger_type: TriggerType,
        trigger_operation: TriggerOperation,
    ) -> None:
        """Create or replace a trigger."""

    @abstractmethod
    async def upsert_user_defined_function(
        self, database_id: str, container_id: str | None, id: str, body: str
    ) -> None:
        """Create or replace a user-defined function."""
