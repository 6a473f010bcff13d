"""Abstract base class for migration strategies."""

from abc import ABC, abstractmethod

import structlog

from ...models.migration import MigrationIdentifier
from ..client import DatabaseClient

logger = structlog.get_logger()


class MigrationStrategy(ABC):
    """Abstract base class for all migration strategies.

    A strategy recognizes one kind of migration and applies it through the
    database client. Strategies hold no per-run state and their ``apply`` must
    be idempotent.
    """

    #: Object type segment this strategy handles, if it matches on type alone
    object_type: str | None = None

    def __init__(self):
        self.logger = logger.bind(component=self.__class__.__name__.lower())

    @property
    def name(self) -> str:
        """Get the name of this strategy."""
        return self.__class__.__name__

    def can_handle(self, identifier: MigrationIdentifier) -> bool:
        """Check whether this strategy applies the given migration.

        Args:
            identifier: Parsed migration identifier

        Returns:
            True if this strategy handles the migration
        """
        return self.object_type is not None and identifier.object_type == self.object_type

    def validate(self, identifier: MigrationIdentifier) -> None:
        """Validate strategy-specific metadata before anything is applied.

        Args:
            identifier: Parsed migration identifier

        Raises:
            MigrationMetadataError: If the qualifiers are invalid for this strategy
        """
        return None

    @abstractmethod
    async def apply(self, client: DatabaseClient, identifier: MigrationIdentifier, content: str) -> str | None:
        """Apply a migration through the database client.

        Args:
            client: Database client to upsert into
            identifier: Parsed migration identifier
            content: Migration source text

        Returns:
            Id of the object that was created or replaced; None reports the raw name
        """
        pass
