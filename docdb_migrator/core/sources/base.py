"""Abstract base class for migration sources."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

import structlog

logger = structlog.get_logger()


class MigrationSource(ABC):
    """Abstract base class for all migration sources."""

    def __init__(self):
        self.logger = logger.bind(component=self.__class__.__name__.lower())

    @abstractmethod
    async def list_migration_paths(self) -> Sequence[str]:
        """List migration resource paths.

        Returns:
            Resource paths in no particular order; the engine sorts them
        """
        pass

    @abstractmethod
    async def read_migration_content(self, path: str) -> str:
        """Read the source text of one migration.

        Args:
            path: Resource path as returned by list_migration_paths

        Returns:
            Migration source text

        Raises:
            MigrationSourceError: If the path is unknown or cannot be read
        """
        pass

    def get_source_type(self) -> str:
        """Get the name/type of this migration source."""
        return self.__class__.__name__
