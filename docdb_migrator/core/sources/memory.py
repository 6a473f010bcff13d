"""In-memory migration source."""

from collections.abc import Mapping, Sequence

from ..exceptions import MigrationSourceError
from .base import MigrationSource


class InMemoryMigrationSource(MigrationSource):
    """Serve migrations from a path -> content mapping."""

    def __init__(self, migrations: Mapping[str, str] | None = None):
        super().__init__()
        self.migrations: dict[str, str] = dict(migrations or {})

    def get_source_type(self) -> str:
        return "memory"

    def add(self, path: str, content: str) -> None:
        self.migrations[path] = content

    async def list_migration_paths(self) -> Sequence[str]:
        return list(self.migrations)

    async def read_migration_content(self, path: str) -> str:
        try:
            return self.migrations[path]
        except KeyError:
            raise MigrationSourceError(path, "no such migration") from None
