"""Migration engine that applies migrations in lexicographic path order."""

import time
from datetime import UTC, datetime

import structlog

from ..models.migration import (
    AppliedMigration,
    MigrationIdentifier,
    MigrationRecord,
    MigrationSummary,
)
from .client import DatabaseClient
from .exceptions import MigrationRunError
from .naming import MigrationNameParser
from .sources.base import MigrationSource
from .strategies.base import MigrationStrategy
from .strategies.registry import StrategyRegistry

logger = structlog.get_logger()


class MigrationEngine:
    """Orchestrates one migration run against a database client.

    Migrations are applied strictly one after another in ascending order of
    their resource path. The first failure aborts the run and is raised as a
    ``MigrationRunError`` wrapping the original exception.
    """

    def __init__(
        self,
        client: DatabaseClient,
        source: MigrationSource,
        registry: StrategyRegistry | None = None,
        parser: MigrationNameParser | None = None,
    ):
        self.logger = logger.bind(component="migration_engine")
        self.client = client
        self.source = source
        self.registry = registry if registry is not None else StrategyRegistry()
        self.parser = parser or MigrationNameParser()

    async def list_ordered_paths(self) -> list[str]:
        """Fetch migration paths from the source in apply order."""
        try:
            paths = await self.source.list_migration_paths()
        except Exception as e:
            self.logger.error(
                "Failed to list migrations", source=self.source.get_source_type(), error=str(e)
            )
            raise MigrationRunError(None, None, e) from e
        return sorted(paths)

    async def run(self) -> MigrationSummary:
        """Apply every migration from the source.

        Returns:
            Summary of the applied migrations

        Raises:
            MigrationRunError: At the first migration that cannot be applied
        """
        started_at = datetime.now(UTC)
        run_start = time.perf_counter()

        paths = await self.list_ordered_paths()
        self.logger.info(
            "Starting migration run",
            source=self.source.get_source_type(),
            migrations=len(paths),
            strategies=[s.name for s in self.registry.strategies],
        )

        applied: list[AppliedMigration] = []
        for index, path in enumerate(paths, 1):
            applied.append(await self._apply_path(path, index, len(paths)))

        summary = MigrationSummary(
            applied=applied,
            started_at=started_at,
            finished_at=datetime.now(UTC),
            duration_ms=(time.perf_counter() - run_start) * 1000,
        )
        self.logger.info(
            "Migration run complete",
            applied=summary.count,
            duration_ms=round(summary.duration_ms, 2),
        )
        return summary

    async def _apply_path(self, path: str, index: int, total: int) -> AppliedMigration:
        identifier: MigrationIdentifier | None = None
        try:
            identifier = self.parser.parse(path)
            strategy = self.registry.select_strategy(identifier)
            # Metadata errors must surface before the client is touched for this migration
            strategy.validate(identifier)
            return await self._apply(path, identifier, strategy, index, total)
        except Exception as e:
            self.logger.error(
                "Migration failed, aborting run",
                path=path,
                position=index,
                total=total,
                database=identifier.database if identifier else None,
                container=identifier.container if identifier else None,
                object_type=identifier.object_type if identifier else None,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise MigrationRunError(path, identifier, e) from e

    async def _apply(
        self,
        path: str,
        identifier: MigrationIdentifier,
        strategy: MigrationStrategy,
        index: int,
        total: int,
    ) -> AppliedMigration:
        start = time.perf_counter()

        await self.client.create_database_if_not_exists(identifier.database)
        if identifier.container is not None:
            await self.client.create_container_if_not_exists(identifier.database, identifier.container)

        content = await self.source.read_migration_content(path)
        record = MigrationRecord(identifier=identifier, content=content)
        object_id = await strategy.apply(self.client, record.identifier, record.content)
        if object_id is None:
            object_id = identifier.raw_name

        duration_ms = (time.perf_counter() - start) * 1000
        self.logger.info(
            "Applied migration",
            path=identifier.path,
            position=index,
            total=total,
            strategy=strategy.name,
            object_id=object_id,
            duration_ms=round(duration_ms, 2),
        )
        return AppliedMigration(
            path=identifier.path,
            database=identifier.database,
            container=identifier.container,
            object_type=identifier.object_type,
            object_id=object_id,
            strategy=strategy.name,
            duration_ms=duration_ms,
        )
