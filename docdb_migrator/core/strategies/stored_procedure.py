"""Stored procedure migration strategy."""

from ...constants import STORED_PROCEDURE
from ...models.migration import MigrationIdentifier
from ..client import DatabaseClient
from .base import MigrationStrategy


class StoredProcedureStrategy(MigrationStrategy):
    """Upsert a stored procedure named after the migration file."""

    object_type = STORED_PROCEDURE

    async def apply(self, client: DatabaseClient, identifier: MigrationIdentifier, content: str) -> str:
        await client.upsert_stored_procedure(
            identifier.database, identifier.container, identifier.raw_name, content
        )
        self.logger.info(
            "Upserted stored procedure",
            database=identifier.database,
            container=identifier.container,
            id=identifier.raw_name,
        )
        return identifier.raw_name
