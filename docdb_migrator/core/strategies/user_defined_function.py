"""User-defined function migration strategy."""

from ...constants import USER_DEFINED_FUNCTION
from ...models.migration import MigrationIdentifier
from ..client import DatabaseClient
from .base import MigrationStrategy


class UserDefinedFunctionStrategy(MigrationStrategy):
    """Upsert a user-defined function named after the migration file."""

    object_type = USER_DEFINED_FUNCTION

    async def apply(self, client: DatabaseClient, identifier: MigrationIdentifier, content: str) -> str:
        await client.upsert_user_defined_function(
            identifier.database, identifier.container, identifier.raw_name, content
        )
        self.logger.info(
            "Upserted user-defined function",
            database=identifier.database,
            container=identifier.container,
            id=identifier.raw_name,
        )
        return identifier.raw_name
