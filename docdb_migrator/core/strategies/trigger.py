"""Trigger migration strategy."""

from typing import NamedTuple

from ...constants import TRIGGER, TRIGGER_QUALIFIER_COUNT
from ...models.enums import TriggerOperation, TriggerType
from ...models.migration import MigrationIdentifier
from ..client import DatabaseClient
from ..exceptions import InvalidTriggerMetadataError
from .base import MigrationStrategy

# Token lookups are case-insensitive: "pre", "Pre" and "PRE" all map to TriggerType.PRE
TRIGGER_TYPES: dict[str, TriggerType] = {member.value.lower(): member for member in TriggerType}
TRIGGER_OPERATIONS: dict[str, TriggerOperation] = {
    member.value.lower(): member for member in TriggerOperation
}


class TriggerMetadata(NamedTuple):
    trigger_type: TriggerType
    trigger_operation: TriggerOperation
    name: str


class TriggerStrategy(MigrationStrategy):
    """Upsert a trigger named ``{TriggerType}-{TriggerOperation}-{Name}``."""

    object_type = TRIGGER

    def parse_metadata(self, identifier: MigrationIdentifier) -> TriggerMetadata:
        """Map qualifier tokens to trigger type, operation and name.

        Raises:
            InvalidTriggerMetadataError: If the token count is wrong or a token is unknown
        """
        qualifiers = identifier.qualifiers
        if len(qualifiers) != TRIGGER_QUALIFIER_COUNT:
            raise InvalidTriggerMetadataError(
                identifier,
                f"expected {TRIGGER_QUALIFIER_COUNT} tokens "
                f"'{{TriggerType}}-{{TriggerOperation}}-{{Name}}', got {len(qualifiers)}",
            )

        type_token, operation_token, name = qualifiers
        trigger_type = TRIGGER_TYPES.get(type_token.lower())
        if trigger_type is None:
            raise InvalidTriggerMetadataError(
                identifier,
                f"unknown trigger type '{type_token}' "
                f"(expected one of {', '.join(t.value for t in TriggerType)})",
            )

        trigger_operation = TRIGGER_OPERATIONS.get(operation_token.lower())
        if trigger_operation is None:
            raise InvalidTriggerMetadataError(
                identifier,
                f"unknown trigger operation '{operation_token}' "
                f"(expected one of {', '.join(o.value for o in TriggerOperation)})",
            )

        if not name:
            raise InvalidTriggerMetadataError(identifier, "missing trigger name")

        return TriggerMetadata(trigger_type, trigger_operation, name)

    def validate(self, identifier: MigrationIdentifier) -> None:
        self.parse_metadata(identifier)

    async def apply(self, client: DatabaseClient, identifier: MigrationIdentifier, content: str) -> str:
        metadata = self.parse_metadata(identifier)
        await client.upsert_trigger(
            identifier.database,
            identifier.container,
            metadata.name,
            content,
            metadata.trigger_type,
            metadata.trigger_operation,
        )
        self.logger.info(
            "Upserted trigger",
            database=identifier.database,
            container=identifier.container,
            id=metadata.name,
            trigger_type=metadata.trigger_type.value,
            trigger_operation=metadata.trigger_operation.value,
        )
        return metadata.name
