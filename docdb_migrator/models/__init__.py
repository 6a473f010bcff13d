"""Data models for document database migrations."""

from .enums import TriggerOperation, TriggerType  # noqa: F401
from .migration import (  # noqa: F401
    AppliedMigration,
    MigrationIdentifier,
    MigrationRecord,
    MigrationSummary,
)

__all__ = [
    # Migration models
    "AppliedMigration",
    "MigrationIdentifier",
    "MigrationRecord",
    "MigrationSummary",
    # Enums
    "TriggerOperation",
    "TriggerType",
]
