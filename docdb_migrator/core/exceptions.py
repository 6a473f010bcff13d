"""Core exceptions for document database migrations."""

from typing import Any


class DocDBMigratorError(Exception):
    """Base exception for migration operations."""


class ConfigurationError(DocDBMigratorError):
    """Configuration validation or loading failed."""


class MalformedNameError(DocDBMigratorError):
    """Migration resource path does not follow the naming convention."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed migration name '{path}': {reason}")


class MigrationSourceError(DocDBMigratorError):
    """Migration source could not list or read a resource."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read migration '{path}': {reason}")


class NoStrategyFoundError(DocDBMigratorError):
    """No registered strategy handles the migration's object type."""

    def __init__(self, identifier: Any):
        self.identifier = identifier
        super().__init__(
            f"No strategy registered for object type '{identifier.object_type}' "
            f"(migration '{identifier.path}')"
        )


class AmbiguousStrategyError(DocDBMigratorError):
    """More than one strategy handles the migration in strict selection mode."""

    def __init__(self, identifier: Any, strategy_names: list[str]):
        self.identifier = identifier
        self.strategy_names = strategy_names
        super().__init__(
            f"Strategies {', '.join(strategy_names)} all handle object type "
            f"'{identifier.object_type}' (migration '{identifier.path}')"
        )


class MigrationMetadataError(DocDBMigratorError):
    """Qualifier tokens of a migration name are invalid for its strategy."""

    def __init__(self, identifier: Any, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Invalid metadata for migration '{identifier.path}': {reason}")


class InvalidTriggerMetadataError(MigrationMetadataError):
    """Trigger name does not encode a known trigger type and operation."""


class DatabaseClientError(DocDBMigratorError):
    """Database client operation failed."""


class MigrationRunError(DocDBMigratorError):
    """Migration run aborted at the first failing migration."""

    def __init__(self, path: str | None, identifier: Any, cause: BaseException):
        self.path = path
        self.identifier = identifier
        self.cause = cause
        location = f"migration '{path}'" if path else "migration listing"
        super().__init__(f"Migration run failed at {location}: {cause}")
