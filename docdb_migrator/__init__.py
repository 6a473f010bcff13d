"""Apply file-defined stored procedures, triggers and functions to a document database."""

import asyncio
from collections.abc import Iterable

import structlog

from .core.client import DatabaseClient
from .core.config_loader import MigratorConfig, load_config_async
from .core.engine import MigrationEngine
from .core.exceptions import (
    AmbiguousStrategyError,
    ConfigurationError,
    DatabaseClientError,
    DocDBMigratorError,
    InvalidTriggerMetadataError,
    MalformedNameError,
    MigrationMetadataError,
    MigrationRunError,
    MigrationSourceError,
    NoStrategyFoundError,
)
from .core.logging_config import setup_logging
from .core.naming import MigrationNameParser, parse_migration_path
from .core.sources import (
    DirectoryMigrationSource,
    InMemoryMigrationSource,
    MigrationSource,
    PackageMigrationSource,
)
from .core.strategies import MigrationStrategy, StrategyRegistry
from .models import MigrationIdentifier, MigrationSummary, TriggerOperation, TriggerType

__version__ = "0.1.0"

logger = structlog.get_logger()


def build_engine(
    client: DatabaseClient,
    config: MigratorConfig,
    source: MigrationSource | None = None,
    strategies: Iterable[MigrationStrategy] = (),
) -> MigrationEngine:
    """Wire an engine from configuration, appending host strategies to the built-ins."""
    if source is None:
        source = DirectoryMigrationSource(config.migrations_root, pattern=f"*{config.file_extension}")
    registry = StrategyRegistry.with_defaults(strategies, strict=config.strict_strategy_selection)
    parser = MigrationNameParser(
        root_marker=config.root_marker,
        extension=config.file_extension,
        qualifier_delimiter=config.qualifier_delimiter,
    )
    return MigrationEngine(client, source, registry=registry, parser=parser)


async def migrate(
    client: DatabaseClient,
    source: MigrationSource | None = None,
    *,
    strategies: Iterable[MigrationStrategy] = (),
    config: MigratorConfig | None = None,
    setup_logs: bool = False,
) -> MigrationSummary:
    """Apply all migrations, typically once at application startup.

    Args:
        client: Database client the migrations are applied through
        source: Where migrations come from (defaults to config.migrations_root on disk)
        strategies: Host strategies tried after the built-in ones
        config: Migrator configuration (loaded from files and environment when omitted)
        setup_logs: Configure structlog output from config.log_level and config.log_dir

    Returns:
        Summary of the applied migrations

    Raises:
        MigrationRunError: If any migration cannot be applied
        TimeoutError: If config.run_timeout elapses first
    """
    if config is None:
        config = await load_config_async()
    if setup_logs:
        setup_logging(config.log_dir, config.log_level)

    engine = build_engine(client, config, source, strategies)
    if config.run_timeout is None:
        return await engine.run()

    try:
        return await asyncio.wait_for(engine.run(), timeout=config.run_timeout)
    except TimeoutError:
        logger.error("Migration run timed out", timeout=config.run_timeout)
        raise


def migrate_sync(
    client: DatabaseClient,
    source: MigrationSource | None = None,
    *,
    strategies: Iterable[MigrationStrategy] = (),
    config: MigratorConfig | None = None,
    setup_logs: bool = False,
) -> MigrationSummary:
    """Blocking variant of migrate() for startup code without an event loop."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(
            migrate(client, source, strategies=strategies, config=config, setup_logs=setup_logs)
        )
    raise RuntimeError(
        "migrate_sync() cannot be called from within an async context. "
        "Use 'await migrate()' instead."
    )


__all__ = [
    "migrate",
    "migrate_sync",
    "build_engine",
    # Core
    "DatabaseClient",
    "MigrationEngine",
    "MigrationNameParser",
    "parse_migration_path",
    "MigratorConfig",
    # Sources
    "MigrationSource",
    "DirectoryMigrationSource",
    "InMemoryMigrationSource",
    "PackageMigrationSource",
    # Strategies
    "MigrationStrategy",
    "StrategyRegistry",
    # Models
    "MigrationIdentifier",
    "MigrationSummary",
    "TriggerOperation",
    "TriggerType",
    # Errors
    "AmbiguousStrategyError",
    "ConfigurationError",
    "DatabaseClientError",
    "DocDBMigratorError",
    "InvalidTriggerMetadataError",
    "MalformedNameError",
    "MigrationMetadataError",
    "MigrationRunError",
    "MigrationSourceError",
    "NoStrategyFoundError",
]
