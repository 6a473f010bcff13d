"""Shared pytest fixtures for migration tests."""

import logging
from pathlib import Path
from typing import Any

import pytest
import structlog

from docdb_migrator.core.client import DatabaseClient
from docdb_migrator.core.config_loader import MigratorConfig
from docdb_migrator.core.sources import InMemoryMigrationSource
from docdb_migrator.models.enums import TriggerOperation, TriggerType


class RecordingDatabaseClient(DatabaseClient):
    """In-memory document database that records every call in order."""

    def __init__(self):
        self.calls: list[tuple[Any, ...]] = []
        self.databases: set[str] = set()
        self.containers: set[tuple[str, str]] = set()
        # (kind, database, container, id) -> object definition
        self.objects: dict[tuple[str, str, str | None, str], dict[str, Any]] = {}

    async def create_database_if_not_exists(self, database_id: str) -> None:
        self.calls.append(("create_database", database_id))
        self.databases.add(database_id)

    async def create_container_if_not_exists(self, database_id: str, container_id: str) -> None:
        self.calls.append(("create_container", database_id, container_id))
        self.containers.add((database_id, container_id))

    async def upsert_stored_procedure(self, database_id, container_id, id, body) -> None:
        self.calls.append(("upsert_stored_procedure", database_id, container_id, id))
        self.objects[("sproc", database_id, container_id, id)] = {"id": id, "body": body}

    async def upsert_trigger(
        self,
        database_id,
        container_id,
        id,
        body,
        trigger_type: TriggerType,
        trigger_operation: TriggerOperation,
    ) -> None:
        self.calls.append(("upsert_trigger", database_id, container_id, id))
        self.objects[("trigger", database_id, container_id, id)] = {
            "id": id,
            "body": body,
            "trigger_type": trigger_type,
            "trigger_operation": trigger_operation,
        }

    async def upsert_user_defined_function(self, database_id, container_id, id, body) -> None:
        self.calls.append(("upsert_user_defined_function", database_id, container_id, id))
        self.objects[("udf", database_id, container_id, id)] = {"id": id, "body": body}

    def upserted_ids(self) -> list[str]:
        return [call[3] for call in self.calls if call[0].startswith("upsert_")]


@pytest.fixture
def client() -> RecordingDatabaseClient:
    """Fresh recording database client."""
    return RecordingDatabaseClient()


@pytest.fixture
def source() -> InMemoryMigrationSource:
    """Empty in-memory migration source."""
    return InMemoryMigrationSource()


@pytest.fixture
def config(tmp_path: Path) -> MigratorConfig:
    """Configuration isolated from the caller's environment."""
    return MigratorConfig(
        migrations_root=tmp_path / "Migrations",
        log_level="DEBUG",
        run_timeout=None,
        strict_strategy_selection=False,
    )


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Migrations tree on disk with one object of each built-in type."""
    root = tmp_path / "Migrations"
    files = {
        "TestDb/Orders/StoredProcedure/bulkDelete.js": "function bulkDelete() {}",
        "TestDb/Orders/Trigger/Pre-Create-Validate.js": "function validate() {}",
        "TestDb/UserDefinedFunction/calc.js": "function calc(x) { return x; }",
    }
    for relative, content in files.items():
        file_path = root / relative
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
    (root / "README.md").write_text("not a migration", encoding="utf-8")
    return root


@pytest.fixture
def restore_logging():
    """Undo setup_logging() changes to the root logger and structlog."""
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()
