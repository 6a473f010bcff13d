"""Tests for migration sources."""

import asyncio
import sys

import pytest

from docdb_migrator.core.engine import MigrationEngine
from docdb_migrator.core.exceptions import MigrationSourceError
from docdb_migrator.core.naming import parse_migration_path
from docdb_migrator.core.sources import (
    DirectoryMigrationSource,
    InMemoryMigrationSource,
    PackageMigrationSource,
)


class TestDirectoryMigrationSource:
    """Test suite for DirectoryMigrationSource."""

    @pytest.mark.asyncio
    async def test_lists_only_migration_files(self, migrations_dir):
        source = DirectoryMigrationSource(migrations_dir)

        paths = await source.list_migration_paths()

        assert sorted(paths) == [
            "TestDb/Orders/StoredProcedure/bulkDelete.js",
            "TestDb/Orders/Trigger/Pre-Create-Validate.js",
            "TestDb/UserDefinedFunction/calc.js",
        ]
        for path in paths:
            parse_migration_path(path)

    @pytest.mark.asyncio
    async def test_reads_content(self, migrations_dir):
        source = DirectoryMigrationSource(migrations_dir)

        content = await source.read_migration_content("TestDb/UserDefinedFunction/calc.js")

        assert content == "function calc(x) { return x; }"

    @pytest.mark.asyncio
    async def test_missing_root_raises(self, tmp_path):
        source = DirectoryMigrationSource(tmp_path / "nowhere")

        with pytest.raises(MigrationSourceError, match="not a directory"):
            await source.list_migration_paths()

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, migrations_dir):
        source = DirectoryMigrationSource(migrations_dir)

        with pytest.raises(MigrationSourceError) as exc_info:
            await source.read_migration_content("TestDb/StoredProcedure/missing.js")

        assert exc_info.value.path == "TestDb/StoredProcedure/missing.js"

    @pytest.mark.asyncio
    async def test_path_outside_root_is_rejected(self, migrations_dir):
        source = DirectoryMigrationSource(migrations_dir)

        with pytest.raises(MigrationSourceError, match="escapes"):
            await source.read_migration_content("../secrets.js")

    def test_source_type(self, tmp_path):
        assert DirectoryMigrationSource(tmp_path).get_source_type() == "directory"


class TestPackageMigrationSource:
    """Test suite for PackageMigrationSource."""

    @pytest.fixture
    def package_name(self, tmp_path, monkeypatch):
        """Importable package with a bundled Migrations tree."""
        name = "docdb_migrator_fixture_app"
        package = tmp_path / name
        (package / "Migrations" / "Shop" / "Orders" / "Trigger").mkdir(parents=True)
        (package / "Migrations" / "Shop" / "StoredProcedure").mkdir(parents=True)
        (package / "__init__.py").write_text("")
        (package / "Migrations" / "Shop" / "Orders" / "Trigger" / "Post-All-audit.js").write_text(
            "function audit() {}"
        )
        (package / "Migrations" / "Shop" / "StoredProcedure" / "spA.js").write_text("function spA() {}")
        (package / "Migrations" / "Shop" / "notes.txt").write_text("ignored")
        monkeypatch.syspath_prepend(str(tmp_path))
        monkeypatch.delitem(sys.modules, name, raising=False)
        return name

    @pytest.mark.asyncio
    async def test_lists_packaged_migrations(self, package_name):
        source = PackageMigrationSource(package_name)

        paths = sorted(await source.list_migration_paths())

        assert paths == [
            "Shop/Orders/Trigger/Post-All-audit.js",
            "Shop/StoredProcedure/spA.js",
        ]
        assert parse_migration_path(paths[0]).container == "Orders"

    @pytest.mark.asyncio
    async def test_reads_packaged_content(self, package_name):
        source = PackageMigrationSource(package_name)

        content = await source.read_migration_content("Shop/StoredProcedure/spA.js")

        assert content == "function spA() {}"

    @pytest.mark.asyncio
    async def test_missing_directory_raises(self, package_name):
        source = PackageMigrationSource(package_name, directory="Schema")

        with pytest.raises(MigrationSourceError, match="not found"):
            await source.list_migration_paths()

    @pytest.mark.asyncio
    async def test_path_outside_directory_is_rejected(self, package_name):
        source = PackageMigrationSource(package_name)

        with pytest.raises(MigrationSourceError, match="escapes"):
            await source.read_migration_content("../__init__.py")

    @pytest.mark.asyncio
    async def test_custom_directory_is_not_a_database(self, tmp_path, monkeypatch, client):
        """Test a directory name other than the root marker never reaches the parser."""
        name = "docdb_migrator_fixture_schema_app"
        schema = tmp_path / name / "schema" / "Shop" / "StoredProcedure"
        schema.mkdir(parents=True)
        (tmp_path / name / "__init__.py").write_text("")
        (schema / "spA.js").write_text("function spA() {}")
        monkeypatch.syspath_prepend(str(tmp_path))
        monkeypatch.delitem(sys.modules, name, raising=False)

        source = PackageMigrationSource(name, directory="schema")
        summary = await MigrationEngine(client, source).run()

        assert await source.list_migration_paths() == ["Shop/StoredProcedure/spA.js"]
        assert client.calls == [
            ("create_database", "Shop"),
            ("upsert_stored_procedure", "Shop", None, "spA"),
        ]
        assert summary.applied[0].database == "Shop"

    @pytest.mark.asyncio
    async def test_file_access_runs_off_the_event_loop(self, package_name, monkeypatch):
        offloaded = []
        to_thread = asyncio.to_thread

        async def recording_to_thread(func, *args, **kwargs):
            offloaded.append(func)
            return await to_thread(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
        source = PackageMigrationSource(package_name)

        await source.list_migration_paths()
        await source.read_migration_content("Shop/StoredProcedure/spA.js")

        assert len(offloaded) == 2

    @pytest.mark.asyncio
    async def test_unknown_package_raises(self):
        source = PackageMigrationSource("docdb_migrator_no_such_package")

        with pytest.raises(MigrationSourceError, match="not importable"):
            await source.list_migration_paths()


class TestInMemoryMigrationSource:
    """Test suite for InMemoryMigrationSource."""

    @pytest.mark.asyncio
    async def test_list_and_read(self):
        source = InMemoryMigrationSource({"A/StoredProcedure/b.js": "b"})
        source.add("A/StoredProcedure/a.js", "a")

        assert await source.list_migration_paths() == ["A/StoredProcedure/b.js", "A/StoredProcedure/a.js"]
        assert await source.read_migration_content("A/StoredProcedure/a.js") == "a"

    @pytest.mark.asyncio
    async def test_unknown_path_raises(self):
        with pytest.raises(MigrationSourceError, match="no such migration"):
            await InMemoryMigrationSource().read_migration_content("A/StoredProcedure/a.js")
