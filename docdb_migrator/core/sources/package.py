"""Migration source backed by resources shipped inside a Python package."""

import asyncio
from collections.abc import Sequence
from importlib import resources
from importlib.resources.abc import Traversable

import structlog

from ...constants import DEFAULT_ROOT_MARKER, MIGRATION_EXTENSION, PATH_SEPARATOR
from ..exceptions import MigrationSourceError
from .base import MigrationSource

logger = structlog.get_logger()


class PackageMigrationSource(MigrationSource):
    """Read migrations bundled as package data.

    Paths are reported relative to ``directory``, like
    ``DirectoryMigrationSource`` reports them relative to its root, so the
    directory name never becomes part of the parsed identifier.
    """

    def __init__(
        self,
        package: str,
        directory: str = DEFAULT_ROOT_MARKER,
        extension: str = MIGRATION_EXTENSION,
        encoding: str = "utf-8",
    ):
        super().__init__()
        self.package = package
        self.directory = directory
        self.extension = extension
        self.encoding = encoding
        self.logger = logger.bind(component="package_source", package=package, directory=directory)

    def get_source_type(self) -> str:
        return "package"

    def _root(self) -> Traversable:
        try:
            root = resources.files(self.package)
        except ModuleNotFoundError as e:
            raise MigrationSourceError(self.package, f"package not importable: {e}") from e
        for part in self.directory.split(PATH_SEPARATOR):
            root = root.joinpath(part)
        if not root.is_dir():
            raise MigrationSourceError(
                f"{self.package}:{self.directory}", "migrations directory not found in package"
            )
        return root

    async def list_migration_paths(self) -> Sequence[str]:
        root = self._root()
        paths: list[str] = []
        await asyncio.to_thread(self._walk, root, "", paths)
        self.logger.info("Discovered packaged migrations", count=len(paths))
        return paths

    def _walk(self, node: Traversable, prefix: str, paths: list[str]) -> None:
        for child in node.iterdir():
            child_path = f"{prefix}{PATH_SEPARATOR}{child.name}" if prefix else child.name
            if child.is_dir():
                self._walk(child, child_path, paths)
            elif child.name.endswith(self.extension):
                paths.append(child_path)

    async def read_migration_content(self, path: str) -> str:
        node = self._root()
        for part in path.split(PATH_SEPARATOR):
            if part in ("", ".", ".."):
                raise MigrationSourceError(path, "path escapes the migrations directory")
            node = node.joinpath(part)
        try:
            return await asyncio.to_thread(node.read_text, encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise MigrationSourceError(path, str(e)) from e
