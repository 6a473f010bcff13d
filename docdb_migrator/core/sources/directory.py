"""Migration source backed by a directory on the local filesystem."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

import structlog

from ...constants import MIGRATION_EXTENSION
from ..exceptions import MigrationSourceError
from .base import MigrationSource

logger = structlog.get_logger()


class DirectoryMigrationSource(MigrationSource):
    """Read migrations from files below a root directory."""

    def __init__(
        self,
        root: Path | str,
        pattern: str = f"*{MIGRATION_EXTENSION}",
        encoding: str = "utf-8",
    ):
        super().__init__()
        self.root = Path(root)
        self.pattern = pattern
        self.encoding = encoding
        self.logger = logger.bind(component="directory_source", root=str(self.root))

    def get_source_type(self) -> str:
        return "directory"

    async def list_migration_paths(self) -> Sequence[str]:
        if not self.root.is_dir():
            raise MigrationSourceError(str(self.root), "migrations root is not a directory")

        files = await asyncio.to_thread(
            lambda: [p for p in self.root.rglob(self.pattern) if p.is_file()]
        )
        paths = [p.relative_to(self.root).as_posix() for p in files]
        self.logger.info("Discovered migration files", count=len(paths), pattern=self.pattern)
        return paths

    async def read_migration_content(self, path: str) -> str:
        file_path = self._resolve(path)
        try:
            return await asyncio.to_thread(file_path.read_text, encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise MigrationSourceError(path, str(e)) from e

    def _resolve(self, path: str) -> Path:
        """Resolve a relative resource path without escaping the root."""
        root = self.root.resolve()
        file_path = (root / path).resolve()
        if not file_path.is_relative_to(root):
            raise MigrationSourceError(path, "path escapes the migrations root")
        return file_path
