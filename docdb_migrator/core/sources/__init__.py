"""Migration sources that enumerate and read migration resources."""

from .base import MigrationSource  # noqa: F401
from .directory import DirectoryMigrationSource  # noqa: F401
from .memory import InMemoryMigrationSource  # noqa: F401
from .package import PackageMigrationSource  # noqa: F401

__all__ = [
    "MigrationSource",
    "DirectoryMigrationSource",
    "InMemoryMigrationSource",
    "PackageMigrationSource",
]
