"""Migration resource name parsing.

Resource paths follow the convention::

    <root>/<Database>/[<Container>/]<ObjectType>/<RawName>.js

The parser only validates structural shape. Database, container and object
names are passed through untouched for the database client to judge.
"""

import structlog

from ..constants import (
    DEFAULT_ROOT_MARKER,
    MIGRATION_EXTENSION,
    PATH_SEPARATOR,
    QUALIFIER_DELIMITER,
)
from ..models.migration import MigrationIdentifier
from .exceptions import MalformedNameError

logger = structlog.get_logger()


class MigrationNameParser:
    """Parser for migration resource paths."""

    def __init__(
        self,
        root_marker: str | None = DEFAULT_ROOT_MARKER,
        extension: str = MIGRATION_EXTENSION,
        qualifier_delimiter: str = QUALIFIER_DELIMITER,
    ):
        if not extension:
            raise ValueError("Migration extension must not be empty")
        if not qualifier_delimiter:
            raise ValueError("Qualifier delimiter must not be empty")
        self.root_marker = root_marker
        self.extension = extension
        self.qualifier_delimiter = qualifier_delimiter
        self.logger = logger.bind(component="name_parser")

    def parse(self, path: str) -> MigrationIdentifier:
        """Parse a resource path into a migration identifier.

        Args:
            path: Resource path, either relative to the migrations root or
                containing the root marker segment

        Returns:
            Parsed identifier

        Raises:
            MalformedNameError: If the path does not follow the naming convention
        """
        normalized = self.normalize(path)
        segments = self._structural_segments(normalized)

        if any(not segment for segment in segments):
            raise MalformedNameError(path, "empty path segment")

        if len(segments) == 3:
            database, object_type, file_name = segments
            container = None
        elif len(segments) == 4:
            database, container, object_type, file_name = segments
        else:
            raise MalformedNameError(
                path,
                f"expected 3 or 4 segments after the root, found {len(segments)}",
            )

        if not file_name.endswith(self.extension):
            raise MalformedNameError(path, f"file extension must be '{self.extension}'")

        raw_name = file_name[: -len(self.extension)]
        if not raw_name:
            raise MalformedNameError(path, "missing object name")

        identifier = MigrationIdentifier(
            path=normalized,
            database=database,
            container=container,
            object_type=object_type,
            raw_name=raw_name,
            qualifiers=tuple(raw_name.split(self.qualifier_delimiter)),
        )
        self.logger.debug(
            "Parsed migration name",
            path=normalized,
            database=database,
            container=container,
            object_type=object_type,
            raw_name=raw_name,
        )
        return identifier

    @staticmethod
    def normalize(path: str) -> str:
        """Normalize separators and strip surrounding slashes."""
        return path.replace("\\", PATH_SEPARATOR).strip(PATH_SEPARATOR)

    def _structural_segments(self, normalized: str) -> list[str]:
        segments = normalized.split(PATH_SEPARATOR) if normalized else []
        if not self.root_marker:
            return segments
        # A marker only counts as the root when 3 or 4 structural segments follow it,
        # so databases or containers named like the marker still parse
        for index, segment in enumerate(segments):
            if segment == self.root_marker and len(segments) - index - 1 in (3, 4):
                return segments[index + 1 :]
        return segments


_default_parser = MigrationNameParser()


def parse_migration_path(path: str) -> MigrationIdentifier:
    """Parse a resource path using the default naming convention."""
    return _default_parser.parse(path)
