"""Migration-related data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MigrationIdentifier(BaseModel):
    """Structured metadata parsed from a migration resource path."""

    model_config = ConfigDict(frozen=True)

    path: str
    database: str
    container: str | None = None
    object_type: str
    raw_name: str
    qualifiers: tuple[str, ...] = ()

    @property
    def is_container_scoped(self) -> bool:
        return self.container is not None


class MigrationRecord(BaseModel):
    """A parsed migration paired with its source text."""

    model_config = ConfigDict(frozen=True)

    identifier: MigrationIdentifier
    content: str


class AppliedMigration(BaseModel):
    """Outcome of one successfully applied migration."""

    path: str
    database: str
    container: str | None = None
    object_type: str
    object_id: str
    strategy: str
    duration_ms: float


class MigrationSummary(BaseModel):
    """Result of a migration run where every migration applied."""

    applied: list[AppliedMigration] = Field(default_factory=list)
    started_at: datetime
    finished_at: datetime
    duration_ms: float

    @property
    def count(self) -> int:
        return len(self.applied)
