"""Enum definitions for trigger migrations."""

from enum import Enum


class TriggerType(Enum):
    """When a trigger runs relative to the operation."""

    PRE = "Pre"
    POST = "Post"


class TriggerOperation(Enum):
    """Document operation a trigger is bound to."""

    ALL = "All"
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    REPLACE = "Replace"
