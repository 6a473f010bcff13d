"""Centralized constants for the migration naming convention."""

# Naming convention
DEFAULT_ROOT_MARKER = "Migrations"
MIGRATION_EXTENSION = ".js"
QUALIFIER_DELIMITER = "-"
PATH_SEPARATOR = "/"

# Built-in object types
STORED_PROCEDURE = "StoredProcedure"
TRIGGER = "Trigger"
USER_DEFINED_FUNCTION = "UserDefinedFunction"

# Trigger raw names carry {TriggerType}-{TriggerOperation}-{Name}
TRIGGER_QUALIFIER_COUNT = 3
