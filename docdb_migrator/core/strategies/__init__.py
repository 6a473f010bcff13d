"""Migration strategies and their registry."""

from .base import MigrationStrategy  # noqa: F401
from .registry import StrategyRegistry, default_strategies  # noqa: F401
from .stored_procedure import StoredProcedureStrategy  # noqa: F401
from .trigger import TriggerMetadata, TriggerStrategy  # noqa: F401
from .user_defined_function import UserDefinedFunctionStrategy  # noqa: F401

__all__ = [
    "MigrationStrategy",
    "StrategyRegistry",
    "default_strategies",
    "StoredProcedureStrategy",
    "TriggerMetadata",
    "TriggerStrategy",
    "UserDefinedFunctionStrategy",
]
