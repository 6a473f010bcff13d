"""Strategy registry for migration dispatch."""

from collections.abc import Iterable

import structlog

from ...models.migration import MigrationIdentifier
from ..exceptions import AmbiguousStrategyError, NoStrategyFoundError
from .base import MigrationStrategy
from .stored_procedure import StoredProcedureStrategy
from .trigger import TriggerStrategy
from .user_defined_function import UserDefinedFunctionStrategy

logger = structlog.get_logger()


def default_strategies() -> list[MigrationStrategy]:
    """Built-in strategies in their registration order."""
    return [StoredProcedureStrategy(), TriggerStrategy(), UserDefinedFunctionStrategy()]


class StrategyRegistry:
    """Ordered set of strategies with first-match selection.

    When several strategies handle the same identifier the earliest registered
    one wins. With ``strict=True`` that situation is reported as an
    ``AmbiguousStrategyError`` instead.
    """

    def __init__(self, strategies: Iterable[MigrationStrategy] | None = None, *, strict: bool = False):
        self.logger = logger.bind(component="strategy_registry")
        self.strict = strict
        self._strategies: list[MigrationStrategy] = (
            list(strategies) if strategies is not None else default_strategies()
        )

    @classmethod
    def with_defaults(
        cls, extra: Iterable[MigrationStrategy] = (), *, strict: bool = False
    ) -> "StrategyRegistry":
        """Create a registry of the built-ins followed by host strategies."""
        return cls([*default_strategies(), *extra], strict=strict)

    @property
    def strategies(self) -> tuple[MigrationStrategy, ...]:
        return tuple(self._strategies)

    def register(self, strategy: MigrationStrategy) -> None:
        """Append a strategy after the ones already registered."""
        self._strategies.append(strategy)
        self.logger.debug("Registered strategy", strategy=strategy.name, position=len(self._strategies))

    def select_strategy(self, identifier: MigrationIdentifier) -> MigrationStrategy:
        """Select the strategy that applies a migration.

        Args:
            identifier: Parsed migration identifier

        Returns:
            The first registered strategy that handles the identifier

        Raises:
            NoStrategyFoundError: If no strategy handles the identifier
            AmbiguousStrategyError: In strict mode, if more than one does
        """
        if not self.strict:
            for strategy in self._strategies:
                if strategy.can_handle(identifier):
                    return strategy
            raise NoStrategyFoundError(identifier)

        matches = [s for s in self._strategies if s.can_handle(identifier)]
        if not matches:
            raise NoStrategyFoundError(identifier)
        if len(matches) > 1:
            raise AmbiguousStrategyError(identifier, [s.name for s in matches])
        return matches[0]

    def __len__(self) -> int:
        return len(self._strategies)
