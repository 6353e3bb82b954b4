"""Filter registry.

The registry maps pipeline filter names to handler functions. Handlers are
plain functions that take the incoming table and the filter's argument
vector and return a new table. Once frozen, a registry rejects further
registration and exposes its contents only through a read-only mapping.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lsh.data.table import Table

# Type alias for filter handlers
FilterHandler = Callable[["Table", Sequence[str]], "Table"]


class RegistryError(Exception):
    """Base exception for registry errors."""


class FilterNotFoundError(RegistryError):
    """Raised when a filter is not found in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"filter '{name}' not supported")


class FilterAlreadyRegisteredError(RegistryError):
    """Raised when attempting to register a filter that already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Filter already registered: {name}")


class RegistryFrozenError(RegistryError):
    """Raised when registering into a frozen registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Registry is frozen, cannot register: {name}")


class InvalidHandlerError(RegistryError):
    """Raised when a handler doesn't meet requirements."""


@dataclass(frozen=True, slots=True)
class FilterInfo:
    """Information about a registered filter.

    Attributes:
        name: The filter name as typed in a pipeline (e.g., "sort-by").
        handler: The filter function.
        description: Human-readable description.
        usage: Argument synopsis shown in usage errors and help.
    """

    name: str
    handler: FilterHandler
    description: str
    usage: str


def _validate_handler(handler: FilterHandler, name: str) -> None:
    """Validate that a handler meets requirements."""
    if not callable(handler):
        raise InvalidHandlerError(f"Handler for '{name}' is not callable")

    if inspect.iscoroutinefunction(handler):
        raise InvalidHandlerError(f"Handler for '{name}' must be a synchronous function")


@dataclass
class FilterRegistry:
    """Registry of pipeline filters.

    Maps filter names to their handler functions. Names are matched
    case-sensitively and exactly.

    Example:
        registry = FilterRegistry()

        @registry.operation("head", usage="head")
        def head(table: Table, args: Sequence[str]) -> Table:
            return table.with_rows(table.rows[:1])

        registry.freeze()
        registry.get_handler("head")(table, [])
    """

    _filters: dict[str, FilterInfo] = field(default_factory=dict)
    _frozen: bool = False

    def register(
        self,
        name: str,
        handler: FilterHandler,
        *,
        description: str | None = None,
        usage: str | None = None,
        replace: bool = False,
    ) -> None:
        """Register a filter handler.

        Args:
            name: Filter name (e.g., "where").
            handler: Function taking (table, args) and returning a table.
            description: Human-readable description. Defaults to handler docstring.
            usage: Argument synopsis. Defaults to the bare name.
            replace: If True, replace existing registration. Otherwise raise error.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
            FilterAlreadyRegisteredError: If filter exists and replace=False.
            InvalidHandlerError: If handler doesn't meet requirements.
        """
        if self._frozen:
            raise RegistryFrozenError(name)

        _validate_handler(handler, name)

        if name in self._filters and not replace:
            raise FilterAlreadyRegisteredError(name)

        desc = description or handler.__doc__ or f"Filter: {name}"
        # Keep only the summary line of a docstring
        desc = inspect.cleandoc(desc).split("\n", 1)[0]

        self._filters[name] = FilterInfo(
            name=name,
            handler=handler,
            description=desc,
            usage=usage or name,
        )

    def operation(
        self,
        name: str,
        *,
        description: str | None = None,
        usage: str | None = None,
    ) -> Callable[[FilterHandler], FilterHandler]:
        """Decorator to register a filter handler.

        Example:
            @registry.operation("limit", usage="limit N")
            def limit(table: Table, args: Sequence[str]) -> Table:
                ...
        """

        def decorator(handler: FilterHandler) -> FilterHandler:
            self.register(name, handler, description=description, usage=usage)
            return handler

        return decorator

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def filters(self) -> Mapping[str, FilterInfo]:
        """Read-only view of the registered filters."""
        return MappingProxyType(self._filters)

    def get(self, name: str) -> FilterInfo:
        """Get filter info by name.

        Raises:
            FilterNotFoundError: If filter is not registered.
        """
        if name not in self._filters:
            raise FilterNotFoundError(name)
        return self._filters[name]

    def get_handler(self, name: str) -> FilterHandler:
        """Get the handler function for a filter.

        Raises:
            FilterNotFoundError: If filter is not registered.
        """
        return self.get(name).handler

    def has(self, name: str) -> bool:
        """Check if a filter is registered."""
        return name in self._filters

    def list_filters(self) -> list[str]:
        """List all registered filter names."""
        return sorted(self._filters.keys())

    def list_filters_info(self) -> list[FilterInfo]:
        """List all registered filters with full info."""
        return [self._filters[name] for name in sorted(self._filters.keys())]

    def __len__(self) -> int:
        return len(self._filters)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)
