"""Base component classes for TableStat.

Classes:
    AsyncComponent: Configured component with an async lifecycle

Example:
    >>> class MyConnector(AsyncComponent[ConnectionConfig]):
    ...     async def _async_initialize(self) -> None:
    ...         self._conn = await connect()
    ...
    ...     async def _async_cleanup(self) -> None:
    ...         await self._conn.close()
    >>>
    >>> async with MyConnector(config) as connector:
    ...     ...
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class AsyncComponent(Generic[T], ABC):
    """Base class for components that acquire resources asynchronously.

    ``initialize`` and ``cleanup`` are idempotent. Errors raised by
    ``_async_initialize`` propagate unchanged so subclasses decide how
    failures are reported; cleanup always runs on context manager exit.

    Attributes:
        component_name: Human-readable component name
    """

    component_name: str = "AsyncComponent"

    def __init__(self, config: T) -> None:
        """Initialize component.

        Args:
            config: Configuration object for this component
        """
        self._config = config
        self._initialized = False

    @property
    def config(self) -> T:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Acquire the component's resources."""
        if self._initialized:
            return
        await self._async_initialize()
        self._initialized = True

    async def cleanup(self) -> None:
        """Release the component's resources."""
        if not self._initialized:
            return
        try:
            await self._async_cleanup()
        finally:
            self._initialized = False

    @abstractmethod
    async def _async_initialize(self) -> None:
        """Perform async initialization work."""

    async def _async_cleanup(self) -> None:
        """Perform async cleanup work."""

    async def __aenter__(self) -> "AsyncComponent[T]":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.cleanup()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(initialized={self._initialized})"
