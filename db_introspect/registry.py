"""Registry of dialect drivers."""

from typing import Callable, Dict, List

from .database.base import DialectDriver, QueryClient
from .database.postgres import PostgresDriver
from .errors import UnknownDialectError

DriverFactory = Callable[[QueryClient], DialectDriver]


class DialectRegistry:
    """Maps dialect names to driver factories.

    Registries are plain values: build one at startup and pass it where
    drivers are created.
    """

    def __init__(self):
        self._factories: Dict[str, DriverFactory] = {}

    def register(self, name: str, factory: DriverFactory, *aliases: str):
        """Register a driver factory under a name and optional aliases."""
        for key in (name, *aliases):
            self._factories[key.lower()] = factory

    def create(self, name: str, client: QueryClient) -> DialectDriver:
        """Create a driver for the given dialect bound to a client."""
        factory = self._factories.get(name.lower())
        if factory is None:
            raise UnknownDialectError(name, available=self.names())
        return factory(client)

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._factories


def default_registry() -> DialectRegistry:
    """Build a registry with all built-in dialects."""
    registry = DialectRegistry()
    registry.register("postgres", PostgresDriver, "postgresql")
    return registry
