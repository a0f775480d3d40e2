"""
Registry mapping input names to collector factories.

The host application builds a registry and hands it to whatever composes
collectors from configuration; nothing registers itself at import time.
"""

from collections.abc import Callable
from typing import Any

from ..config.schema import DefaultsConfig
from .base import Collector
from .system import SystemCollector

CollectorFactory = Callable[[Any, DefaultsConfig], Collector]


class CollectorRegistry:
    """
    Name -> factory mapping.

    Example:
        registry = CollectorRegistry()
        registry.register("system", SystemCollector)
        collector = registry.create("system", sys_config, defaults)
    """

    def __init__(self):
        self._factories: dict[str, CollectorFactory] = {}

    def register(self, name: str, factory: CollectorFactory) -> None:
        """
        Register a factory under ``name``.

        Raises:
            ValueError: If the name is already taken
        """
        if name in self._factories:
            raise ValueError(f"Collector '{name}' is already registered")
        self._factories[name] = factory

    def create(self, name: str, config: Any, defaults: DefaultsConfig) -> Collector:
        """
        Instantiate the collector registered as ``name``.

        Raises:
            KeyError: If nothing is registered under that name
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise KeyError(f"Unknown collector: {name}") from None
        return factory(config, defaults)

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def default_registry() -> CollectorRegistry:
    """Registry with the built-in inputs."""
    registry = CollectorRegistry()
    registry.register(SystemCollector.NAME, SystemCollector)
    return registry
