#!/usr/bin/env python3
"""
Dependency Injection Container

Builds the configuration, the source registry and the fetch pipeline
pieces on demand. Commands receive a container instead of constructing
services themselves, so tests can swap any of them out.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Set

logger = logging.getLogger(__name__)


class Container:
    """Named services built lazily, either once (singleton) or per call (factory)."""

    def __init__(self):
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._singleton_names: Set[str] = set()
        self._instances: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, service_name: str, factory: Callable[[], Any]) -> None:
        """Register a service built on first use and reused afterwards."""
        with self._lock:
            self._factories[service_name] = factory
            self._singleton_names.add(service_name)
            self._instances.pop(service_name, None)

    def register_factory(self, service_name: str, factory: Callable[[], Any]) -> None:
        """Register a service built anew on every ``get``."""
        with self._lock:
            self._factories[service_name] = factory
            self._singleton_names.discard(service_name)
            self._instances.pop(service_name, None)

    def register_instance(self, service_name: str, instance: Any) -> None:
        with self._lock:
            self._instances[service_name] = instance

    def get(self, service_name: str) -> Any:
        """
        Get service instance by name.

        Raises:
            KeyError: If service is not registered
        """
        with self._lock:
            if service_name in self._instances:
                return self._instances[service_name]
            factory = self._factories.get(service_name)
            singleton = service_name in self._singleton_names

        if factory is None:
            raise KeyError(f"Service '{service_name}' not registered")

        instance = factory()
        if singleton:
            with self._lock:
                instance = self._instances.setdefault(service_name, instance)
            logger.debug(f"Created singleton instance for '{service_name}'")
        return instance

    def has(self, service_name: str) -> bool:
        return service_name in self._factories or service_name in self._instances

    def clear(self) -> None:
        with self._lock:
            self._factories.clear()
            self._singleton_names.clear()
            self._instances.clear()


# Global container instance
_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get global container instance (thread-safe singleton)."""
    global _container
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = Container()
                _setup_default_services(_container)
    return _container


def reset_container() -> None:
    """Reset global container (useful for testing)."""
    global _container
    with _container_lock:
        if _container:
            _container.clear()
        _container = None


def _setup_default_services(container: Container) -> None:
    from .config import get_config
    from .parsing import FeedParser
    from .sources import SourceRegistry
    from .transport import AiohttpTransport

    def create_source_registry():
        return SourceRegistry.from_file(container.get('config').sources_file)

    def create_feed_parser():
        return FeedParser(max_items=container.get('config').feeds.items_per_feed)

    def create_transport():
        feeds = container.get('config').feeds
        return AiohttpTransport(timeout=feeds.timeout, user_agent=feeds.user_agent)

    container.register_singleton('config', get_config)
    container.register_singleton('source_registry', create_source_registry)
    container.register_singleton('feed_parser', create_feed_parser)

    # Transports own an HTTP session, so each caller gets its own
    container.register_factory('transport', create_transport)
