"""
Service registry shared by the clip session and its managers.
"""

import logging
from threading import Lock
from typing import Any, Dict


class DependencyContainer:
    """
    Name-to-instance registry.

    Managers look each other up by name during ``initialize``. ``clear``
    cleans services up in reverse registration order so a manager is
    always cleaned up before the services it depends on.
    """

    def __init__(self):
        self._services: Dict[str, Any] = {}
        self._lock = Lock()
        self.logger = logging.getLogger(__name__)

    def register_service(self, name: str, instance: Any) -> None:
        with self._lock:
            if name in self._services:
                self.logger.warning(f"Replacing registered service: {name}")
            self._services[name] = instance
            self.logger.debug(f"Registered {name} ({type(instance).__name__})")

    def get_service(self, name: str) -> Any:
        """
        Raises:
            ValueError: No service is registered under ``name``
        """
        with self._lock:
            try:
                return self._services[name]
            except KeyError:
                raise ValueError(f"Service '{name}' not found") from None

    def has_service(self, name: str) -> bool:
        with self._lock:
            return name in self._services

    def clear(self) -> None:
        """Call ``cleanup()`` on every service, newest first, then forget them all."""
        with self._lock:
            services = list(self._services.items())
            self._services.clear()

        for name, service in reversed(services):
            if not hasattr(service, 'cleanup'):
                continue
            try:
                service.cleanup()
            except Exception as e:
                self.logger.error(f"Cleanup of {name} failed: {e}", exc_info=True)
