"""
Base Manager Class

Lifecycle and error reporting shared by every Clip Marker manager.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
import functools
import logging

from ..exceptions import ProviderUnavailable
from .error_handling import ErrorContext, ErrorSeverity


class BaseManager(ABC):
    """
    A component owned by the clip session.

    The session constructs every manager with the shared dependency
    container, calls ``initialize()`` once in dependency order and
    ``cleanup()`` on teardown.
    """

    def __init__(self, parent_widget, dependency_container):
        """
        Args:
            parent_widget: The owning Qt widget, or None when running headless
            dependency_container: Registry the manager resolves its services from
        """
        self.parent_widget = parent_widget
        self.container = dependency_container
        self.logger = logging.getLogger(self.__class__.__name__)
        self._initialized = False

    @abstractmethod
    def initialize(self) -> bool:
        """
        Resolve services and prepare the manager.

        Returns:
            bool: True if the manager is ready to use
        """

    @abstractmethod
    def cleanup(self) -> None:
        """Stop timers and drop references held by the manager."""

    def is_initialized(self) -> bool:
        return self._initialized

    def get_optional_service(self, name: str, default: Any = None) -> Any:
        """Get a service from the container, or ``default`` if it is not registered."""
        if self.container and self.container.has_service(name):
            return self.container.get_service(name)
        return default

    def handle_error(self, error: Exception, context: str,
                     user_friendly_message: Optional[str] = None) -> None:
        """
        Report a failure inside the manager.

        Goes through the shared ErrorHandler when one is registered, otherwise
        straight to the parent widget.
        """
        error_handler = self.get_optional_service('error_handler')
        if error_handler is not None:
            error_handler.handle_error(
                error, ErrorContext(component=self.__class__.__name__, operation=context),
                ErrorSeverity.ERROR)
            return

        self.logger.error(f"Error in {context}: {error}", exc_info=error)
        if hasattr(self.parent_widget, 'show_error_message'):
            self.parent_widget.show_error_message(
                user_friendly_message or f"Error in {context}: {error}")

    def _mark_initialized(self) -> None:
        self._initialized = True
        self.logger.info(f"{self.__class__.__name__} initialized successfully")

    def _mark_cleanup_started(self) -> None:
        self.logger.debug(f"{self.__class__.__name__} cleanup started")


class ProviderBoundManager(BaseManager):
    """
    Base class for managers that issue commands to the playback provider.

    The provider is attached by the session once it reports ready and
    detached again on re-initialization or teardown.
    """

    def __init__(self, parent_widget, dependency_container):
        super().__init__(parent_widget, dependency_container)
        self.provider = None

    def attach_provider(self, provider) -> None:
        self.provider = provider
        self.logger.debug(f"Provider attached: {type(provider).__name__}")

    def detach_provider(self) -> None:
        self.provider = None

    def has_provider(self) -> bool:
        return self.provider is not None

    def require_provider(self, operation: str = ""):
        """Return the attached provider or raise ProviderUnavailable."""
        if self.provider is None:
            raise ProviderUnavailable(operation)
        return self.provider


def ignore_when_unavailable(method):
    """
    Turn ProviderUnavailable into a logged no-op.

    The UI can be used before the provider reports ready; commands issued
    in that window are dropped instead of surfacing an error.
    """
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except ProviderUnavailable as e:
            self.logger.debug(f"Ignoring {method.__name__}: {e}")
            return None
    return wrapper
