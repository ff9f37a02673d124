"""
Clip Marker Manager Components

This package contains the manager-based architecture components that handle
specific aspects of the application functionality:

- BaseManager / ProviderBoundManager: Abstract base classes for all managers
- DependencyContainer: Service locator for manager communication
- ErrorHandler: Centralized error handling and user notification
- ConfigurationManager: Application settings
- LoggingManager: Centralized logging with file rotation
- TimeTracker: Playback position polling
- ClipTimelineManager: Pending start marker and clip collection
- ClipPlayer: Bounded clip replay
- SeekController: Scrub-to-seek mapping
"""

from .base import BaseManager, ProviderBoundManager, ignore_when_unavailable
from .container import DependencyContainer
from .error_handling import ErrorHandler, ErrorContext, ErrorSeverity
from .configuration import ConfigurationManager
from .logging import LoggingManager
from .time_tracker import TimeTracker
from .timeline import ClipTimelineManager
from .clip_player import ClipPlayer
from .seek import SeekController

__all__ = [
    'BaseManager',
    'ProviderBoundManager',
    'ignore_when_unavailable',
    'DependencyContainer',
    'ErrorHandler',
    'ErrorContext',
    'ErrorSeverity',
    'ConfigurationManager',
    'LoggingManager',
    'TimeTracker',
    'ClipTimelineManager',
    'ClipPlayer',
    'SeekController',
]
