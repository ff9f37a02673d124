"""
Clip Marker

Mark in/out points on a playing video and replay the resulting clips.
"""

from .version import __version__

__all__ = ['__version__']
