"""
Navigation management module.
"""

from .navigation_serializer import (
    NavigationIntent,
    NavigationSerializer,
    NavigationTimings,
    TransitionMode,
)

__all__ = [
    'NavigationIntent',
    'NavigationSerializer',
    'NavigationTimings',
    'TransitionMode',
]
