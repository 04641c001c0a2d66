"""
Utilities package.
"""

from docdrop.utils.counter import DocumentCounter
from docdrop.utils.durations import format_duration, parse_duration
from docdrop.utils.storage import DocumentStorage, is_safe_name

__all__ = [
    "DocumentCounter",
    "DocumentStorage",
    "format_duration",
    "is_safe_name",
    "parse_duration",
]
