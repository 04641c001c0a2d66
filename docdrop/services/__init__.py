"""
Services package - business logic.
"""

from docdrop.services.allocator import allocate_name, generate_name, name_space_size
from docdrop.services.lifecycle import DocumentManager
from docdrop.services.scheduler import ExpiryScheduler

__all__ = [
    "allocate_name",
    "generate_name",
    "name_space_size",
    "DocumentManager",
    "ExpiryScheduler",
]
