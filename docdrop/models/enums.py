"""
Enums for document lifecycle tracking.
"""

from enum import Enum


class DocumentState(str, Enum):
    """Lifecycle state of a document."""
    RESERVED = "reserved"   # name taken, payload still being written
    STORED = "stored"       # readable until its lifetime elapses
    DELETED = "deleted"
