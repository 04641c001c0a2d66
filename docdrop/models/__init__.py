"""
Models package - data structures and schemas.
"""

from docdrop.models.enums import DocumentState
from docdrop.models.schemas import (
    MAX_NAME_LENGTH,
    CreateOptions,
    StoreStatus,
    validate_name_params,
)

__all__ = [
    "DocumentState",
    "MAX_NAME_LENGTH",
    "CreateOptions",
    "StoreStatus",
    "validate_name_params",
]
