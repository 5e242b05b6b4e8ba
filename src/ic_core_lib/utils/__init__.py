"""Utility Functions"""

from ic_core_lib.utils.resilience import (
    storage_startup_retry,
    create_custom_retry,
)

__all__ = [
    "storage_startup_retry",
    "create_custom_retry",
]
