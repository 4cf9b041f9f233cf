"""Shared utilities for the backend."""
from utils.case import row_to_camel, to_camel_key

__all__ = [
    "to_camel_key",
    "row_to_camel",
]
