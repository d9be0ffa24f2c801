"""
Error types shared by the matching and scheduling engines.
"""
from __future__ import annotations
from typing import Optional


class ValidationError(ValueError):
    """Input profile or availability violates the expected shape."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ProfileStoreError(RuntimeError):
    """Profile store could not be read or written."""
