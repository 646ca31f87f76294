# src/todo_list/errors.py

"""
Error types shared by the store, the API helpers and the console.

Both concrete errors are recoverable: the console logs them and prints a notice
instead of exiting.
"""

from __future__ import annotations


class TodoError(Exception):
    """Base class for expected, user-reportable failures."""


class ValidationError(TodoError, ValueError):
    """Bad user input: empty title (when enforced), unparseable date, bad list offset."""


class StorageError(TodoError):
    """A persistence operation failed (database unavailable, locked, corrupt, ...)."""
