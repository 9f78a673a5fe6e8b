# synctex_locator/errors.py
from __future__ import annotations
from typing import Optional


class SyncTexError(Exception):
    """Base class for errors raised while reading or querying SyncTeX data."""


class FormatError(SyncTexError, ValueError):
    """A structural record appeared outside the context it requires."""

    def __init__(self, message: str, lineno: Optional[int] = None):
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


class SyncTexNotFound(SyncTexError, LookupError):
    """The query has nothing in the model to resolve against."""
