"""Exceptions raised by the roster merge pipeline."""

from __future__ import annotations

from typing import List, Tuple


class RosterError(Exception):
    """Base class for roster merge errors."""


class NoInputError(RosterError, ValueError):
    """Raised when a merge is requested with no workbooks at all."""


class AliasConflictError(RosterError):
    """Two header variants normalise to one key but name different fields."""

    def __init__(self, conflicts: List[Tuple[str, str, str]]):
        self.conflicts = conflicts
        details = "; ".join(f"{key!r}: {a} vs {b}" for key, a, b in conflicts)
        super().__init__(f"Conflicting header aliases: {details}")


class PreviewPublishError(RosterError):
    """The preview endpoint is missing, unreachable or answered badly."""
