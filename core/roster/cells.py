"""
RawCell: the source shapes a workbook cell can take.

Each variant is a small frozen dataclass; an empty cell is ``None``.
``CellValueExtractor`` dispatches over these variants in priority order
(hyperlink > rich text > formula > date > plain > opaque).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Tuple, Union


@dataclass(frozen=True)
class PlainCell:
    """A scalar: str, int, float, bool."""
    value: Any


@dataclass(frozen=True)
class HyperlinkCell:
    """A linked value; ``target`` may be a URL string or a nested display object."""
    display: Any = None
    target: Any = None


@dataclass(frozen=True)
class RichTextCell:
    segments: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FormulaCell:
    formula: str = ""
    result: Any = None


@dataclass(frozen=True)
class DateCell:
    value: date


@dataclass(frozen=True)
class OpaqueCell:
    """Anything composite the reader could not classify (dicts, library objects)."""
    value: Any


RawCell = Union[PlainCell, HyperlinkCell, RichTextCell, FormulaCell, DateCell, OpaqueCell]
CellRow = Tuple[Optional[RawCell], ...]
