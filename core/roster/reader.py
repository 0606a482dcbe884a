"""
WorkbookReader: openpyxl workbooks → sheets of RawCell rows.

Encapsulates the openpyxl specifics:
- hyperlinks (``cell.hyperlink``) next to their displayed value
- rich text (``load_workbook(rich_text=True)``)
- formulas, paired with the cached result from a ``data_only`` load
- date cells
Rows are read "with empties" up to the sheet's max column so column
positions line up with the header row.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from openpyxl import load_workbook
from openpyxl.cell.rich_text import CellRichText
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from core.logger import get_logger
from core.roster.cells import (
    CellRow,
    DateCell,
    FormulaCell,
    HyperlinkCell,
    OpaqueCell,
    PlainCell,
    RawCell,
    RichTextCell,
)

logger = get_logger(__name__)

ValuesGrid = List[Tuple[Any, ...]]


@dataclass
class SheetData:
    name: str
    rows: List[CellRow] = field(default_factory=list)


@dataclass
class WorkbookData:
    """One decoded input file: its label (usually the filename) and its sheets."""
    label: str
    sheets: List[SheetData] = field(default_factory=list)

    @property
    def sheet_names(self) -> List[str]:
        return [s.name for s in self.sheets]


class WorkbookReader:
    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_path(self, file_path: str, label: Optional[str] = None) -> WorkbookData:
        path = Path(file_path)
        return self.read_bytes(path.read_bytes(), label or path.name)

    def read_bytes(self, data: bytes, label: str) -> WorkbookData:
        wb = load_workbook(BytesIO(data), data_only=False, rich_text=True)

        def values_loader() -> Workbook:
            return load_workbook(BytesIO(data), data_only=True, read_only=True)

        try:
            return self.read_workbook(wb, label, values_loader=values_loader)
        finally:
            wb.close()

    def read_workbook(
        self,
        wb: Workbook,
        label: str,
        values_loader: Optional[Callable[[], Workbook]] = None,
    ) -> WorkbookData:
        """
        Convert an already-open workbook. *values_loader* returns the same
        workbook opened with ``data_only=True``; it is called only when a
        formula cell is found.
        """
        cached = _CachedValues(values_loader)
        try:
            sheets = [
                SheetData(name=ws.title, rows=self._read_rows(ws, cached))
                for ws in wb.worksheets
            ]
        finally:
            cached.close()
        logger.info("Decoded %r: %d sheet(s) %s", label, len(sheets), [s.name for s in sheets])
        return WorkbookData(label=label, sheets=sheets)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_rows(self, ws: Worksheet, cached: "_CachedValues") -> List[CellRow]:
        rows: List[CellRow] = []
        max_col = ws.max_column or 1
        for row in ws.iter_rows(min_row=1, max_row=ws.max_row, max_col=max_col):
            converted = []
            for cell in row:
                hyperlink = getattr(cell, "hyperlink", None)
                if getattr(cell, "data_type", None) != "f":
                    converted.append(to_raw_cell(cell.value, hyperlink))
                    continue
                formula = self._formula_cell(ws.title, cell, cached)
                if hyperlink is not None:
                    converted.append(HyperlinkCell(display=formula, target=_link_target(hyperlink)))
                else:
                    converted.append(formula)
            rows.append(tuple(converted))
        return rows

    @staticmethod
    def _formula_cell(sheet_name: str, cell: Any, cached: "_CachedValues") -> FormulaCell:
        value = cell.value
        formula = getattr(value, "text", None) or str(value or "")
        return FormulaCell(formula=formula, result=cached.get(sheet_name, cell.row, cell.column))


def to_raw_cell(value: Any, hyperlink: Any = None) -> Optional[RawCell]:
    """Classify one openpyxl value into its RawCell variant (``None`` when empty)."""
    if hyperlink is not None:
        display = to_raw_cell(value) if value is not None else None
        return HyperlinkCell(display=display, target=_link_target(hyperlink))
    if value is None:
        return None
    if isinstance(value, CellRichText):
        segments = tuple(seg if isinstance(seg, str) else getattr(seg, "text", "") for seg in value)
        return RichTextCell(segments=segments)
    if isinstance(value, (datetime, date)):
        return DateCell(value=value)
    if isinstance(value, (str, int, float, bool)):
        return PlainCell(value=value)
    return OpaqueCell(value=value)


def _link_target(hyperlink: Any) -> Any:
    return getattr(hyperlink, "target", None) or getattr(hyperlink, "location", None)


class _CachedValues:
    """Lazily opened ``data_only`` twin of a workbook, for formula results."""

    def __init__(self, loader: Optional[Callable[[], Workbook]]):
        self._loader = loader
        self._wb: Optional[Workbook] = None
        self._grids = {}

    def get(self, sheet_name: str, row: int, column: int) -> Any:
        if self._loader is None:
            return None
        grid = self._grid(sheet_name)
        if row - 1 < len(grid) and column - 1 < len(grid[row - 1]):
            return grid[row - 1][column - 1]
        return None

    def _grid(self, sheet_name: str) -> ValuesGrid:
        if sheet_name not in self._grids:
            if self._wb is None:
                self._wb = self._loader()
            ws = self._wb[sheet_name]
            self._grids[sheet_name] = [tuple(r) for r in ws.iter_rows(values_only=True)]
        return self._grids[sheet_name]

    def close(self) -> None:
        if self._wb is not None:
            try:
                self._wb.close()
            except Exception as exc:
                logger.debug("Closing cached-values workbook failed: %s", exc)


async def decode_workbooks_async(
    sources: Sequence[Tuple[str, bytes]],
    reader: Optional[WorkbookReader] = None,
) -> List[WorkbookData]:
    """
    Decode ``(label, data)`` pairs concurrently in worker threads.

    Results come back in input order; callers still fold them into the
    merge sequentially.
    """
    reader = reader or WorkbookReader()
    tasks = [asyncio.to_thread(reader.read_bytes, data, label) for label, data in sources]
    return list(await asyncio.gather(*tasks))
