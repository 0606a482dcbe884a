"""
Export Writer Module
====================

Render a merged entry stream as a formatted ``.xlsx`` workbook:
banner/logo area, styled header row, full-width batch and branch separator
rows, alternating data rows and fixed column widths. Entry order is written
verbatim.
"""

from __future__ import annotations

from io import BytesIO
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from core.export.flatten import EXPORT_COLUMNS, EXPORT_HEADERS, Entry, record_row
from core.ir import BatchSeparator, BranchSeparator
from core.logger import get_logger

logger = get_logger(__name__)

# ------------------------------
# Layout / style constants
# ------------------------------

SHEET_TITLE = "Combined Data"
BANNER_ROWS = 8
COLUMN_WIDTHS = (15, 30, 35, 10, 40, 15, 25, 40, 15, 20, 15)

BANNER_FONT = Font(size=14, italic=True, color="666666")
BANNER_FILL = PatternFill(start_color="F8F9FA", end_color="F8F9FA", fill_type="solid")

HEADER_FONT = Font(bold=True, size=12, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
HEADER_BORDER = Border(
    left=Side(style="thin", color="FFFFFF"),
    right=Side(style="thin", color="FFFFFF"),
    top=Side(style="thin", color="FFFFFF"),
    bottom=Side(style="thin", color="FFFFFF"),
)

BATCH_FONT = Font(bold=True, size=16, color="FFFFFF")
BATCH_FILL = PatternFill(start_color="0B5394", end_color="0B5394", fill_type="solid")
BATCH_ROW_HEIGHT = 30

BRANCH_FONT = Font(bold=True, size=14, color="FFFFFF")
BRANCH_FILL = PatternFill(start_color="6AA84F", end_color="6AA84F", fill_type="solid")
BRANCH_ROW_HEIGHT = 25

STRIPE_FILL = PatternFill(start_color="F8F9FA", end_color="F8F9FA", fill_type="solid")
DATA_BORDER = Border(
    left=Side(style="thin", color="E1E1E1"),
    right=Side(style="thin", color="E1E1E1"),
    top=Side(style="thin", color="E1E1E1"),
    bottom=Side(style="thin", color="E1E1E1"),
)

CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
LEFT = Alignment(horizontal="left", vertical="center")


class ExcelExportWriter:
    """
    Writes entries into a fresh worksheet.

    Row layout:
      rows 1..BANNER_ROWS   merged banner (logo space)
      next row              column headers
      then                  entries; each separator is followed by one spacer row
    """

    def __init__(self, banner_text: str = "", sheet_title: str = SHEET_TITLE):
        self._banner_text = banner_text
        self._sheet_title = sheet_title
        self._ncols = len(EXPORT_COLUMNS)
        self._last_col = get_column_letter(self._ncols)

    def build(self, entries: Iterable[Entry]) -> Workbook:
        wb = Workbook()
        ws = wb.active
        ws.title = self._sheet_title

        self._write_banner(ws)
        row_idx = self._write_header(ws, BANNER_ROWS + 1) + 1

        counts = {"records": 0, "batches": 0, "branches": 0}
        for entry in entries:
            if isinstance(entry, BatchSeparator):
                row_idx = self._write_separator(ws, row_idx, entry.label, BATCH_FONT, BATCH_FILL, BATCH_ROW_HEIGHT)
                counts["batches"] += 1
            elif isinstance(entry, BranchSeparator):
                row_idx = self._write_separator(ws, row_idx, entry.label, BRANCH_FONT, BRANCH_FILL, BRANCH_ROW_HEIGHT)
                counts["branches"] += 1
            else:
                self._write_record(ws, row_idx, record_row(entry))
                row_idx += 1
                counts["records"] += 1

        for idx, width in enumerate(COLUMN_WIDTHS[: self._ncols], start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width

        logger.info(
            "Export built: %d record(s), %d batch separator(s), %d branch separator(s)",
            counts["records"], counts["batches"], counts["branches"],
        )
        return wb

    # ------------------------------
    # Row writers
    # ------------------------------

    def _write_banner(self, ws: Worksheet) -> None:
        ws.merge_cells(f"A1:{self._last_col}{BANNER_ROWS}")
        cell = ws.cell(row=1, column=1, value=self._banner_text or None)
        cell.font = BANNER_FONT
        cell.fill = BANNER_FILL
        cell.alignment = CENTER

    def _write_header(self, ws: Worksheet, row_idx: int) -> int:
        for col, header in enumerate(EXPORT_HEADERS, start=1):
            cell = ws.cell(row=row_idx, column=col, value=header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = CENTER
            cell.border = HEADER_BORDER
        return row_idx

    def _write_separator(
        self,
        ws: Worksheet,
        row_idx: int,
        label: str,
        font: Font,
        fill: PatternFill,
        height: int,
    ) -> int:
        ws.merge_cells(f"A{row_idx}:{self._last_col}{row_idx}")
        cell = ws.cell(row=row_idx, column=1, value=label)
        cell.font = font
        cell.fill = fill
        cell.alignment = CENTER
        ws.row_dimensions[row_idx].height = height
        # one spacer row after every separator
        return row_idx + 2

    @staticmethod
    def _write_record(ws: Worksheet, row_idx: int, values: list) -> None:
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_idx, column=col, value=value)
            if row_idx % 2 == 0:
                cell.fill = STRIPE_FILL
            cell.border = DATA_BORDER
            cell.alignment = CENTER if col == 1 else LEFT


def export_to_excel_bytes(
    entries: Iterable[Entry],
    banner_text: str = "",
    sheet_title: Optional[str] = None,
) -> bytes:
    wb = ExcelExportWriter(banner_text=banner_text, sheet_title=sheet_title or SHEET_TITLE).build(entries)
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()
