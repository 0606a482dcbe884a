"""
Export layer: merged entries → flat rows, formatted workbook, remote preview.
"""

from core.export.flatten import EXPORT_COLUMNS, EXPORT_HEADERS, flatten_entries, record_row
from core.export.preview import PreviewPublisher
from core.export.writer import ExcelExportWriter, export_to_excel_bytes

__all__ = [
    "EXPORT_COLUMNS",
    "EXPORT_HEADERS",
    "flatten_entries",
    "record_row",
    "PreviewPublisher",
    "ExcelExportWriter",
    "export_to_excel_bytes",
]
