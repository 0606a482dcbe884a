"""
Pytest configuration and shared fixtures.
"""
import os
import sys
from io import BytesIO

import pytest
from openpyxl import Workbook

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from core.roster.cells import PlainCell
from core.roster.reader import SheetData, WorkbookData


ROSTER_HEADER = [
    "USN",
    "Student Name",
    "Sec",
    "E-Mail ID",
    "Mobile No",
    "Counsellor Name",
    "E-Mail ID of the Counsellors",
    "COUNSELOR MOBILE",
    "Counsellor Dept.",
    "BATCH(20XX-20XX)",
]


def _student(usn, name, section="A", batch=""):
    slug = name.split()[0].lower()
    return [
        usn,
        name,
        section,
        f"{slug}@students.example.edu",
        "9876543210",
        "Dr. Kavya",
        "kavya@example.edu",
        "9123456789",
        "ME",
        batch,
    ]


@pytest.fixture
def roster_header():
    return list(ROSTER_HEADER)


@pytest.fixture
def student_row():
    """Factory: ``student_row("1MS22ME001", "Asha Rao")`` → one data row."""
    return _student


@pytest.fixture
def roster_sheet():
    """Factory: a small valid sheet grid (title row, header, *n* students)."""
    def _make(prefix="1MS22ME", n=2, title="Counsellor Allotment"):
        rows = [[title] + [""] * (len(ROSTER_HEADER) - 1), list(ROSTER_HEADER)]
        names = ["Asha Rao", "Bharath Kumar", "Chitra Nair", "Deepak Shetty"]
        for i in range(n):
            rows.append(_student(f"{prefix}{i + 1:03d}", names[i % len(names)]))
        return rows
    return _make


def _to_cells(rows):
    return [tuple(PlainCell(v) if v not in (None, "") else None for v in row) for row in rows]


@pytest.fixture
def make_workbook_data():
    """Factory: ``make_workbook_data(label, {sheet_name: rows})`` → WorkbookData of plain cells."""
    def _make(label, sheets):
        return WorkbookData(
            label=label,
            sheets=[SheetData(name=name, rows=_to_cells(rows)) for name, rows in sheets.items()],
        )
    return _make


@pytest.fixture
def make_xlsx_bytes():
    """Factory: ``make_xlsx_bytes({sheet_name: rows})`` → saved ``.xlsx`` bytes."""
    def _make(sheets):
        wb = Workbook()
        wb.remove(wb.active)
        for name, rows in sheets.items():
            ws = wb.create_sheet(title=name)
            for row in rows:
                ws.append([v if v != "" else None for v in row])
        bio = BytesIO()
        wb.save(bio)
        return bio.getvalue()
    return _make
