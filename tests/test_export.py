"""
Tests for the export layer: flattened rows and the formatted workbook.
"""
from io import BytesIO

import pytest
from openpyxl import load_workbook

from core.export.flatten import EXPORT_HEADERS, flatten_entries, record_row
from core.export.writer import BANNER_ROWS, SHEET_TITLE, export_to_excel_bytes
from core.ir import BatchSeparator, BranchSeparator, StudentRecord


def _record(usn, name, branch="Computer Science Engineering"):
    return StudentRecord(
        values={
            "USN": usn,
            "Full Name": name,
            "Normalized Branch": branch,
            "Branch": "CSE",
            "Section": "A",
            "Email": f"{usn.lower()}@example.edu",
            "Phone Number": "9876543210",
            "Counsellor": "Dr. Kavya",
            "Counsellor Email": "kavya@example.edu",
            "Counsellor Phone": "9123456789",
            "Counsellor Department": "CSE",
            "Batch": "2022-2026",
        }
    )


@pytest.fixture
def entries():
    return [
        BatchSeparator(label="2022-2026 Batch (Year 4)", batch="2022-2026", cohort="Year 4"),
        BranchSeparator(label="Computer Science Engineering"),
        _record("1MS22CS001", "Asha Rao"),
        _record("1MS22CS002", "Bharath Kumar"),
    ]


def test_export_headers():
    assert EXPORT_HEADERS == [
        "USN",
        "Full Name",
        "Student Branch",
        "Section",
        "Student Email ID",
        "Phone Number",
        "Counsellor Name",
        "Counsellor Email ID",
        "Counsellor Phone",
        "Counsellor Department",
        "Student Batch",
    ]


def test_record_row_uses_normalized_branch():
    row = record_row(_record("1MS22CS001", "Asha Rao", branch="Mechanical Engineering"))
    assert row[:3] == ["1MS22CS001", "Asha Rao", "Mechanical Engineering"]
    assert row[-1] == "2022-2026"


def test_flatten_entries(entries):
    rows = flatten_entries(entries)
    assert rows[0] == EXPORT_HEADERS
    assert rows[1] == ["2022-2026 Batch (Year 4)"]
    assert rows[2] == ["Computer Science Engineering"]
    assert rows[3][0] == "1MS22CS001"
    assert len(rows) == 5
    assert flatten_entries(entries, include_header=False)[0] == ["2022-2026 Batch (Year 4)"]


def test_flatten_missing_values_are_empty():
    (row,) = flatten_entries([StudentRecord(values={"USN": "1MS22CS001"})], include_header=False)
    assert row == ["1MS22CS001"] + [""] * (len(EXPORT_HEADERS) - 1)


def test_excel_layout(entries):
    data = export_to_excel_bytes(entries, banner_text="LOGO SPACE")
    ws = load_workbook(BytesIO(data))[SHEET_TITLE]
    merged = {str(r) for r in ws.merged_cells.ranges}

    assert ws["A1"].value == "LOGO SPACE"
    assert f"A1:K{BANNER_ROWS}" in merged

    header_row = BANNER_ROWS + 1
    assert [c.value for c in ws[header_row]] == EXPORT_HEADERS
    assert ws.cell(row=header_row, column=1).font.bold

    # batch separator, spacer, branch separator, spacer, records
    assert ws.cell(row=header_row + 1, column=1).value == "2022-2026 Batch (Year 4)"
    assert f"A{header_row + 1}:K{header_row + 1}" in merged
    assert ws.cell(row=header_row + 2, column=1).value is None
    assert ws.cell(row=header_row + 3, column=1).value == "Computer Science Engineering"
    assert ws.cell(row=header_row + 5, column=1).value == "1MS22CS001"
    assert ws.cell(row=header_row + 6, column=1).value == "1MS22CS002"
    assert ws.cell(row=header_row + 6, column=3).value == "Computer Science Engineering"


def test_excel_styles(entries):
    ws = load_workbook(BytesIO(export_to_excel_bytes(entries)))[SHEET_TITLE]
    header_row = BANNER_ROWS + 1
    assert ws.cell(row=header_row, column=1).fill.start_color.rgb.endswith("366092")
    assert ws.cell(row=header_row + 1, column=1).fill.start_color.rgb.endswith("0B5394")
    assert ws.cell(row=header_row + 3, column=1).fill.start_color.rgb.endswith("6AA84F")
    assert ws.row_dimensions[header_row + 1].height == 30
    assert ws.column_dimensions["B"].width == 30


def test_excel_preserves_entry_order():
    entries = [
        BatchSeparator(label="2023-2027 Batch (Year 3)"),
        BranchSeparator(label="ECE"),
        _record("1MS23EC009", "Zed"),
        _record("1MS23EC001", "Amy"),
    ]
    ws = load_workbook(BytesIO(export_to_excel_bytes(entries)))[SHEET_TITLE]
    usns = [ws.cell(row=r, column=1).value for r in range(BANNER_ROWS + 2, ws.max_row + 1)]
    assert [u for u in usns if u and u.startswith("1MS")] == ["1MS23EC009", "1MS23EC001"]


def test_excel_empty_entries():
    ws = load_workbook(BytesIO(export_to_excel_bytes([])))[SHEET_TITLE]
    assert [c.value for c in ws[BANNER_ROWS + 1]] == EXPORT_HEADERS
