"""
Flatten a merged entry stream into plain 2-D string rows.

Both the formatted Excel export and the remote preview copy are built from
the same column definition, so the two views always agree.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple, Union

from core.ir import (
    BatchSeparator,
    BranchSeparator,
    CanonicalField,
    DerivedField,
    StudentRecord,
)

# (column header, record field), in output order.
EXPORT_COLUMNS: Tuple[Tuple[str, Union[CanonicalField, DerivedField]], ...] = (
    ("USN", CanonicalField.USN),
    ("Full Name", CanonicalField.FULL_NAME),
    ("Student Branch", DerivedField.NORMALIZED_BRANCH),
    ("Section", CanonicalField.SECTION),
    ("Student Email ID", CanonicalField.EMAIL),
    ("Phone Number", CanonicalField.PHONE_NUMBER),
    ("Counsellor Name", CanonicalField.COUNSELLOR),
    ("Counsellor Email ID", CanonicalField.COUNSELLOR_EMAIL),
    ("Counsellor Phone", CanonicalField.COUNSELLOR_PHONE),
    ("Counsellor Department", CanonicalField.COUNSELLOR_DEPARTMENT),
    ("Student Batch", CanonicalField.BATCH),
)

EXPORT_HEADERS: List[str] = [header for header, _ in EXPORT_COLUMNS]

Entry = Union[StudentRecord, BatchSeparator, BranchSeparator]


def record_row(record: StudentRecord, columns: Sequence[Tuple[str, object]] = EXPORT_COLUMNS) -> List[str]:
    return [record.get(str(field)) for _, field in columns]


def flatten_entries(entries: Iterable[Entry], include_header: bool = True) -> List[List[str]]:
    """
    Header row, then one row per entry. Separators become a single-cell row
    holding their label.
    """
    rows: List[List[str]] = [list(EXPORT_HEADERS)] if include_header else []
    for entry in entries:
        if isinstance(entry, (BatchSeparator, BranchSeparator)):
            rows.append([entry.label])
        else:
            rows.append(record_row(entry))
    return rows
