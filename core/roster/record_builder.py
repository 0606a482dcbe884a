"""
RecordBuilder: turn a validated sheet grid into StudentRecord objects.

Steps (per sheet):
  1. header row = first row mentioning the sentinel
  2. canonicalize header cells
  3. drop blank data rows
  4. zip headers with cleaned values (later duplicate columns win)
  5. fill every CanonicalField
  6. derive ``Normalized Branch`` from the sheet label
  7. resolve ``Batch`` (row value, else the file's batch hint)
  8. drop rows without an identifier
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Union

from core.ir import IDENTIFIER_FIELD, CanonicalField, DerivedField, StudentRecord
from core.logger import get_logger
from core.roster.aliases import BRANCH_ALIASES
from core.roster.cell_extractor import CellValueExtractor
from core.roster.config import DEFAULT_CONFIG, MergeConfig
from core.roster.header_canonicalizer import HeaderCanonicalizer
from core.roster.sheet_validator import SheetGrid, SheetValidator

logger = get_logger(__name__)


def normalize_branch(label: str, aliases: Mapping[str, str] = BRANCH_ALIASES) -> str:
    """Display branch for a sheet label; exact match, else the label itself."""
    text = str(label or "").strip()
    return aliases.get(text, text)


class RecordBuilder:
    def __init__(
        self,
        cfg: MergeConfig = DEFAULT_CONFIG,
        canonicalizer: Optional[HeaderCanonicalizer] = None,
        validator: Optional[SheetValidator] = None,
        branch_aliases: Mapping[str, str] = BRANCH_ALIASES,
    ):
        self._cfg = cfg
        self._canon = canonicalizer or HeaderCanonicalizer()
        self._validator = validator or SheetValidator(cfg)
        self._branch_aliases = branch_aliases

    def build(
        self,
        rows: SheetGrid,
        sheet_label: str,
        batch_hint: str,
        source_file: str = "",
    ) -> List[StudentRecord]:
        header_idx = self._validator.find_header_row(rows)
        if header_idx is None:
            return []

        headers = self._canon.canonicalize_row(rows[header_idx])
        branch = normalize_branch(sheet_label, self._branch_aliases)

        records: List[StudentRecord] = []
        skipped_no_id = 0
        for row in rows[header_idx + 1:]:
            if CellValueExtractor.is_blank_row(row):
                continue
            values = self._row_values(headers, row)
            if not values[str(IDENTIFIER_FIELD)]:
                skipped_no_id += 1
                continue
            values[str(DerivedField.NORMALIZED_BRANCH)] = branch
            batch_key = str(CanonicalField.BATCH)
            values[batch_key] = values[batch_key] or batch_hint
            records.append(
                StudentRecord(values=values, source_file=source_file, sheet=sheet_label)
            )

        if skipped_no_id:
            logger.debug(
                "Sheet %r: dropped %d row(s) without %s",
                sheet_label, skipped_no_id, IDENTIFIER_FIELD,
            )
        return records

    @staticmethod
    def _row_values(
        headers: Sequence[Union[CanonicalField, str]],
        row: Sequence[str],
    ) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for idx, header in enumerate(headers):
            key = str(header)
            if not key:
                continue
            cell = row[idx] if idx < len(row) else ""
            # Last write wins when two columns canonicalize to one field.
            values[key] = CellValueExtractor.clean_value(cell)
        for field in CanonicalField:
            values.setdefault(field.value, "")
        return values
