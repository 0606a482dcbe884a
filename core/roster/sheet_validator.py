"""
SheetValidator: decide whether a sheet holds real student records.

Workbooks routinely ship decorative or leftover tabs. Instead of a per-file
allow-list we use a three-part structural check:

1. at least two rows;
2. some cell mentions the identifier sentinel (the header row);
3. some cell *below* that header row looks like an actual identifier
   (long enough, with both a digit and a letter).

Utility tabs (leftover default names, "template", "format", ...) are
excluded by name before any content check.
"""

from __future__ import annotations

from typing import Optional, Sequence

from core.roster.config import DEFAULT_CONFIG, DIGIT_RE, LETTER_RE, MergeConfig

SheetGrid = Sequence[Sequence[str]]

# Reason codes reported by ``SheetValidator.explain``.
REASON_OK = "ok"
REASON_UTILITY = "utility_sheet"
REASON_TOO_SHORT = "too_few_rows"
REASON_NO_SENTINEL = "no_identifier_header"
REASON_NO_IDENTIFIER = "no_identifier_values"


class SheetValidator:
    def __init__(self, cfg: MergeConfig = DEFAULT_CONFIG):
        self._cfg = cfg

    # -----------------------------------------------------------------
    # Name-level exclusion
    # -----------------------------------------------------------------

    def is_utility_sheet(self, sheet_name: str) -> bool:
        c = self._cfg
        name = str(sheet_name or "").strip()
        if name.startswith(c.default_sheet_prefix) and name != c.default_sheet_keep:
            return True
        return name.lower() in c.utility_sheet_names

    # -----------------------------------------------------------------
    # Content checks
    # -----------------------------------------------------------------

    def find_header_row(self, rows: SheetGrid) -> Optional[int]:
        """Index of the first row with a cell containing the sentinel, else ``None``."""
        marker = self._cfg.sentinel.upper()
        for idx, row in enumerate(rows):
            if any(marker in str(cell).upper() for cell in row):
                return idx
        return None

    def looks_like_identifier(self, value: str) -> bool:
        text = str(value or "").strip()
        return (
            len(text) >= self._cfg.identifier_min_length
            and DIGIT_RE.search(text) is not None
            and LETTER_RE.search(text) is not None
        )

    def explain(self, rows: SheetGrid, sheet_name: str) -> str:
        """Return ``REASON_OK`` or the first failing reason code."""
        if self.is_utility_sheet(sheet_name):
            return REASON_UTILITY
        if not rows or len(rows) < 2:
            return REASON_TOO_SHORT
        header_idx = self.find_header_row(rows)
        if header_idx is None:
            return REASON_NO_SENTINEL
        for row in rows[header_idx + 1:]:
            if any(self.looks_like_identifier(cell) for cell in row):
                return REASON_OK
        return REASON_NO_IDENTIFIER

    def is_valid(self, rows: SheetGrid, sheet_name: str) -> bool:
        return self.explain(rows, sheet_name) == REASON_OK
