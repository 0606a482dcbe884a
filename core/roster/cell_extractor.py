"""
CellValueExtractor: turn one RawCell into plain text.

Responsibilities:
- Priority dispatch over RawCell variants (``extract``)
- Phone-number narrowing for noisy scalar cells
- Best-effort text recovery from opaque composite values
- Absent-value blanking (``clean_value``)
"""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from typing import Any, Iterable, List, Optional

from core.logger import get_logger
from core.roster.cells import (
    DateCell,
    FormulaCell,
    HyperlinkCell,
    OpaqueCell,
    PlainCell,
    RawCell,
    RichTextCell,
)
from core.roster.config import (
    ABSENT_VALUES,
    DEFAULT_CONFIG,
    EMAIL_RE,
    LINK_SCHEME_RE,
    PHONE_RE,
    MergeConfig,
)

logger = get_logger(__name__)

_RAW_CELL_TYPES = (PlainCell, HyperlinkCell, RichTextCell, FormulaCell, DateCell, OpaqueCell)


def _json_default(obj: Any) -> Any:
    # attributes rather than repr(), which carries the object address
    if hasattr(obj, "__dict__"):
        return vars(obj)
    return str(obj)


class CellValueExtractor:
    """Stateless helper that normalises raw cells into strings. Never raises."""

    def __init__(self, cfg: MergeConfig = DEFAULT_CONFIG):
        self._cfg = cfg

    # ----- RawCell → string ------------------------------------------------

    def extract(self, raw: Optional[RawCell]) -> str:
        try:
            return self._dispatch(raw)
        except Exception as exc:
            logger.debug("Unresolvable cell %r: %s", raw, exc)
            return ""

    def extract_row(self, cells: Iterable[Optional[RawCell]]) -> List[str]:
        return [self.extract(c) for c in cells]

    def _dispatch(self, raw: Optional[RawCell]) -> str:
        if raw is None:
            return ""
        if isinstance(raw, HyperlinkCell):
            return self._extract_hyperlink(raw)
        if isinstance(raw, RichTextCell):
            return "".join(str(seg) for seg in raw.segments if seg is not None)
        if isinstance(raw, FormulaCell):
            if raw.result is not None and self._scalar_to_str(raw.result) != "":
                return self._extract_plain(raw.result)
            return str(raw.formula or "").strip()
        if isinstance(raw, DateCell):
            return self._format_date(raw.value)
        if isinstance(raw, PlainCell):
            return self._extract_plain(raw.value)
        if isinstance(raw, OpaqueCell):
            return self._extract_opaque(raw.value)
        return self._extract_opaque(raw)

    def _extract_hyperlink(self, cell: HyperlinkCell) -> str:
        shown = cell.display
        if isinstance(shown, FormulaCell) and self._scalar_to_str(shown.result) == "":
            # formula never computed: its source text is not what the cell shows
            shown = None
        # openpyxl copies the target into an empty cell's value
        display = LINK_SCHEME_RE.sub("", self._nested_text(shown), count=1).strip()
        if display:
            return display
        target = cell.target
        if isinstance(target, str):
            return LINK_SCHEME_RE.sub("", target, count=1).strip()
        return self._nested_text(target)

    def _nested_text(self, value: Any) -> str:
        """Display text of a hyperlink part that may itself be a cell or an object."""
        if value is None:
            return ""
        if isinstance(value, _RAW_CELL_TYPES):
            return self._dispatch(value)
        if isinstance(value, dict):
            for key in ("text", "display", "value"):
                if isinstance(value.get(key), str) and value[key].strip():
                    return value[key].strip()
            return ""
        text_attr = getattr(value, "text", None)
        if isinstance(text_attr, str):
            return text_attr.strip()
        return self._scalar_to_str(value)

    def _extract_plain(self, value: Any) -> str:
        if isinstance(value, (datetime, date)):
            return self._format_date(value)
        text = self._scalar_to_str(value)
        # e-mail addresses may hold long digit runs (roll numbers)
        if not text or "@" in text:
            return text
        m = PHONE_RE.search(text)
        if m:
            return m.group(0).strip()
        return text

    def _extract_opaque(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (str, int, float, bool)):
            return self._extract_plain(value)
        try:
            blob = json.dumps(value, default=_json_default, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.debug("Opaque value not serialisable: %s", exc)
            blob = ""
        m = EMAIL_RE.search(blob)
        if m:
            return m.group(0)
        m = PHONE_RE.search(blob)
        if m:
            return m.group(0).strip()

        if isinstance(value, dict):
            props = list(value.values())
        else:
            props = list(getattr(value, "__dict__", {}).values())
        strings = [p.strip() for p in props if isinstance(p, str) and p.strip()]
        for s in strings:
            if "@" in s:
                return s
        return strings[0] if strings else ""

    # ----- scalar helpers --------------------------------------------------

    def _format_date(self, value: Any) -> str:
        if isinstance(value, (datetime, date)):
            return value.strftime(self._cfg.date_format)
        return self._scalar_to_str(value)

    @staticmethod
    def _scalar_to_str(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                return ""
            if value.is_integer():
                return str(int(value))
        return str(value).strip()

    # ----- absent-value cleaning -------------------------------------------

    @staticmethod
    def clean_value(text: Any) -> str:
        """Blank out placeholder values ("nan", "none", "null", "0", empty)."""
        if text is None:
            return ""
        stripped = str(text).strip()
        if stripped.lower() in ABSENT_VALUES:
            return ""
        return stripped

    @staticmethod
    def is_blank_row(cells: Iterable[str]) -> bool:
        return all(not str(c).strip() for c in cells)


def clean_value(text: Any) -> str:
    return CellValueExtractor.clean_value(text)
