"""
Roster merge subpackage.

Public API:
  - MergeOrchestrator      (fixed-order multi-workbook merge)
  - WorkbookReader         (openpyxl → RawCell rows)
  - CellValueExtractor     (cell normalisation, ``clean_value``)
  - HeaderCanonicalizer    (header aliases → canonical fields)
  - SheetValidator         (utility/invalid sheet detection)
  - RecordBuilder          (sheet grid → student records)
  - MergeConfig            (tunables)
"""

from core.roster.config import MergeConfig, DEFAULT_CONFIG
from core.roster.cell_extractor import CellValueExtractor, clean_value
from core.roster.header_canonicalizer import HeaderCanonicalizer, canonicalize, normalize_key
from core.roster.sheet_validator import SheetValidator
from core.roster.record_builder import RecordBuilder, normalize_branch
from core.roster.cohort import BatchInfo, resolve_batch
from core.roster.reader import SheetData, WorkbookData, WorkbookReader, decode_workbooks_async
from core.roster.orchestrator import MergeOrchestrator, merge_workbooks
from core.roster.errors import AliasConflictError, NoInputError, PreviewPublishError, RosterError

__all__ = [
    "MergeConfig",
    "DEFAULT_CONFIG",
    "CellValueExtractor",
    "clean_value",
    "HeaderCanonicalizer",
    "canonicalize",
    "normalize_key",
    "SheetValidator",
    "RecordBuilder",
    "normalize_branch",
    "BatchInfo",
    "resolve_batch",
    "SheetData",
    "WorkbookData",
    "WorkbookReader",
    "decode_workbooks_async",
    "MergeOrchestrator",
    "merge_workbooks",
    "AliasConflictError",
    "NoInputError",
    "PreviewPublishError",
    "RosterError",
]
