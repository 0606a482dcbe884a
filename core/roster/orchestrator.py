"""
MergeOrchestrator: fold decoded workbooks into one ordered record stream.

Handles:
- fixed file order by cohort (oldest first), independent of upload order
- per-file batch separator, utility/invalid sheet filtering
- branch ordering inside a batch (case-insensitive normalized label)
- per-sheet outcome collection with failure isolation
- statistics and advisory diagnostics

Processing is strictly sequential; emission order is the contract that
the export and preview layers rely on.
"""

from __future__ import annotations

import threading
from typing import List, Optional, Sequence, Tuple

from core.ir import (
    BatchSeparator,
    BranchSeparator,
    MergeDiagnostic,
    MergeResult,
    SheetOutcome,
    SkipReason,
)
from core.logger import get_logger
from core.roster.cell_extractor import CellValueExtractor
from core.roster.cohort import BatchInfo, resolve_batch
from core.roster.config import DEFAULT_CONFIG, MergeConfig
from core.roster.errors import NoInputError
from core.roster.header_canonicalizer import HeaderCanonicalizer
from core.roster.reader import SheetData, WorkbookData
from core.roster.record_builder import RecordBuilder, normalize_branch
from core.roster.sheet_validator import REASON_OK, SheetGrid, SheetValidator

logger = get_logger(__name__)


class MergeOrchestrator:
    """
    Merge several cohort workbooks into ``Record | Separator`` entries.

    Typical use::

        orchestrator = MergeOrchestrator()
        result = orchestrator.merge([workbook_a, workbook_b])
        for entry in result.entries:
            ...
    """

    def __init__(
        self,
        cfg: MergeConfig = DEFAULT_CONFIG,
        extractor: Optional[CellValueExtractor] = None,
        validator: Optional[SheetValidator] = None,
        builder: Optional[RecordBuilder] = None,
    ):
        self._cfg = cfg
        self._extractor = extractor or CellValueExtractor(cfg)
        self._validator = validator or SheetValidator(cfg)
        self._builder = builder or RecordBuilder(
            cfg, canonicalizer=HeaderCanonicalizer(), validator=self._validator,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def merge(
        self,
        files: Sequence[WorkbookData],
        cancel: Optional[threading.Event] = None,
    ) -> MergeResult:
        """
        Merge *files* in cohort order.

        Raises :class:`NoInputError` when *files* is empty. Everything else
        (unknown batch, invalid sheets, a sheet that fails to build) is
        recovered locally and reported through ``result.diagnostics``.
        *cancel* is checked only between files and between sheets.
        """
        files = list(files or [])
        if not files:
            raise NoInputError("At least one workbook is required to merge")

        result = MergeResult()
        stats = result.statistics

        for wb, info in self.order_files(files):
            if _is_set(cancel):
                self._mark_cancelled(result, wb.label)
                break
            if not info.known:
                self._diagnose(
                    result, "unknown_batch",
                    f"No known cohort year pair in {wb.label!r}; using {info.batch!r}",
                    file=wb.label,
                )

            result.entries.append(
                BatchSeparator(label=info.separator_label, batch=info.batch, cohort=info.cohort)
            )

            for name, grid, branch in self.discover_sheets(wb, result):
                if _is_set(cancel):
                    break
                outcome = self.process_sheet(name, grid, info.batch, source_file=wb.label)
                if outcome.ok:
                    result.entries.append(BranchSeparator(label=branch))
                    result.entries.extend(outcome.records)
                    stats.total_sheets += 1
                    stats.total_records += len(outcome.records)
                    stats.branches.add(branch)
                else:
                    self._diagnose(
                        result, SkipReason(outcome.skip_reason).value,
                        outcome.detail or f"Sheet {name!r} produced no records",
                        file=wb.label, sheet=name,
                    )

            if _is_set(cancel):
                self._mark_cancelled(result, wb.label)
                break
            stats.batches.add(info.batch)
            stats.total_files += 1

        logger.info(
            "Merge finished: files=%d sheets=%d records=%d branches=%d batches=%s cancelled=%s",
            stats.total_files, stats.total_sheets, stats.total_records,
            len(stats.branches), sorted(stats.batches), result.cancelled,
        )
        return result

    def order_files(self, files: Sequence[WorkbookData]) -> List[Tuple[WorkbookData, BatchInfo]]:
        """Pair each file with its cohort, oldest cohort first (stable)."""
        paired = [(wb, resolve_batch(wb.label)) for wb in files]
        return sorted(paired, key=lambda p: p[1].rank)

    def discover_sheets(
        self,
        wb: WorkbookData,
        result: Optional[MergeResult] = None,
    ) -> List[Tuple[str, SheetGrid, str]]:
        """
        Return ``(sheet_name, grid, normalized_branch)`` for valid sheets,
        sorted by branch label (case-insensitive, stable).
        """
        valid: List[Tuple[str, SheetGrid, str]] = []
        for sheet in wb.sheets:
            if self._validator.is_utility_sheet(sheet.name):
                logger.debug("Skipping utility sheet %r in %r", sheet.name, wb.label)
                continue
            grid = self.sheet_grid(sheet)
            reason = self._validator.explain(grid, sheet.name)
            if reason != REASON_OK:
                if result is not None:
                    self._diagnose(
                        result, SkipReason.INVALID.value,
                        f"Sheet {sheet.name!r} skipped ({reason})",
                        file=wb.label, sheet=sheet.name,
                    )
                continue
            valid.append((sheet.name, grid, normalize_branch(sheet.name)))
        valid.sort(key=lambda v: v[2].lower())
        return valid

    def sheet_grid(self, sheet: SheetData) -> List[List[str]]:
        return [self._extractor.extract_row(row) for row in sheet.rows]

    def process_sheet(
        self,
        sheet_name: str,
        grid: SheetGrid,
        batch_hint: str,
        source_file: str = "",
    ) -> SheetOutcome:
        """Build one sheet's records; any failure becomes a ``build_error`` outcome."""
        branch = normalize_branch(sheet_name)
        try:
            records = self._builder.build(grid, sheet_name, batch_hint, source_file=source_file)
        except Exception as e:
            logger.error(
                "Failed to build records for sheet %r in %r: %s",
                sheet_name, source_file, e, exc_info=True,
            )
            return SheetOutcome(
                sheet=sheet_name,
                normalized_branch=branch,
                skip_reason=SkipReason.BUILD_ERROR,
                detail=f"{type(e).__name__}: {e}",
            )
        if not records:
            return SheetOutcome(
                sheet=sheet_name,
                normalized_branch=branch,
                skip_reason=SkipReason.NO_RECORDS,
                detail=f"Sheet {sheet_name!r} has no rows with an identifier",
            )
        logger.debug("Sheet %r → %d record(s)", sheet_name, len(records))
        return SheetOutcome(sheet=sheet_name, normalized_branch=branch, records=records)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _diagnose(
        result: MergeResult,
        code: str,
        message: str,
        file: Optional[str] = None,
        sheet: Optional[str] = None,
    ) -> None:
        logger.warning("%s | %s", code, message)
        result.diagnostics.append(MergeDiagnostic(code=code, message=message, file=file, sheet=sheet))

    def _mark_cancelled(self, result: MergeResult, label: str) -> None:
        result.cancelled = True
        self._diagnose(result, "cancelled", f"Merge cancelled at {label!r}", file=label)


def _is_set(event: Optional[threading.Event]) -> bool:
    return event is not None and event.is_set()


def merge_workbooks(
    files: Sequence[WorkbookData],
    cfg: MergeConfig = DEFAULT_CONFIG,
    cancel: Optional[threading.Event] = None,
) -> MergeResult:
    return MergeOrchestrator(cfg).merge(files, cancel=cancel)
