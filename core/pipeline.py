"""
Pipeline: thin orchestrator that composes the decode → merge layers.

run_merge       – file paths or (label, bytes) pairs → MergeResult
run_merge_async – same, decoding workbooks concurrently
load_workbooks  – decode only

Heavy lifting is delegated to:
  core.roster.reader       – WorkbookReader
  core.roster.orchestrator – MergeOrchestrator
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from core.ir import MergeResult
from core.logger import get_logger
from core.roster.config import DEFAULT_CONFIG, MergeConfig
from core.roster.errors import NoInputError
from core.roster.orchestrator import MergeOrchestrator
from core.roster.reader import WorkbookData, WorkbookReader, decode_workbooks_async

logger = get_logger(__name__)

Source = Union[str, Path, Tuple[str, bytes]]


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------

def load_workbooks(
    sources: Sequence[Source],
    reader: Optional[WorkbookReader] = None,
) -> List[WorkbookData]:
    """Decode every source in input order."""
    reader = reader or WorkbookReader()
    return [reader.read_bytes(data, label) for label, data in _as_pairs(sources)]


# ---------------------------------------------------------------------------
# Merge pipeline
# ---------------------------------------------------------------------------

def run_merge(
    sources: Sequence[Source],
    cfg: MergeConfig = DEFAULT_CONFIG,
    cancel: Optional[threading.Event] = None,
) -> MergeResult:
    """
    Decode *sources* and merge them.

    Steps:
      1. Decode each workbook (openpyxl → RawCell rows)
      2. MergeOrchestrator → ordered entries + statistics + diagnostics
    """
    if not sources:
        raise NoInputError("At least one workbook is required to merge")
    logger.info("run_merge: %d source(s)", len(sources))
    workbooks = load_workbooks(sources)
    return MergeOrchestrator(cfg).merge(workbooks, cancel=cancel)


async def run_merge_async(
    sources: Sequence[Source],
    cfg: MergeConfig = DEFAULT_CONFIG,
    cancel: Optional[threading.Event] = None,
) -> MergeResult:
    """
    Like :func:`run_merge`, but workbooks are decoded in parallel threads.
    The merge itself stays sequential so output order is unchanged.
    """
    if not sources:
        raise NoInputError("At least one workbook is required to merge")
    logger.info("run_merge_async: %d source(s)", len(sources))
    workbooks = await decode_workbooks_async(_as_pairs(sources))
    return MergeOrchestrator(cfg).merge(workbooks, cancel=cancel)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _as_pairs(sources: Sequence[Source]) -> List[Tuple[str, bytes]]:
    pairs: List[Tuple[str, bytes]] = []
    for src in sources:
        if isinstance(src, tuple):
            label, data = src
            pairs.append((str(label), data))
        else:
            path = Path(src)
            pairs.append((path.name, path.read_bytes()))
    return pairs
