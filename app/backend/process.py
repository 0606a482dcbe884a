"""
Backend Process Module
======================

Wraps the merge pipeline for the front ends: decode → merge → formatted
export (+ optional preview copy) → readable JSON summary.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from core.config import Settings, get_settings
from core.export.flatten import flatten_entries
from core.export.preview import PreviewPublisher
from core.export.writer import export_to_excel_bytes
from core.ir import MergeResult
from core.logger import get_logger
from core.pipeline import run_merge
from core.roster.errors import NoInputError, PreviewPublishError

logger = get_logger(__name__)

ACCEPTED_SUFFIXES = {".xlsx"}


def ensure_output_dir(output_dir: str) -> Path:
    """Create *output_dir* if needed and return it resolved."""
    output_path = Path(output_dir).resolve()
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def is_accepted_file(filename: str) -> bool:
    return Path(filename or "").suffix.lower() in ACCEPTED_SUFFIXES


def write_export(result: MergeResult, output_dir: str, settings: Optional[Settings] = None) -> str:
    """Write the formatted workbook for *result* and return its path."""
    s = settings or get_settings()
    output_path = ensure_output_dir(output_dir)
    export_path = output_path / s.EXPORT_FILENAME
    export_path.write_bytes(
        export_to_excel_bytes(result.entries, banner_text=s.EXPORT_BANNER_TEXT)
    )
    logger.info("Export written: %s", export_path)
    return str(export_path)


def publish_preview(
    result: MergeResult,
    settings: Optional[Settings] = None,
    publisher: Optional[PreviewPublisher] = None,
) -> str:
    """Publish a viewable copy of *result*; raises PreviewPublishError."""
    s = settings or get_settings()
    publisher = publisher or PreviewPublisher(settings=s)
    return publisher.publish(flatten_entries(result.entries), title=s.EXPORT_TITLE)


def build_readable_output(
    result: MergeResult,
    input_files: List[str],
    output_dir: str,
    export_path: Optional[str] = None,
    preview: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """meta / statistics / diagnostics / outputs."""
    by_code: Dict[str, int] = {}
    for diag in result.diagnostics:
        by_code[diag.code] = by_code.get(diag.code, 0) + 1
    return {
        "meta": {
            "processed_at": datetime.now().isoformat(timespec="seconds"),
            "input_files": input_files,
            "output_dir": output_dir,
            "cancelled": result.cancelled,
        },
        "statistics": result.statistics.to_dict(),
        "summary": {
            "entries": len(result.entries),
            "diagnostics_by_code": by_code,
        },
        "diagnostics": [d.model_dump() for d in result.diagnostics],
        "outputs": {
            "export_path": export_path,
            "preview": preview,
        },
    }


def merge_files(
    file_paths: List[str],
    output_dir: str,
    settings: Optional[Settings] = None,
) -> Tuple[MergeResult, str]:
    """Merge *file_paths* and write the export; returns ``(result, export_path)``."""
    if not file_paths:
        raise NoInputError("No input files provided.")
    logger.info("Processing %d files", len(file_paths))
    result = run_merge(file_paths)
    return result, write_export(result, output_dir, settings=settings)


def process_files(
    file_paths: List[str],
    output_dir: str,
    with_preview: bool = False,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Merge *file_paths* and write the formatted export into *output_dir*.

    Args:
        file_paths: input ``.xlsx`` workbooks, any order
        output_dir: output directory
        with_preview: also publish a viewable copy; a publish failure is
            reported in the output and does not fail the run
    """
    s = settings or get_settings()
    output_path = ensure_output_dir(output_dir)
    result, export_path = merge_files(file_paths, str(output_path), settings=s)

    preview: Optional[Dict[str, Any]] = None
    if with_preview:
        try:
            preview = {"url": publish_preview(result, settings=s), "error": None}
        except PreviewPublishError as e:
            logger.warning("Preview publish failed: %s", e)
            preview = {"url": None, "error": str(e)}

    return build_readable_output(
        result,
        input_files=file_paths,
        output_dir=str(output_path),
        export_path=export_path,
        preview=preview,
    )


def _resolve_output_json_name(output_filename: Optional[str] = None) -> str:
    if output_filename and output_filename.strip():
        return output_filename.strip()
    env_output_name = os.getenv("OUTPUT_JSON_NAME", "").strip()
    if env_output_name:
        return env_output_name
    if os.getenv("OUTPUT_JSON_TIMESTAMP", "").strip().lower() in {"1", "true", "yes", "on"}:
        return f"result_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    return "result.json"


def write_json_output(
    result: Dict[str, Any],
    output_dir: str,
    output_filename: Optional[str] = None,
) -> str:
    """
    Write *result* as JSON into *output_dir*. The filename comes from
    *output_filename*, else ``OUTPUT_JSON_NAME``, else ``result.json``.
    """
    output_path = Path(output_dir).resolve()
    output_path.mkdir(parents=True, exist_ok=True)
    json_path = output_path / _resolve_output_json_name(output_filename)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(result, f, ensure_ascii=False, indent=2, default=str)
    return str(json_path)
